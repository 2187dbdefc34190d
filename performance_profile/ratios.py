"""
ratios.py

Turns a problems x solvers matrix of measurements (smaller is better) into
the sorted ratio matrix behind a performance or data profile.

Failures are encoded in the raw matrix as negative, infinite or NaN entries.
They are masked on entry, so everything after as_matrix() works on a
numpy.ma.MaskedArray where "masked" means "this solver failed on this
problem". The caller's matrix is copied and never modified.

Two normalizations share one pipeline:
  - "best"   => divide every row by its best (smallest) successful measure
  - "budget" => divide every row by a per-problem budget (e.g. n + 1
                simplex gradients for a problem in n variables)
"""

import warnings
from enum import Enum

import numpy as np
import pandas as pd

from .constants import CONVERGENCE_TOL, SENTINEL_FACTOR
from .errors import (
    AllFailuresInRowError,
    EmptyInputError,
    NoSuccessfulRunsError,
    ProfileError,
    ZeroMeasurementError,
    ZeroMeasurementWarning,
)


class ZeroPolicy(Enum):
    SHIFT_AND_WARN = "shift"
    FAIL = "fail"


NORMALIZERS = ("best", "budget")

##############################################################################
# Input boundary
##############################################################################

def as_matrix(T):
    """
    Copy T into a fresh 2-D float64 array.

    Returns (matrix, columns) where columns holds the column names when T is
    a DataFrame and None otherwise.
    """
    columns = None
    if isinstance(T, pd.DataFrame):
        columns = [str(c) for c in T.columns]
        T = T.to_numpy(dtype=float)

    mat = np.array(T, dtype=float, copy=True)
    if mat.size == 0:
        raise EmptyInputError(
            f"matrix has shape {mat.shape}; need at least one problem and one solver"
        )
    if mat.ndim != 2:
        raise ProfileError(f"expected a 2-D problems x solvers matrix, got {mat.ndim}-D")
    return mat, columns


def mask_failures(mat):
    """
    Mask every infinite, NaN or negative entry.
    Masked slots hold 1.0 underneath so no arithmetic ever sees a NaN.
    """
    with np.errstate(invalid="ignore"):
        failed = ~np.isfinite(mat) | (mat < 0)
    return np.ma.masked_array(np.where(failed, 1.0, mat), mask=failed)


def apply_zero_policy(meas, policy):
    zeros = (meas == 0).filled(False)
    if not zeros.any():
        return meas

    if policy is ZeroPolicy.FAIL:
        rows, cols = np.nonzero(zeros)
        raise ZeroMeasurementError(
            f"{len(rows)} measure(s) are zero, first at problem {rows[0]}, solver {cols[0]}"
        )
    warnings.warn("some measures are zero; shifting all by one",
                  ZeroMeasurementWarning, stacklevel=3)
    return meas + 1.0

##############################################################################
# Ratio Engine
##############################################################################

def _budgets_vector(budgets, nprob):
    if budgets is None:
        raise ProfileError("budget normalization needs one budget per problem")
    b = np.array(budgets, dtype=float, copy=True).ravel()
    if b.shape != (nprob,):
        raise ProfileError(f"got {b.size} budgets for {nprob} problems")
    if not np.all(np.isfinite(b)) or np.any(b <= 0):
        raise ProfileError("budgets must be finite and positive")
    return b


def failure_value(max_ratio):
    """
    Ratio at which failed runs are drawn: SENTINEL_FACTOR * max_ratio, or
    max_ratio + 1 when max_ratio <= 0 (log2 ratios that never exceed 1), so
    failures always sort after every successful run.
    """
    if max_ratio > 0:
        return SENTINEL_FACTOR * max_ratio
    return max_ratio + 1.0


def compute_ratios(T, normalizer="best", budgets=None, logscale=True,
                   zero_policy=ZeroPolicy.SHIFT_AND_WARN, strict=False):
    """
    Sorted ratio matrix and the largest finite ratio.

    Steps:
      1) copy T and mask failures
      2) apply the zero policy to the successful measures
      3) divide each row by its normalizer (row best or budget)
      4) optionally take log2
      5) max_ratio = largest successful ratio
      6) failures => failure_value(max_ratio)
      7) sort every column ascending, independently

    With strict=True a problem on which every solver failed raises
    AllFailuresInRowError; otherwise its row is all failures.
    """
    if normalizer not in NORMALIZERS:
        raise ProfileError(f"unknown normalizer {normalizer!r}; use one of {NORMALIZERS}")

    mat, _ = as_matrix(T)
    nprob = mat.shape[0]
    meas = apply_zero_policy(mask_failures(mat), zero_policy)

    dead = np.ma.getmaskarray(meas).all(axis=1)
    if strict and dead.any():
        raise AllFailuresInRowError(np.flatnonzero(dead).tolist())

    if normalizer == "best":
        norm = meas.min(axis=1)
    else:
        norm = _budgets_vector(budgets, nprob)

    r = meas / norm[:, np.newaxis]
    if logscale:
        r = np.ma.log2(r)

    if r.count() == 0:
        raise NoSuccessfulRunsError("no solver succeeded on any problem")
    max_ratio = float(r.max())

    r = r.filled(failure_value(max_ratio))
    return np.sort(r, axis=0), max_ratio


def performance_ratios(T, logscale=True, strict=False):
    """
    Ratios for a performance profile: each measure over the best measure on
    the same problem. Zero measures shift the whole matrix by one, with a
    ZeroMeasurementWarning.
    """
    return compute_ratios(T, normalizer="best", logscale=logscale,
                          zero_policy=ZeroPolicy.SHIFT_AND_WARN, strict=strict)


def data_ratios(T, budgets, logscale=False, strict=False):
    """
    Ratios for a data profile: each measure (typically function evaluations
    until convergence) over the problem's budget. Zero measures raise
    ZeroMeasurementError.
    """
    return compute_ratios(T, normalizer="budget", budgets=budgets, logscale=logscale,
                          zero_policy=ZeroPolicy.FAIL, strict=strict)

##############################################################################
# Data profile inputs
##############################################################################

def simplex_gradient_budgets(dims):
    """n + 1 evaluations buy one simplex gradient in n variables."""
    return np.asarray(dims, dtype=float) + 1.0


def convergence_evaluations(histories, tol=CONVERGENCE_TOL):
    """
    histories: array of shape (problems, solvers, evaluations) holding the
               objective value seen at each evaluation (NaN past the end of a
               shorter run).

    A run has converged once f <= f_L + tol * (f_0 - f_L), where f_0 is the
    value at the shared starting point (the first finite first-evaluation
    value across solvers) and f_L the smallest value any solver reached on it.

    Returns a (problems, solvers) matrix with the 1-based index of the first
    converged evaluation, or NaN when the run never converged.
    """
    H = np.array(histories, dtype=float, copy=True)
    if H.size == 0:
        raise EmptyInputError(f"histories have shape {H.shape}")
    if H.ndim != 3:
        raise ProfileError(f"expected (problems, solvers, evaluations) histories, got {H.ndim}-D")
    if tol < 0:
        raise ProfileError(f"tol must be non-negative, got {tol}")

    nprob = H.shape[0]
    start = H[:, :, 0]
    has_start = np.isfinite(start)
    missing = np.flatnonzero(~has_start.any(axis=1))
    if missing.size:
        raise ProfileError(f"no finite starting value for problem(s) {missing.tolist()}")
    f0 = start[np.arange(nprob), has_start.argmax(axis=1)]
    f_low = np.ma.masked_invalid(H).reshape(nprob, -1).min(axis=1)
    threshold = (f_low + tol * (f0 - f_low)).filled(-np.inf)

    with np.errstate(invalid="ignore"):
        hit = H <= threshold[:, np.newaxis, np.newaxis]
    first = hit.argmax(axis=2)
    return np.where(hit.any(axis=2), first + 1.0, np.nan)
