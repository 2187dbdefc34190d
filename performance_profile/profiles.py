"""
profiles.py

Draws performance and data profiles: one step curve per solver (column)
showing which fraction of the problems (rows) it handles within a given
ratio.

    ax = performance_profile(times, ["Gorder", "METIS", "RCM"], title="SpMV")
    save_figure(ax.figure, "spmv_profile.png")

Failures (negative, infinite or NaN measures) are drawn at twice the largest
finite ratio, so a solver's curve only reaches 1 at the right edge if it
solved every problem.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .canvas import MatplotlibCanvas
from .constants import (
    AXIS_PAD,
    COLUMN_LABEL,
    DATA_XLABEL,
    DPI,
    LEGEND_LOC,
    LOG_SUFFIX,
    PERFORMANCE_XLABEL,
    YLABEL,
    YMAX,
)
from .errors import EmptyInputError, LabelCountMismatchError, ProfileError
from .ratios import as_matrix, data_ratios, failure_value, performance_ratios
from .staircase import staircase

KINDS = ("performance", "data")

##############################################################################
# Options & labels
##############################################################################

@dataclass
class ProfileOptions:
    """
    Recognized options of a profile plot. Everything in `style` is handed to
    the canvas as is (colors, markers, line widths, ...).
    """
    logscale: bool = True
    title: str = ""
    sampletol: float = 0.0
    xlabel: Optional[str] = None
    ylabel: Optional[str] = None
    style: dict = field(default_factory=dict)

    @classmethod
    def from_kwargs(cls, logscale=True, title="", sampletol=0.0, **kwargs):
        xlabel = kwargs.pop("xlabel", None)
        ylabel = kwargs.pop("ylabel", None)
        return cls(logscale=logscale, title=title, sampletol=sampletol,
                   xlabel=xlabel, ylabel=ylabel, style=kwargs)


def resolve_labels(labels, nsolvers, columns=None):
    """
    No labels => DataFrame column names if there are any, else
    "column 1" .. "column ns". Otherwise exactly one label per solver.
    """
    if labels is None or len(labels) == 0:
        if columns is not None:
            return list(columns)
        return [COLUMN_LABEL.format(s) for s in range(1, nsolvers + 1)]
    if len(labels) != nsolvers:
        raise LabelCountMismatchError(len(labels), nsolvers)
    return [str(label) for label in labels]

##############################################################################
# Series
##############################################################################

def profile_series(ratios, max_ratio, sampletol=0.0):
    """
    One (x, y) staircase per column of the sorted ratio matrix.

    A row at failure_value(max_ratio) is appended to every column so each
    curve runs to the right edge of the plot.
    """
    ratios = np.asarray(ratios, dtype=float)
    nprob, nsolv = ratios.shape
    padded = np.vstack([ratios, np.full((1, nsolv), failure_value(max_ratio))])
    return [staircase(padded[:, s], sampletol, nprob) for s in range(nsolv)]


def _kind_ratios(kind, mat, budgets, logscale, strict):
    if kind == "performance":
        return performance_ratios(mat, logscale=logscale, strict=strict)
    if kind == "data":
        return data_ratios(mat, budgets, logscale=logscale, strict=strict)
    raise ProfileError(f"unknown profile kind {kind!r}; use one of {KINDS}")


def _default_logscale(kind):
    return kind == "performance"


def _xmax(max_ratio):
    if max_ratio > 0:
        return AXIS_PAD * max_ratio
    return max_ratio + (AXIS_PAD - 1.0)

##############################################################################
# Drawing
##############################################################################

def _draw(series, labels, max_ratio, xmin, default_xlabel, options, canvas):
    canvas.new_plot()
    for (x, y), label in zip(series, labels):
        canvas.add_step_series(x, y, label, **options.style)

    xlabel = options.xlabel
    if xlabel is None:
        xlabel = default_xlabel + (LOG_SUFFIX if options.logscale else "")
    ylabel = options.ylabel if options.ylabel is not None else YLABEL

    canvas.set_axis_bounds((xmin, _xmax(max_ratio)), (0, YMAX))
    canvas.set_axis_labels(xlabel, ylabel)
    canvas.set_title(options.title)
    canvas.finish()
    return canvas.handle


def performance_profile(T, labels=None, logscale=True, title="", sampletol=0.0,
                        strict=False, canvas=None, ax=None, **kwargs):
    """
    Performance profile of the problems x solvers matrix T (smaller is
    better; negative, infinite or NaN entries are failures).

    - labels: one name per column, or None/[] for defaults
    - logscale: plot log2 of the ratios
    - sampletol: merge steps closer than this along the ratio axis
    - strict: raise AllFailuresInRowError if every solver failed on a problem
    - xlabel / ylabel: override the axis titles
    - any other keyword is passed to every step series

    Draws on `canvas` if given, else on `ax` (or a new matplotlib figure) and
    returns the canvas handle (the matplotlib Axes by default).
    """
    options = ProfileOptions.from_kwargs(logscale=logscale, title=title,
                                         sampletol=sampletol, **kwargs)
    mat, columns = as_matrix(T)
    labels = resolve_labels(labels, mat.shape[1], columns)

    ratios, max_ratio = performance_ratios(mat, logscale=options.logscale, strict=strict)
    series = profile_series(ratios, max_ratio, options.sampletol)

    xmin = 0.0 if options.logscale else 1.0
    return _draw(series, labels, max_ratio, xmin, PERFORMANCE_XLABEL, options,
                 canvas or MatplotlibCanvas(ax=ax))


def data_profile(T, budgets, labels=None, logscale=False, title="", sampletol=0.0,
                 strict=False, canvas=None, ax=None, **kwargs):
    """
    Data profile of T, where T[p, s] is the cost solver s needed on problem p
    (e.g. convergence_evaluations()) and budgets[p] the unit it is measured
    in (e.g. simplex_gradient_budgets(dims)). Zero costs are rejected.

    Keywords are those of performance_profile().
    """
    options = ProfileOptions.from_kwargs(logscale=logscale, title=title,
                                         sampletol=sampletol, **kwargs)
    mat, columns = as_matrix(T)
    labels = resolve_labels(labels, mat.shape[1], columns)

    ratios, max_ratio = data_ratios(mat, budgets, logscale=options.logscale, strict=strict)
    series = profile_series(ratios, max_ratio, options.sampletol)

    # Budget ratios can fall below 1 (and below 0 after log2)
    xmin = min(0.0, float(ratios[0].min())) if options.logscale else 0.0
    return _draw(series, labels, max_ratio, xmin, DATA_XLABEL, options,
                 canvas or MatplotlibCanvas(ax=ax))


def profile_grid(measures, labels=None, kind="performance", budgets=None,
                 logscale=None, sampletol=0.0, ncols=None, **kwargs):
    """
    One subplot per entry of `measures` ({title: matrix}), e.g. runtime and
    iteration count of the same solvers on the same problems, with a single
    legend for the whole figure. Returns the Figure.
    """
    names = list(measures)
    if not names:
        raise EmptyInputError("no measures to plot")
    if kind not in KINDS:
        raise ProfileError(f"unknown profile kind {kind!r}; use one of {KINDS}")
    if logscale is None:
        logscale = _default_logscale(kind)

    ncols = ncols or min(len(names), 3)
    nrows = math.ceil(len(names) / ncols)
    fig, axes = plt.subplots(nrows=nrows, ncols=ncols,
                             figsize=(4*ncols, 3*nrows+2), squeeze=False)

    handles_labels = None
    for ax, name in zip(axes.flat, names):
        canvas = MatplotlibCanvas(ax=ax, legend=False)
        if kind == "performance":
            performance_profile(measures[name], labels, logscale=logscale, title=name,
                                sampletol=sampletol, canvas=canvas, **kwargs)
        else:
            data_profile(measures[name], budgets, labels, logscale=logscale, title=name,
                         sampletol=sampletol, canvas=canvas, **kwargs)
        hl = ax.get_legend_handles_labels()
        if len(hl[0]) > 0:
            handles_labels = hl

    # Unused cells of the last row
    for ax in axes.flat[len(names):]:
        ax.axis("off")

    if handles_labels:
        handles, solver_names = handles_labels
        fig.legend(handles, solver_names, loc=LEGEND_LOC)
    fig.tight_layout()
    return fig

##############################################################################
# Export
##############################################################################

def profile_table(T, labels=None, kind="performance", budgets=None,
                  logscale=None, sampletol=0.0, strict=False):
    """
    The breakpoints a profile would draw, as a long DataFrame with columns
    solver, ratio, fraction (one row per step, solvers in column order).
    """
    if logscale is None:
        logscale = _default_logscale(kind)
    mat, columns = as_matrix(T)
    labels = resolve_labels(labels, mat.shape[1], columns)

    ratios, max_ratio = _kind_ratios(kind, mat, budgets, logscale, strict)
    frames = []
    for label, (x, y) in zip(labels, profile_series(ratios, max_ratio, sampletol)):
        frames.append(pd.DataFrame({"solver": label, "ratio": x, "fraction": y}))
    return pd.concat(frames, ignore_index=True)


def save_figure(fig, out_png, dpi=DPI):
    fig.savefig(out_png, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    print("Created", out_png)
