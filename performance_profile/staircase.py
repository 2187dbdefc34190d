"""
staircase.py

Reduces one sorted ratio column to the few points needed to draw its
empirical distribution F(t) = fraction of problems with ratio <= t as a
right-continuous ("post") step plot.

Only the last index of each run of tied values matters; with sampletol > 0,
steps closer than sampletol to the previous breakpoint are merged into the
next one.
"""

import numpy as np

from .errors import ProfileError


def breakpoints(column, sampletol=0.0):
    """
    0-based indices into the sorted column where the drawn step function
    changes value, always ending with the last index.

    From the reference value rv = column[0]:
      - idx = last index with column[idx] <= rv
      - rv  = max(column[idx] + sampletol, column[idx + 1])
    until rv reaches the column maximum.
    """
    rs = np.asarray(column, dtype=float)
    if rs.ndim != 1 or rs.size == 0:
        raise ProfileError(f"expected a non-empty 1-D column, got shape {rs.shape}")
    if sampletol < 0:
        raise ProfileError(f"sampletol must be non-negative, got {sampletol}")
    if not np.all(np.isfinite(rs)):
        raise ProfileError("column holds NaN or infinite ratios")
    if np.any(np.diff(rs) < 0):
        raise ProfileError("column must be sorted ascending")

    last = rs.size - 1
    maxval = rs[last]

    # Indices strictly increase, so each search only looks ahead of the
    # previous breakpoint
    idx = []
    start = 0
    rv = rs[0]
    while rv < maxval:
        k = start + int(np.searchsorted(rs[start:], rv, side="right")) - 1
        idx.append(k)
        rv = max(rs[k] + sampletol, rs[k + 1])
        start = k + 1
    idx.append(last)

    return np.array(list(dict.fromkeys(idx)), dtype=int)


def staircase(column, sampletol=0.0, nprob=None):
    """
    (x, y) coordinates of the reduced step function:
    x = column[idx], y = (idx + 1) / nprob.

    nprob defaults to the column length; profiles pass the true number of
    problems so the appended sentinel row lands at y = (nprob + 1) / nprob.
    """
    rs = np.asarray(column, dtype=float)
    idx = breakpoints(rs, sampletol)
    if nprob is None:
        nprob = rs.size
    return rs[idx], (idx + 1) / nprob
