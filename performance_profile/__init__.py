"""Dolan-More performance profiles and More-Wild data profiles."""

from .canvas import MatplotlibCanvas, StepCanvas
from .errors import (
    AllFailuresInRowError,
    EmptyInputError,
    LabelCountMismatchError,
    NoSuccessfulRunsError,
    ProfileError,
    ZeroMeasurementError,
    ZeroMeasurementWarning,
)
from .profiles import (
    ProfileOptions,
    data_profile,
    performance_profile,
    profile_grid,
    profile_series,
    profile_table,
    save_figure,
)
from .ratios import (
    ZeroPolicy,
    compute_ratios,
    convergence_evaluations,
    data_ratios,
    failure_value,
    performance_ratios,
    simplex_gradient_budgets,
)
from .staircase import breakpoints, staircase

__version__ = "0.1.0"
