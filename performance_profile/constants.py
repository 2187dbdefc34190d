# Axis titles used when the caller does not override them
PERFORMANCE_XLABEL = "Within this factor of the best"
DATA_XLABEL        = "Number of simplex gradients"
LOG_SUFFIX         = " (log scale)"
YLABEL             = "Proportion of problems"

# Label synthesized for solver i (1-based) when no labels are given
COLUMN_LABEL = "column {}"

# Failures are drawn at SENTINEL_FACTOR * max_ratio, the x-axis stops at
# AXIS_PAD * max_ratio and the y-axis at YMAX (for max_ratio <= 0: one and
# AXIS_PAD - 1 above max_ratio)
SENTINEL_FACTOR = 2.0
AXIS_PAD        = 1.1
YMAX            = 1.1

FIGSIZE    = (8, 6)
DPI        = 300
LEGEND_LOC = "lower right"

# Default relative tolerance of the convergence test behind data profiles
CONVERGENCE_TOL = 1.0e-3
