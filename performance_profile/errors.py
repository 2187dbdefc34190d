"""
Exceptions and warnings raised while building profiles.

Every error derives from ProfileError (itself a ValueError), so callers can
catch bad input in one place.
"""


class ProfileError(ValueError):
    """Invalid input for a performance or data profile."""


class EmptyInputError(ProfileError):
    """The measurement matrix has no problems or no solvers."""


class LabelCountMismatchError(ProfileError):
    def __init__(self, nlabels, nsolvers):
        super().__init__(
            f"got {nlabels} labels for {nsolvers} solvers; "
            f"pass no labels or exactly one per solver"
        )
        self.nlabels = nlabels
        self.nsolvers = nsolvers


class ZeroMeasurementError(ProfileError):
    """A measurement is exactly zero and the zero policy forbids shifting."""


class AllFailuresInRowError(ProfileError):
    def __init__(self, rows):
        rows = list(rows)
        super().__init__(f"every solver failed on problem(s) {rows}")
        self.rows = rows


class NoSuccessfulRunsError(ProfileError):
    """No solver succeeded on any problem, so there is no finite ratio."""


class ZeroMeasurementWarning(UserWarning):
    """Zero measurements were shifted by one before computing ratios."""
