"""Engine error taxonomy."""


class LivabilityError(Exception):
    """Base class for engine errors."""


class InvalidCoordinate(LivabilityError, ValueError):
    """Latitude or longitude outside the valid range."""


class InvalidHorizon(LivabilityError, ValueError):
    """Projection horizon outside 1-60 months."""


class InvalidPrice(LivabilityError, ValueError):
    """Starting price for a projection is not a positive number."""


class UnknownCategory(LivabilityError, ValueError):
    """Raw category string with no enum member (strict parsing only)."""


class MissingDependency(LivabilityError):
    """The spatial data source could not be read.

    Recovered inside the engine by falling back to neutral defaults.
    """
