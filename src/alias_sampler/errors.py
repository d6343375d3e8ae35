"""Errors raised while building an alias sampler.

Every error derives from ``AliasConstructionError``, which is a
``ValueError``, so callers can catch either the specific failure or the
builtin they would expect from a bad argument.
"""


class AliasConstructionError(ValueError):
    """Base class for invalid input to the alias sampler."""

    code = "AliasConstruction"


class NoDistributionError(AliasConstructionError):
    """The weight sequence is missing or empty."""

    code = "NoDistribution"


class BadSizeError(AliasConstructionError):
    """The value map and the weights have different lengths."""

    code = "BadSize"


class BadDistributionError(AliasConstructionError):
    """A weight is negative or infinite."""

    code = "BadDistribution"


class NoDataError(AliasConstructionError):
    """No weight is strictly positive."""

    code = "NoData"
