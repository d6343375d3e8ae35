"""Package initialization for alias-sampler.

Draws samples from arbitrary discrete distributions in O(1) per sample after
O(n) preprocessing, using the alias method.
"""

import logging

from alias_sampler.conformance import ChiSquaredResult, check_distribution
from alias_sampler.errors import (
    AliasConstructionError,
    BadDistributionError,
    BadSizeError,
    NoDataError,
    NoDistributionError,
)
from alias_sampler.histogram import from_histogram, histogram_distribution
from alias_sampler.sampler import (
    RESIDUAL_TOLERANCE,
    AliasSampler,
    build_alias_tables,
    build_sampler,
)

# Silent unless the application configures logging.
logging.getLogger("alias_sampler").addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "RESIDUAL_TOLERANCE",
    "AliasConstructionError",
    "AliasSampler",
    "BadDistributionError",
    "BadSizeError",
    "ChiSquaredResult",
    "NoDataError",
    "NoDistributionError",
    "build_alias_tables",
    "build_sampler",
    "check_distribution",
    "from_histogram",
    "histogram_distribution",
]
