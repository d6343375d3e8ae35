"""Statistical conformance check for alias samplers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import stats

if TYPE_CHECKING:
    from alias_sampler.sampler import AliasSampler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChiSquaredResult:
    """Outcome of a chi-squared goodness-of-fit test."""

    chi_squared: float
    p_value: float
    degrees_of_freedom: int
    num_samples: int

    def passes(self, alpha: float = 0.05) -> bool:
        """True if the null hypothesis survives at significance ``alpha``."""
        return self.p_value >= alpha


def check_distribution(
    sampler: AliasSampler,
    num_samples: int,
    *,
    seed: Any = None,
) -> ChiSquaredResult:
    """Draw ``num_samples`` indices and test them against the sampler's weights.

    Only outcomes with positive probability take part in the test. A draw of
    a zero-probability outcome fails the check outright.

    The draws come from a generator seeded with ``seed``, not from the
    sampler's own stream, which is left untouched.
    """
    if num_samples < 1:
        raise ValueError(f"num_samples must be positive, got {num_samples}")

    n = len(sampler)
    rng = np.random.default_rng(seed)
    observed = np.bincount(sampler._draw_with(rng, num_samples), minlength=n)
    probabilities = sampler.probabilities
    support = probabilities > 0.0

    if observed[~support].any():
        logger.warning(
            "Sampled %d draws from zero-probability outcomes",
            int(observed[~support].sum()),
        )
        return ChiSquaredResult(math.inf, 0.0, int(support.sum()) - 1, num_samples)

    dof = int(support.sum()) - 1
    if dof == 0:
        return ChiSquaredResult(0.0, 1.0, 0, num_samples)

    expected = num_samples * probabilities[support]
    # chisquare insists the two totals agree to within rounding.
    expected *= num_samples / expected.sum()
    chi_squared, p_value = stats.chisquare(observed[support], expected)
    return ChiSquaredResult(float(chi_squared), float(p_value), dof, num_samples)
