"""Build samplers from raw data via a histogram.

The usual way to get a distribution worth sampling is to bin some observed
data; these helpers do that with ``numpy.histogram`` and hand the bin
probabilities and centres to ``AliasSampler``.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import numpy.typing as npt

from alias_sampler.errors import NoDistributionError
from alias_sampler.sampler import AliasSampler, SeedLike


def histogram_distribution(
    data: npt.ArrayLike,
    bins: Any = 10,
    range: tuple[float, float] | None = None,  # noqa: A002
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Bin ``data`` and return ``(probabilities, centres, edges)``.

    ``bins`` and ``range`` mean what they mean for ``numpy.histogram``. NaN
    samples are dropped before binning.
    """
    x = np.asarray(data, dtype=np.float64).ravel()
    x = x[~np.isnan(x)]
    if x.size == 0:
        raise NoDistributionError("Cannot build a histogram from empty data.")

    counts, edges = np.histogram(x, bins=bins, range=range)
    total = counts.sum()
    if total == 0:
        raise NoDistributionError("No data falls inside the histogram range.")
    probabilities = counts / total
    centres = edges[:-1] + np.diff(edges) / 2.0
    return probabilities, centres, edges


def from_histogram(
    data: npt.ArrayLike,
    bins: Any = 10,
    range: tuple[float, float] | None = None,  # noqa: A002
    *,
    seed: SeedLike = None,
) -> AliasSampler:
    """Return a sampler whose draws are bin centres of a histogram of ``data``."""
    probabilities, centres, _ = histogram_distribution(data, bins, range)
    return AliasSampler(probabilities, centres, seed=seed)
