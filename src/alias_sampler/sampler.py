"""Alias-method sampler for arbitrary discrete distributions.

Construction turns a non-negative weight vector into two parallel tables in
O(n): a probability table and an alias table. Each draw then costs O(1): pick
a slot uniformly, keep it with the slot's probability, otherwise take its
alias.

See https://en.wikipedia.org/wiki/Alias_method and
http://keithschwarz.com/darts-dice-coins/ for background.

Indices are 0-based. Every sampler owns its own ``numpy.random.Generator``,
so drawing never touches ``numpy.random``'s or ``random``'s global state.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Sequence
from typing import Any

import numpy as np
import numpy.typing as npt

from alias_sampler.conformance import ChiSquaredResult, check_distribution
from alias_sampler.errors import (
    BadDistributionError,
    BadSizeError,
    NoDataError,
    NoDistributionError,
)

logger = logging.getLogger(__name__)

# Largest rounding error the final clamp is allowed to hide before it is
# reported. Observed values are around 1e-13.
RESIDUAL_TOLERANCE = 1e-9

SeedLike = int | np.random.SeedSequence | None


def _clean_weights(
    weights: Any, values: npt.NDArray[Any] | None
) -> npt.NDArray[np.float64]:
    """Validate ``weights`` (and the size of ``values``) and return a flat copy.

    Checks run in a fixed order and the first failure wins. NaN weights are
    replaced by zero in the returned copy.
    """
    if weights is None:
        raise NoDistributionError("You must specify a discrete distribution to be sampled.")
    w = np.array(weights, dtype=np.float64).ravel()
    if w.size == 0:
        raise NoDistributionError("You must specify a discrete distribution to be sampled.")

    if values is not None and values.size != w.size:
        raise BadSizeError(
            f"The distribution has {w.size} entries but {values.size} values were given."
        )

    if np.any(w < 0.0):
        raise BadDistributionError("The discrete distribution must be all >= 0.0.")
    if np.any(np.isposinf(w)):
        raise BadDistributionError("The discrete distribution must be finite.")
    # After the negative check this also rules out all-zero and all-NaN input.
    if not np.any(w > 0.0):
        raise NoDataError("The discrete distribution contains no data.")

    w[np.isnan(w)] = 0.0
    return w


def _normalize(w: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    total = w.sum()
    if not np.isfinite(total):
        # Finite weights whose sum overflows.
        w = w / w.max()
        total = w.sum()
    if total != 1.0:
        w = w / total
    return w


def build_alias_tables(
    probabilities: npt.ArrayLike,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.intp], float]:
    """Build the probability and alias tables for a normalized distribution.

    Args:
        probabilities: Non-negative entries summing to one.

    Returns:
        ``(probability_table, alias_table, residual)``. ``residual`` is the
        largest deviation from 1.0 that was clamped away after the
        redistribution loop; it only reflects floating point error.
    """
    p = np.asarray(probabilities, dtype=np.float64)
    n = p.size

    # Plain lists keep the O(n) loop fast; numpy scalar indexing is not.
    table: list[float] = (n * p).tolist()
    alias: list[int] = list(range(n))

    underfull = [i for i, x in enumerate(table) if x < 1.0]
    overfull = [i for i, x in enumerate(table) if x > 1.0]

    while underfull and overfull:
        u = underfull.pop()
        o = overfull.pop()
        alias[u] = o
        table[o] += table[u] - 1.0
        if table[o] > 1.0:
            overfull.append(o)
        elif table[o] < 1.0:
            underfull.append(o)

    residual = 0.0
    for i in underfull + overfull:
        residual = max(residual, abs(table[i] - 1.0))
        table[i] = 1.0
        alias[i] = i

    if residual > RESIDUAL_TOLERANCE:
        logger.warning(
            "Clamped a residual of %.3g in the probability table (tolerance %.3g)",
            residual,
            RESIDUAL_TOLERANCE,
        )
    elif residual:
        logger.debug("Clamped rounding residual of %.3g", residual)

    return np.array(table, dtype=np.float64), np.array(alias, dtype=np.intp), residual


def _value_array(values: Sequence[Any]) -> npt.NDArray[Any]:
    """Copy ``values`` into a flat array.

    numpy arrays are flattened in C order, like the weights. Other sequences
    are taken item by item, so tuples stay whole.
    """
    if isinstance(values, np.ndarray):
        return values.ravel().copy()
    items = list(values)
    if all(isinstance(v, (int, float, np.number)) for v in items):
        return np.array(items)
    out = np.empty(len(items), dtype=object)
    for i, v in enumerate(items):
        out[i] = v
    return out


def _frozen(a: npt.NDArray[Any]) -> npt.NDArray[Any]:
    a.flags.writeable = False
    return a


class AliasSampler:
    """Draws indices, or mapped values, from a fixed discrete distribution.

    Args:
        weights: Non-negative weights, normalized internally. NaN counts as 0.
        values: Optional sequence parallel to ``weights``; when given, draws
            return these values instead of indices.
        seed: Seed for this sampler's random stream. ``None`` seeds from OS
            entropy.

    Raises:
        NoDistributionError: ``weights`` is ``None`` or empty.
        BadSizeError: ``values`` has a different number of entries from ``weights``.
        BadDistributionError: a weight is negative or infinite.
        NoDataError: no weight is strictly positive.
    """

    def __init__(
        self,
        weights: Any,
        values: Sequence[Any] | None = None,
        *,
        seed: SeedLike = None,
    ) -> None:
        value_array = None if values is None else _value_array(values)
        w = _clean_weights(weights, value_array)
        self._probabilities = _frozen(_normalize(w))
        prob, alias, residual = build_alias_tables(self._probabilities)
        self._probability_table = _frozen(prob)
        self._alias_table = _frozen(alias)
        self._n = w.size
        self._values = None if value_array is None else _frozen(value_array)
        self._residual = residual
        self._rng = np.random.default_rng(seed)
        logger.debug("Built alias tables for %d outcomes", self._n)

    # ------------------------------------------------------------------
    # Table access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._n

    def __repr__(self) -> str:
        mapped = "" if self._values is None else ", mapped"
        return f"AliasSampler(n={self._n}{mapped})"

    @property
    def probability_table(self) -> npt.NDArray[np.float64]:
        """Per-slot probability of keeping the slot's own index (read-only)."""
        return self._probability_table

    @property
    def alias_table(self) -> npt.NDArray[np.intp]:
        """Per-slot fallback index (read-only). Full slots alias to themselves."""
        return self._alias_table

    @property
    def probabilities(self) -> npt.NDArray[np.float64]:
        """The normalized input distribution (read-only)."""
        return self._probabilities

    @property
    def values(self) -> npt.NDArray[Any] | None:
        """The flattened value map, or None when draws are indices (read-only)."""
        return self._values

    @property
    def residual(self) -> float:
        """Rounding error clamped away while building the tables."""
        return self._residual

    def weight(self, index: int) -> float:
        """Return the normalized probability of ``index``.

        Negative indices count from the end, as for a list.
        """
        i = operator.index(index)
        if i < 0:
            i += self._n
        if not 0 <= i < self._n:
            raise IndexError(f"index {index} out of range for {self._n} outcomes")
        return float(self._probabilities[i])

    def __getitem__(self, index: int) -> float:
        return self.weight(index)

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def reseed(self, seed: SeedLike) -> None:
        """Replace the random stream with a fresh one derived from ``seed``."""
        self._rng = np.random.default_rng(seed)

    def draw_indices(self, count: int, seed: SeedLike = None) -> npt.NDArray[np.intp]:
        """Draw ``count`` indices.

        If ``seed`` is given the stream is reset first, and the stream's state
        after the draw carries over to later unseeded calls. Consequently
        ``draw_indices(a + b, s)`` equals ``draw_indices(a, s)`` followed by
        ``draw_indices(b)``.
        """
        count = operator.index(count)
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if seed is not None:
            self.reseed(seed)
        return self._draw_with(self._rng, count)

    def _draw_with(self, rng: np.random.Generator, count: int) -> npt.NDArray[np.intp]:
        # Generator.random is uniform on [0, 1), which is what the
        # ``remainder < probability`` comparison below assumes.
        scaled = self._n * rng.random(count)
        slot = np.floor(scaled).astype(np.intp)
        np.minimum(slot, self._n - 1, out=slot)
        remainder = scaled - slot
        keep = remainder < self._probability_table[slot]
        return np.where(keep, slot, self._alias_table[slot])

    def draw(self, count: int, seed: SeedLike = None) -> npt.NDArray[Any]:
        """Draw ``count`` samples, mapped through ``values`` when present.

        See ``draw_indices`` for the seeding contract.
        """
        indices = self.draw_indices(count, seed)
        if self._values is None:
            return indices
        return self._values[indices]

    def sample(self, seed: SeedLike = None) -> Any:
        """Draw a single sample."""
        out = self.draw(1, seed)[0]
        if isinstance(out, np.generic):
            return out.item()
        return out

    def test_distribution(self, num_samples: int, *, seed: SeedLike = None) -> ChiSquaredResult:
        """Chi-squared test of ``num_samples`` fresh draws against the weights.

        The draws come from a separate generator, so this sampler's stream is
        left as it was.
        """
        return check_distribution(self, num_samples, seed=seed)


def build_sampler(
    weights: Any,
    values: Sequence[Any] | None = None,
    *,
    seed: SeedLike = None,
) -> AliasSampler:
    """Functional spelling of ``AliasSampler(weights, values, seed=seed)``."""
    return AliasSampler(weights, values, seed=seed)
