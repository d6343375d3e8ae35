"""Statistical conformance of the alias sampler.

All draws here are seeded, so the checks are deterministic.
"""

import pytest

SIMPLE_DATA = [4, 4, 2, 2, 2, 2, 3, 1, 5, 6]


def test_histogram_of_simple_data() -> None:
    """Six bins over the simple data put each value in its own bin."""
    from alias_sampler import histogram_distribution

    probabilities, centres, edges = histogram_distribution(SIMPLE_DATA, bins=6)
    assert probabilities.tolist() == pytest.approx([0.1, 0.4, 0.1, 0.2, 0.1, 0.1])
    assert len(centres) == 6
    assert len(edges) == 7
    assert centres[0] == pytest.approx(1.0 + 5.0 / 12.0)


def test_empirical_frequencies_converge() -> None:
    """A million draws match the histogram probabilities to within 0.01."""
    import numpy as np

    from alias_sampler import AliasSampler, histogram_distribution

    probabilities, _, _ = histogram_distribution(SIMPLE_DATA, bins=6)
    sampler = AliasSampler(probabilities, seed=20180305)
    n = 1_000_000
    counts = np.bincount(sampler.draw(n), minlength=len(probabilities))
    for observed, expected in zip(counts / n, probabilities):
        assert abs(observed - expected) < 0.01


def test_uniform_weights_are_uniform() -> None:
    """Equal weights give each index about a quarter of the draws."""
    import numpy as np

    from alias_sampler import AliasSampler

    sampler = AliasSampler([1, 1, 1, 1], seed=7)
    n = 100_000
    counts = np.bincount(sampler.draw(n), minlength=4)
    for frequency in counts / n:
        assert abs(frequency - 0.25) < 0.02


def test_from_histogram_draws_bin_centres() -> None:
    """A histogram sampler only returns bin centres."""
    from alias_sampler import from_histogram, histogram_distribution

    _, centres, _ = histogram_distribution(SIMPLE_DATA, bins=6)
    sampler = from_histogram(SIMPLE_DATA, bins=6, seed=1)
    assert set(sampler.draw(1000).tolist()) <= set(centres.tolist())


def test_from_histogram_of_gaussian_data() -> None:
    """Resampled Gaussian data keeps roughly the same mean and spread."""
    import numpy as np

    from alias_sampler import from_histogram

    rng = np.random.default_rng(65536)
    data = rng.standard_normal(65536)
    sampler = from_histogram(data, bins=128, seed=2)
    resampled = sampler.draw(65536)
    assert abs(resampled.mean() - data.mean()) < 0.05
    assert abs(resampled.std() - data.std()) < 0.05


def test_histogram_drops_nan() -> None:
    """NaN samples do not count towards any bin."""
    import math

    from alias_sampler import histogram_distribution

    probabilities, _, _ = histogram_distribution([1.0, 2.0, math.nan], bins=2)
    assert probabilities.tolist() == [0.5, 0.5]


def test_histogram_of_empty_data_rejected() -> None:
    """Empty data has no distribution."""
    import math

    from alias_sampler import NoDistributionError, histogram_distribution

    with pytest.raises(NoDistributionError):
        histogram_distribution([])
    with pytest.raises(NoDistributionError):
        histogram_distribution([math.nan])


def test_histogram_range_excluding_data_rejected() -> None:
    """A range that contains no data has no distribution."""
    from alias_sampler import NoDistributionError, histogram_distribution

    with pytest.raises(NoDistributionError):
        histogram_distribution([1.0, 2.0], bins=4, range=(10.0, 20.0))


# -----------------------------------------------------------------------------
# Chi-squared conformance
# -----------------------------------------------------------------------------


def test_chi_squared_passes_after_construction() -> None:
    """A freshly built sampler passes its own goodness-of-fit test."""
    from alias_sampler import AliasSampler

    sampler = AliasSampler([1.0, 2.0, 3.0, 4.0, 0.0, 5.0])
    result = sampler.test_distribution(50_000, seed=123)
    assert result.degrees_of_freedom == 4
    assert result.num_samples == 50_000
    assert result.passes(1e-6), (
        f"chi2={result.chi_squared:.2f}, p_value={result.p_value:.6f}"
    )


def test_chi_squared_single_outcome() -> None:
    """With one possible outcome there is nothing to test."""
    from alias_sampler import AliasSampler, check_distribution

    result = check_distribution(AliasSampler([0.0, 3.0, 0.0]), 100, seed=0)
    assert result.degrees_of_freedom == 0
    assert result.passes()


def test_chi_squared_detects_wrong_tables() -> None:
    """A sampler whose tables disagree with its weights fails."""
    import numpy as np

    from alias_sampler import AliasSampler, check_distribution

    sampler = AliasSampler([1.0, 1.0, 1.0, 1.0])
    # Route every draw to index 0 while the weights still say uniform.
    sampler._probability_table = np.zeros(4)
    sampler._alias_table = np.zeros(4, dtype=np.intp)
    result = check_distribution(sampler, 10_000, seed=5)
    assert not result.passes(0.001)


def test_chi_squared_flags_zero_weight_draws() -> None:
    """Drawing a zero-probability outcome fails outright."""
    import math

    import numpy as np

    from alias_sampler import AliasSampler, check_distribution

    sampler = AliasSampler([1.0, 0.0])
    sampler._probability_table = np.zeros(2)
    sampler._alias_table = np.ones(2, dtype=np.intp)
    result = check_distribution(sampler, 100, seed=5)
    assert result.chi_squared == math.inf
    assert not result.passes()


def test_chi_squared_needs_samples() -> None:
    """At least one sample is required."""
    from alias_sampler import AliasSampler

    with pytest.raises(ValueError):
        AliasSampler([1.0, 2.0]).test_distribution(0)


def test_chi_squared_leaves_stream_untouched() -> None:
    """Running the check does not move or reseed the sampler's own stream."""
    from alias_sampler import AliasSampler

    checked = AliasSampler([1.0, 2.0], seed=5)
    twin = AliasSampler([1.0, 2.0], seed=5)
    checked.test_distribution(100, seed=1)
    checked.test_distribution(100)
    assert checked.draw(10).tolist() == twin.draw(10).tolist()


def test_chi_squared_seed_is_reproducible() -> None:
    """The same check seed gives the same result."""
    from alias_sampler import AliasSampler

    sampler = AliasSampler([1.0, 2.0, 3.0])
    assert sampler.test_distribution(1000, seed=9) == sampler.test_distribution(1000, seed=9)
