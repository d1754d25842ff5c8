"""
Tests for fitness-proportionate roulette selection.

Properties tested:
- Selection frequency follows the reflected fitness weights
- Degenerate weight distributions fall back to uniform selection
- Spins always return a valid candidate index
"""

from collections import Counter

import math

import pytest
import numpy as np
from hypothesis import given, strategies as st, settings

from neuro_evolver.evolution.models import Individual
from neuro_evolver.evolution.random_source import RandomSource
from neuro_evolver.evolution.roulette import Roulette


def make_candidates(fitnesses):
    return [Individual(genome=np.zeros(4), fitness=f) for f in fitnesses]


def spin_counts(wheel, spins=10000):
    return Counter(wheel.spin() for _ in range(spins))


class TestSelectionBias:
    """Weight derivation from minimization fitness"""

    def test_negative_fitness_monotonic(self):
        wheel = Roulette(make_candidates([-30.143, -60.556, -90.334]), RandomSource(42))
        counts = spin_counts(wheel)
        assert counts[0] > counts[1] > counts[2]

    def test_positive_fitness_favors_lowest(self):
        wheel = Roulette(make_candidates([1.0, 2.0, 3.0]), RandomSource(42))
        counts = spin_counts(wheel)
        assert counts[0] > counts[1] > counts[2]

    def test_probabilities_follow_reflected_weights(self):
        wheel = Roulette(make_candidates([1.0, 2.0, 3.0]), RandomSource(0))
        assert wheel.probabilities == pytest.approx([3 / 6, 2 / 6, 1 / 6])

    def test_frequencies_match_probabilities(self):
        wheel = Roulette(make_candidates([2.0, 5.0, 8.0, 11.0]), RandomSource(3))
        counts = spin_counts(wheel, spins=20000)
        for index, probability in enumerate(wheel.probabilities):
            assert abs(counts[index] / 20000 - probability) < 0.02

    def test_mixed_sign_weights_are_clipped(self):
        # lo + hi = -5 gives weights 5, -5, -10 with a negative total;
        # the weight opposite in sign to the total gets no share
        wheel = Roulette(make_candidates([-10.0, 0.0, 5.0]), RandomSource(1))
        assert wheel.probabilities == pytest.approx([0.0, 1 / 3, 2 / 3])
        assert all(wheel.spin() != 0 for _ in range(500))

    def test_mixed_sign_negative_total_favors_highest_fitness(self):
        wheel = Roulette(make_candidates([-10.0, 0.0, 5.0]), RandomSource(9))
        counts = spin_counts(wheel)
        assert counts[0] == 0
        assert counts[2] > counts[1] > 0

    def test_mixed_sign_positive_total_favors_lowest_fitness(self):
        # lo + hi = 5 gives weights 15, 5, 0
        wheel = Roulette(make_candidates([-10.0, 0.0, 15.0]), RandomSource(9))
        assert wheel.probabilities == pytest.approx([0.75, 0.25, 0.0])
        counts = spin_counts(wheel)
        assert counts[0] > counts[1]
        assert counts[2] == 0


class TestDegenerateCases:
    """Fallback to uniform index selection"""

    def test_equal_fitness_is_uniform(self):
        wheel = Roulette(make_candidates([4.0] * 4), RandomSource(42))
        assert wheel.uniform
        counts = spin_counts(wheel, spins=8000)
        assert set(counts) == {0, 1, 2, 3}
        assert all(1700 < c < 2300 for c in counts.values())

    def test_zero_fitness_does_not_divide_by_zero(self):
        wheel = Roulette(make_candidates([0.0, 0.0, 0.0]), RandomSource(42))
        assert wheel.uniform
        assert wheel.probabilities == pytest.approx([1 / 3] * 3)

    def test_zero_total_is_uniform(self):
        # weights 1, 0, -1 sum to zero
        wheel = Roulette(make_candidates([-1.0, 0.0, 1.0]), RandomSource(42))
        assert wheel.uniform

    def test_unevaluated_candidates_are_uniform(self):
        wheel = Roulette(make_candidates([math.inf, 1.0]), RandomSource(42))
        assert wheel.uniform

    def test_single_candidate(self):
        wheel = Roulette(make_candidates([12.0]), RandomSource(42))
        assert all(wheel.spin() == 0 for _ in range(100))

    def test_empty_candidates_rejected(self):
        with pytest.raises(ValueError, match="at least one candidate"):
            Roulette([], RandomSource(42))


class TestSpinRange:

    @given(
        fitnesses=st.lists(
            st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False),
            min_size=1,
            max_size=30,
        ),
        seed=st.integers(min_value=0, max_value=10**6),
    )
    @settings(max_examples=100)
    def test_spin_returns_valid_index(self, fitnesses, seed):
        wheel = Roulette(make_candidates(fitnesses), RandomSource(seed))
        for _ in range(20):
            assert 0 <= wheel.spin() < len(fitnesses)

    def test_same_seed_same_spins(self):
        candidates = make_candidates([0.5, 1.5, 2.5, 3.5])
        a = Roulette(candidates, RandomSource(21))
        b = Roulette(candidates, RandomSource(21))
        assert [a.spin() for _ in range(100)] == [b.spin() for _ in range(100)]
