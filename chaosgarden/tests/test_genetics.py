"""Tests for trait mutation."""

from __future__ import annotations

import random

import pytest

from chaosgarden.src.entities import TRAIT_DOMAINS
from chaosgarden.src.genetics import (
    MUTATION_RANGE,
    clamp_trait,
    is_reportable_change,
    mutate_traits,
    reportable_mutations,
)


class TestMutateTraits:
    def test_each_trait_stays_within_ten_percent(self):
        parent = {"movement_speed": 2.0, "perception_radius": 100.0, "reproduction_rate": 0.05}
        rng = random.Random(17)
        for _ in range(200):
            child = mutate_traits(parent, rng)
            for trait, value in parent.items():
                assert value * (1 - MUTATION_RANGE) - 1e-9 <= child[trait] <= value * (1 + MUTATION_RANGE) + 1e-9

    def test_same_keys_as_parent(self):
        parent = {"photosynthesis_rate": 1.0, "metabolism_efficiency": 1.1}
        assert set(mutate_traits(parent, random.Random(1))) == set(parent)

    def test_parent_is_not_modified(self):
        parent = {"movement_speed": 2.0}
        mutate_traits(parent, random.Random(1))
        assert parent == {"movement_speed": 2.0}

    def test_values_clamped_to_domain(self):
        low, high = TRAIT_DOMAINS["reproduction_rate"]
        rng = random.Random(2)
        for _ in range(100):
            child = mutate_traits({"reproduction_rate": high}, rng)
            assert low <= child["reproduction_rate"] <= high

    def test_zero_range_copies_exactly(self):
        parent = {"movement_speed": 2.5, "perception_radius": 90.0}
        assert mutate_traits(parent, random.Random(3), mutation_range=0.0) == parent

    def test_deterministic_for_a_seed(self):
        parent = {"movement_speed": 2.5, "perception_radius": 90.0}
        assert mutate_traits(parent, random.Random(9)) == mutate_traits(parent, random.Random(9))


class TestClampTrait:
    def test_known_trait_is_clamped(self):
        assert clamp_trait("metabolism_efficiency", 5.0) == TRAIT_DOMAINS["metabolism_efficiency"][1]

    def test_unknown_trait_only_floored_at_zero(self):
        assert clamp_trait("wingspan", 1e6) == 1e6
        assert clamp_trait("wingspan", -3.0) == 0.0


class TestReportableMutations:
    @pytest.mark.parametrize("old,new,expected", [
        (1.0, 1.02, True),
        (1.0, 1.005, False),
        (1.0, 0.98, True),
        (0.0, 0.1, True),
        (0.0, 0.0, False),
    ])
    def test_one_percent_threshold(self, old, new, expected):
        assert is_reportable_change(old, new) is expected

    def test_lists_only_meaningful_changes(self):
        parent = {"movement_speed": 2.0, "perception_radius": 100.0}
        child = {"movement_speed": 2.1, "perception_radius": 100.5}
        assert reportable_mutations(parent, child) == [("movement_speed", 2.0, 2.1)]
