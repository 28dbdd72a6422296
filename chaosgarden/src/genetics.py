"""Trait inheritance: symmetric mutation with domain clamping."""

from __future__ import annotations

import random

from .entities import trait_domain
from .helpers import clamp

MUTATION_RANGE = 0.1
REPORTABLE_CHANGE = 0.01


def clamp_trait(trait: str, value: float) -> float:
    low, high = trait_domain(trait)
    return clamp(value, low, high)


def mutate_traits(
    parent_traits: dict[str, float],
    rng: random.Random,
    mutation_range: float = MUTATION_RANGE,
) -> dict[str, float]:
    """Copy parent traits, scaling each by 1 ± up to `mutation_range`."""
    child = {}
    for trait, value in parent_traits.items():
        factor = 1.0 + rng.uniform(-mutation_range, mutation_range)
        child[trait] = clamp_trait(trait, value * factor)
    return child


def is_reportable_change(old: float, new: float) -> bool:
    if old == 0:
        return new != 0
    return abs(new - old) / abs(old) > REPORTABLE_CHANGE


def reportable_mutations(
    parent_traits: dict[str, float],
    child_traits: dict[str, float],
) -> list[tuple[str, float, float]]:
    """(trait, old, new) for every trait that moved by more than 1%."""
    return [
        (trait, old, child_traits[trait])
        for trait, old in parent_traits.items()
        if trait in child_traits and is_reportable_change(old, child_traits[trait])
    ]
