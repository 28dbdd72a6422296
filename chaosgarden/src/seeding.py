"""Initial world generation.

Species counts are drawn from weighted ratios (mostly plants, fewer
herbivores, fewest carnivores) and every trait is sampled stratified:
each entity of a kind lands in its own slice of the trait's range, so a
small population still spans the whole range.
"""

from __future__ import annotations

import random

from .entities import ENTITY_CLASSES, Entity, EntityKind
from .helpers import MAX_HEALTH, generate_entity_id, random_position, utc_now
from .names import generate_name

DEFAULT_SEED = 20260210
DEFAULT_TOTAL_ENTITIES = 22
DEFAULT_FUNGUS_COUNT = 3
MIN_TOTAL_ENTITIES = 11

MIN_PLANTS = 6
MIN_HERBIVORES = 3
MIN_CARNIVORES = 1
HERBIVORES_PER_CARNIVORE = 3

SUSTAINABILITY_TICK_WINDOW = 120
SUSTAINABILITY_MINIMUMS = {
    "plants": 2,
    "herbivores": 1,
    "carnivores": 1,
    "fungi": 1,
    "total_living": 6,
}

SPECIES_WEIGHT_RANGES = {
    EntityKind.PLANT: (5.4, 6.6),
    EntityKind.HERBIVORE: (2.8, 3.8),
    EntityKind.CARNIVORE: (0.9, 1.4),
}

# kind -> attribute -> (low, high). "energy" is the starting energy.
TRAIT_RANGES: dict[EntityKind, dict[str, tuple[float, float]]] = {
    EntityKind.PLANT: {
        "energy": (44.0, 62.0),
        "reproduction_rate": (0.035, 0.075),
        "metabolism_efficiency": (0.85, 1.2),
        "photosynthesis_rate": (0.8, 1.3),
    },
    EntityKind.HERBIVORE: {
        "energy": (50.0, 70.0),
        "reproduction_rate": (0.02, 0.04),
        "movement_speed": (1.5, 2.9),
        "metabolism_efficiency": (0.82, 1.25),
        "perception_radius": (80.0, 140.0),
        "threat_detection_radius": (95.0, 170.0),
    },
    EntityKind.CARNIVORE: {
        "energy": (46.0, 66.0),
        "reproduction_rate": (0.012, 0.03),
        "movement_speed": (2.8, 4.2),
        "metabolism_efficiency": (0.85, 1.25),
        "perception_radius": (130.0, 190.0),
    },
    EntityKind.FUNGUS: {
        "energy": (48.0, 68.0),
        "reproduction_rate": (0.028, 0.05),
        "metabolism_efficiency": (1.04, 1.34),
        "decomposition_rate": (0.96, 1.4),
        "perception_radius": (46.0, 92.0),
    },
}


def generate_population_counts(
    rng: random.Random,
    total: int = DEFAULT_TOTAL_ENTITIES,
    fungus_count: int = DEFAULT_FUNGUS_COUNT,
) -> dict[EntityKind, int]:
    """Split `total` between plants, herbivores and carnivores, then add fungi.

    Floors keep at least MIN_PLANTS, MIN_HERBIVORES and MIN_CARNIVORES.
    Carnivores are capped at one per HERBIVORES_PER_CARNIVORE herbivores;
    anything trimmed goes to the plants.
    """
    if total < MIN_TOTAL_ENTITIES:
        raise ValueError(f"total must be >= {MIN_TOTAL_ENTITIES}, got {total}")

    weights = {kind: rng.uniform(*bounds) for kind, bounds in SPECIES_WEIGHT_RANGES.items()}
    weight_sum = sum(weights.values())
    plants = round(weights[EntityKind.PLANT] / weight_sum * total)
    herbivores = round(weights[EntityKind.HERBIVORE] / weight_sum * total)
    carnivores = total - plants - herbivores

    if plants < MIN_PLANTS:
        herbivores = max(MIN_HERBIVORES, herbivores - (MIN_PLANTS - plants))
        plants = MIN_PLANTS
    if herbivores < MIN_HERBIVORES:
        plants = max(MIN_PLANTS, plants - (MIN_HERBIVORES - herbivores))
        herbivores = MIN_HERBIVORES
    carnivores = min(
        max(MIN_CARNIVORES, carnivores),
        max(MIN_CARNIVORES, herbivores // HERBIVORES_PER_CARNIVORE),
    )
    plants = total - herbivores - carnivores

    return {
        EntityKind.PLANT: plants,
        EntityKind.HERBIVORE: herbivores,
        EntityKind.CARNIVORE: carnivores,
        EntityKind.FUNGUS: max(0, fungus_count),
    }


def stratified_samples(rng: random.Random, count: int, low: float, high: float) -> list[float]:
    """One value per stratum of [low, high], in shuffled order."""
    if count <= 0:
        return []
    if count == 1:
        return [low + (high - low) * 0.5]
    strata = list(range(count))
    rng.shuffle(strata)
    bucket = (high - low) / count
    return [low + bucket * index + rng.random() * bucket for index in strata]


def _unique_name(kind: EntityKind, rng: random.Random, used: set[str]) -> str:
    base = generate_name(kind, rng)
    name, counter = base, 2
    while name in used:
        name = f"{base}-{counter}"
        counter += 1
    used.add(name)
    return name


def create_entity(
    kind: EntityKind | str,
    rng: random.Random,
    tick: int = 0,
    now: str | None = None,
    name: str | None = None,
    **attributes,
) -> Entity:
    """Build a fresh, unrelated entity of `kind` at a random position.

    Unspecified traits keep the class defaults.
    """
    kind = EntityKind(kind)
    now = now or utc_now()
    return ENTITY_CLASSES[kind](
        id=generate_entity_id(rng),
        name=name or generate_name(kind, rng),
        position=random_position(rng),
        health=MAX_HEALTH,
        born_at_tick=tick,
        created_at=now,
        updated_at=now,
        **attributes,
    )


def generate_initial_population(
    rng: random.Random,
    total: int = DEFAULT_TOTAL_ENTITIES,
    fungus_count: int = DEFAULT_FUNGUS_COUNT,
    tick: int = 0,
    now: str | None = None,
) -> list[Entity]:
    """Seed a garden. The same generator state always yields the same world."""
    now = now or utc_now()
    counts = generate_population_counts(rng, total, fungus_count)

    population: list[Entity] = []
    for kind in EntityKind:
        count = counts[kind]
        samples = {
            attribute: stratified_samples(rng, count, low, high)
            for attribute, (low, high) in TRAIT_RANGES[kind].items()
        }
        used_names: set[str] = set()
        for index in range(count):
            attributes = {attribute: values[index] for attribute, values in samples.items()}
            population.append(create_entity(
                kind, rng, tick=tick, now=now,
                name=_unique_name(kind, rng, used_names),
                **attributes,
            ))
    return population
