"""Plant behavior: photosynthesis, growth, seeding."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Sequence

from .creatures import (
    BehaviorResult,
    ReproductionProfile,
    apply_metabolism,
    evaluate_death,
    try_reproduce,
)
from .helpers import MAX_ENERGY, MAX_HEALTH, clamp, day_phase, moisture_multiplier, utc_now
from .weather import get_active_weather_modifiers

if TYPE_CHECKING:
    from .entities import Entity, Plant
    from .environment import Environment
    from .events import EventLogger

BASE_PHOTOSYNTHESIS_RATE = 2.0
PLANT_METABOLISM_FACTOR = 0.5
PLANT_GROWTH_ENERGY = 70.0
PLANT_GROWTH_HEALTH_PER_TICK = 0.5
PLANT_MAX_AGE = 200
PLANT_STARVATION_DECAY = MAX_HEALTH

PLANT_REPRODUCTION = ReproductionProfile(
    threshold=80.0,
    cost=30.0,
    max_reproductive_age=180,
    dispersal_radius=30.0,
)


def calculate_photosynthesis(plant: Plant, environment: Environment) -> float:
    """Energy gained this tick from light, time of day and soil moisture."""
    modifiers = get_active_weather_modifiers(environment.weather_state)
    return (
        BASE_PHOTOSYNTHESIS_RATE
        * plant.photosynthesis_rate
        * day_phase(environment.tick)
        * moisture_multiplier(environment.moisture)
        * (0.5 + environment.sunlight)
        * modifiers.photosynthesis
    )


def process_plant(
    plant: Plant,
    environment: Environment,
    candidates: Sequence[Entity],
    event_logger: EventLogger,
    rng: random.Random,
    now: str | None = None,
) -> BehaviorResult:
    """One tick of plant life. Plants never move and ignore `candidates`."""
    result = BehaviorResult()

    gain = calculate_photosynthesis(plant, environment)
    plant.energy = clamp(plant.energy + gain, 0.0, MAX_ENERGY)
    apply_metabolism(plant, environment, PLANT_METABOLISM_FACTOR)

    if plant.energy > PLANT_GROWTH_ENERGY:
        plant.health = clamp(plant.health + PLANT_GROWTH_HEALTH_PER_TICK, 0.0, MAX_HEALTH)

    child = try_reproduce(plant, environment, rng, event_logger, PLANT_REPRODUCTION, now=now)
    if child is not None:
        result.offspring.append(child)

    # Plants wither the tick they run dry
    evaluate_death(plant, PLANT_MAX_AGE, PLANT_STARVATION_DECAY)

    plant.updated_at = now or utc_now()
    return result
