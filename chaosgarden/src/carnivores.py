"""Carnivore behavior: hunting herbivores, reproduction."""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING, Sequence

from .creatures import (
    BehaviorResult,
    ReproductionProfile,
    apply_metabolism,
    evaluate_death,
    kill,
    pay_for_movement,
    reward_feeding,
    transfer_energy,
    try_reproduce,
)
from .helpers import (
    BASE_ENERGY_COST_PER_TICK,
    MAX_HEALTH,
    distance,
    find_nearest,
    move_toward,
    utc_now,
)
from .weather import get_active_weather_modifiers

if TYPE_CHECKING:
    from .entities import Carnivore, Entity
    from .environment import Environment
    from .events import EventLogger

CARNIVORE_METABOLISM_FACTOR = 0.9
CARNIVORE_HUNGER_ENERGY = 60.0
HUNTING_DISTANCE = 8.0
ENERGY_FROM_PREY = 58.0
PURSUIT_COST_MULTIPLIER = 1.2
SEARCH_SPEED_MULTIPLIER = 0.85
SEARCH_COST_MULTIPLIER = 0.85
IDLE_COST_FACTOR = 0.25
CARNIVORE_MAX_AGE = 200
# An empty carnivore dies the same tick.
CARNIVORE_STARVATION_DECAY = MAX_HEALTH

CARNIVORE_REPRODUCTION = ReproductionProfile(
    threshold=95.0,
    cost=50.0,
    max_reproductive_age=150,
    dispersal_radius=30.0,
)


def process_carnivore(
    carnivore: Carnivore,
    environment: Environment,
    prey: Sequence[Entity],
    event_logger: EventLogger,
    rng: random.Random,
    now: str | None = None,
) -> BehaviorResult:
    """One tick of carnivore life. Only a hungry carnivore hunts.

    With nothing in perception range it heads for the nearest herbivore
    anywhere in the garden. Energy at zero is fatal.
    """
    result = BehaviorResult()
    modifiers = get_active_weather_modifiers(environment.weather_state)
    speed = carnivore.movement_speed * modifiers.movement

    if carnivore.energy < CARNIVORE_HUNGER_ENERGY:
        target = find_nearest(carnivore, prey, carnivore.perception_radius)
        if target is None:
            search(carnivore, prey, speed)
        elif distance(carnivore.position, target.position) <= HUNTING_DISTANCE:
            hunt(carnivore, target)
            result.consumed.append(target.id)
        else:
            moved = move_toward(carnivore, target.position, speed)
            pay_for_movement(carnivore, moved, PURSUIT_COST_MULTIPLIER)

    apply_metabolism(carnivore, environment, CARNIVORE_METABOLISM_FACTOR)

    child = try_reproduce(
        carnivore, environment, rng, event_logger, CARNIVORE_REPRODUCTION,
        chance_multiplier=modifiers.reproduction, now=now,
    )
    if child is not None:
        result.offspring.append(child)

    evaluate_death(carnivore, CARNIVORE_MAX_AGE, CARNIVORE_STARVATION_DECAY)

    carnivore.updated_at = now or utc_now()
    return result


def hunt(carnivore: Carnivore, prey: Entity) -> float:
    """Kill the prey and eat what fits. The rest stays on the carcass."""
    energy_before = carnivore.energy
    gain = transfer_energy(prey, carnivore, ENERGY_FROM_PREY)
    kill(prey, f"killed by {carnivore.name}")
    reward_feeding(carnivore, energy_before)
    return gain


def search(carnivore: Carnivore, prey: Sequence[Entity], speed: float) -> None:
    """Close in on the nearest herbivore in the garden, or idle if there is none."""
    target = find_nearest(carnivore, prey, math.inf)
    if target is None:
        carnivore.energy = max(
            0.0, carnivore.energy - BASE_ENERGY_COST_PER_TICK * CARNIVORE_METABOLISM_FACTOR * IDLE_COST_FACTOR,
        )
        return
    reach = speed * SEARCH_SPEED_MULTIPLIER
    moved = move_toward(carnivore, target.position, reach)
    pay_for_movement(carnivore, moved, SEARCH_COST_MULTIPLIER)
