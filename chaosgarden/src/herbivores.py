"""Herbivore behavior: fleeing predators, grazing, reproduction."""

from __future__ import annotations

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
    distance,
    exploration_target,
    find_nearest,
    move_away,
    move_toward,
    utc_now,
)
from .weather import get_active_weather_modifiers

if TYPE_CHECKING:
    from .entities import Entity, Herbivore
    from .environment import Environment
    from .events import EventLogger

HERBIVORE_METABOLISM_FACTOR = 0.8
HERBIVORE_MIN_SPEED = 0.35
HERBIVORE_SATIATION_ENERGY = 85.0
EATING_DISTANCE = 5.0
ENERGY_FROM_PLANT = 40.0
FLEE_SPEED_MULTIPLIER = 1.5
FLEE_COST_MULTIPLIER = 1.3
MOVE_TO_PLANT_COST_MULTIPLIER = 0.68
# A hungry herbivore holds its ground longer before bolting.
PANIC_ENERGY = 30.0
PANIC_DISTANCE_LOW_ENERGY = 40.0
PANIC_DISTANCE_HIGH_ENERGY = 80.0
EXHAUSTION_THRESHOLD_TICKS = 5
EXHAUSTION_SPEED_PENALTY = 0.6
RECOVERY_TICKS_REQUIRED = 10
EXPLORATION_SPEED_MULTIPLIER = 0.5
EXPLORATION_COST_MULTIPLIER = 0.5
HERBIVORE_MAX_AGE = 150
HERBIVORE_STARVATION_DECAY = 1.0

HERBIVORE_REPRODUCTION = ReproductionProfile(
    threshold=90.0,
    cost=30.0,
    max_reproductive_age=140,
    dispersal_radius=30.0,
)


def process_herbivore(
    herbivore: Herbivore,
    environment: Environment,
    plants: Sequence[Entity],
    event_logger: EventLogger,
    rng: random.Random,
    threats: Sequence[Entity] = (),
    now: str | None = None,
) -> BehaviorResult:
    """One tick of herbivore life.

    A carnivore inside the panic distance takes priority over food. Otherwise
    a hungry herbivore grazes the nearest plant in perception range, or
    wanders looking for one.
    """
    result = BehaviorResult()
    modifiers = get_active_weather_modifiers(environment.weather_state)
    speed = max(HERBIVORE_MIN_SPEED, herbivore.movement_speed * modifiers.movement)

    threat = find_nearest(herbivore, threats, herbivore.threat_detection_radius)
    if threat is None:
        herbivore.flee_ticks = 0
        recover(herbivore)
        forage(herbivore, plants, speed, rng, result)
    elif distance(herbivore.position, threat.position) <= panic_distance(herbivore):
        flee(herbivore, threat, speed)
    else:
        herbivore.flee_ticks = 0
        forage(herbivore, plants, speed, rng, result)

    apply_metabolism(herbivore, environment, HERBIVORE_METABOLISM_FACTOR)

    child = try_reproduce(
        herbivore, environment, rng, event_logger, HERBIVORE_REPRODUCTION,
        chance_multiplier=modifiers.reproduction, now=now,
    )
    if child is not None:
        result.offspring.append(child)

    evaluate_death(herbivore, HERBIVORE_MAX_AGE, HERBIVORE_STARVATION_DECAY)

    herbivore.updated_at = now or utc_now()
    return result


def panic_distance(herbivore: Herbivore) -> float:
    if herbivore.energy < PANIC_ENERGY:
        return PANIC_DISTANCE_LOW_ENERGY
    return PANIC_DISTANCE_HIGH_ENERGY


def flee(herbivore: Herbivore, threat: Entity, speed: float) -> float:
    """Run from the threat. A long chase leaves the herbivore exhausted and slower."""
    flee_speed = speed * FLEE_SPEED_MULTIPLIER
    if herbivore.exhausted:
        flee_speed *= EXHAUSTION_SPEED_PENALTY
    moved = move_away(herbivore, threat.position, flee_speed)
    pay_for_movement(herbivore, moved, FLEE_COST_MULTIPLIER)

    herbivore.flee_ticks += 1
    if herbivore.flee_ticks >= EXHAUSTION_THRESHOLD_TICKS:
        herbivore.exhausted = True
    return moved


def recover(herbivore: Herbivore) -> None:
    """Count calm ticks; enough of them in a row end exhaustion."""
    if not herbivore.exhausted:
        return
    herbivore.recovery_ticks += 1
    if herbivore.recovery_ticks >= RECOVERY_TICKS_REQUIRED:
        herbivore.exhausted = False
        herbivore.recovery_ticks = 0


def forage(
    herbivore: Herbivore,
    plants: Sequence[Entity],
    speed: float,
    rng: random.Random,
    result: BehaviorResult,
) -> None:
    if herbivore.energy >= HERBIVORE_SATIATION_ENERGY:
        return
    plant = find_nearest(herbivore, plants, herbivore.perception_radius)
    if plant is None:
        reach = speed * EXPLORATION_SPEED_MULTIPLIER
        moved = move_toward(herbivore, exploration_target(herbivore, reach, rng), reach)
        pay_for_movement(herbivore, moved, EXPLORATION_COST_MULTIPLIER)
    elif distance(herbivore.position, plant.position) <= EATING_DISTANCE:
        if graze(herbivore, plant):
            result.consumed.append(plant.id)
    else:
        moved = move_toward(herbivore, plant.position, speed)
        pay_for_movement(herbivore, moved, MOVE_TO_PLANT_COST_MULTIPLIER)


def graze(herbivore: Herbivore, plant: Entity) -> bool:
    """Take a bite. Returns True when the plant was eaten down to nothing."""
    energy_before = herbivore.energy
    gain = transfer_energy(plant, herbivore, ENERGY_FROM_PLANT)
    if gain > 0:
        reward_feeding(herbivore, energy_before)
    if plant.energy <= 0:
        plant.energy = 0.0
        kill(plant, f"eaten by {herbivore.name}")
        return True
    return False
