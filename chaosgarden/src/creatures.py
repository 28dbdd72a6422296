"""Lifecycle steps shared by the species processors: upkeep, feeding, death, reproduction."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .genetics import mutate_traits, reportable_mutations
from .helpers import (
    BASE_ENERGY_COST_PER_TICK,
    MAX_ENERGY,
    MAX_HEALTH,
    clamp,
    generate_entity_id,
    movement_energy_cost,
    position_near_parent,
    temperature_multiplier,
    utc_now,
)
from .names import generate_name

if TYPE_CHECKING:
    from .entities import Entity
    from .environment import Environment
    from .events import EventLogger

HEALTH_GAIN_FROM_FEEDING = 5.0
STARVATION_RECOVERY_THRESHOLD = 5.0
STARVATION_RECOVERY_HEALTH_BONUS = 15.0

CAUSE_OLD_AGE = "old age"
CAUSE_STARVATION = "starvation"
CAUSE_EXPOSURE = "exposure"


@dataclass
class BehaviorResult:
    """What a processor produced this tick, besides in-place mutation."""
    offspring: list[Entity] = field(default_factory=list)
    consumed: list[str] = field(default_factory=list)
    decomposed: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReproductionProfile:
    threshold: float
    cost: float
    max_reproductive_age: int
    dispersal_radius: float


# ── Energy ──────────────────────────────────────────────────────


def apply_metabolism(entity: Entity, environment: Environment, factor: float) -> float:
    """Deduct per-tick upkeep. Returns the cost paid."""
    cost = BASE_ENERGY_COST_PER_TICK * factor * temperature_multiplier(environment.temperature)
    entity.energy = clamp(entity.energy - cost, 0.0, MAX_ENERGY)
    return cost


def pay_for_movement(entity: Entity, moved: float, multiplier: float = 1.0) -> None:
    cost = movement_energy_cost(moved, entity.metabolism_efficiency) * multiplier
    entity.energy = clamp(entity.energy - cost, 0.0, MAX_ENERGY)


def transfer_energy(source: Entity, consumer: Entity, limit: float) -> float:
    """Move up to `limit` energy from source to consumer.

    Bounded by what the source holds and what the consumer has room for.
    """
    gain = max(0.0, min(limit, source.energy, MAX_ENERGY - consumer.energy))
    source.energy = clamp(source.energy - gain, 0.0, MAX_ENERGY)
    consumer.energy = clamp(consumer.energy + gain, 0.0, MAX_ENERGY)
    return gain


def reward_feeding(consumer: Entity, energy_before: float) -> None:
    bonus = HEALTH_GAIN_FROM_FEEDING
    if energy_before <= STARVATION_RECOVERY_THRESHOLD:
        bonus += STARVATION_RECOVERY_HEALTH_BONUS
    consumer.health = clamp(consumer.health + bonus, 0.0, MAX_HEALTH)


# ── Death ───────────────────────────────────────────────────────


def kill(entity: Entity, cause: str) -> None:
    """Mark dead. Energy is left alone so the body can be decomposed."""
    if not entity.is_alive:
        return
    entity.is_alive = False
    entity.health = 0.0
    entity.death_cause = cause


def evaluate_death(entity: Entity, max_age: int, starvation_decay: float) -> None:
    """Old age first; otherwise an empty stomach wears health down until death."""
    if entity.age >= max_age:
        kill(entity, CAUSE_OLD_AGE)
        entity.energy = 0.0
        return
    if entity.energy <= 0:
        entity.energy = 0.0
        entity.health = clamp(entity.health - starvation_decay, 0.0, MAX_HEALTH)
    if entity.health <= 0:
        kill(entity, CAUSE_STARVATION if entity.energy <= 0 else CAUSE_EXPOSURE)


# ── Reproduction ────────────────────────────────────────────────


def can_reproduce(entity: Entity, profile: ReproductionProfile) -> bool:
    return (
        entity.is_alive
        and entity.energy >= profile.threshold
        and entity.age <= profile.max_reproductive_age
    )


def try_reproduce(
    parent: Entity,
    environment: Environment,
    rng: random.Random,
    event_logger: EventLogger,
    profile: ReproductionProfile,
    chance_multiplier: float = 1.0,
    now: str | None = None,
) -> Entity | None:
    """Bernoulli trial on the parent's reproduction rate, gated by energy and age."""
    if not can_reproduce(parent, profile):
        return None
    if rng.random() >= parent.reproduction_rate * chance_multiplier:
        return None
    return spawn_offspring(parent, environment, rng, event_logger, profile, now=now)


def spawn_offspring(
    parent: Entity,
    environment: Environment,
    rng: random.Random,
    event_logger: EventLogger,
    profile: ReproductionProfile,
    now: str | None = None,
) -> Entity:
    """Pay the cost and create one mutated child near the parent.

    The child starts with the energy the parent spent on it.
    """
    now = now or utc_now()
    parent.energy = clamp(parent.energy - profile.cost, 0.0, MAX_ENERGY)

    parent_traits = parent.traits()
    child_traits = mutate_traits(parent_traits, rng)
    child = type(parent)(
        id=generate_entity_id(rng),
        name=generate_name(parent.kind, rng, parent.name),
        position=position_near_parent(parent.position, profile.dispersal_radius, rng),
        energy=profile.cost,
        health=MAX_HEALTH,
        lineage=parent.id,
        born_at_tick=environment.tick,
        garden_state_id=parent.garden_state_id,
        created_at=now,
        updated_at=now,
        **child_traits,
    )

    event_logger.log_birth(child, parent.id, parent.name)
    for trait, old_value, new_value in reportable_mutations(parent_traits, child_traits):
        event_logger.log_mutation(child, trait, old_value, new_value)
    return child
