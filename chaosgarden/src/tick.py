"""Tick orchestration: one discrete step of the whole garden."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Sequence

from .carnivores import process_carnivore
from .entities import EntityKind, Fungus, partition_by_kind
from .environment import Environment, advance_environment, apply_environmental_effects
from .events import GuardedEventLogger
from .fungi import is_decomposable, process_fungus
from .helpers import generate_entity_id, random_position, utc_now
from .herbivores import process_herbivore
from .names import generate_name
from .plants import process_plant
from .population import PopulationSummary, count_population, log_population_changes

if TYPE_CHECKING:
    from .app_logger import ApplicationLogger
    from .creatures import BehaviorResult
    from .entities import Entity
    from .events import EventLogger

WILD_FUNGUS_SPAWN_PROBABILITY = 0.006
WILD_FUNGUS_ENERGY = 40.0
WILD_LINEAGE = "wild"

# Insertion order is the processing order.
PROCESSORS: dict[EntityKind, Callable[..., BehaviorResult]] = {
    EntityKind.PLANT: process_plant,
    EntityKind.HERBIVORE: process_herbivore,
    EntityKind.CARNIVORE: process_carnivore,
    EntityKind.FUNGUS: process_fungus,
}


@dataclass
class TickResult:
    """Everything a caller needs to persist after a tick."""
    new_entities: list[Entity]
    environment: Environment
    population_summary: PopulationSummary
    living: list[Entity] = field(default_factory=list)
    dead: list[Entity] = field(default_factory=list)
    newly_dead: list[Entity] = field(default_factory=list)


def process_entities_for_tick(
    living: list[Entity],
    dead: list[Entity],
    environment: Environment,
    event_logger: EventLogger,
    rng: random.Random,
    now: str | None = None,
) -> list[Entity]:
    """Run every species processor in trophic order. Returns all offspring.

    Plants first, then herbivores against the plants, carnivores against
    the herbivores, and finally fungi against whatever has died so far,
    including this tick's kills.
    """
    now = now or utc_now()
    groups = partition_by_kind(living)
    offspring: list[Entity] = []

    for kind, process in PROCESSORS.items():
        targets = _targets_for(kind, groups, living, dead)
        extra = {"threats": groups[EntityKind.CARNIVORE]} if kind is EntityKind.HERBIVORE else {}
        for entity in groups[kind]:
            if entity.is_alive:
                offspring += process(
                    entity, environment, targets, event_logger, rng, now=now, **extra,
                ).offspring

    return offspring


def _targets_for(
    kind: EntityKind,
    groups: dict[EntityKind, list[Entity]],
    living: list[Entity],
    dead: list[Entity],
) -> Sequence[Entity]:
    """What a kind feeds on, read at the moment that kind's turn comes."""
    if kind is EntityKind.HERBIVORE:
        return groups[EntityKind.PLANT]
    if kind is EntityKind.CARNIVORE:
        return groups[EntityKind.HERBIVORE]
    if kind is EntityKind.FUNGUS:
        return [e for e in (*living, *dead) if is_decomposable(e)]
    return ()


def maybe_spawn_wild_fungus(
    environment: Environment,
    rng: random.Random,
    event_logger: EventLogger,
    probability: float = WILD_FUNGUS_SPAWN_PROBABILITY,
    now: str | None = None,
) -> Fungus | None:
    """Occasionally a fungus drifts in from outside the garden."""
    if rng.random() >= probability:
        return None
    now = now or utc_now()
    fungus = Fungus(
        id=generate_entity_id(rng),
        name=generate_name(EntityKind.FUNGUS, rng),
        position=random_position(rng),
        energy=WILD_FUNGUS_ENERGY,
        lineage=WILD_LINEAGE,
        born_at_tick=environment.tick,
        created_at=now,
        updated_at=now,
    )
    event_logger.log_birth(fungus)
    return fungus


def run_tick(
    living: list[Entity],
    dead: list[Entity],
    environment: Environment,
    event_logger: EventLogger,
    app_logger: ApplicationLogger,
    rng: random.Random,
    previous_summary: PopulationSummary | None = None,
    now: str | None = None,
    wild_fungus_probability: float = WILD_FUNGUS_SPAWN_PROBABILITY,
) -> TickResult:
    """Advance the garden by one tick.

    Entities are mutated in place. Offspring and wild spawns are returned in
    `new_entities` and first act on the following tick. Event logger
    failures are reported to `app_logger` and never interrupt the tick.
    """
    now = now or utc_now()
    if previous_summary is None:
        previous_summary = count_population(living, dead)

    event_logger.bind(environment.tick + 1)
    events = GuardedEventLogger(event_logger, app_logger)

    # 1. Environment and weather
    next_environment = advance_environment(environment, rng, events)

    # 2. Aging and exposure
    for entity in living:
        if entity.is_alive:
            entity.age += 1
            apply_environmental_effects(entity, next_environment)

    # 3. Species processing
    spawned = maybe_spawn_wild_fungus(next_environment, rng, events, wild_fungus_probability, now)
    offspring = process_entities_for_tick(living, dead, next_environment, events, rng, now=now)
    new_entities = offspring + ([spawned] if spawned is not None else [])

    # 4. Deaths
    newly_dead = [e for e in living if not e.is_alive]
    for entity in newly_dead:
        entity.death_tick = next_environment.tick
        entity.updated_at = now
        events.log_death(entity, entity.death_cause or "unknown")

    survivors = [e for e in living if e.is_alive] + new_entities
    remaining_dead = [e for e in (*dead, *newly_dead) if e.energy > 0]

    # 5. Census
    summary = count_population(survivors, remaining_dead, previous_summary, newly_dead)
    species_names = {e.kind: e.species for e in newly_dead}
    log_population_changes(previous_summary, summary, events, species_names)
    events.log_ambient_narrative(next_environment, summary, survivors)

    app_logger.debug(
        "run_tick", "tick complete",
        tick=next_environment.tick,
        living=summary.total_living,
        dead=summary.total_dead,
        born=len(new_entities),
        died=len(newly_dead),
        weather=next_environment.weather_state.current_state.value,
    )

    return TickResult(
        new_entities=new_entities,
        environment=next_environment,
        population_summary=summary,
        living=survivors,
        dead=remaining_dead,
        newly_dead=newly_dead,
    )
