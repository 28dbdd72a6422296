"""Fungus behavior: decomposing the dead, spore reproduction."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Sequence

from .creatures import (
    CAUSE_OLD_AGE,
    CAUSE_STARVATION,
    BehaviorResult,
    ReproductionProfile,
    apply_metabolism,
    kill,
    pay_for_movement,
    reward_feeding,
    try_reproduce,
)
from .helpers import MAX_ENERGY, clamp, distance, find_nearest, move_toward, utc_now

if TYPE_CHECKING:
    from .entities import Entity, Fungus
    from .environment import Environment
    from .events import EventLogger

FUNGUS_METABOLISM_FACTOR = 0.2 * 0.5
FUNGUS_CREEP_SPEED = 0.5
DECOMPOSITION_DISTANCE = 10.0
ENERGY_FROM_DECOMPOSITION = 20.0
FUNGUS_MAX_AGE = 300

FUNGUS_REPRODUCTION = ReproductionProfile(
    threshold=70.0,
    cost=25.0,
    max_reproductive_age=250,
    dispersal_radius=40.0,
)


def is_decomposable(entity: Entity) -> bool:
    return not entity.is_alive and entity.energy > 0


def process_fungus(
    fungus: Fungus,
    environment: Environment,
    dead_matter: Sequence[Entity],
    event_logger: EventLogger,
    rng: random.Random,
    now: str | None = None,
) -> BehaviorResult:
    """One tick of fungus life.

    A starving fungus withers (health drops to 0) and dies at its next
    death check unless it feeds in between.
    """
    result = BehaviorResult()

    target = find_nearest(fungus, dead_matter, fungus.perception_radius, predicate=is_decomposable)
    if target is not None:
        if distance(fungus.position, target.position) <= DECOMPOSITION_DISTANCE:
            decompose(fungus, target, environment)
            result.decomposed.append(target.id)
        else:
            moved = move_toward(fungus, target.position, FUNGUS_CREEP_SPEED)
            pay_for_movement(fungus, moved)

    apply_metabolism(fungus, environment, FUNGUS_METABOLISM_FACTOR)

    child = try_reproduce(fungus, environment, rng, event_logger, FUNGUS_REPRODUCTION, now=now)
    if child is not None:
        result.offspring.append(child)

    if fungus.age >= FUNGUS_MAX_AGE:
        kill(fungus, CAUSE_OLD_AGE)
        fungus.energy = 0.0
    elif fungus.health <= 0:
        kill(fungus, CAUSE_STARVATION)
    elif fungus.energy <= 0:
        fungus.energy = 0.0
        fungus.health = 0.0

    fungus.updated_at = now or utc_now()
    return result


def decompose(fungus: Fungus, dead: Entity, environment: Environment) -> float:
    """Draw energy from a corpse; damp ground speeds it up."""
    energy_before = fungus.energy
    gain = min(
        ENERGY_FROM_DECOMPOSITION * fungus.decomposition_rate * max(0.5, environment.moisture * 2),
        dead.energy,
    )
    fungus.energy = clamp(fungus.energy + gain, 0.0, MAX_ENERGY)
    dead.energy = max(0.0, dead.energy - gain)
    reward_feeding(fungus, energy_before)
    return gain
