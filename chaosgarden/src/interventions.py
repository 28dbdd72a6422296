"""Disasters and user interventions: chaos injected from outside the ecosystem."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Sequence

from .creatures import kill
from .entities import EntityKind
from .events import DisasterKind
from .helpers import MAX_ENERGY, MAX_HEALTH, clamp, utc_now
from .seeding import create_entity

if TYPE_CHECKING:
    from .entities import Entity
    from .environment import Environment
    from .events import EventLogger

DISASTER_CAUSE_PREFIX = "disaster: "

# kind -> (share of eligible entities hit, health damage range)
DISASTER_PROFILES = {
    DisasterKind.FIRE: (0.4, (40.0, 90.0)),
    DisasterKind.FLOOD: (0.3, (20.0, 60.0)),
    DisasterKind.PLAGUE: (0.5, (30.0, 70.0)),
}

FLOOD_MOISTURE_BOOST = 0.3
FIRE_MOISTURE_LOSS = 0.15

DISASTER_DESCRIPTIONS = {
    DisasterKind.FIRE: "Fire sweeps through the garden, scorching {count} living things.",
    DisasterKind.FLOOD: "Flood water pours across the ground and catches {count} creatures.",
    DisasterKind.PLAGUE: "A plague spreads among the {kind}s; {count} fall sick.",
}


def maybe_trigger_disaster(
    living: Sequence[Entity],
    environment: Environment,
    config: dict,
    rng: random.Random,
    event_logger: EventLogger,
) -> list[Entity]:
    """Roll for a disaster and apply it if triggered. Returns the entities hit."""
    if not config.get("enabled", False):
        return []
    if environment.tick < config.get("start_tick", 0):
        return []
    if rng.random() >= config.get("probability", 0.002):
        return []

    kind = _weighted_choice(config.get("types", {k.value: 1.0 for k in DisasterKind}), rng)
    if kind is None:
        return []
    return trigger_disaster(kind, living, environment, rng, event_logger)


def trigger_disaster(
    kind: DisasterKind | str,
    living: Sequence[Entity],
    environment: Environment,
    rng: random.Random,
    event_logger: EventLogger,
) -> list[Entity]:
    """Damage a random share of living entities.

    Fire burns everything but fungi and dries the ground. Floods drown
    animals and soak the soil. Plague strikes the most numerous animal kind.
    Entities whose health reaches 0 die with cause "disaster: <kind>".
    """
    kind = DisasterKind(kind)
    share, (low, high) = DISASTER_PROFILES[kind]
    targets = _eligible_targets(kind, living)
    if not targets:
        return []

    hit = rng.sample(targets, max(1, round(len(targets) * share)))
    for entity in hit:
        entity.health = clamp(entity.health - rng.uniform(low, high), 0.0, MAX_HEALTH)
        if entity.health <= 0:
            kill(entity, DISASTER_CAUSE_PREFIX + kind.value.lower())

    if kind is DisasterKind.FLOOD:
        environment.moisture = clamp(environment.moisture + FLOOD_MOISTURE_BOOST, 0.0, 1.0)
    elif kind is DisasterKind.FIRE:
        environment.moisture = clamp(environment.moisture - FIRE_MOISTURE_LOSS, 0.0, 1.0)

    description = DISASTER_DESCRIPTIONS[kind].format(count=len(hit), kind=hit[0].kind.value)
    event_logger.log_disaster(kind, description, [e.id for e in hit])
    return hit


def introduce_entities(
    kind: EntityKind | str,
    count: int,
    rng: random.Random,
    event_logger: EventLogger,
    tick: int = 0,
    now: str | None = None,
    energy: float | None = None,
) -> list[Entity]:
    """A gardener drops new, unrelated entities into the world."""
    kind = EntityKind(kind)
    now = now or utc_now()
    attributes = {} if energy is None else {"energy": clamp(energy, 0.0, MAX_ENERGY)}
    created = [create_entity(kind, rng, tick=tick, now=now, **attributes) for _ in range(count)]
    for entity in created:
        event_logger.log_birth(entity)
    if created:
        event_logger.log_user_intervention(
            "INTRODUCE",
            f"{count} {kind.value}{'' if count == 1 else 's'} introduced to the garden",
            [e.id for e in created],
        )
    return created


# ── Helpers ────────────────────────────────────────────────────────


def _eligible_targets(kind: DisasterKind, living: Sequence[Entity]) -> list[Entity]:
    alive = [e for e in living if e.is_alive]
    if kind is DisasterKind.FIRE:
        return [e for e in alive if e.kind is not EntityKind.FUNGUS]
    if kind is DisasterKind.FLOOD:
        return [e for e in alive if e.kind in (EntityKind.HERBIVORE, EntityKind.CARNIVORE)]

    animals: dict[EntityKind, list[Entity]] = {EntityKind.HERBIVORE: [], EntityKind.CARNIVORE: []}
    for entity in alive:
        if entity.kind in animals:
            animals[entity.kind].append(entity)
    return max(animals.values(), key=len)


def _weighted_choice(weights: dict[str, float], rng: random.Random) -> str | None:
    """Pick a key weighted by its value. Keys are visited in sorted order."""
    total = sum(weights.values())
    if total <= 0:
        return None
    r = rng.random() * total
    cumulative = 0.0
    for key in sorted(weights):
        cumulative += weights[key]
        if r <= cumulative:
            return key
    return sorted(weights)[-1]
