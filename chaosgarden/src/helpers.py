"""Spatial and energy helpers shared by every species processor."""

from __future__ import annotations

import math
import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:
    from .entities import Entity

GARDEN_WIDTH = 800.0
GARDEN_HEIGHT = 600.0
TICKS_PER_DAY = 96

MAX_ENERGY = 100.0
MAX_HEALTH = 100.0

BASE_ENERGY_COST_PER_TICK = 1.0
MOVEMENT_ENERGY_COST_PER_PIXEL = 0.1
MIN_METABOLISM_EFFICIENCY = 0.1

OPTIMAL_TEMPERATURE = 25.0
OPTIMAL_MOISTURE = 0.5


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_entity_id(rng: random.Random) -> str:
    """Opaque, seed-reproducible entity id."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


# ── Geometry ────────────────────────────────────────────────────


@dataclass
class Position:
    """A point in garden coordinates."""
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


def distance(a: Position, b: Position) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def clamp_position(x: float, y: float) -> Position:
    return Position(clamp(x, 0.0, GARDEN_WIDTH), clamp(y, 0.0, GARDEN_HEIGHT))


def random_position(rng: random.Random) -> Position:
    return clamp_position(rng.uniform(0, GARDEN_WIDTH), rng.uniform(0, GARDEN_HEIGHT))


def position_near_parent(parent: Position, radius: float, rng: random.Random) -> Position:
    """Random point within `radius` of the parent, kept inside the garden."""
    angle = rng.uniform(0, 2 * math.pi)
    offset = rng.uniform(0, radius)
    return clamp_position(
        parent.x + math.cos(angle) * offset,
        parent.y + math.sin(angle) * offset,
    )


def exploration_target(entity: Entity, reach: float, rng: random.Random) -> Position:
    """Point `reach` units away along a random heading."""
    angle = rng.uniform(0, 2 * math.pi)
    return clamp_position(
        entity.position.x + math.cos(angle) * reach,
        entity.position.y + math.sin(angle) * reach,
    )


def move_toward(entity: Entity, target: Position, speed: float) -> float:
    """Step toward target, snapping onto it when within reach. Returns distance moved."""
    start = entity.position
    gap = distance(start, target)
    if gap <= speed:
        entity.position = clamp_position(target.x, target.y)
    else:
        ratio = speed / gap
        entity.position = clamp_position(
            start.x + (target.x - start.x) * ratio,
            start.y + (target.y - start.y) * ratio,
        )
    return distance(start, entity.position)


def move_away(entity: Entity, threat: Position, speed: float) -> float:
    """Step directly away from a threat. Returns distance moved after clamping."""
    start = entity.position
    dx = start.x - threat.x
    dy = start.y - threat.y
    gap = math.hypot(dx, dy)
    if gap == 0:
        dx, dy, gap = 1.0, 0.0, 1.0
    entity.position = clamp_position(
        start.x + dx / gap * speed,
        start.y + dy / gap * speed,
    )
    return distance(start, entity.position)


def is_viable_target(entity: Entity) -> bool:
    return entity.is_alive and entity.health > 0 and entity.energy > 0


def find_nearest(
    source: Entity,
    candidates: Iterable[Entity],
    radius: float,
    predicate: Callable[[Entity], bool] = is_viable_target,
) -> Entity | None:
    """Nearest candidate within radius; ties keep the first one seen."""
    nearest = None
    nearest_distance = math.inf
    for candidate in candidates:
        if candidate.id == source.id or not predicate(candidate):
            continue
        gap = distance(source.position, candidate.position)
        if gap <= radius and gap < nearest_distance:
            nearest = candidate
            nearest_distance = gap
    return nearest


# ── Energy ──────────────────────────────────────────────────────


def movement_energy_cost(moved: float, efficiency: float) -> float:
    return MOVEMENT_ENERGY_COST_PER_PIXEL * moved / max(efficiency, MIN_METABOLISM_EFFICIENCY)


def temperature_multiplier(temperature: float) -> float:
    """Metabolic pace: 1.5 around 25 degrees, slowing to 0.5 at the extremes."""
    return clamp(1.5 - abs(temperature - OPTIMAL_TEMPERATURE) / 20, 0.5, 1.5)


def moisture_multiplier(moisture: float) -> float:
    return clamp(1.5 - abs(moisture - OPTIMAL_MOISTURE), 0.5, 1.5)


def day_phase(tick: int) -> float:
    """0 at midnight, 1 at midday, over a TICKS_PER_DAY cycle."""
    angle = (tick % TICKS_PER_DAY) / TICKS_PER_DAY * 2 * math.pi
    return (math.sin(angle - math.pi / 2) + 1) / 2
