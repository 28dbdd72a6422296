"""Garden entities: a tagged union of plants, herbivores, carnivores and fungi."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar

from .helpers import Position
from .names import category_from_name


class EntityKind(str, Enum):
    PLANT = "plant"
    HERBIVORE = "herbivore"
    CARNIVORE = "carnivore"
    FUNGUS = "fungus"


# Heritable traits are clamped into these ranges after mutation.
TRAIT_DOMAINS: dict[str, tuple[float, float]] = {
    "reproduction_rate": (0.0, 1.0),
    "metabolism_efficiency": (0.5, 2.0),
    "photosynthesis_rate": (0.3, 2.0),
    "movement_speed": (0.2, 8.0),
    "perception_radius": (10.0, 400.0),
    "threat_detection_radius": (10.0, 400.0),
    "decomposition_rate": (0.1, 3.0),
}


def trait_domain(trait: str) -> tuple[float, float]:
    return TRAIT_DOMAINS.get(trait, (0.0, math.inf))


@dataclass
class Entity:
    """Fields shared by every kind. Subclasses add their heritable traits."""
    id: str
    name: str
    position: Position
    energy: float = 50.0
    health: float = 100.0
    age: int = 0
    is_alive: bool = True
    lineage: str = "origin"
    species: str = ""
    born_at_tick: int = 0
    death_tick: int | None = None
    death_cause: str | None = None
    garden_state_id: int = 0
    created_at: str = ""
    updated_at: str = ""

    kind: ClassVar[EntityKind]
    TRAITS: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        if not self.species:
            self.species = category_from_name(self.name)

    def traits(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.TRAITS}

    def to_dict(self) -> dict:
        data = {"type": self.kind.value}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.to_dict() if isinstance(value, Position) else value
        return data

    @staticmethod
    def from_dict(data: dict) -> Entity:
        """Rebuild the right subclass from a `to_dict` payload."""
        payload = dict(data)
        kind = EntityKind(payload.pop("type"))
        cls = ENTITY_CLASSES[kind]
        position = payload.pop("position")
        payload["position"] = Position(float(position["x"]), float(position["y"]))
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in payload.items() if k in known})


@dataclass
class Plant(Entity):
    kind: ClassVar[EntityKind] = EntityKind.PLANT
    TRAITS: ClassVar[tuple[str, ...]] = (
        "photosynthesis_rate", "reproduction_rate", "metabolism_efficiency",
    )

    energy: float = 50.0
    photosynthesis_rate: float = 1.0
    reproduction_rate: float = 0.05
    metabolism_efficiency: float = 1.0


@dataclass
class Herbivore(Entity):
    kind: ClassVar[EntityKind] = EntityKind.HERBIVORE
    TRAITS: ClassVar[tuple[str, ...]] = (
        "reproduction_rate", "movement_speed", "metabolism_efficiency",
        "perception_radius", "threat_detection_radius",
    )

    energy: float = 60.0
    reproduction_rate: float = 0.055
    movement_speed: float = 2.0
    metabolism_efficiency: float = 1.0
    perception_radius: float = 100.0
    threat_detection_radius: float = 120.0
    # Flight state, carried across ticks and snapshots.
    flee_ticks: int = 0
    exhausted: bool = False
    recovery_ticks: int = 0


@dataclass
class Carnivore(Entity):
    kind: ClassVar[EntityKind] = EntityKind.CARNIVORE
    TRAITS: ClassVar[tuple[str, ...]] = (
        "reproduction_rate", "movement_speed", "metabolism_efficiency", "perception_radius",
    )

    energy: float = 50.0
    reproduction_rate: float = 0.02
    movement_speed: float = 4.6
    metabolism_efficiency: float = 1.1
    perception_radius: float = 175.0


@dataclass
class Fungus(Entity):
    kind: ClassVar[EntityKind] = EntityKind.FUNGUS
    TRAITS: ClassVar[tuple[str, ...]] = (
        "reproduction_rate", "metabolism_efficiency", "decomposition_rate", "perception_radius",
    )

    energy: float = 40.0
    reproduction_rate: float = 0.04
    metabolism_efficiency: float = 1.2
    decomposition_rate: float = 1.0
    perception_radius: float = 50.0


ENTITY_CLASSES: dict[EntityKind, type[Entity]] = {
    EntityKind.PLANT: Plant,
    EntityKind.HERBIVORE: Herbivore,
    EntityKind.CARNIVORE: Carnivore,
    EntityKind.FUNGUS: Fungus,
}


def partition_by_kind(entities: list[Entity]) -> dict[EntityKind, list[Entity]]:
    """Group entities by kind, preserving input order. Every kind gets a list."""
    groups: dict[EntityKind, list[Entity]] = {kind: [] for kind in EntityKind}
    for entity in entities:
        groups[entity.kind].append(entity)
    return groups
