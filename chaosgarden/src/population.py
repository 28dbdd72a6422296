"""Population census and the ecology events derived from it."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Iterable

from .entities import EntityKind
from .events import Severity

if TYPE_CHECKING:
    from .entities import Entity
    from .events import EventLogger

# kind -> (living field, dead field, all-time-dead field)
KIND_FIELDS = {
    EntityKind.PLANT: ("plants", "dead_plants", "all_time_dead_plants"),
    EntityKind.HERBIVORE: ("herbivores", "dead_herbivores", "all_time_dead_herbivores"),
    EntityKind.CARNIVORE: ("carnivores", "dead_carnivores", "all_time_dead_carnivores"),
    EntityKind.FUNGUS: ("fungi", "dead_fungi", "all_time_dead_fungi"),
}

EXPLOSION_FACTOR = 3
EXPLOSION_MIN_COUNT = 5
COLLAPSE_THRESHOLD = 10
PLANT_DELTA_THRESHOLD = 5
HERBIVORE_DELTA_THRESHOLD = 2


@dataclass
class PopulationSummary:
    plants: int = 0
    herbivores: int = 0
    carnivores: int = 0
    fungi: int = 0
    dead_plants: int = 0
    dead_herbivores: int = 0
    dead_carnivores: int = 0
    dead_fungi: int = 0
    all_time_dead_plants: int = 0
    all_time_dead_herbivores: int = 0
    all_time_dead_carnivores: int = 0
    all_time_dead_fungi: int = 0
    total_living: int = 0
    total_dead: int = 0
    total: int = 0

    def living(self, kind: EntityKind) -> int:
        return getattr(self, KIND_FIELDS[kind][0])

    @property
    def all_time_dead(self) -> int:
        return sum(getattr(self, fields[2]) for fields in KIND_FIELDS.values())

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> PopulationSummary:
        return PopulationSummary(**{k: int(v) for k, v in data.items()})


def count_population(
    living: Iterable[Entity],
    dead: Iterable[Entity] = (),
    previous: PopulationSummary | None = None,
    newly_dead: Iterable[Entity] = (),
) -> PopulationSummary:
    """Census of living and dead entities.

    All-time-dead counters carry over from `previous` and grow by `newly_dead`.
    """
    summary = PopulationSummary()
    for entity in living:
        if entity.is_alive:
            field_name = KIND_FIELDS[entity.kind][0]
            setattr(summary, field_name, getattr(summary, field_name) + 1)
    for entity in dead:
        field_name = KIND_FIELDS[entity.kind][1]
        setattr(summary, field_name, getattr(summary, field_name) + 1)
    for entity in newly_dead:
        field_name = KIND_FIELDS[entity.kind][2]
        setattr(summary, field_name, getattr(summary, field_name) + 1)

    if previous is not None:
        for _, _, all_time in KIND_FIELDS.values():
            setattr(summary, all_time, getattr(summary, all_time) + getattr(previous, all_time))

    summary.total_living = summary.plants + summary.herbivores + summary.carnivores + summary.fungi
    summary.total_dead = (
        summary.dead_plants + summary.dead_herbivores + summary.dead_carnivores + summary.dead_fungi
    )
    summary.total = summary.total_living + summary.total_dead
    return summary


def log_population_changes(
    previous: PopulationSummary,
    current: PopulationSummary,
    event_logger: EventLogger,
    species_names: dict[EntityKind, str] | None = None,
) -> None:
    """Emit extinction, explosion, collapse and delta events between two censuses."""
    for kind in EntityKind:
        before = previous.living(kind)
        after = current.living(kind)
        if before > 0 and after == 0:
            species = (species_names or {}).get(kind, kind.value)
            event_logger.log_extinction(species, kind.value)
        elif before > 0 and after >= EXPLOSION_MIN_COUNT and after >= before * EXPLOSION_FACTOR:
            event_logger.log_population_explosion(kind.value, after)

    if previous.total_living >= COLLAPSE_THRESHOLD > current.total_living:
        event_logger.log_ecosystem_collapse(current.total_living)

    plant_delta = current.plants - previous.plants
    herbivore_delta = current.herbivores - previous.herbivores
    if abs(plant_delta) > PLANT_DELTA_THRESHOLD or abs(herbivore_delta) > HERBIVORE_DELTA_THRESHOLD:
        event_logger.log_custom(
            "POPULATION_DELTA",
            f"Population shift: plants {plant_delta:+d}, herbivores {herbivore_delta:+d}",
            [],
            Severity.LOW,
            ["population", "delta"],
            {"plant_delta": plant_delta, "herbivore_delta": herbivore_delta},
        )
