"""Simulation event log: the narrative record of births, deaths and ecology shifts.

Processors talk to an `EventLogger`; concrete loggers decide where events go
(an in-memory buffer, the stdlib log, several sinks at once, or nowhere).
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Sequence

from .helpers import utc_now
from .narrative import (
    ambient_narrative,
    describe_birth,
    describe_death,
    describe_ecosystem_collapse,
    describe_extinction,
    describe_mutation,
    describe_population_explosion,
    describe_reproduction,
)

if TYPE_CHECKING:
    from .app_logger import ApplicationLogger
    from .entities import Entity
    from .environment import Environment
    from .population import PopulationSummary


class EventType(str, Enum):
    BIRTH = "BIRTH"
    DEATH = "DEATH"
    REPRODUCTION = "REPRODUCTION"
    MUTATION = "MUTATION"
    EXTINCTION = "EXTINCTION"
    POPULATION_EXPLOSION = "POPULATION_EXPLOSION"
    ECOSYSTEM_COLLAPSE = "ECOSYSTEM_COLLAPSE"
    DISASTER = "DISASTER"
    USER_INTERVENTION = "USER_INTERVENTION"
    ENVIRONMENT_CHANGE = "ENVIRONMENT_CHANGE"
    CUSTOM = "CUSTOM"
    AMBIENT_NARRATIVE = "AMBIENT_NARRATIVE"


class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class DisasterKind(str, Enum):
    FIRE = "FIRE"
    FLOOD = "FLOOD"
    PLAGUE = "PLAGUE"


SEVERITY_LOG_LEVELS = {
    Severity.LOW: logging.DEBUG,
    Severity.MEDIUM: logging.INFO,
    Severity.HIGH: logging.WARNING,
    Severity.CRITICAL: logging.ERROR,
}


@dataclass
class SimulationEvent:
    tick: int
    event_type: str
    description: str
    severity: Severity = Severity.LOW
    entities_affected: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)
    timestamp: str = ""
    garden_state_id: int = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["event_type"] = str(getattr(self.event_type, "value", self.event_type))
        data["severity"] = self.severity.value
        return data

    @staticmethod
    def from_dict(data: dict) -> SimulationEvent:
        payload = dict(data)
        payload["severity"] = Severity(payload.get("severity", "LOW"))
        return SimulationEvent(**payload)


class EventLogger:
    """Builds `SimulationEvent`s and hands them to `emit`.

    Subclasses implement `emit`. `bind` sets the tick stamped on every
    subsequent event.
    """

    def __init__(self, tick: int = 0, garden_state_id: int = 0,
                 clock: Callable[[], str] = utc_now):
        self.tick = tick
        self.garden_state_id = garden_state_id
        self.clock = clock

    def bind(self, tick: int, garden_state_id: int | None = None) -> None:
        self.tick = tick
        if garden_state_id is not None:
            self.garden_state_id = garden_state_id

    def emit(self, event: SimulationEvent) -> None:
        raise NotImplementedError

    # ── Biology ─────────────────────────────────────────────────

    def log_birth(self, entity: Entity, parent_id: str | None = None,
                  parent_name: str | None = None) -> None:
        self._log(
            EventType.BIRTH, describe_birth(entity, parent_name), [entity.id], Severity.LOW,
            ["biology", entity.kind.value, "birth"],
            {
                "type": entity.kind.value,
                "species": entity.species,
                "parent_id": parent_id or "origin",
                "traits": entity.traits(),
            },
        )

    def log_death(self, entity: Entity, cause: str) -> None:
        self._log(
            EventType.DEATH, describe_death(entity, cause), [entity.id], Severity.MEDIUM,
            ["biology", entity.kind.value, "death"],
            {
                "type": entity.kind.value,
                "age": entity.age,
                "energy": entity.energy,
                "health": entity.health,
                "cause": cause,
            },
        )

    def log_reproduction(self, parent: Entity, offspring: Entity) -> None:
        self._log(
            EventType.REPRODUCTION, describe_reproduction(parent, offspring),
            [parent.id, offspring.id], Severity.LOW,
            ["biology", parent.kind.value, "reproduction"],
            {"parent_traits": parent.traits(), "offspring_traits": offspring.traits()},
        )

    def log_mutation(self, entity: Entity, trait: str, old_value: float, new_value: float) -> None:
        percent = (new_value - old_value) / old_value * 100 if old_value else None
        self._log(
            EventType.MUTATION, describe_mutation(entity, trait, old_value, new_value),
            [entity.id], Severity.LOW,
            ["evolution", entity.kind.value, "mutation", trait],
            {
                "trait": trait,
                "old_value": old_value,
                "new_value": new_value,
                "percent_change": round(percent, 1) if percent is not None else None,
            },
        )

    # ── Ecology ─────────────────────────────────────────────────

    def log_extinction(self, species: str, kind: str) -> None:
        self._log(
            EventType.EXTINCTION, describe_extinction(species, kind), [], Severity.CRITICAL,
            ["ecology", "extinction", kind], {"species": species, "type": kind},
        )

    def log_population_explosion(self, kind: str, count: int) -> None:
        self._log(
            EventType.POPULATION_EXPLOSION, describe_population_explosion(kind, count), [],
            Severity.HIGH, ["ecology", "population", kind], {"type": kind, "count": count},
        )

    def log_ecosystem_collapse(self, remaining: int) -> None:
        self._log(
            EventType.ECOSYSTEM_COLLAPSE, describe_ecosystem_collapse(remaining), [],
            Severity.CRITICAL, ["ecology", "collapse"], {"remaining_entities": remaining},
        )

    def log_disaster(self, kind: DisasterKind | str, description: str,
                     affected: Sequence[str]) -> None:
        kind = DisasterKind(kind)
        self._log(
            EventType.DISASTER, description, list(affected), Severity.HIGH,
            ["chaos", "disaster", kind.value.lower()],
            {"disaster_type": kind.value, "affected_count": len(affected)},
        )

    def log_user_intervention(self, action: str, description: str,
                              affected: Sequence[str]) -> None:
        self._log(
            EventType.USER_INTERVENTION, f"{action}: {description}", list(affected),
            Severity.MEDIUM, ["intervention", action.lower()],
            {"action": action, "affected_count": len(affected)},
        )

    def log_environment_change(self, description: str) -> None:
        self._log(EventType.ENVIRONMENT_CHANGE, description, [], Severity.MEDIUM, ["environment"])

    def log_custom(self, event_type: str, description: str, entities: Sequence[str] = (),
                   severity: Severity = Severity.LOW, tags: Sequence[str] = (),
                   metadata: dict | None = None) -> None:
        self._log(event_type, description, list(entities), Severity(severity), tags, metadata)

    def log_ambient_narrative(self, environment: Environment, populations: PopulationSummary,
                              entities: list[Entity]) -> None:
        description, tags = ambient_narrative(environment, populations, entities)
        self._log(
            EventType.AMBIENT_NARRATIVE, description, [], Severity.LOW,
            ["ambient", "narrative", *tags],
        )

    # ── Private ─────────────────────────────────────────────────

    def _log(self, event_type: EventType | str, description: str, entities: list[str],
             severity: Severity, tags: Sequence[str] = (), metadata: dict | None = None) -> None:
        type_name = str(getattr(event_type, "value", event_type))
        self.emit(SimulationEvent(
            tick=self.tick,
            event_type=type_name,
            description=description,
            severity=severity,
            entities_affected=entities,
            tags=[type_name.lower(), *tags],
            metadata=metadata or {},
            timestamp=self.clock(),
            garden_state_id=self.garden_state_id,
        ))


class BufferedEventLogger(EventLogger):
    """Keeps events in memory in the order they happened."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.events: list[SimulationEvent] = []

    def emit(self, event: SimulationEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: EventType | str) -> list[SimulationEvent]:
        type_name = str(getattr(event_type, "value", event_type))
        return [e for e in self.events if e.event_type == type_name]

    def drain(self) -> list[SimulationEvent]:
        """Return buffered events and clear the buffer."""
        events, self.events = self.events, []
        return events


class LoggingEventLogger(EventLogger):
    """Echoes events to the stdlib log, with severity mapped to log level."""

    def __init__(self, *args, log: logging.Logger | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.log = log or logging.getLogger("chaosgarden.events")

    def emit(self, event: SimulationEvent) -> None:
        self.log.log(
            SEVERITY_LOG_LEVELS[event.severity],
            "tick %d %s: %s", event.tick, event.event_type, event.description,
        )


class CompositeEventLogger(EventLogger):
    """Fans each event out to several loggers."""

    def __init__(self, loggers: Sequence[EventLogger], *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.loggers = list(loggers)

    def emit(self, event: SimulationEvent) -> None:
        for sink in self.loggers:
            sink.emit(event)


class NullEventLogger(EventLogger):
    def emit(self, event: SimulationEvent) -> None:
        pass


class GuardedEventLogger:
    """Wraps a logger so that a failing `log_*` call is reported, never raised.

    The simulation treats event logging as fire-and-forget; a broken sink
    must not abort or alter a tick.
    """

    def __init__(self, inner: EventLogger, app_logger: ApplicationLogger):
        self.inner = inner
        self.app_logger = app_logger

    def __getattr__(self, name: str):
        target = getattr(self.inner, name)
        if not name.startswith("log_") or not callable(target):
            return target

        def guarded(*args, **kwargs):
            try:
                target(*args, **kwargs)
            except Exception as exc:
                self.app_logger.error("event_logger", f"{name} failed", error=repr(exc))

        return guarded


def append_events_jsonl(events: Sequence[SimulationEvent], path: Path) -> None:
    """Append events to a JSONL file, one event per line."""
    with open(path, "a") as f:
        for event in events:
            f.write(json.dumps(event.to_dict()) + "\n")


def load_events_jsonl(path: Path) -> list[SimulationEvent]:
    if not path.exists():
        return []
    events = []
    with open(path) as f:
        for line in f:
            line = line.strip()
            if line:
                events.append(SimulationEvent.from_dict(json.loads(line)))
    return events
