"""Tests for the simulation event log and its sinks."""

from __future__ import annotations

import logging

import pytest

from chaosgarden.src.events import (
    BufferedEventLogger,
    CompositeEventLogger,
    DisasterKind,
    EventLogger,
    EventType,
    GuardedEventLogger,
    LoggingEventLogger,
    NullEventLogger,
    Severity,
    SimulationEvent,
    append_events_jsonl,
    load_events_jsonl,
)
from chaosgarden.src.population import PopulationSummary
from chaosgarden.tests.factories import (
    FIXED_NOW,
    build_carnivore,
    build_environment,
    build_herbivore,
    build_plant,
)


class BrokenEventLogger(EventLogger):
    def emit(self, event):
        raise OSError("disk full")


class TestEventConstruction:
    def test_events_carry_bound_tick_and_clock(self, event_logger):
        event_logger.bind(17, garden_state_id=3)
        event_logger.log_birth(build_plant())

        [event] = event_logger.events
        assert event.tick == 17
        assert event.garden_state_id == 3
        assert event.timestamp == FIXED_NOW

    def test_tags_start_with_lowercase_event_type(self, event_logger):
        event_logger.log_death(build_herbivore(), "starvation")
        event_logger.log_extinction("Moth", "herbivore")
        event_logger.log_custom("POPULATION_DELTA", "shift")

        assert [e.tags[0] for e in event_logger.events] == ["death", "extinction", "population_delta"]

    def test_birth_without_parent_is_origin(self, event_logger):
        plant = build_plant()
        event_logger.log_birth(plant)

        [event] = event_logger.events
        assert event.event_type == "BIRTH"
        assert event.entities_affected == [plant.id]
        assert event.metadata["parent_id"] == "origin"
        assert event.metadata["traits"] == plant.traits()

    def test_death_metadata(self, event_logger):
        herbivore = build_herbivore(age=40, energy=0.0, health=0.0)
        event_logger.log_death(herbivore, "starvation")

        [event] = event_logger.events
        assert event.severity is Severity.MEDIUM
        assert event.metadata == {
            "type": "herbivore", "age": 40, "energy": 0.0, "health": 0.0, "cause": "starvation",
        }

    def test_predation_death_names_the_killer(self, event_logger):
        herbivore = build_herbivore(name="Moth-dash")
        event_logger.log_death(herbivore, "killed by Fang-rip")

        assert "Fang-rip" in event_logger.events[0].description

    def test_mutation_percent_change(self, event_logger):
        event_logger.log_mutation(build_herbivore(), "movement_speed", 2.0, 2.1)

        [event] = event_logger.events
        assert event.metadata["percent_change"] == pytest.approx(5.0)
        assert "movement_speed" in event.tags

    def test_reproduction_lists_both_entities(self, event_logger):
        parent, child = build_plant(), build_plant()
        event_logger.log_reproduction(parent, child)
        assert event_logger.events[0].entities_affected == [parent.id, child.id]

    def test_severities(self, event_logger):
        event_logger.log_extinction("Fang", "carnivore")
        event_logger.log_population_explosion("plant", 40)
        event_logger.log_ecosystem_collapse(4)
        event_logger.log_disaster(DisasterKind.FIRE, "Fire!", ["a"])
        assert [e.severity for e in event_logger.events] == [
            Severity.CRITICAL, Severity.HIGH, Severity.CRITICAL, Severity.HIGH,
        ]

    def test_ambient_narrative_is_tagged(self, event_logger):
        summary = PopulationSummary(plants=5, herbivores=2, total_living=7, total=7)
        event_logger.log_ambient_narrative(build_environment(), summary, [build_plant()])

        [event] = event_logger.events
        assert event.event_type == EventType.AMBIENT_NARRATIVE.value
        assert event.tags[:3] == ["ambient_narrative", "ambient", "narrative"]
        assert event.description

    def test_ambient_narrative_is_stable_for_a_tick(self):
        first, second = BufferedEventLogger(), BufferedEventLogger()
        summary = PopulationSummary(plants=5, total_living=5, total=5)
        env = build_environment(tick=200)
        first.log_ambient_narrative(env, summary, [])
        second.log_ambient_narrative(env, summary, [])
        assert first.events[0].description == second.events[0].description
        assert "empty" in first.events[0].tags


class TestSinks:
    def test_buffer_drain_empties(self, event_logger):
        event_logger.log_birth(build_plant())
        assert len(event_logger.drain()) == 1
        assert event_logger.events == []

    def test_composite_fans_out(self):
        a, b = BufferedEventLogger(), BufferedEventLogger()
        composite = CompositeEventLogger([a, b])
        composite.bind(9)
        composite.log_birth(build_carnivore())
        assert len(a.events) == len(b.events) == 1
        assert a.events[0].tick == 9

    def test_logging_logger_maps_severity_to_level(self, caplog):
        sink = LoggingEventLogger(tick=4)
        with caplog.at_level(logging.DEBUG, logger="chaosgarden.events"):
            sink.log_extinction("Moth", "herbivore")
            sink.log_birth(build_plant())
        levels = [r.levelno for r in caplog.records]
        assert levels == [logging.ERROR, logging.DEBUG]
        assert "tick 4 EXTINCTION" in caplog.records[0].getMessage()

    def test_null_logger_accepts_everything(self):
        NullEventLogger().log_death(build_plant(), "old age")

    def test_base_logger_requires_emit(self):
        with pytest.raises(NotImplementedError):
            EventLogger().log_birth(build_plant())


class TestGuardedEventLogger:
    def test_failures_are_reported_not_raised(self, app_logger):
        guarded = GuardedEventLogger(BrokenEventLogger(), app_logger)

        guarded.log_birth(build_plant())

        [record] = app_logger.at("error")
        assert record[1] == "event_logger"
        assert "log_birth" in record[2]
        assert "disk full" in record[3]["error"]

    def test_passes_events_through(self, event_logger, app_logger):
        guarded = GuardedEventLogger(event_logger, app_logger)
        guarded.log_birth(build_plant())
        assert len(event_logger.events) == 1
        assert app_logger.records == []

    def test_non_logging_attributes_are_forwarded(self, event_logger, app_logger):
        event_logger.bind(33)
        assert GuardedEventLogger(event_logger, app_logger).tick == 33


class TestJsonl:
    def test_round_trip(self, tmp_path, event_logger):
        event_logger.bind(5)
        event_logger.log_death(build_herbivore(), "old age")
        event_logger.log_disaster("FLOOD", "Water everywhere", ["x", "y"])
        path = tmp_path / "events.jsonl"

        append_events_jsonl(event_logger.events, path)
        loaded = load_events_jsonl(path)

        assert loaded == event_logger.events

    def test_appends(self, tmp_path, event_logger):
        path = tmp_path / "events.jsonl"
        event_logger.log_birth(build_plant())
        append_events_jsonl(event_logger.drain(), path)
        event_logger.log_birth(build_plant())
        append_events_jsonl(event_logger.drain(), path)
        assert len(path.read_text().splitlines()) == 2

    def test_missing_file_is_empty(self, tmp_path):
        assert load_events_jsonl(tmp_path / "nope.jsonl") == []

    def test_to_dict_uses_plain_strings(self):
        event = SimulationEvent(tick=1, event_type="DEATH", description="d", severity=Severity.HIGH)
        data = event.to_dict()
        assert data["severity"] == "HIGH"
        assert data["event_type"] == "DEATH"
