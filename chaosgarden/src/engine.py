"""Main simulation loop: tick scheduling, event sinks, snapshot I/O."""

from __future__ import annotations

import asyncio
import csv
import json
import logging
import random
from pathlib import Path

import yaml

from .app_logger import ApplicationLogger
from .entities import Entity
from .environment import Environment, create_initial_environment
from .events import (
    BufferedEventLogger,
    CompositeEventLogger,
    EventLogger,
    LoggingEventLogger,
    append_events_jsonl,
)
from .interventions import introduce_entities, maybe_trigger_disaster
from .metrics import POPULATION_FIELDS, extract_metrics
from .population import PopulationSummary, count_population
from .seeding import generate_initial_population
from .tick import WILD_FUNGUS_SPAWN_PROBABILITY, TickResult, run_tick

logger = logging.getLogger(__name__)


class Engine:
    """Runs the garden: seeded world + one `run_tick` per step."""

    def __init__(self, config: dict, data_dir: Path, app_logger: ApplicationLogger | None = None):
        self.config = config
        self.data_dir = data_dir
        self.tick = 0
        self.living: list[Entity] = []
        self.dead: list[Entity] = []
        self.environment: Environment = self._initial_environment()
        self.summary = PopulationSummary()
        self.app_logger = app_logger or ApplicationLogger()
        self.buffer = BufferedEventLogger()
        self.events: EventLogger = self.buffer
        if config.get("events", {}).get("echo_to_log", False):
            self.events = CompositeEventLogger([self.buffer, LoggingEventLogger()])
        self._rng = random.Random(config["simulation"]["seed"])

    # ── Lifecycle ───────────────────────────────────────────────

    def setup(self) -> None:
        """Create data dirs, seed the world and write the tick-0 snapshot."""
        self._make_dirs()

        # Save resolved config for history/replay
        config_path = self.data_dir / "config.yaml"
        config_path.write_text(yaml.dump(self.config, default_flow_style=False))

        population_cfg = self.config["population"]
        self.living = generate_initial_population(
            self._rng,
            total=population_cfg.get("total", 22),
            fungus_count=population_cfg.get("fungi", 3),
        )
        self.summary = count_population(self.living, self.dead)
        logger.info(
            "Seeded %d plants, %d herbivores, %d carnivores, %d fungi",
            self.summary.plants, self.summary.herbivores,
            self.summary.carnivores, self.summary.fungi,
        )
        self._save_snapshot()

    async def run(self) -> None:
        """Main tick loop."""
        max_ticks = self.config["simulation"]["ticks"]
        delay_ms = self.config["simulation"].get("tick_delay_ms", 0)
        snapshot_every = self.config["simulation"].get("snapshot_every", 50)
        extract_every = self.config.get("metrics", {}).get("extract_every", 1)

        while self.tick < max_ticks:
            result = self.step()

            if self.tick % extract_every == 0:
                extract_metrics(result.population_summary, result.environment, self.data_dir)
            self._flush_events()
            if self.tick % snapshot_every == 0:
                self._save_snapshot()

            logger.info(
                "Tick %d / %d  (%d alive, %s, %.1f°C)",
                self.tick, max_ticks, self.summary.total_living,
                self.environment.weather_state.current_state.value,
                self.environment.temperature,
            )

            if self.summary.total_living == 0:
                logger.info("Garden is empty at tick %d", self.tick)
                break

            if delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000)

        # Final snapshot
        self._flush_events()
        self._save_snapshot()
        logger.info(
            "Simulation complete: %d ticks, %d alive, %d dead all-time",
            self.tick, self.summary.total_living, self.summary.all_time_dead,
        )

    def step(self) -> TickResult:
        """Advance exactly one tick, including any disaster rolled for it."""
        self.events.bind(self.tick + 1)
        disasters_cfg = self.config.get("disasters", {})
        maybe_trigger_disaster(self.living, self.environment, disasters_cfg, self._rng, self.events)

        result = run_tick(
            self.living,
            self.dead,
            self.environment,
            self.events,
            self.app_logger,
            self._rng,
            previous_summary=self.summary,
            wild_fungus_probability=self.config.get("events", {}).get(
                "wild_fungus_probability", WILD_FUNGUS_SPAWN_PROBABILITY
            ),
        )
        self.living = result.living
        self.dead = result.dead
        self.environment = result.environment
        self.summary = result.population_summary
        self.tick = result.environment.tick
        return result

    def introduce(self, kind: str, count: int) -> list[Entity]:
        """Drop new entities into the garden; they act from the next tick."""
        self.events.bind(self.tick)
        created = introduce_entities(kind, count, self._rng, self.events, tick=self.tick)
        self.living.extend(created)
        self.summary = count_population(self.living, self.dead, self.summary)
        return created

    # ── Snapshots ───────────────────────────────────────────────

    @classmethod
    def from_snapshot(cls, data_dir: Path, snapshot_path: Path | None = None,
                      app_logger: ApplicationLogger | None = None) -> Engine:
        """Resume a run from its latest (or a given) tick snapshot."""
        config = yaml.safe_load((data_dir / "config.yaml").read_text())
        if snapshot_path is None:
            snapshots = sorted((data_dir / "logs" / "ticks").glob("*.json"))
            if not snapshots:
                raise FileNotFoundError(f"No snapshots in {data_dir / 'logs' / 'ticks'}")
            snapshot_path = snapshots[-1]

        snapshot = json.loads(snapshot_path.read_text())
        engine = cls(config, data_dir, app_logger=app_logger)
        engine._make_dirs()
        engine.tick = snapshot["tick"]
        engine.environment = Environment.from_dict(snapshot["environment"])
        engine.living = [Entity.from_dict(e) for e in snapshot["living"]]
        engine.dead = [Entity.from_dict(e) for e in snapshot["dead"]]
        engine.summary = PopulationSummary.from_dict(snapshot["population"])
        version, state, gauss = snapshot["rng_state"]
        engine._rng.setstate((version, tuple(state), gauss))
        engine._discard_after(engine.tick)
        logger.info("Resumed %s at tick %d", data_dir, engine.tick)
        return engine

    def _save_snapshot(self) -> None:
        """Write full garden state to tick snapshot file."""
        snapshot = {
            "tick": self.tick,
            "environment": self.environment.to_dict(),
            "population": self.summary.to_dict(),
            "living": [e.to_dict() for e in self.living],
            "dead": [e.to_dict() for e in self.dead],
            "rng_state": self._rng.getstate(),
        }
        path = self.data_dir / "logs" / "ticks" / f"{self.tick:06d}.json"
        path.write_text(json.dumps(snapshot, indent=2))

    # ── Private helpers ─────────────────────────────────────────

    def _initial_environment(self) -> Environment:
        env_cfg = self.config.get("environment", {})
        return create_initial_environment(
            temperature=env_cfg.get("temperature", 20.0),
            sunlight=env_cfg.get("sunlight", 0.5),
            moisture=env_cfg.get("moisture", 0.5),
            weather=env_cfg.get("weather", "CLEAR"),
        )

    def _make_dirs(self) -> None:
        (self.data_dir / "logs" / "ticks").mkdir(parents=True, exist_ok=True)
        (self.data_dir / "analysis").mkdir(exist_ok=True)

    def _discard_after(self, tick: int) -> None:
        """Drop event lines and metric rows written after `tick`.

        Both files are flushed every tick but snapshots are sparser, so a run
        that stopped between snapshots has already logged the ticks it is
        about to replay.
        """
        events_path = self.data_dir / "logs" / "events.jsonl"
        if events_path.exists():
            with open(events_path) as f:
                kept = [line for line in f if line.strip() and json.loads(line)["tick"] <= tick]
            events_path.write_text("".join(kept))

        csv_path = self.data_dir / "analysis" / "population.csv"
        if csv_path.exists():
            with open(csv_path, newline="") as f:
                rows = [row for row in csv.DictReader(f) if int(row["tick"]) <= tick]
            with open(csv_path, "w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=POPULATION_FIELDS)
                writer.writeheader()
                writer.writerows(rows)

    def _flush_events(self) -> None:
        events = self.buffer.drain()
        if events:
            append_events_jsonl(events, self.data_dir / "logs" / "events.jsonl")
