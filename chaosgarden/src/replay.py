"""Terminal replay mode: play back a completed run snapshot by snapshot."""

from __future__ import annotations

import json
from pathlib import Path


def replay(
    data_dir: Path,
    kind_filter: str | None = None,
    tick_range: tuple[int, int] | None = None,
) -> None:
    """Replay a completed simulation run to stdout.

    Parameters
    ----------
    data_dir : Path
        Root data directory of a completed run (e.g. data/garden_20250101_120000).
    kind_filter : str | None
        If set, only list entities of this kind ("plant", "herbivore", ...).
    tick_range : tuple[int, int] | None
        If set, only replay ticks in [start, end] inclusive.
    """
    ticks_dir = data_dir / "logs" / "ticks"
    if not ticks_dir.exists():
        print(f"No tick snapshots found in {ticks_dir}")
        return

    snapshot_files = sorted(ticks_dir.glob("*.json"))
    if not snapshot_files:
        print(f"No snapshot files found in {ticks_dir}")
        return

    # Notable events (everything except births and ambient prose), by tick
    events_by_tick: dict[int, list[dict]] = {}
    events_path = data_dir / "logs" / "events.jsonl"
    if events_path.exists():
        with open(events_path) as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                entry = json.loads(line)
                if entry.get("event_type") in ("BIRTH", "AMBIENT_NARRATIVE"):
                    continue
                events_by_tick.setdefault(entry.get("tick", 0), []).append(entry)

    previous_tick = -1
    for snapshot_file in snapshot_files:
        snapshot = json.loads(snapshot_file.read_text())
        tick_num = snapshot["tick"]

        if tick_range is not None and (tick_num < tick_range[0] or tick_num > tick_range[1]):
            previous_tick = tick_num
            continue

        population = snapshot.get("population", {})
        environment = snapshot.get("environment", {})
        weather = environment.get("weather_state", {}).get("current_state", "?")

        print(f"{'=' * 72}")
        print(
            f"Tick {tick_num:>6}  |  Alive: {population.get('total_living', 0)}  "
            f"(P {population.get('plants', 0)} / H {population.get('herbivores', 0)} / "
            f"C {population.get('carnivores', 0)} / F {population.get('fungi', 0)})  |  "
            f"{weather} {environment.get('temperature', 0):.1f}°C"
        )
        print(f"{'-' * 72}")

        for entity in snapshot.get("living", []):
            if kind_filter and entity.get("type") != kind_filter:
                continue
            pos = entity.get("position", {})
            print(
                f"  {entity.get('name', '?'):<24} {entity.get('type', '?'):<10} "
                f"pos=({pos.get('x', 0):>5.0f},{pos.get('y', 0):>5.0f})  "
                f"energy={entity.get('energy', 0):>6.1f}  health={entity.get('health', 0):>5.1f}"
            )

        # Events since the previous snapshot
        notable = [
            event
            for t in sorted(events_by_tick)
            if previous_tick < t <= tick_num
            for event in events_by_tick[t]
        ]
        if notable:
            print(f"  {'~' * 40}")
            print("  EVENTS:")
            for event in notable:
                print(f"    [{event['tick']}] {event['event_type']}: {event['description']}")

        print()
        previous_tick = tick_num
