"""Post-run analysis for Chaos Garden simulations.

Uses only stdlib (csv, json). Reads the population CSV written by
`extract_metrics` and the event log written by the engine.

CLI usage:
    python -m chaosgarden.analysis.analyze data/garden_xxx/
"""

from __future__ import annotations

import csv
import json
import sys
from collections import Counter, defaultdict
from pathlib import Path

KINDS = ("plants", "herbivores", "carnivores", "fungi")


# ── Data loading ─────────────────────────────────────────────────


def load_population(data_dir: Path) -> list[dict]:
    """Load population CSV as list of dicts, numeric fields cast."""
    csv_path = data_dir / "analysis" / "population.csv"
    if not csv_path.exists():
        return []

    with open(csv_path, newline="") as f:
        return [_cast_row(row) for row in csv.DictReader(f)]


def load_events(data_dir: Path) -> list[dict]:
    """Load the event JSONL as list of dicts."""
    jsonl_path = data_dir / "logs" / "events.jsonl"
    if not jsonl_path.exists():
        return []

    entries: list[dict] = []
    with open(jsonl_path) as f:
        for line in f:
            line = line.strip()
            if line:
                entries.append(json.loads(line))
    return entries


# ── Summary statistics ───────────────────────────────────────────


def summary_stats(rows: list[dict]) -> dict:
    """Per-kind population statistics over the run.

    Returns::

        {
            "plants": {"min": int, "max": int, "mean": float, "final": int},
            ...
            "total_living": {...},
        }
    """
    result: dict[str, dict] = {}
    ordered = sorted(rows, key=lambda r: r["tick"])
    for key in (*KINDS, "total_living"):
        values = [r[key] for r in ordered]
        result[key] = {
            "min": min(values) if values else 0,
            "max": max(values) if values else 0,
            "mean": _mean(values),
            "final": values[-1] if values else 0,
        }
    return result


def extinction_ticks(rows: list[dict]) -> dict[str, int | None]:
    """First tick at which each kind's living count hit zero (None if never)."""
    result: dict[str, int | None] = {kind: None for kind in KINDS}
    for row in sorted(rows, key=lambda r: r["tick"]):
        for kind in KINDS:
            if result[kind] is None and row[kind] == 0:
                result[kind] = row["tick"]
    return result


def weather_time(rows: list[dict]) -> dict[str, int]:
    """Number of recorded ticks spent in each weather state."""
    return dict(Counter(r["weather"] for r in rows))


def event_counts(events: list[dict]) -> dict[str, int]:
    return dict(Counter(e["event_type"] for e in events))


def death_causes(events: list[dict]) -> dict[str, dict[str, int]]:
    """Death causes per entity kind. Predation collapses to "predation"."""
    result: dict[str, Counter] = defaultdict(Counter)
    for event in events:
        if event.get("event_type") != "DEATH":
            continue
        metadata = event.get("metadata", {})
        cause = metadata.get("cause", "unknown")
        if cause.startswith(("killed by ", "eaten by ")):
            cause = "predation"
        result[metadata.get("type", "unknown")][cause] += 1
    return {kind: dict(counts) for kind, counts in result.items()}


# ── CLI main ─────────────────────────────────────────────────────


def main():
    """CLI: python -m chaosgarden.analysis.analyze data/garden_xxx/"""
    if len(sys.argv) < 2:
        print("Usage: python -m chaosgarden.analysis.analyze <data_dir>")
        sys.exit(1)

    data_dir = Path(sys.argv[1])
    if not data_dir.exists():
        print(f"Error: {data_dir} does not exist")
        sys.exit(1)

    print(f"Analyzing garden: {data_dir}\n")

    rows = load_population(data_dir)
    events = load_events(data_dir)
    print(f"Loaded {len(rows)} population rows, {len(events)} events\n")

    if not rows:
        print("No population data found. Exiting.")
        sys.exit(0)

    print("=" * 60)
    print("POPULATION")
    print("=" * 60)
    for key, s in summary_stats(rows).items():
        print(
            f"  {key:<14} min={s['min']:>4}  max={s['max']:>4}  "
            f"mean={s['mean']:>7.2f}  final={s['final']:>4}"
        )

    print(f"\n{'=' * 60}")
    print("EXTINCTIONS")
    print("=" * 60)
    for kind, tick in extinction_ticks(rows).items():
        print(f"  {kind}: {'tick ' + str(tick) if tick is not None else 'SURVIVED'}")

    print(f"\n{'=' * 60}")
    print("WEATHER")
    print("=" * 60)
    for state, ticks in sorted(weather_time(rows).items(), key=lambda x: -x[1]):
        print(f"  {state:<10} {ticks} ticks")

    if events:
        print(f"\n{'=' * 60}")
        print("EVENTS")
        print("=" * 60)
        for event_type, count in sorted(event_counts(events).items(), key=lambda x: -x[1]):
            print(f"  {event_type:<22} {count}")

        causes = death_causes(events)
        if causes:
            print(f"\n{'=' * 60}")
            print("DEATH CAUSES")
            print("=" * 60)
            for kind, counts in sorted(causes.items()):
                summary = ", ".join(f"{c}={n}" for c, n in sorted(counts.items(), key=lambda x: -x[1]))
                print(f"  {kind}: {summary}")

    print()


# ── Private helpers ──────────────────────────────────────────────


def _cast_row(row: dict) -> dict:
    """Cast CSV string values to appropriate Python types."""
    cast = dict(row)
    for key in ("tick", *KINDS, "total_living", "total_dead", "all_time_dead"):
        if key in cast and cast[key] != "":
            try:
                cast[key] = int(cast[key])
            except (ValueError, TypeError):
                cast[key] = 0

    for key in ("temperature", "sunlight", "moisture"):
        if key in cast and cast[key] != "":
            try:
                cast[key] = float(cast[key])
            except (ValueError, TypeError):
                cast[key] = 0.0

    return cast


def _mean(values: list) -> float:
    """Safe mean that handles empty lists."""
    if not values:
        return 0.0
    return sum(values) / len(values)


if __name__ == "__main__":
    main()
