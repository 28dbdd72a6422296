"""Per-tick metric extraction: population and climate time series."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .environment import Environment
    from .population import PopulationSummary

POPULATION_FIELDS = [
    "tick",
    "plants",
    "herbivores",
    "carnivores",
    "fungi",
    "total_living",
    "total_dead",
    "all_time_dead",
    "temperature",
    "sunlight",
    "moisture",
    "weather",
]


def metrics_row(summary: PopulationSummary, environment: Environment) -> dict:
    return {
        "tick": environment.tick,
        "plants": summary.plants,
        "herbivores": summary.herbivores,
        "carnivores": summary.carnivores,
        "fungi": summary.fungi,
        "total_living": summary.total_living,
        "total_dead": summary.total_dead,
        "all_time_dead": summary.all_time_dead,
        "temperature": f"{environment.temperature:.2f}",
        "sunlight": f"{environment.sunlight:.3f}",
        "moisture": f"{environment.moisture:.3f}",
        "weather": environment.weather_state.current_state.value,
    }


def extract_metrics(summary: PopulationSummary, environment: Environment, data_dir: Path) -> None:
    """Append one row for this tick to analysis/population.csv."""
    csv_path = data_dir / "analysis" / "population.csv"
    write_header = not csv_path.exists()

    with open(csv_path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=POPULATION_FIELDS)
        if write_header:
            writer.writeheader()
        writer.writerow(metrics_row(summary, environment))
