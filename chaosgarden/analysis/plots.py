"""Matplotlib visualization for Chaos Garden runs."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

KIND_COLUMNS = {
    "plants": "tab:green",
    "herbivores": "tab:orange",
    "carnivores": "tab:red",
    "fungi": "tab:purple",
}


def plot_population_trajectories(data_dir: Path, output_path: Path | None = None) -> None:
    """Plot living counts per kind over time."""
    df = pd.read_csv(data_dir / "analysis" / "population.csv")

    fig, ax = plt.subplots(figsize=(12, 6))
    for column, color in KIND_COLUMNS.items():
        ax.plot(df["tick"], df[column], label=column, color=color, alpha=0.8)
    ax.plot(df["tick"], df["total_living"], label="total", color="black", linestyle="--", alpha=0.5)

    ax.set_xlabel("Tick")
    ax.set_ylabel("Living entities")
    ax.set_title("Population Trajectories")
    ax.legend(fontsize=8)
    ax.grid(True, alpha=0.3)

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
    else:
        plt.show()
    plt.close(fig)


def plot_environment_timeline(data_dir: Path, output_path: Path | None = None) -> None:
    """Temperature, moisture and sunlight over time, shaded by weather state."""
    df = pd.read_csv(data_dir / "analysis" / "population.csv")

    fig, axes = plt.subplots(3, 1, figsize=(12, 9), sharex=True)
    axes[0].plot(df["tick"], df["temperature"], color="tab:red")
    axes[0].set_ylabel("Temperature (°C)")
    axes[0].set_title("Environment Over Time")
    axes[1].plot(df["tick"], df["moisture"], color="tab:blue")
    axes[1].set_ylabel("Moisture")
    axes[2].plot(df["tick"], df["sunlight"], color="goldenrod")
    axes[2].set_ylabel("Sunlight")
    axes[2].set_xlabel("Tick")

    # Shade contiguous weather spans
    spans = (df["weather"] != df["weather"].shift()).cumsum()
    for _, span in df.groupby(spans):
        weather = span["weather"].iloc[0]
        if weather == "CLEAR":
            continue
        for ax in axes:
            ax.axvspan(span["tick"].iloc[0], span["tick"].iloc[-1], alpha=0.08, color="gray")
        axes[0].annotate(weather, (span["tick"].iloc[0], axes[0].get_ylim()[1]),
                         fontsize=6, va="top", alpha=0.6)

    for ax in axes:
        ax.grid(True, alpha=0.3)

    fig.tight_layout()
    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
    else:
        plt.show()
    plt.close(fig)
