"""CLI entrypoint for the Chaos Garden simulation."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

import yaml

from chaosgarden.src.engine import Engine

CONFIG_DIR = Path(__file__).parent / "config"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def load_config(config_path: Path) -> dict:
    """Load YAML config with inheritance support."""
    with open(config_path) as f:
        config = yaml.safe_load(f)

    # Handle inherits
    if "inherits" in config:
        base_name = config.pop("inherits")
        base_path = config_path.parent.parent / f"{base_name}.yaml"
        base = load_config(base_path)
        config = _deep_merge(base, config)

    return config


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_tick_range(text: str) -> tuple[int, int]:
    parts = text.split("-")
    return int(parts[0]), int(parts[1])


def _write_plots(data_dir: Path) -> None:
    from chaosgarden.analysis.plots import plot_environment_timeline, plot_population_trajectories

    plot_population_trajectories(data_dir, data_dir / "analysis" / "population.png")
    plot_environment_timeline(data_dir, data_dir / "analysis" / "environment.png")
    logger.info("Plots written to %s", data_dir / "analysis")


def main():
    parser = argparse.ArgumentParser(description="Chaos Garden: ecosystem tick simulation")
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Path to experiment config YAML",
    )
    parser.add_argument("--ticks", type=int, help="Override tick count")
    parser.add_argument("--seed", type=int, help="Override random seed")
    parser.add_argument("--population", type=int, help="Override initial population size")
    parser.add_argument("--data-dir", type=Path, help="Output directory (default data/garden_<timestamp>)")
    parser.add_argument("--resume", type=Path, help="Resume interrupted run from data dir")
    parser.add_argument("--replay", type=Path, help="Replay a completed run")
    parser.add_argument("--kind", type=str, help="Entity kind to filter (with --replay)")
    parser.add_argument("--tick-range", type=str, help="Tick range for replay (e.g., 100-200)")
    parser.add_argument("--plot", action="store_true", help="Write population/environment plots after the run")

    args = parser.parse_args()

    # Handle --replay mode
    if args.replay:
        from chaosgarden.src.replay import replay

        tick_range = _parse_tick_range(args.tick_range) if args.tick_range else None
        replay(args.replay, kind_filter=args.kind, tick_range=tick_range)
        sys.exit(0)

    # Handle --resume mode
    if args.resume:
        try:
            engine = Engine.from_snapshot(args.resume)
        except (FileNotFoundError, KeyError, ValueError) as exc:
            logger.error("Cannot resume %s: %s", args.resume, exc)
            sys.exit(1)
        if args.ticks:
            engine.config["simulation"]["ticks"] = args.ticks
        asyncio.run(engine.run())
        if args.plot:
            _write_plots(args.resume)
        logger.info("Resumed run complete: %s", args.resume)
        sys.exit(0)

    if not args.config:
        args.config = CONFIG_DIR / "default.yaml"

    try:
        config = load_config(args.config)
    except (FileNotFoundError, yaml.YAMLError) as exc:
        logger.error("Cannot load config %s: %s", args.config, exc)
        sys.exit(1)

    if args.ticks:
        config["simulation"]["ticks"] = args.ticks
    if args.seed is not None:
        config["simulation"]["seed"] = args.seed
    if args.population:
        config["population"]["total"] = args.population

    level = config.get("logging", {}).get("level", "INFO")
    logging.getLogger().setLevel(getattr(logging, str(level).upper(), logging.INFO))

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    data_dir = args.data_dir or Path("data") / f"garden_{timestamp}"

    logger.info("Starting garden: %s", data_dir)
    engine = Engine(config, data_dir)
    engine.setup()
    asyncio.run(engine.run())
    if args.plot:
        _write_plots(data_dir)
    logger.info("Garden complete: %s", data_dir)


if __name__ == "__main__":
    main()
