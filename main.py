"""
Entry point for Brick Game Tetris.

Supports two modes:
  - play:   Play the game with keyboard controls.
  - record: Record a demo GIF of a seeded game played by a random policy.

Usage:
    python main.py
    python main.py --mode play --config config/game.yaml
    python main.py --mode record --seed 7 --frames 600 --output assets/demo.gif
"""

from __future__ import annotations

import argparse
import pathlib
import sys

import yaml


def load_config(config_path: str | pathlib.Path) -> dict:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dict of configuration key-value pairs (empty if the file is empty).

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If a setting has an invalid value (see validate_config).
    """
    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}
    validate_config(config)
    return config


def validate_config(config: dict) -> None:
    """Check values that would otherwise fail deep inside a run.

    Raises:
        ValueError: If soft_drop_steps is not 1 or 2, or record_frames is
            not a positive integer.
    """
    steps = config.get("soft_drop_steps", 2)
    if steps not in (1, 2):
        raise ValueError(f"soft_drop_steps must be 1 or 2, got {steps!r}")
    frames = config.get("record_frames", 300)
    if not isinstance(frames, int) or frames <= 0:
        raise ValueError(f"record_frames must be a positive integer, got {frames!r}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with mode, config, seed, output and frames attributes.
    """
    parser = argparse.ArgumentParser(
        description="Brick Game 9999-in-1 Tetris.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=["play", "record"],
        default="play",
        help="Run mode: 'play' (keyboard play), 'record' (write a demo GIF).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/game.yaml",
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the piece generator (overrides the config).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output GIF path for 'record' mode (overrides the config).",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help="Number of frames to capture in 'record' mode (overrides the config).",
    )
    return parser.parse_args(argv)


def apply_overrides(config: dict, args: argparse.Namespace) -> dict:
    """Return a copy of config with command-line overrides applied.

    Raises:
        ValueError: If an override has an invalid value.
    """
    config = dict(config)
    if args.seed is not None:
        config["seed"] = args.seed
    if args.output is not None:
        config["record_output"] = args.output
    if args.frames is not None:
        config["record_frames"] = args.frames
    validate_config(config)
    return config


def main() -> None:
    """Main entry point: parse args, load config, and dispatch to the selected mode."""
    args = parse_args()
    try:
        config = apply_overrides(load_config(args.config), args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.mode == "play":
        from brickgame.play import play_manual
        play_manual(config)

    elif args.mode == "record":
        from brickgame.recorder import record_demo
        record_demo(config)

    else:
        print(f"Unknown mode: {args.mode}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
