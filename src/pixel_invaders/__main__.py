from __future__ import annotations

import argparse
import logging
import sys

from . import __version__
from .app import run_auto, run_gui, run_headless
from .config import load_settings
from .exceptions import ConfigurationError


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pixel-invaders",
        description="Space invaders on a pixel matrix",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--gui", action="store_true", help="Force GUI mode (Arcade)")
    mode.add_argument("--headless", action="store_true", help="Force headless mode (in-memory display)")
    parser.add_argument("--settings", default=None, help="YAML settings file")
    parser.add_argument("--max-steps", type=int, default=None, help="Stop after N ticks")
    parser.add_argument("--framerate", type=float, default=None, help="Simulation ticks per second")
    parser.add_argument("--tick-rate", type=float, default=None, help="Loop pacing in Hz (0 = unpaced, headless only)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the shared random generator")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        settings = load_settings(args.settings).with_overrides(framerate=args.framerate, seed=args.seed)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.gui:
        return run_gui(settings, max_steps=args.max_steps)
    if args.headless:
        return run_headless(settings, max_steps=args.max_steps, tick_rate=args.tick_rate)
    return run_auto(settings, max_steps=args.max_steps, tick_rate=args.tick_rate)


if __name__ == "__main__":
    sys.exit(main())
