"""Desktop entry point.

Run with: `python -m startrip`

Pass ``--help`` for options. Without a tile sheet at ``--atlas`` the game
falls back to glyphs rendered with pygame's default font.
"""

from __future__ import annotations

import argparse
import logging

from .constants import ATLAS_PATH, FPS, GameConfig


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--atlas", default=ATLAS_PATH, help="Path to the 16x16 tile sheet image.")
    parser.add_argument(
        "--no-pacing",
        dest="pacing",
        action="store_false",
        help="Draw screens at once instead of tile by tile.",
    )
    parser.set_defaults(pacing=True)
    parser.add_argument("--delay", type=int, default=None, help="Milliseconds to pause on each tile.")
    parser.add_argument("--fps", type=int, default=FPS, help="Frames per second of the window loop.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(atlas_path=args.atlas, pacing=args.pacing, delay_ms=args.delay, fps=args.fps)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    # Imported late so --help does not need pygame
    from .run_pygame import main as run

    run(config_from_args(args))


if __name__ == "__main__":
    main()
