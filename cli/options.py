"""Engine options shared by several subcommands."""

from __future__ import annotations

import argparse

from config import MEDIAN_WINDOW_SIZES
from pixel_engine import EngineConfig
from pixel_engine.median import BORDER_POLICIES


def add_engine_args(parser: argparse.ArgumentParser) -> None:
    """Add the EngineConfig overrides to a subcommand parser."""
    group = parser.add_argument_group("engine options")
    group.add_argument(
        "--window",
        type=int,
        choices=MEDIAN_WINDOW_SIZES,
        help="Window size for the 'median' operation",
    )
    group.add_argument(
        "--border",
        choices=BORDER_POLICIES,
        help="Median border policy: copy source pixels or zero them",
    )
    group.add_argument(
        "--levels",
        type=int,
        help="Number of output levels for histogram equalization",
    )
    group.add_argument(
        "--force-opaque",
        action="store_true",
        help="Grayscale sets alpha to 255 instead of keeping it",
    )


def config_from_args(args: argparse.Namespace) -> EngineConfig:
    """Build and validate an EngineConfig from parsed arguments.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    defaults = EngineConfig()
    config = EngineConfig(
        median_window=args.window if args.window is not None else defaults.median_window,
        median_border=args.border or defaults.median_border,
        equalization_levels=(
            args.levels if args.levels is not None else defaults.equalization_levels
        ),
        grayscale_force_opaque=args.force_opaque or defaults.grayscale_force_opaque,
    )
    config.validate()
    return config
