#!/usr/bin/env python3
"""
Command line for the pixel engine.

Usage:
    pxe list                                  # List available operations
    pxe apply sobel photo.png edges.png       # Apply one operation
    pxe apply median photos/ out/ --window 5  # Apply to every image in a directory
    pxe combine xor a.png b.png diff.png      # Bitwise combination of two images
    pxe histogram photo.png --levels 8        # Histogram and equalization map
    pxe pipeline in.png out.png grayscale median-3 laplacian --artifacts steps/
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.apply import add_apply_subparser
from cli.combine import add_combine_subparser
from cli.histogram import add_histogram_subparser
from cli.pipeline import add_pipeline_subparser

logger = logging.getLogger(__name__)


def cmd_list(args: argparse.Namespace) -> int:
    """List the named operations."""
    from pixel_engine import BINARY_OPERATIONS, OPERATIONS

    print("Single-image operations:")
    for name in sorted(OPERATIONS):
        print(f"  {name}")
    print("Two-image operations:")
    for name in sorted(BINARY_OPERATIONS):
        print(f"  {name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pxe",
        description="Pixel engine - grayscale, convolution, median, histogram and bitwise operations",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    list_parser = subparsers.add_parser(
        "list",
        help="List available operations",
    )
    list_parser.set_defaults(_cmd=cmd_list)

    add_apply_subparser(subparsers)
    add_combine_subparser(subparsers)
    add_histogram_subparser(subparsers)
    add_pipeline_subparser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
