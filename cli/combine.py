"""Combine command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

from pixel_engine import BINARY_OPERATIONS, PixelEngineError, get_binary_operation
from pixel_engine.adapter import load_image, save_image

logger = logging.getLogger(__name__)


def add_combine_subparser(subparsers: argparse._SubParsersAction) -> None:
    combine_parser = subparsers.add_parser(
        "combine",
        help="Combine two equally sized images byte by byte",
    )
    combine_parser.add_argument(
        "operation",
        choices=sorted(BINARY_OPERATIONS),
        help="Bitwise operation",
    )
    combine_parser.add_argument("first", help="First image")
    combine_parser.add_argument("second", help="Second image")
    combine_parser.add_argument("output", help="Output image file")
    combine_parser.set_defaults(_cmd=cmd_combine)


def cmd_combine(args: argparse.Namespace) -> int:
    try:
        operation = get_binary_operation(args.operation)
        result = operation(load_image(args.first), load_image(args.second))
        save_image(result, args.output)
    except (PixelEngineError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Wrote %s (%dx%d)", args.output, result.width, result.height)
    return 0
