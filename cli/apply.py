"""Apply command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from tqdm import tqdm

from cli.options import add_engine_args, config_from_args
from pixel_engine import OPERATIONS, PixelEngineError, get_operation
from pixel_engine.adapter import find_images, load_image, save_image

logger = logging.getLogger(__name__)


def add_apply_subparser(subparsers: argparse._SubParsersAction) -> None:
    apply_parser = subparsers.add_parser(
        "apply",
        help="Apply a named operation to an image or a directory of images",
    )
    apply_parser.add_argument(
        "operation",
        help=f"Operation name ({', '.join(sorted(OPERATIONS))})",
    )
    apply_parser.add_argument(
        "source",
        help="Image file or directory of images",
    )
    apply_parser.add_argument(
        "output",
        help="Output image file (or directory when source is a directory)",
    )
    add_engine_args(apply_parser)
    apply_parser.set_defaults(_cmd=cmd_apply)


def cmd_apply(args: argparse.Namespace) -> int:
    try:
        config = config_from_args(args)
        operation = get_operation(args.operation, config)
        images = find_images(args.source)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    if not images:
        logger.info("No images to process.")
        return 0

    source_is_dir = Path(args.source).is_dir()
    output = Path(args.output)
    failures = 0

    logger.info("Applying %s to %d image(s)", args.operation, len(images))
    for path in tqdm(images, desc="Processing", disable=len(images) == 1):
        target = output / path.name if source_is_dir else output
        try:
            result = operation(load_image(path))
            save_image(result, target)
        except (PixelEngineError, ValueError, OSError) as e:
            logger.error("Error processing %s: %s", path, e)
            failures += 1
            continue
        logger.debug("Wrote %s", target)

    if failures:
        logger.warning("%d of %d image(s) failed", failures, len(images))
        return 1
    return 0
