"""Histogram command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

from config import EQUALIZATION_LEVELS
from pixel_engine import (
    PixelEngineError,
    equalize,
    equalized_histogram,
    generate_histogram,
)
from pixel_engine.adapter import load_image
from pixel_engine.schemas import HistogramReport

logger = logging.getLogger(__name__)


def add_histogram_subparser(subparsers: argparse._SubParsersAction) -> None:
    histogram_parser = subparsers.add_parser(
        "histogram",
        help="Print the intensity histogram and its equalization map",
    )
    histogram_parser.add_argument("source", help="Image file")
    histogram_parser.add_argument(
        "--levels",
        type=int,
        default=EQUALIZATION_LEVELS,
        help=f"Number of equalization levels (default: {EQUALIZATION_LEVELS})",
    )
    histogram_parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON report instead of a table",
    )
    histogram_parser.set_defaults(_cmd=cmd_histogram)


def build_report(source: str, levels: int) -> HistogramReport:
    """Load an image and compute its histogram report."""
    buffer = load_image(source)
    histogram = generate_histogram(buffer)
    mapping = equalize(histogram, buffer.pixel_count, levels)
    return HistogramReport(
        source=str(source),
        width=buffer.width,
        height=buffer.height,
        total_pixels=buffer.pixel_count,
        levels=levels,
        counts=histogram.counts.tolist(),
        probabilities=histogram.probabilities().tolist(),
        equalization_map=mapping.tolist(),
        equalized_histogram=equalized_histogram(histogram, mapping, levels).tolist(),
    )


def print_report(report: HistogramReport) -> None:
    print(f"{report.source}: {report.width}x{report.height}, {report.total_pixels} pixels")
    print()
    print("intensity     count  probability  level")
    for value, count in enumerate(report.counts):
        if count == 0:
            continue
        print(
            f"{value:9d}  {count:8d}  {report.probabilities[value]:11.6f}  "
            f"{report.equalization_map[value]:5d}"
        )
    print()
    print(f"equalized ({report.levels} levels)")
    for level, mass in enumerate(report.equalized_histogram):
        print(f"{level:5d}  {mass:.6f}")


def cmd_histogram(args: argparse.Namespace) -> int:
    try:
        report = build_report(args.source, args.levels)
    except (PixelEngineError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print_report(report)
    return 0
