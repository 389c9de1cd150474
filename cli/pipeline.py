"""Pipeline command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

from cli.options import add_engine_args, config_from_args
from pixel_engine import OPERATIONS, Pipeline, PixelEngineError, build_step
from pixel_engine.adapter import load_image, save_image
from pixel_engine.schemas import PipelineReport, StepReport

logger = logging.getLogger(__name__)


def add_pipeline_subparser(subparsers: argparse._SubParsersAction) -> None:
    pipeline_parser = subparsers.add_parser(
        "pipeline",
        help="Chain several operations on one image",
    )
    pipeline_parser.add_argument("source", help="Image file")
    pipeline_parser.add_argument("output", help="Output image file")
    pipeline_parser.add_argument(
        "operations",
        nargs="+",
        metavar="OP",
        help=f"Operations to apply in order ({', '.join(sorted(OPERATIONS))})",
    )
    pipeline_parser.add_argument(
        "--artifacts",
        metavar="DIR",
        help="Save every intermediate result into DIR",
    )
    pipeline_parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON report of the steps run",
    )
    add_engine_args(pipeline_parser)
    pipeline_parser.set_defaults(_cmd=cmd_pipeline)


def cmd_pipeline(args: argparse.Namespace) -> int:
    try:
        config = config_from_args(args)
        pipeline = Pipeline(steps=[build_step(name, config) for name in args.operations])
        buffer = load_image(args.source)
        result = pipeline.run(buffer, artifact_dir=args.artifacts)
        save_image(result.final, args.output)
    except (PixelEngineError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Ran %d step(s); wrote %s", len(pipeline), args.output)
    if args.json:
        report = PipelineReport(
            source=str(args.source),
            output=str(args.output),
            width=result.final.width,
            height=result.final.height,
            steps=[
                StepReport(name=step.name, artifact_path=step.artifact_path)
                for step in result.steps
            ],
        )
        print(report.model_dump_json(indent=2))
    return 0
