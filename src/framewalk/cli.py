"""
FrameWalk Command Line
======================

Entry point for the `framewalk` command.

Commands:
    render REFERENCE INPUT_DIR OUTPUT   Build the animated GIF
    check [FILE]                        Decode one image (stdin if omitted)

Exit Codes:
    0 - success
    1 - run failed (unusable reference, unreadable input, write error,
        or `check` could not decode)
    2 - configuration error
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from framewalk import __version__
from framewalk.config import RunConfig, Settings, load_config, setup_logging
from framewalk.errors import ConfigurationError, FrameWalkError, ImageDecodeError
from framewalk.imaging.decoder import decode_file, decode_image
from framewalk.models.frame import PixelFormat
from framewalk.pipeline import run
from framewalk.selection.metrics import available_metrics


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="framewalk",
        description="Turn a directory of JPEG files into a visually coherent animated GIF",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: search ./config.yaml, ~/.config/framewalk)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override logging.level (DEBUG, INFO, WARNING, ...)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Build the animated GIF")
    render.add_argument("reference", help="The original file to get the size from")
    render.add_argument("input", help="The directory containing jpg images to convert to a gif")
    render.add_argument("output", help="The file to write the gif to")
    render.add_argument("--max-frames", type=int, default=None, help="Maximum output frames")
    render.add_argument(
        "--leading-copies",
        type=int,
        default=None,
        help="Copies of the reference frame at the start",
    )
    render.add_argument("--weight-local", type=float, default=None, help="Weight of the distance to the previous frame")
    render.add_argument("--weight-global", type=float, default=None, help="Weight of the distance to the reference frame")
    render.add_argument("--metric", choices=available_metrics(), default=None, help="Distance metric")
    render.add_argument(
        "--prefilter-k",
        type=int,
        default=None,
        help="Only walk the k candidates closest to the reference (0 = all)",
    )
    render.add_argument("--duration", type=int, default=None, help="Frame duration in milliseconds")

    check = subparsers.add_parser("check", help="Decode one image and report its format")
    check.add_argument("file", nargs="?", default=None, help="Image file (default: stdin)")

    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply command-line flags on top of loaded settings."""
    data = settings.model_dump()

    if args.log_level is not None:
        data["logging"]["level"] = args.log_level

    if args.command == "render":
        overrides = {
            "max_frames": args.max_frames,
            "leading_copies": args.leading_copies,
            "weight_local": args.weight_local,
            "weight_global": args.weight_global,
            "metric": args.metric,
            "prefilter_k": args.prefilter_k,
        }
        for key, value in overrides.items():
            if value is not None:
                data["selection"][key] = value
        if args.duration is not None:
            data["output"]["frame_duration_ms"] = args.duration

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid option: {e}") from e


def build_run_config(args: argparse.Namespace, settings: Settings) -> RunConfig:
    """
    Assemble the run configuration from positionals and settings.

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    try:
        return RunConfig(
            reference_path=args.reference,
            input_dir=args.input,
            output_path=args.output,
            max_frames=settings.selection.max_frames,
            leading_copies=settings.selection.leading_copies,
            weight_local=settings.selection.weight_local,
            weight_global=settings.selection.weight_global,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid run configuration: {e}") from e


def _cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    run_config = build_run_config(args, settings)
    report = run(run_config, settings)
    print(
        f"Wrote {len(report.selection)} frames "
        f"({report.width}x{report.height}) to {report.output_path}"
    )
    return EXIT_OK


def _cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    force_grayscale = settings.decode.force_grayscale
    try:
        if args.file is None:
            frame = decode_image(
                sys.stdin.buffer.read(),
                identity="<stdin>",
                force_grayscale=force_grayscale,
            )
        else:
            frame = decode_file(args.file, force_grayscale=force_grayscale)
    except ImageDecodeError as e:
        print(f"whoops: {e}", file=sys.stderr)
        return EXIT_FAILURE

    line = f"{frame.identity}: {frame.width}x{frame.height} {frame.pixel_format.value}"
    if frame.pixel_format == PixelFormat.CMYK32:
        line += " (4-channel image, unsupported)"
    print(line)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_overrides(load_config(args.config), args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    setup_logging(settings)

    try:
        if args.command == "render":
            return _cmd_render(args, settings)
        return _cmd_check(args, settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG
    except FrameWalkError as e:
        logger.error(f"Run failed: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
