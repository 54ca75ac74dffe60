"""Command-line interface for FrameScore."""
import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import AnalyzerConfig
from .core.types import AnalysisType
from .exceptions import FramescoreError
from .utils.logging import configure_from_cli, get_cli_args_parser, get_logger

logger = get_logger("cli")

ANALYSIS_CHOICES = [t.value for t in AnalysisType] + ["all"]


def _build_config(args: argparse.Namespace) -> AnalyzerConfig:
    config = AnalyzerConfig.from_file(args.config) if args.config else AnalyzerConfig()
    if args.sequential:
        config = AnalyzerConfig(parallel=False, max_workers=config.max_workers)
    return config


def analyze_image(args: argparse.Namespace) -> int:
    """Analyze one image file and print the result as JSON."""
    import json

    from .analysis.frame_analyzer import FrameAnalyzer
    from .utils.image_io import load_frame

    frame = load_frame(args.image)
    analyzer = FrameAnalyzer(_build_config(args))

    if args.analysis == "all":
        output = analyzer.analyze(frame).to_json(indent=args.indent)
    else:
        result = analyzer.analyze_type(frame, args.analysis)
        output = json.dumps(result.to_dict(), indent=args.indent, sort_keys=True)

    print(output)
    return 0


def hash_image(args: argparse.Namespace) -> int:
    """Print the cache key of an image file for one analysis type."""
    from .utils.image_io import load_frame

    frame = load_frame(args.image)
    print(frame.cache_key(args.analysis))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="framescore",
        description="FrameScore - single-frame composition, quality and engagement analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full analysis as indented JSON
  framescore analyze still.png --indent 2

  # Technical quality only, without the thread pool
  framescore analyze still.png --analysis technical --sequential

  # Cache key for a frame's scene classification
  framescore hash still.png --analysis scene
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    for flags, kwargs in get_cli_args_parser():
        parser.add_argument(*flags, **kwargs)

    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze an image file")
    analyze_parser.add_argument("image", help="Path to the image file")
    analyze_parser.add_argument(
        "--analysis",
        choices=ANALYSIS_CHOICES,
        default="all",
        help="Analysis to run (default: all)",
    )
    analyze_parser.add_argument(
        "--config",
        default=None,
        help="JSON file with analyzer settings",
    )
    analyze_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run analyzers one after another instead of in a thread pool",
    )
    analyze_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent JSON output by N spaces",
    )
    analyze_parser.set_defaults(func=analyze_image)

    hash_parser = subparsers.add_parser("hash", help="Print a frame's cache key")
    hash_parser.add_argument("image", help="Path to the image file")
    hash_parser.add_argument(
        "--analysis",
        choices=[t.value for t in AnalysisType],
        default=AnalysisType.COMPOSITION.value,
        help="Analysis type the key is for (default: composition)",
    )
    hash_parser.set_defaults(func=hash_image)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_from_cli(
        log_level=args.log_level,
        log_format=args.log_format,
        log_file=args.log_file,
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 1
    except FramescoreError as e:
        logger.debug("command failed", error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
