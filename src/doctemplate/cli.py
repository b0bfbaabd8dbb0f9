"""Command-line interface for doctemplate."""

import argparse
import logging
import sys

from .config import settings
from .engine import TemplateProcessor
from .placeholders import ConsoleValueSource, DocTemplateError, MappingValueSource

logger = logging.getLogger(__name__)


def parse_assignment(text: str) -> tuple[str, str]:
    """Parse a NAME=VALUE command-line assignment."""
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    return name.strip(), value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doctemplate",
        description="doctemplate - Fill !placeholders! and !=formulas! in document templates",
    )
    parser.add_argument(
        "-t",
        "--template",
        dest="templates",
        nargs="+",
        action="extend",
        required=True,
        metavar="PATH",
        help="Template files to be processed",
    )
    parser.add_argument(
        "-s", "--save", action="store_true", help="Save entered values to a yaml file next to the template"
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=settings.output_dir,
        help=f"Output directory segment (default: {settings.output_dir})",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        type=parse_assignment,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Supply a value up front instead of being asked for it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    failures = 0
    for template in args.templates:
        # Fresh sources per template so each run asks for its own values
        value_source = MappingValueSource(dict(args.assignments), fallback=ConsoleValueSource())
        processor = TemplateProcessor(value_source, output_dir=args.output_dir)

        try:
            result = processor.process(template, save=args.save)
        except DocTemplateError as e:
            logger.debug(f"Failed to process {template}", exc_info=True)
            print(f"Error: {template}: {e}", file=sys.stderr)
            failures += 1
            continue

        print(f"Written: {result.output_path}")
        if result.cache_path:
            print(f"Values saved: {result.cache_path}")

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
