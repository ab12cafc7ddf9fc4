"""Main CLI entry point for dupcheck."""

import argparse
import logging
import os
import sys
from typing import List, Optional

import requests
from rich.console import Console

from . import __version__
from .checker import DuplicatePackageChecker
from .config import CheckerOptions, load_options
from .formatters import ReportFormatter, render_rich
from .models import DiagnosticSink
from .parsers import StatsParseError, StatsParser

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_level: Optional[str] = None):
    """Configure logging based on verbosity flags."""
    if log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def build_options(args) -> CheckerOptions:
    """Combine the config file, if any, with command line flags."""
    overrides = {}
    if args.verbose:
        overrides['verbose'] = True
    if args.relaxed:
        overrides['strict'] = False
    if args.emit_error:
        overrides['emit_error'] = True
    if not args.show_help:
        overrides['show_help'] = False

    if args.config:
        options = load_options(args.config, **overrides)
    else:
        options = CheckerOptions.from_mapping(overrides)

    if args.exclude:
        options = options.with_exclusion(args.exclude)
    return options


def handle_check(args) -> int:
    """Handle the 'check' subcommand."""
    setup_logging(args.verbose, args.loglevel)

    try:
        options = build_options(args)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading options: {e}")
        print(f"Error loading options: {e}", file=sys.stderr)
        return 1

    try:
        graph = StatsParser.parse_file(args.input)
    except (OSError, StatsParseError, requests.RequestException) as e:
        logger.error(f"Error parsing stats file: {e}")
        print(f"Error parsing stats file: {e}", file=sys.stderr)
        return 1

    context = args.context or graph.context or os.getcwd()
    logger.info(f"Checking {len(graph.modules)} modules relative to {context}")

    checker = DuplicatePackageChecker(options)

    if args.output_format == 'plain':
        sink = DiagnosticSink()
        checker.run(graph.modules, context, sink)
        for message in sink.errors + sink.warnings:
            print(message)
        found = len(sink)
    else:
        duplicates = checker.find_duplicates(graph.modules, context)
        found = len(duplicates)
        if args.output_format == 'json':
            print(ReportFormatter.format_as_json(duplicates), end='')
        elif args.output_format == 'sbom':
            print(ReportFormatter.format_as_sbom(duplicates), end='')
        else:
            render_rich(
                duplicates,
                verbose=options.verbose,
                show_help=options.show_help,
                console=Console(highlight=False)
            )

    if not found:
        logger.info("No duplicate packages found")

    if options.emit_error and found:
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog='dupcheck',
        description='Find packages bundled at more than one version, and what pulled them in'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Subcommands')

    check_parser = subparsers.add_parser('check', help='Report duplicate packages in a build')
    check_parser.add_argument('input', help='webpack stats.json or module list (file or URL)')
    check_parser.add_argument('--context',
                              help='Project root for relative paths. Default: stats context, then cwd')
    check_parser.add_argument('--relaxed', action='store_true',
                              help='Only report duplicates sharing a major version')
    check_parser.add_argument('--emit-error', action='store_true',
                              help='Report duplicates as errors and exit with status 1')
    check_parser.add_argument('--no-help', dest='show_help', action='store_false',
                              help='Omit the help footer')
    check_parser.add_argument('--exclude', action='append', default=[], metavar='RULE',
                              help='Exclude name or name@version (globs allowed), repeatable')
    check_parser.add_argument('--config', help='JSON file with checker options')
    check_parser.add_argument('--format', dest='output_format', default='text',
                              choices=['text', 'plain', 'json', 'sbom'],
                              help='Output format (text, plain, json, sbom). Default: text')
    check_parser.add_argument('-v', '--verbose', action='store_true',
                              help='Show the issuer of each instance and verbose logging')
    check_parser.add_argument('--loglevel',
                              choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                              help='Set log level')
    check_parser.set_defaults(func=handle_check)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
