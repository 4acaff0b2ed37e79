#!/usr/bin/env python3
"""
Command-line interface for Renatic - static site generator.
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .core import Renatic
from .errors import error_chain
from .minifier import MinificationLevel


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(prog='renatic', description='Renatic - Static Site Generator')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', required=True)

    generate = subparsers.add_parser('generate', help='Generate a site')
    generate.add_argument('output', type=str,
                          help='Path to the output directory')
    generate.add_argument('--source', '-s', type=str, default='.',
                          help='Source directory, defaults to the current directory')
    generate.add_argument('--minification', '-m', type=str,
                          choices=[level.value for level in MinificationLevel],
                          default=MinificationLevel.SPEC_COMPLIANT.value,
                          help='Minification level of generated pages')
    generate.add_argument('--verbose', '-v', action='store_true',
                          help='Use verbose output')
    generate.add_argument('--log-file', type=str,
                          help='Also write a detailed log to this file')
    return parser


def print_error(error: Exception) -> None:
    """Print an error and every error that caused it."""
    messages = error_chain(error)
    print(f"Error: {messages[0]}", file=sys.stderr)
    for message in messages[1:]:
        print(f"  Caused by: {message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'generate':
        try:
            generator = Renatic(
                source_dir=args.source,
                output_dir=args.output,
                minification=MinificationLevel.from_name(args.minification),
                verbose=args.verbose,
                log_file=args.log_file,
            )
            generator.generate()
        except Exception as e:
            print_error(e)
            sys.exit(1)


if __name__ == '__main__':
    main()
