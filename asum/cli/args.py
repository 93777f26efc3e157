"""CLI Argument Parsing"""

import argparse
import argcomplete

from asum import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='asum',
        description='ASUM - AI Commit Summarizer. Generate a commit message from staged changes.',
        epilog='Example: asum (prints the message and copies it to the clipboard)'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('command', nargs='?', choices=['verify'], help='verify: check the syntax of ./asum.toml')

    parser.add_argument('--no-copy', action='store_true', help='Print message only, do not copy to clipboard')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
