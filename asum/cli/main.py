"""CLI Main Entry Point"""

import logging
import sys
from pathlib import Path

from asum.config import CONFIG_FILENAME, ConfigError, ConfigManager, verify_toml
from asum.git import GitAnalyzer, GitError
from asum.logging_config import configure_logging, default_log_dir
from asum.output import bold, colorize_commit_type, print_error, print_success, Spinner
from asum.summarizer import SummarizerError, get_summarizer

from asum.cli.args import parse_args
from asum.cli.utils import copy_to_clipboard

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else "INFO"
    try:
        configure_logging(level, log_dir=default_log_dir())
    except (OSError, ValueError) as e:
        configure_logging(level)
        logger.warning("File logging disabled: %s", e)


def run_verify() -> int:
    """Validate ./asum.toml."""
    path = Path.cwd() / CONFIG_FILENAME
    if not path.exists():
        print_error(f"{CONFIG_FILENAME} not found in the current directory.")
        return 1

    try:
        verify_toml(path)
    except ConfigError as e:
        print_error(f"{CONFIG_FILENAME} syntax error: {e}")
        return 1

    print_success(f"{CONFIG_FILENAME} syntax is valid.")
    return 0


def _display_message(message: str) -> None:
    """Raw message when piped, colored header on a terminal."""
    if not sys.stdout.isatty():
        print(message)
        return
    lines = colorize_commit_type(message).split('\n')
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)


def _copy_and_report(message: str, no_copy: bool) -> None:
    if no_copy:
        return
    copied, reason = copy_to_clipboard(message)
    if copied:
        logger.info("Message copied to clipboard.")
    else:
        logger.warning("Could not copy to clipboard: %s", reason)


def _generate_commit_flow(args) -> int:
    """Config, staged diff, summarize, display.

    Returns:
        int: Exit code
    """
    manager = ConfigManager()
    try:
        config = manager.load()
    except ConfigError as e:
        logger.error("Failed to load configuration: %s", e)
        return 1
    logger.debug("Using configuration %s", manager.get_config_path())

    try:
        diff_text = GitAnalyzer().collect(config.git_extensions, config.max_diff_length)
    except GitError as e:
        logger.error("Failed to get git diff: %s", e)
        return 1

    if not diff_text:
        logger.warning("No staged changes found.")
        return 0

    logger.info("AI is analyzing your changes...")

    try:
        summarizer = get_summarizer(config)
        with Spinner():
            message = summarizer.summarize(diff_text)
    except SummarizerError as e:
        logger.error("Summarization failed: %s", e)
        return 1

    _display_message(message)
    _copy_and_report(message, args.no_copy)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    _setup_logging(args.verbose)

    if args.command == "verify":
        return run_verify()

    return _generate_commit_flow(args)


if __name__ == "__main__":
    sys.exit(main())
