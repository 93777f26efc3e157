"""Git Analyzer - Extract staged changes from git."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

# Generated files that only add noise to a summary
EXCLUDE_PATTERNS = [
    ":(exclude)*-lock.json",
    ":(exclude)package-lock.json",
    ":(exclude)pnpm-lock.yaml",
    ":(exclude)*.min.js",
]


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class GitAnalyzer:
    """Reads staged changes from the repository at ``cwd``."""

    def __init__(self, cwd: str | Path = "."):
        self.cwd = Path(cwd)

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}") from e
        except FileNotFoundError as e:
            raise GitError("Git is not installed or not in PATH") from e

    def get_diff(self, extensions: list[str]) -> str:
        """Staged diff limited to the given pathspecs, minus generated files."""
        return self._run_git('diff', '--cached', '--', *extensions, *EXCLUDE_PATTERNS)

    def get_staged_files(self) -> str:
        """Name/status listing of every staged file, minus generated files."""
        return self._run_git('diff', '--cached', '--name-status', '--', *EXCLUDE_PATTERNS)

    def collect(self, extensions: list[str], max_length: int) -> str:
        """Diff text ready for the summarizer, or "" when nothing is staged.

        Falls back to the file listing when no staged file matches the
        extensions, then truncates to ``max_length`` characters.
        """
        diff_text = self.get_diff(extensions)

        if not diff_text:
            logger.warning("No staged changes found in supported code files. Falling back to file list...")
            diff_text = self.get_staged_files()
            if not diff_text:
                return ""

        if len(diff_text) > max_length:
            logger.info(
                "Diff is too large (%d chars), truncating to %d chars for AI...",
                len(diff_text), max_length,
            )
            logger.info("You can increase this limit by updating 'max_diff_length' in your config.")
            diff_text = truncate_diff(diff_text, max_length)

        return diff_text


def truncate_diff(text: str, max_length: int) -> str:
    """Keep the first ``max_length`` characters."""
    return text[:max_length]


def get_git_diff(extensions: list[str], cwd: str | Path = ".") -> str:
    return GitAnalyzer(cwd).get_diff(extensions)


def get_staged_files(cwd: str | Path = ".") -> str:
    return GitAnalyzer(cwd).get_staged_files()
