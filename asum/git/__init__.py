"""Git Operations Package"""

from asum.git.analyzer import (
    EXCLUDE_PATTERNS,
    GitAnalyzer,
    GitError,
    get_git_diff,
    get_staged_files,
    truncate_diff,
)

__all__ = [
    "EXCLUDE_PATTERNS",
    "GitAnalyzer",
    "GitError",
    "get_git_diff",
    "get_staged_files",
    "truncate_diff",
]
