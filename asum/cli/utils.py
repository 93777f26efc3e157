"""CLI Utility Functions"""

import subprocess
import sys

# Tried in order; the first one installed wins
CLIPBOARD_COMMANDS = {
    'win32': [['clip']],
    'darwin': [['pbcopy']],
}
DEFAULT_CLIPBOARD_COMMANDS = [
    ['wl-copy'],
    ['xclip', '-selection', 'clipboard'],
    ['xsel', '--clipboard', '--input'],
]


def clipboard_commands(platform: str | None = None) -> list[list[str]]:
    return CLIPBOARD_COMMANDS.get(platform or sys.platform, DEFAULT_CLIPBOARD_COMMANDS)


def copy_to_clipboard(text: str) -> tuple[bool, str]:
    """Copy text to clipboard. Returns (success, failure_reason)."""
    data = text.encode('utf-8')
    for command in clipboard_commands():
        try:
            subprocess.run(command, input=data, check=True, capture_output=True)
            return True, ""
        except FileNotFoundError:
            continue
        except (subprocess.CalledProcessError, OSError) as e:
            return False, f"Clipboard command failed: {e}"

    if sys.platform.startswith('linux'):
        return False, "Install wl-clipboard, xclip or xsel"
    return False, "No clipboard tool found"
