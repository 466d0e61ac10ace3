"""Colored verdict lines for the command line tool."""

import os
import sys

GREEN = '\033[92m'
RED = '\033[91m'
BOLD = '\033[1m'
RESET = '\033[0m'

# terminals on Windows that understand ANSI escapes
_WINDOWS_ANSI_MARKERS = ('ANSICON', 'WT_SESSION', 'ConEmuANSI')


def supports_color(stream=None):
    """Check if 'stream' (stdout by default) is a terminal that renders ANSI colors."""
    stream = stream or sys.stdout
    if os.environ.get('NO_COLOR') or not getattr(stream, 'isatty', lambda: False)():
        return False
    if os.name != 'nt':
        return True
    return any(marker in os.environ for marker in _WINDOWS_ANSI_MARKERS) or \
        os.environ.get('TERM_PROGRAM') == 'vscode'


def paint(text, *codes, stream=None):
    """Wrap text in ANSI codes when the stream supports them."""
    if not codes or not supports_color(stream):
        return text
    return f"{''.join(codes)}{text}{RESET}"


def verdict(ok, message, stream=None):
    """
    Format the one-line outcome of a validation.

    Args:
        ok (bool): Whether the license was accepted
        message (str): Text after the check mark or cross

    Returns:
        str: "✓ message" in green or "✗ message" in red
    """
    if ok:
        return paint(f"✓ {message}", GREEN, BOLD, stream=stream)
    return paint(f"✗ {message}", RED, stream=stream)
