"""Logging setup and terminal-safe text for the flowtrace CLI.

Detects terminal encoding and provides ASCII alternatives for Unicode glyphs
so output does not crash terminals without UTF-8 support.
"""
import sys
import locale
import logging
from rich.logging import RichHandler


# Unicode to ASCII mapping for glyphs the CLI prints
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '←': '<-',
    '…': '...',
    '•': '*',
    '│': '|',
    '─': '-',
    '└': '+',
    '├': '+',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except Exception:
        pass

    return 'ascii'


def is_utf8_capable() -> bool:
    return detect_terminal_encoding() in ('utf-8', 'utf8', 'utf_8')


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode glyphs with ASCII equivalents if the terminal needs it.

    Args:
        text: Text potentially containing Unicode glyphs

    Returns:
        str: Text safe for the current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)
    return sanitized


def configure_logging(verbose: bool = False, console=None) -> logging.Logger:
    """Route flowtrace log records to a Rich handler on stderr.

    Args:
        verbose: Emit DEBUG records instead of WARNING and above
        console: Console to render on (default: a stderr SafeConsole)

    Returns:
        The 'flowtrace' package logger
    """
    if console is None:
        from .safe_console import SafeConsole
        console = SafeConsole(stderr=True)

    package_logger = logging.getLogger('flowtrace')
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(console=console, show_time=False, show_path=verbose, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    return package_logger
