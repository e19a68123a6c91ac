"""Logging utilities for Tilesmith.

Provides color-coded console output so placement failures stand out from
routine editor activity.
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for message types
    BLUE = "\033[94m"      # Deterministic operations (placement, history)
    YELLOW = "\033[93m"    # Rejected edits (collision, exhausted search)
    RED = "\033[91m"       # Errors
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if TILESMITH_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("TILESMITH_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def _quiet() -> bool:
    return bool(os.getenv("TILESMITH_QUIET"))


def log_deterministic(message: str) -> None:
    """Log a routine placement/history operation (blue)."""
    if not _quiet():
        print(colored(f"{EMOJI_DETERMINISTIC} {message}", Color.BLUE))


def log_warning(message: str) -> None:
    """Log a rejected edit (yellow)."""
    if not _quiet():
        print(colored(f"{EMOJI_WARNING} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error (red). Never silenced by TILESMITH_QUIET."""
    print(colored(f"{EMOJI_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    if not _quiet():
        print(colored(f"{EMOJI_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    if not _quiet():
        print(colored(f"{EMOJI_INFO} {message}", Color.CYAN))


# Markers for message types (color-blind accessible)
EMOJI_DETERMINISTIC = "[•]"  # Routine operation
EMOJI_WARNING = "[!]"        # Rejected edit
EMOJI_ERROR = "[x]"          # Error
EMOJI_SUCCESS = "[✓]"        # Success
EMOJI_INFO = "[i]"           # Information
