"""ANSI color codes for CLI help text and messages."""

import os
import sys


def supports_color(stream=None) -> bool:
    """Check if ``stream`` (stdout by default) is a color-capable terminal."""
    stream = stream or sys.stdout
    return (
        hasattr(stream, "isatty")
        and stream.isatty()
        and not sys.platform.startswith("win")
        and "NO_COLOR" not in os.environ
    )


if supports_color():
    RED = "\033[91m"  # errors, critical severity
    YELLOW = "\033[93m"  # warnings, subsection headers
    GREEN = "\033[92m"  # examples, safe severity
    BLUE = "\033[94m"  # option and format names
    CYAN = "\033[96m"  # section headers
    BOLD = "\033[1m"
    RESET = "\033[0m"
else:
    RED = YELLOW = GREEN = BLUE = CYAN = BOLD = RESET = ""


def section_header(text: str) -> str:
    return f"{BOLD}{YELLOW}{text}:{RESET}"


def example(text: str) -> str:
    return f"{GREEN}# {text}{RESET}"


def error(text: str) -> str:
    return f"{RED}{text}{RESET}"
