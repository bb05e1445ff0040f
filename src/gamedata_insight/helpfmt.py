"""Argparse help formatter for the gamedata-insight CLI.

Combines ArgumentDefaultsHelpFormatter (defaults appended to option help)
with RawTextHelpFormatter (hand-laid-out descriptions and examples keep
their line breaks), and colors section headings when the terminal allows.
"""

from __future__ import annotations

import argparse


class ColorDefaultsFormatter(
    argparse.ArgumentDefaultsHelpFormatter,
    argparse.RawTextHelpFormatter,
):
    """Help formatter with wide option columns and colored section headings.

    Defaults are only shown when they carry information: flags that default
    to ``False`` and options without a default are left alone.
    """

    def __init__(self, *a, **k):
        k.setdefault("max_help_position", 32)
        k.setdefault("width", 110)
        super().__init__(*a, **k)

    def _get_help_string(self, action):
        if action.default in (None, False) or action.default is argparse.SUPPRESS:
            return action.help
        return super()._get_help_string(action)

    def start_section(self, heading):
        # ANSI codes are only safe in headings; argparse measures option widths
        from .cli.colors import BOLD, CYAN, RESET

        if heading:
            heading = f"{BOLD}{CYAN}{heading}{RESET}"
        return super().start_section(heading)
