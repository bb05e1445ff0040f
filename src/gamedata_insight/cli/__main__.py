#!/usr/bin/env python3
"""
Main entry point for running the gamedata-insight CLI as a module.

This allows running: python -m gamedata_insight.cli
"""
from __future__ import annotations

import sys

from . import main

if __name__ == "__main__":
    sys.exit(main())
