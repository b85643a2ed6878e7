"""Main entry point for running formula_pkg as a module.

This allows running the CLI with:
    python -m formula_pkg evaluate "(x+1)^2" --at 3
    python -m formula_pkg --version
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
