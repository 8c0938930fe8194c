"""Make the checkout importable without installing it.

``import terrax`` must resolve to this working tree and the shared
``tree_fixtures`` helpers must be importable from every test module.
"""

from __future__ import annotations

import sys
from pathlib import Path

TESTS_DIR = Path(__file__).resolve().parent

for entry in (str(TESTS_DIR.parent), str(TESTS_DIR)):
    if entry not in sys.path:
        sys.path.insert(0, entry)
