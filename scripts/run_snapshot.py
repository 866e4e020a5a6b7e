#!/usr/bin/env python3
"""Run one snapshot from a checkout, without installing the package."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from feed_snapshot.cli import main


if __name__ == "__main__":
    sys.exit(main())
