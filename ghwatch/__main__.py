"""Allow ``python -m ghwatch``."""

from __future__ import annotations

import sys

from ghwatch.cli import main

if __name__ == "__main__":
    sys.exit(main())
