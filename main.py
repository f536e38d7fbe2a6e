"""Main entry point for the sensor-network evaluation."""

from __future__ import annotations

import sys

from wsnsim.cli import main


if __name__ == "__main__":
    sys.exit(main())
