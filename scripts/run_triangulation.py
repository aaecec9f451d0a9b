#!/usr/bin/env python3
"""``dnatri`` DNA Segment Triangulation Runner.

Usage:
    python scripts/run_triangulation.py ftdna.csv myheritage.csv
    python scripts/run_triangulation.py ftdna.csv -c scripts/user_config.py
    python scripts/run_triangulation.py ftdna.csv --tree family.json --predict-relationships

Note: User config in scripts/user_config.py, expert defaults in src/dnatri/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from dnatri.cli.run_triangulation import main


if __name__ == "__main__":
    sys.exit(main())
