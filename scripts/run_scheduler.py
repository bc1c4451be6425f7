"""
Schedule a tournament from a JSON file (wrapper around tournament_scheduler.cli).

    python scripts/run_scheduler.py schedule data/sample_bracket.json --validate
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tournament_scheduler.cli import main

if __name__ == "__main__":
    sys.exit(main())
