#!/usr/bin/env python
"""
Project Mass import CLI runner.

Usage:
    python run.py fetch                 # download day-sheets to data/
    python run.py segments [--offline]  # list detected segments per sheet
    python run.py preview [--verbose] [--instance N] [--offline]
"""

import sys
from pathlib import Path

# add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from project_mass.main import main

if __name__ == "__main__":
    main()
