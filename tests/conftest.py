"""Pytest configuration for the Ligature test suite."""

import sys
from pathlib import Path

# Add repository root to path for ligature imports
sys.path.insert(0, str(Path(__file__).parent.parent))
