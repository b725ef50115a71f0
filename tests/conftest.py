"""
Pytest configuration for reposter tests.
"""

import sys
from pathlib import Path

# Make the repository root importable without installing the package
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))
