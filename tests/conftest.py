"""
pytest configuration for the client tests.

Adds src directory to Python path for imports and sets up test environment.
"""

import os
import sys
from pathlib import Path

# Keep a developer's shell environment out of config loading
for _var in ("NAKADI_URL", "NAKADI_CONNECTION_TIMEOUT", "NAKADI_RETRY"):
    os.environ.pop(_var, None)

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))
