"""Pytest configuration for exprsimp tests.

Shared configuration for all test suites.
"""

import logging
import pathlib
import sys

# Configure logging
logging.basicConfig(level=logging.INFO)

# Add project root to path for all tests to ensure imports work
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))
