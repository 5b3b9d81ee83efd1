"""
Pytest configuration for backend tests.

Puts the backend directory on sys.path so top-level packages (core, domain,
infrastructure, ...) import the same way they do when the app runs.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))
