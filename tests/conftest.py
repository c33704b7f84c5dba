"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import src...' works, and gives
every test a clean settings singleton with no CALENDAR_*/SCAN_*/LOG_*
overrides from the developer's shell or .env file.
"""
import os
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.config.settings import reset_settings

SETTINGS_ENV_PREFIXES = ("CALENDAR_", "SCAN_", "LOG_")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in list(os.environ):
        if name.startswith(SETTINGS_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
