"""Pytest configuration for the cookie session tests.

Puts the repository root on sys.path so `cookie_session` and
`tests.helpers` import without PYTHONPATH being set externally.
"""
import sys
from pathlib import Path


def pytest_configure(config):
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))
