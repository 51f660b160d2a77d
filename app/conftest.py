"""
Pytest configuration shared by every app.

Tests are auto-marked by filename so a fast subset can be selected with
``pytest -m unit``. App-specific fixtures are defined in each app's
tests/conftest.py.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_listener.py, test_apps.py → integration
      (request handling, settings and logging wired together)
    - Everything else → unit

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_listener.py",
        "test_apps.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
