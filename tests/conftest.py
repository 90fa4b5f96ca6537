"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import json

import pytest


@pytest.fixture(scope="function")
def raw_incident() -> dict:
    """
    Provide an incident as returned with display_value=false.

    Scope: function (created fresh for each test)

    Returns:
        dict: Table API record with scalar fields only
    """
    return {
        "sys_id": "9d385017c611228701d22104cc95c371",
        "number": "INC0010001",
        "short_description": "Email server down",
        "priority": "1",
        "active": True,
        "reassignment_count": 0,
        "assigned_to": None,
        "sys_updated_on": "2025-02-02 10:30:00",
    }


@pytest.fixture(scope="function")
def display_value_incident() -> dict:
    """
    Provide an incident as returned with display_value=all.

    Reference and choice fields carry both the raw value and its label.

    Scope: function (created fresh for each test)

    Returns:
        dict: Table API record mixing scalars and display-value objects
    """
    return {
        "number": "INC0010001",
        "short_description": "Email server down",
        "priority": {"display_value": "1 - Critical", "value": "1"},
        "state": {"display_value": "In Progress", "value": "2"},
        "assignment_group": {"display_value": "IT Support Team", "value": "group-abc123"},
        "sys_updated_on": {"display_value": "02/02/2025 10:30:00", "value": "2025-02-02 10:30:00"},
    }


@pytest.fixture(scope="function")
def write_jsonl(tmp_path):
    """
    Provide a helper writing records to a JSON Lines file.

    Returns:
        Callable[[list[dict], str], Path]: writes records and returns the path
    """
    def _write(records: list, name: str = "records.jsonl"):
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as handle:
            for record in records:
                handle.write(json.dumps(record) + "\n")
        return path

    return _write


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (reads/writes files)"
    )
