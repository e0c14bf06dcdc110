"""
Common utility functions for Orva.
"""

import json
from typing import Any

from jsoncomparison import NO_DIFF, Compare


def load_avro_schema_file(avro_file_path: str) -> Any:
    """Load an Avro schema file as JSON data."""
    with open(avro_file_path, 'r', encoding='utf-8') as avro_file:
        return json.load(avro_file)


def schemas_equal(actual: Any, expected: Any) -> bool:
    """
    Check whether two Avro schemas are structurally equal.

    Args:
        actual: The schema to check, as JSON text or JSON data.
        expected: The reference schema, as JSON text or JSON data.

    Returns:
        bool: True if there is no difference between the schemas.
    """
    if isinstance(actual, str):
        actual = json.loads(actual)
    if isinstance(expected, str):
        expected = json.loads(expected)
    return Compare().check(actual, expected) == NO_DIFF
