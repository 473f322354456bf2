"""Core utility functions for dbcensus."""
from typing import Tuple

def parse_identifier(identifier: str) -> Tuple[str, str]:
    """Parse a table identifier into (schema, table).

    Supports:
    - TABLE
    - SCHEMA.TABLE

    Returns:
        Tuple of (schema, table). Empty strings if not present.

    Raises:
        ValueError: If the identifier has more than two parts
    """
    if not identifier:
        return "", ""

    parts = identifier.split('.')
    if len(parts) == 2:
        return parts[0], parts[1]
    if len(parts) == 1:
        return "", identifier
    raise ValueError(f"Expected SCHEMA.TABLE, got: '{identifier}'")
