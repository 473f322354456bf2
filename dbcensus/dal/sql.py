"""SQL text helpers shared by the database adapters."""
from typing import List, Sequence, Tuple

PARAMSTYLES = ('oracle', 'postgres')


def quote_identifier(name: str) -> str:
    """Render a name as a double-quoted SQL identifier."""
    return '"' + name.replace('"', '""') + '"'


def format_schema_list(
    schemas: Sequence[str],
    paramstyle: str
) -> Tuple[str, List[str]]:
    """Format schema names as bind placeholders for an ``IN (...)`` clause.

    Schema names never appear in the SQL text; they travel as parameters.

    Args:
        schemas: Schema names to filter on
        paramstyle: ``oracle`` (``:1, :2``) or ``postgres`` (``$1, $2``)

    Returns:
        Tuple of (SQL fragment, positional parameters)

    Raises:
        ValueError: If no schemas are given or the paramstyle is unknown
    """
    if paramstyle not in PARAMSTYLES:
        raise ValueError(
            f"Unknown paramstyle: '{paramstyle}'. "
            f"Supported: {', '.join(PARAMSTYLES)}"
        )
    if not schemas:
        raise ValueError("At least one schema name is required")

    names = list(schemas)
    prefix = ':' if paramstyle == 'oracle' else '$'
    fragment = ", ".join(f"{prefix}{i}" for i in range(1, len(names) + 1))
    return fragment, names
