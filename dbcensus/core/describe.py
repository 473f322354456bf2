"""Table description: columns and constraints of a single table."""
from typing import List

from pydantic import BaseModel

from dbcensus.dal.base import Connection
from dbcensus.models.schema import Constraint, TableColumnInfo


class TableDescription(BaseModel):
    """Columns and constraints of one table."""

    schema_name: str
    table_name: str
    columns: List[TableColumnInfo]
    constraints: List[Constraint]


async def describe_table(conn: Connection, schema: str, table: str) -> TableDescription:
    """Fetch columns and constraints of a table.

    The two catalog queries run one after the other, as a connection serves a
    single query at a time.
    """
    columns = await conn.get_table_columns(schema, table)
    constraints = await conn.get_constraints(schema, table)
    return TableDescription(
        schema_name=schema,
        table_name=table,
        columns=columns,
        constraints=constraints
    )
