"""Row-count reporting over catalog tables."""
import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, computed_field

from dbcensus.dal.base import Connection
from dbcensus.dal.errors import ConnectionClosedError
from dbcensus.models.schema import SchemaTableInfo

logger = logging.getLogger(__name__)


class TableRowCount(BaseModel):
    """Row count of one table, or the error that prevented counting it."""

    schema_name: str
    table_name: str
    num_rows: Optional[int] = None
    error: Optional[str] = None


class RowCountReport(BaseModel):
    """Row counts for a set of tables."""

    tables: List[TableRowCount] = []

    @computed_field
    @property
    def num_tables(self) -> int:
        return len(self.tables)

    @computed_field
    @property
    def total_rows(self) -> int:
        return sum(t.num_rows for t in self.tables if t.num_rows is not None)

    @property
    def failed_tables(self) -> List[TableRowCount]:
        return [t for t in self.tables if t.error is not None]


async def count_rows(
    conn: Connection,
    tables: Sequence[SchemaTableInfo],
    skip_errors: bool = False
) -> RowCountReport:
    """Count the rows of every table.

    Tables are queried under their catalog names and reported under their
    normalized (upper-case) names.

    Args:
        conn: Open connection
        tables: Tables as returned by get_schema_tables
        skip_errors: Record a failing table and continue instead of raising

    Returns:
        RowCountReport with one entry per table, in input order
    """
    report = RowCountReport()

    for table in tables:
        key = table.normalize()
        try:
            num_rows = await conn.get_num_of_rows(table.schema_name, table.table_name)
        except ConnectionClosedError:
            raise
        except Exception as e:  # pylint: disable=broad-except
            if not skip_errors:
                raise
            logger.warning("Skipping %s: %s", key.qualified_name, e)
            report.tables.append(TableRowCount(
                schema_name=key.schema_name,
                table_name=key.table_name,
                error=str(e)
            ))
            continue

        report.tables.append(TableRowCount(
            schema_name=key.schema_name,
            table_name=key.table_name,
            num_rows=num_rows
        ))

    logger.info(
        "Counted %d rows in %d tables", report.total_rows, report.num_tables
    )
    return report
