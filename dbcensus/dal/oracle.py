"""Oracle catalog adapter implementation."""
import logging
import numbers
from typing import Any, Dict, List, Optional, Sequence

import oracledb

from dbcensus.dal.base import DB, Connection
from dbcensus.dal.errors import ConnectionClosedError, ConnectivityError, ContractViolation
from dbcensus.dal.sql import format_schema_list, quote_identifier
from dbcensus.models.schema import (
    Constraint,
    ConstraintType,
    DBCoordinates,
    SchemaTableInfo,
    TableColumnInfo,
)

logger = logging.getLogger(__name__)

# Oracle ALL_CONSTRAINTS.CONSTRAINT_TYPE codes
CONSTRAINT_CODES: Dict[str, ConstraintType] = {
    'P': ConstraintType.PRIMARY,
    'U': ConstraintType.UNIQUE,
    'R': ConstraintType.FOREIGN_KEY,
}

# ALL_TAB_COLUMNS.NULLABLE flags
NULLABLE_FLAGS: Dict[str, bool] = {
    'Y': True,
    'N': False,
}

TABLES_QUERY = """
SELECT DISTINCT OWNER, OBJECT_NAME
FROM DBA_OBJECTS
WHERE OBJECT_TYPE = 'TABLE'
AND OWNER IN ({schemas})
ORDER BY OWNER, OBJECT_NAME
"""

COLUMNS_QUERY = """
SELECT col.column_name,
       col.data_type,
       col.data_length,
       col.nullable
FROM sys.all_tab_columns col
INNER JOIN sys.all_tables t
    ON t.owner = col.owner
    AND t.table_name = col.table_name
WHERE col.owner = :owner
AND col.table_name = :table_name
ORDER BY col.column_id
"""

CONSTRAINTS_QUERY = """
SELECT constraint_name, constraint_type
FROM all_constraints
WHERE owner = :owner
AND table_name = :table_name
AND constraint_type IN ('R', 'P', 'U')
"""


def make_dsn(coords: DBCoordinates) -> str:
    """Build a TCP connect descriptor addressing the database by SID."""
    return oracledb.makedsn(coords.host, coords.port, sid=coords.database)


def to_constraint_type(code: str) -> ConstraintType:
    """Map an Oracle constraint type code to ConstraintType."""
    try:
        return CONSTRAINT_CODES[code]
    except KeyError:
        raise ContractViolation(f"Unsupported Oracle constraint type: [{code}]") from None


def to_nullable(flag: str, column_name: str) -> bool:
    """Map an Oracle Y/N nullability flag to a bool."""
    try:
        return NULLABLE_FLAGS[flag]
    except KeyError:
        raise ContractViolation(
            f"Unhandled nullable flag [{flag}] for Oracle column [{column_name}]"
        ) from None


def _require_rows(rows: Optional[List[Any]], query_name: str) -> List[Any]:
    if rows is None:
        raise ContractViolation(f"No result set returned by the Oracle {query_name} query")
    return rows


def _to_count(value: Any, schema: str, table: str) -> int:
    # NUMBER values may surface as int, float or Decimal depending on fetch settings
    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        raise ContractViolation(
            f"Oracle count query on {schema}.{table} returned [{value!r}]"
        )
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ContractViolation(
            f"Oracle count query on {schema}.{table} returned [{value!r}]"
        ) from None
    if count != value or count < 0:
        raise ContractViolation(
            f"Oracle count query on {schema}.{table} returned [{value!r}]"
        )
    return count


class OracleConnection(Connection):
    """Connection wrapping a python-oracledb async session."""

    def __init__(self, conn: oracledb.AsyncConnection):
        self.conn = conn

    def _session(self) -> oracledb.AsyncConnection:
        if self.conn is None:
            raise ConnectionClosedError("Oracle connection is closed")
        return self.conn

    async def get_schema_tables(self, schemas: Sequence[str]) -> List[SchemaTableInfo]:
        """List tables owned by the given schemas, as reported by DBA_OBJECTS."""
        session = self._session()
        if not schemas:
            return []

        schema_list, params = format_schema_list(schemas, 'oracle')
        query = TABLES_QUERY.format(schemas=schema_list)
        logger.debug("Fetching Oracle tables for schemas: %s", ", ".join(schemas))
        rows = _require_rows(await session.fetchall(query, params), 'schema/tables')

        result = [SchemaTableInfo(schema_name=row[0], table_name=row[1]) for row in rows]
        logger.info("Fetched %d tables from Oracle", len(result))
        return result

    async def get_table_columns(self, schema: str, table: str) -> List[TableColumnInfo]:
        session = self._session()
        logger.debug("Fetching Oracle columns for %s.%s", schema, table)
        rows = await session.fetchall(
            COLUMNS_QUERY, {'owner': schema, 'table_name': table}
        )
        rows = _require_rows(rows, 'table/columns')

        result = []
        # data_length is not part of the shared model
        for row in rows:
            if len(row) != 4:
                raise ContractViolation(
                    f"Expected 4 columns from the Oracle table/columns query on {schema}.{table}, "
                    f"got {len(row)}"
                )
            column_name, data_type, _, nullable = row
            result.append(TableColumnInfo(
                name=column_name,
                data_type=data_type,
                is_nullable=to_nullable(nullable, column_name)
            ))
        return result

    async def get_num_of_rows(self, schema: str, table: str) -> int:
        session = self._session()
        query = f"SELECT COUNT(*) FROM {quote_identifier(schema)}.{quote_identifier(table)}"
        rows = _require_rows(await session.fetchall(query), 'row count')

        if len(rows) != 1:
            raise ContractViolation(
                f"Expected 1 row from the Oracle count query on {schema}.{table}, "
                f"got {len(rows)}"
            )
        if len(rows[0]) != 1:
            raise ContractViolation(
                f"Expected 1 column from the Oracle count query on {schema}.{table}, "
                f"got {len(rows[0])}"
            )

        count = _to_count(rows[0][0], schema, table)
        logger.debug("Number of Oracle rows in table %s.%s is: %d", schema, table, count)
        return count

    async def get_constraints(self, schema: str, table: str) -> List[Constraint]:
        session = self._session()
        logger.debug("Fetching Oracle constraints for %s.%s", schema, table)
        rows = await session.fetchall(
            CONSTRAINTS_QUERY, {'owner': schema, 'table_name': table}
        )
        rows = _require_rows(rows, 'constraints')
        return [
            Constraint(name=row[0], ctype=to_constraint_type(row[1]))
            for row in rows
        ]

    async def close(self) -> None:
        """Close Oracle session."""
        if self.conn:
            try:
                await self.conn.close()
                logger.info("Closed Oracle connection")
            except oracledb.Error as e:
                logger.warning("Error closing Oracle connection: %s", e)
            finally:
                self.conn = None


class OracleDB(DB):
    """Opens connections to Oracle databases."""

    name = 'oracle'

    async def open_connection(self, coords: DBCoordinates) -> OracleConnection:
        """Connect to Oracle in thin mode.

        Raises:
            ConnectivityError: If the coordinates do not form a valid descriptor,
                the listener is unreachable or login fails
        """
        try:
            dsn = make_dsn(coords)
            conn = await oracledb.connect_async(
                user=coords.username,
                password=coords.password,
                dsn=dsn
            )
        except oracledb.Error as e:
            logger.error("Failed to connect to Oracle at %s:%s: %s", coords.host, coords.port, e)
            raise ConnectivityError(
                f"Could not connect to Oracle at {coords.host}:{coords.port}/{coords.database}: {e}"
            ) from e

        logger.info("Successfully connected to Oracle as %s", coords.username)
        return OracleConnection(conn)


ORACLE_DB = OracleDB()
