"""PostgreSQL catalog adapter implementation."""
import asyncio
import logging
import numbers
import re
from typing import Any, Dict, List, Optional, Sequence

import asyncpg

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

# pg_constraint.contype codes
CONSTRAINT_CODES: Dict[str, ConstraintType] = {
    'p': ConstraintType.PRIMARY,
    'u': ConstraintType.UNIQUE,
    'f': ConstraintType.FOREIGN_KEY,
}

# information_schema.columns.is_nullable values
NULLABLE_FLAGS: Dict[str, bool] = {
    'YES': True,
    'NO': False,
}

CONNECT_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

INTEGER_TEXT = re.compile(r"\s*[0-9]+\s*")

# Partitions are pg_class rows of their own (relkind 'r', or 'p' when
# sub-partitioned) flagged with relispartition; only their parents are listed.
TABLES_QUERY = """
WITH
partition_parents AS (
    SELECT n.nspname AS schema_name,
           c.relname AS table_name
    FROM pg_catalog.pg_class c
    INNER JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    WHERE c.relkind = 'p'
    AND NOT c.relispartition
),
unpartitioned_tables AS (
    SELECT n.nspname AS schema_name,
           c.relname AS table_name
    FROM pg_catalog.pg_class c
    INNER JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    WHERE c.relkind = 'r'
    AND NOT c.relispartition
)
SELECT schema_name, table_name FROM partition_parents
WHERE schema_name IN ({schemas})
UNION
SELECT schema_name, table_name FROM unpartitioned_tables
WHERE schema_name IN ({schemas})
ORDER BY 1, 2
"""

COLUMNS_QUERY = """
SELECT column_name,
       data_type,
       is_nullable,
       character_maximum_length
FROM information_schema.columns
WHERE table_schema = $1
AND table_name = $2
ORDER BY ordinal_position
"""

CONSTRAINTS_QUERY = """
SELECT con.conname AS conname,
       con.contype::text AS contype
FROM pg_catalog.pg_constraint con
INNER JOIN pg_catalog.pg_class rel ON rel.oid = con.conrelid
INNER JOIN pg_catalog.pg_namespace nsp ON nsp.oid = con.connamespace
WHERE nsp.nspname = $1
AND rel.relname = $2
AND con.contype IN ('u', 'p', 'f')
"""


def to_constraint_type(code: str) -> ConstraintType:
    """Map a pg_constraint.contype code to ConstraintType."""
    try:
        return CONSTRAINT_CODES[code]
    except KeyError:
        raise ContractViolation(f"Unsupported PostgreSQL constraint type: [{code}]") from None


def to_nullable(flag: str, column_name: str) -> bool:
    """Map a YES/NO nullability value to a bool."""
    try:
        return NULLABLE_FLAGS[flag]
    except KeyError:
        raise ContractViolation(
            f"Unhandled is_nullable case: [{flag}] for PostgreSQL column [{column_name}]"
        ) from None


def parse_count(value: Any, schema: str, table: str) -> int:
    """Parse a COUNT(*) value, which may arrive as an int or as text."""
    if isinstance(value, str) and INTEGER_TEXT.fullmatch(value):
        return int(value)
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        try:
            count = int(value)
        except (TypeError, ValueError, OverflowError):
            count = None
        if count is not None and count == value and count >= 0:
            return count
    raise ContractViolation(
        f"PostgreSQL count query on {schema}.{table} returned [{value!r}]"
    )


def _require_rows(rows: Optional[List[Any]], query_name: str) -> List[Any]:
    if rows is None:
        raise ContractViolation(f"No result set returned by the PostgreSQL {query_name} query")
    return rows


class PostgresConnection(Connection):
    """Connection wrapping an asyncpg session."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    def _session(self) -> asyncpg.Connection:
        if self.conn is None:
            raise ConnectionClosedError("PostgreSQL connection is closed")
        return self.conn

    async def get_schema_tables(self, schemas: Sequence[str]) -> List[SchemaTableInfo]:
        """List plain tables and partitioned parents, leaving out partitions."""
        session = self._session()
        if not schemas:
            return []

        schema_list, params = format_schema_list(schemas, 'postgres')
        query = TABLES_QUERY.format(schemas=schema_list)
        logger.debug("Fetching PostgreSQL tables for schemas: %s", ", ".join(schemas))
        rows = _require_rows(await session.fetch(query, *params), 'schema/tables')

        result = [
            SchemaTableInfo(schema_name=row['schema_name'], table_name=row['table_name'])
            for row in rows
        ]
        logger.info("Fetched %d tables from PostgreSQL", len(result))
        return result

    async def get_table_columns(self, schema: str, table: str) -> List[TableColumnInfo]:
        session = self._session()
        logger.debug("Fetching PostgreSQL columns for %s.%s", schema, table)
        rows = _require_rows(await session.fetch(COLUMNS_QUERY, schema, table), 'table/columns')
        return [
            TableColumnInfo(
                name=row['column_name'],
                data_type=row['data_type'],
                is_nullable=to_nullable(row['is_nullable'], row['column_name'])
            )
            for row in rows
        ]

    async def get_num_of_rows(self, schema: str, table: str) -> int:
        session = self._session()
        query = f"SELECT COUNT(*) AS n FROM {quote_identifier(schema)}.{quote_identifier(table)}"
        rows = _require_rows(await session.fetch(query), 'row count')

        if len(rows) != 1:
            raise ContractViolation(
                f"Expected 1 row from the PostgreSQL count query on {schema}.{table}, "
                f"got {len(rows)}"
            )
        if len(rows[0]) != 1:
            raise ContractViolation(
                f"Expected 1 column from the PostgreSQL count query on {schema}.{table}, "
                f"got {len(rows[0])}"
            )

        count = parse_count(rows[0]['n'], schema, table)
        logger.debug("Number of PostgreSQL rows in table %s.%s is: %d", schema, table, count)
        return count

    async def get_constraints(self, schema: str, table: str) -> List[Constraint]:
        session = self._session()
        logger.debug("Fetching PostgreSQL constraints for %s.%s", schema, table)
        rows = _require_rows(await session.fetch(CONSTRAINTS_QUERY, schema, table), 'constraints')
        return [
            Constraint(name=row['conname'], ctype=to_constraint_type(row['contype']))
            for row in rows
        ]

    async def close(self) -> None:
        """End the PostgreSQL session."""
        if self.conn:
            try:
                await self.conn.close()
                logger.info("Closed PostgreSQL connection")
            except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
                logger.warning("Error closing PostgreSQL connection: %s", e)
            finally:
                self.conn = None


class PostgresDB(DB):
    """Opens connections to PostgreSQL databases."""

    name = 'postgres'

    async def open_connection(self, coords: DBCoordinates) -> PostgresConnection:
        """Connect eagerly; there is no lazy connect.

        Raises:
            ConnectivityError: If the server is unreachable or login fails
        """
        try:
            conn = await asyncpg.connect(
                host=coords.host,
                port=coords.port,
                user=coords.username,
                password=coords.password,
                database=coords.database
            )
        except CONNECT_ERRORS as e:
            logger.error(
                "Failed to connect to PostgreSQL at %s:%s: %s", coords.host, coords.port, e
            )
            raise ConnectivityError(
                f"Could not connect to PostgreSQL at {coords.host}:{coords.port}/{coords.database}: {e}"
            ) from e

        logger.info("Successfully connected to PostgreSQL as %s", coords.username)
        return PostgresConnection(conn)


POSTGRES_DB = PostgresDB()
