"""Database adapter registry and connection helpers."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from dbcensus.dal.base import DB, Connection
from dbcensus.dal.errors import (
    ConnectionClosedError,
    ConnectivityError,
    ContractViolation,
    DALError,
)
from dbcensus.dal.oracle import ORACLE_DB
from dbcensus.dal.postgres import POSTGRES_DB
from dbcensus.models.schema import DBCoordinates

logger = logging.getLogger(__name__)


class UnsupportedDatabaseError(ValueError):
    """Raised when an unsupported database type is requested."""


# Registry of available database adapters
DATABASES: Dict[str, DB] = {
    'oracle': ORACLE_DB,
    'postgres': POSTGRES_DB,
}


def get_db(database_type: str) -> DB:
    """Get a database adapter by type.

    Args:
        database_type: Type of database (oracle, postgres)

    Returns:
        DB factory for the specified engine

    Raises:
        UnsupportedDatabaseError: If database type is not recognized
    """
    database_type_lower = database_type.lower()

    if database_type_lower not in DATABASES:
        raise UnsupportedDatabaseError(
            f"Unsupported database: '{database_type}'. "
            f"Supported types: {', '.join(DATABASES.keys())}"
        )

    logger.debug("Using adapter for database type: %s", database_type_lower)
    return DATABASES[database_type_lower]


def list_supported_databases() -> list[str]:
    """Get list of supported database types."""
    return list(DATABASES.keys())


@asynccontextmanager
async def open_connection(db: DB, coords: DBCoordinates) -> AsyncIterator[Connection]:
    """Open a connection and close it on every exit path.

    Usage::

        async with open_connection(get_db('oracle'), coords) as conn:
            tables = await conn.get_schema_tables(['SALES'])
    """
    conn = await db.open_connection(coords)
    try:
        yield conn
    finally:
        await conn.close()


__all__ = [
    'DB',
    'DATABASES',
    'Connection',
    'ConnectionClosedError',
    'ConnectivityError',
    'ContractViolation',
    'DALError',
    'UnsupportedDatabaseError',
    'get_db',
    'list_supported_databases',
    'open_connection',
]
