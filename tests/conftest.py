"""Common test fixtures."""
# pylint: disable=redefined-outer-name
from unittest.mock import AsyncMock, MagicMock

import pytest

from dbcensus.dal.base import Connection
from dbcensus.dal.errors import ContractViolation
from dbcensus.dal.oracle import OracleConnection
from dbcensus.dal.postgres import PostgresConnection
from dbcensus.models.schema import DBCoordinates, SchemaTableInfo


@pytest.fixture
def coords():
    """Connection coordinates for a test database."""
    return DBCoordinates(
        host='db.example.com',
        port=1521,
        database='ORCL',
        username='scott',
        password='tiger'
    )


@pytest.fixture
def oracle_session():
    """Mocked python-oracledb async session."""
    session = MagicMock()
    session.fetchall = AsyncMock(return_value=[])
    session.close = AsyncMock()
    return session


@pytest.fixture
def oracle_conn(oracle_session):
    """OracleConnection over the mocked session."""
    return OracleConnection(oracle_session)


@pytest.fixture
def pg_session():
    """Mocked asyncpg connection."""
    session = MagicMock()
    session.fetch = AsyncMock(return_value=[])
    session.close = AsyncMock()
    return session


@pytest.fixture
def pg_conn(pg_session):
    """PostgresConnection over the mocked session."""
    return PostgresConnection(pg_session)


class FakeConnection(Connection):
    """In-memory Connection serving canned row counts."""

    def __init__(self, counts):
        self.counts = counts
        self.closed = 0
        self.counted = []

    async def get_schema_tables(self, schemas):
        return [
            SchemaTableInfo(schema_name=s, table_name=t)
            for (s, t) in sorted(self.counts) if s in schemas
        ]

    async def get_table_columns(self, schema, table):
        return []

    async def get_num_of_rows(self, schema, table):
        self.counted.append((schema, table))
        count = self.counts[(schema, table)]
        if isinstance(count, Exception):
            raise count
        return count

    async def get_constraints(self, schema, table):
        return []

    async def close(self):
        self.closed += 1


@pytest.fixture
def fake_connection_factory():
    """Factory to create FakeConnection instances for testing."""
    def _make_connection(counts=None):
        if counts is None:
            counts = {
                ('app', 'customers'): 3,
                ('app', 'orders'): 10,
                ('app', 'broken'): ContractViolation("Expected 1 row, got 2"),
            }
        return FakeConnection(counts)
    return _make_connection
