"""Tests for the DAL abstract interfaces."""
import pytest

from dbcensus.dal.base import DB, Connection
from dbcensus.dal.oracle import OracleConnection, OracleDB
from dbcensus.dal.postgres import PostgresConnection, PostgresDB


def test_connection_is_abstract():
    """Test that Connection cannot be instantiated directly."""
    with pytest.raises(TypeError, match="Can't instantiate abstract class"):
        Connection()


def test_db_is_abstract():
    """Test that DB cannot be instantiated directly."""
    with pytest.raises(TypeError, match="Can't instantiate abstract class"):
        DB()


def test_connection_requires_all_methods():
    """Test that a partial implementation cannot be instantiated."""
    class PartialConnection(Connection):
        async def get_schema_tables(self, schemas):
            return []

        async def close(self):
            pass

    with pytest.raises(TypeError):
        PartialConnection()


def test_connection_abstract_methods():
    """Test that every Connection operation is abstract."""
    abstract_methods = {
        'get_schema_tables',
        'get_table_columns',
        'get_num_of_rows',
        'get_constraints',
        'close'
    }
    assert Connection.__abstractmethods__ == frozenset(abstract_methods)


def test_adapters_share_no_implementation():
    """Test that adapters only meet through the interfaces."""
    assert issubclass(OracleConnection, Connection)
    assert issubclass(PostgresConnection, Connection)
    assert not issubclass(OracleConnection, PostgresConnection)
    assert not issubclass(PostgresConnection, OracleConnection)
    assert issubclass(OracleDB, DB)
    assert issubclass(PostgresDB, DB)
