"""Abstract interfaces for catalog adapters."""
from abc import ABC, abstractmethod
from typing import List, Sequence

from dbcensus.models.schema import (
    Constraint,
    DBCoordinates,
    SchemaTableInfo,
    TableColumnInfo,
)


class Connection(ABC):
    """An open session against one database.

    Each implementation wraps a single driver session and translates the
    engine's catalog views into the shared models. Operations must not be
    awaited concurrently on the same instance; open one connection per
    concurrent task instead.
    """

    @abstractmethod
    async def get_schema_tables(self, schemas: Sequence[str]) -> List[SchemaTableInfo]:
        """List tables belonging to the given schemas.

        Args:
            schemas: Schema names to include

        Returns:
            Distinct SchemaTableInfo entries ordered by schema, then table.
            An empty list when the schemas hold no tables.

        Raises:
            ContractViolation: If the driver returns no result set
        """

    @abstractmethod
    async def get_table_columns(self, schema: str, table: str) -> List[TableColumnInfo]:
        """List columns of a table in physical (ordinal) order.

        Args:
            schema: Schema name, exactly as stored in the catalog
            table: Table name, exactly as stored in the catalog

        Returns:
            One TableColumnInfo per column.

        Raises:
            ContractViolation: If a nullability flag is not recognized
        """

    @abstractmethod
    async def get_num_of_rows(self, schema: str, table: str) -> int:
        """Count the rows of a table.

        Args:
            schema: Schema name
            table: Table name

        Returns:
            Non-negative row count.

        Raises:
            ContractViolation: If the count query does not return exactly
                one row holding one non-negative integer
        """

    @abstractmethod
    async def get_constraints(self, schema: str, table: str) -> List[Constraint]:
        """List primary key, unique and foreign key constraints of a table.

        Args:
            schema: Schema name
            table: Table name

        Returns:
            Constraints in catalog order.

        Raises:
            ContractViolation: If the engine reports an unsupported constraint code
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying session.

        Must be idempotent (safe to call multiple times, including after a
        failed operation).
        """


class DB(ABC):
    """Factory for connections to one database engine."""

    name: str

    @abstractmethod
    async def open_connection(self, coords: DBCoordinates) -> Connection:
        """Connect and authenticate.

        Args:
            coords: Host, port, database, username and password

        Returns:
            An open Connection

        Raises:
            ConnectivityError: If the connection or authentication fails
        """
