"""Vendor-neutral catalog models shared by every database adapter."""
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class DBCoordinates(BaseModel):
    """Connection coordinates for a single database.

    Accepts both the canonical keys and the short ones used by
    ``coordinates.json`` files (``dbname``, ``user``/``username``, ``pwd``).
    """

    host: str
    port: int
    database: str = Field(validation_alias=AliasChoices("database", "dbname"))
    username: str = Field(validation_alias=AliasChoices("username", "user"))
    password: str = Field(validation_alias=AliasChoices("password", "pwd"), repr=False)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SchemaTableInfo(BaseModel):
    """A table discovered in the catalog, identified by schema and name."""

    schema_name: str = Field(alias="schema")
    table_name: str = Field(alias="table")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def normalize(self) -> "SchemaTableInfo":
        """Return a copy with schema and table names upper-cased.

        Engines disagree on identifier case, so callers normalize before
        using an entry as a lookup key.
        """
        return SchemaTableInfo(
            schema_name=self.schema_name.upper(),
            table_name=self.table_name.upper()
        )

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"


class TableColumnInfo(BaseModel):
    """Represents a table column; data_type is the engine's own type name."""

    name: str
    data_type: str
    is_nullable: bool

    model_config = ConfigDict(frozen=True)


class ConstraintType(str, Enum):
    """Constraint kinds understood by the catalog layer."""

    PRIMARY = "PRIMARY"
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN_KEY"


class Constraint(BaseModel):
    """A named table constraint."""

    name: str
    ctype: ConstraintType

    model_config = ConfigDict(frozen=True)
