"""dbcensus - vendor-neutral catalog inspection for Oracle and PostgreSQL."""

__version__ = "0.1.0"
