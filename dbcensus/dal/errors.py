"""Errors raised by the database abstraction layer."""


class DALError(Exception):
    """Base class for errors raised by the catalog adapters."""


class ConnectivityError(DALError):
    """Raised when a connection cannot be established or authenticated."""


class ContractViolation(DALError):
    """Raised when a backend returns a response shape the adapter does not understand.

    Examples are a missing result set, a row count query that does not return
    exactly one value, or a constraint/nullability code outside the known set.
    """


class ConnectionClosedError(DALError):
    """Raised when an operation is attempted on a closed connection."""
