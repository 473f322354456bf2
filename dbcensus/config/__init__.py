"""Configuration management."""
from dbcensus.config.connection import (
    ConnectionConfigError,
    load_connection_config,
    load_coordinates,
    validate_connection_config,
)

__all__ = [
    'ConnectionConfigError',
    'load_connection_config',
    'load_coordinates',
    'validate_connection_config',
]
