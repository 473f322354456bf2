"""Connection coordinates management."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from dbcensus.models.schema import DBCoordinates

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    'oracle': 1521,
    'postgres': 5432,
}

# Each required coordinate and the keys it may be given under
REQUIRED_FIELDS = {
    'host': ('host',),
    'user': ('user', 'username'),
    'password': ('password', 'pwd'),
    'database': ('database', 'dbname'),
}


class ConnectionConfigError(ValueError):
    """Raised when connection configuration loading fails."""


def load_connection_config(
    database: str,
    conn_file: Optional[str] = None
) -> Dict[str, Any]:
    """Load database connection configuration.

    Loads configuration with the following priority:
    1. Explicit --conn-file path (highest priority)
    2. ~/.dbcensus/{database}.yaml
    3. Environment variables ({DATABASE}_HOST, {DATABASE}_USER, ...)
    4. Defaults (host and port only)

    JSON is valid YAML, so ``coordinates.json`` files load unchanged.

    Args:
        database: Database type (oracle, postgres)
        conn_file: Optional explicit connection file path

    Returns:
        Dictionary with connection configuration

    Raises:
        ConnectionConfigError: If configuration file is invalid
    """
    if conn_file:
        config = _load_yaml_config(conn_file)
        logger.info("Loaded connection config from: %s", conn_file)
        return config

    default_path = Path.home() / '.dbcensus' / f'{database.lower()}.yaml'
    if default_path.exists():
        config = _load_yaml_config(str(default_path))
        logger.info("Loaded connection config from: %s", default_path)
        return config

    env_config = _load_from_env(database)
    if env_config:
        logger.info("Loaded connection config from environment variables")
        return env_config

    # Credentials are missing here; validation will report them
    logger.warning("No connection config found for %s. Using defaults.", database)
    return _get_defaults(database)


def _load_yaml_config(file_path: str) -> Dict[str, Any]:
    """Load YAML configuration file.

    Raises:
        ConnectionConfigError: If file is invalid or missing
    """
    try:
        if not os.path.exists(file_path):
            raise ConnectionConfigError(f"Configuration file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict):
            raise ConnectionConfigError(
                f"Configuration file must contain a YAML dictionary: {file_path}"
            )

        return config

    except yaml.YAMLError as e:
        raise ConnectionConfigError(
            f"Invalid YAML configuration: {file_path}\n{e}"
        ) from e
    except OSError as e:
        raise ConnectionConfigError(
            f"Error reading configuration file: {file_path}\n{e}"
        ) from e


def _load_from_env(database: str) -> Optional[Dict[str, Any]]:
    """Load configuration from environment variables such as ORACLE_HOST."""
    prefix = database.upper()
    config = {}

    for param in ['HOST', 'PORT', 'DATABASE', 'USER', 'PASSWORD']:
        value = os.getenv(f"{prefix}_{param}")
        if value:
            config[param.lower()] = value

    if config:
        config.setdefault('port', DEFAULT_PORTS.get(database.lower()))
    return config if config else None


def _get_defaults(database: str) -> Dict[str, Any]:
    """Get default configuration for a database type."""
    port = DEFAULT_PORTS.get(database.lower())
    if port is None:
        return {}
    return {
        'host': 'localhost',
        'port': port,
        'user': '',
        'password': '',
        'database': ''
    }


def validate_connection_config(
    database: str,
    config: Dict[str, Any]
) -> bool:
    """Validate that required connection parameters are present.

    Args:
        database: Database type
        config: Configuration dictionary

    Returns:
        True if configuration has required parameters

    Raises:
        ConnectionConfigError: If required parameters are missing
    """
    missing_fields = [
        field for field, keys in REQUIRED_FIELDS.items()
        if not any(config.get(key) for key in keys)
    ]

    if missing_fields:
        raise ConnectionConfigError(
            f"Missing required connection parameters for {database}: "
            f"{', '.join(missing_fields)}. "
            f"Provide via --conn-file or ~/.dbcensus/{database.lower()}.yaml"
        )

    return True


def load_coordinates(database: str, conn_file: Optional[str] = None) -> DBCoordinates:
    """Load, validate and build connection coordinates.

    Raises:
        ConnectionConfigError: If the configuration is missing, incomplete or malformed
    """
    config = load_connection_config(database, conn_file)
    validate_connection_config(database, config)

    if not config.get('port'):
        config = {**config, 'port': DEFAULT_PORTS.get(database.lower())}

    try:
        return DBCoordinates.model_validate(config)
    except ValidationError as e:
        raise ConnectionConfigError(
            f"Invalid connection parameters for {database}:\n{e}"
        ) from e
