"""Tests for connection configuration."""
import json
import os
from unittest.mock import patch

import pytest
import yaml

from dbcensus.config.connection import (
    ConnectionConfigError,
    load_connection_config,
    load_coordinates,
    validate_connection_config,
)
from dbcensus.models.schema import DBCoordinates


def test_load_from_explicit_file(tmp_path):
    """Test loading config from explicit file."""
    config_file = tmp_path / "oracle.yaml"
    config_data = {
        'host': 'ora.example.com',
        'user': 'scott',
        'password': 'tiger',
        'database': 'ORCL'
    }
    config_file.write_text(yaml.dump(config_data))

    config = load_connection_config('oracle', str(config_file))

    assert config['host'] == 'ora.example.com'
    assert config['user'] == 'scott'


def test_load_coordinates_json_file(tmp_path):
    """Test loading a coordinates.json file."""
    config_file = tmp_path / "coordinates.json"
    config_file.write_text(json.dumps({
        'host': 'ora.example.com',
        'port': 1521,
        'dbname': 'GAEE',
        'username': 'scott',
        'pwd': 'tiger'
    }))

    coords = load_coordinates('oracle', str(config_file))

    assert coords == DBCoordinates(
        host='ora.example.com',
        port=1521,
        database='GAEE',
        username='scott',
        password='tiger'
    )


def test_load_from_default_path(tmp_path):
    """Test loading config from default ~/.dbcensus path."""
    with patch('pathlib.Path.home', return_value=tmp_path):
        config_dir = tmp_path / '.dbcensus'
        config_dir.mkdir()
        config_file = config_dir / 'postgres.yaml'
        config_file.write_text(yaml.dump({
            'host': 'pg.example.com',
            'user': 'app',
            'password': 'secret',
            'database': 'appdb'
        }))

        config = load_connection_config('postgres')

        assert config['host'] == 'pg.example.com'


def test_load_from_environment_variables(tmp_path):
    """Test loading config from environment variables."""
    with patch.dict(os.environ, {
        'POSTGRES_HOST': 'env-host',
        'POSTGRES_USER': 'env-user',
        'POSTGRES_PASSWORD': 'env-password',
        'POSTGRES_DATABASE': 'env-db'
    }):
        with patch('pathlib.Path.home', return_value=tmp_path):
            coords = load_coordinates('postgres')

    assert coords.host == 'env-host'
    assert coords.username == 'env-user'
    assert coords.port == 5432


def test_load_explicit_overrides_default(tmp_path):
    """Test that explicit file overrides default path."""
    explicit_file = tmp_path / "explicit.yaml"
    explicit_file.write_text(yaml.dump({'host': 'explicit-host'}))

    default_path = tmp_path / '.dbcensus' / 'oracle.yaml'
    default_path.parent.mkdir(parents=True)
    default_path.write_text(yaml.dump({'host': 'default-host'}))

    with patch('pathlib.Path.home', return_value=tmp_path):
        config = load_connection_config('oracle', str(explicit_file))

    assert config['host'] == 'explicit-host'


def test_load_nonexistent_file():
    """Test error when config file doesn't exist."""
    with pytest.raises(ConnectionConfigError, match="not found"):
        load_connection_config('oracle', '/nonexistent/path.yaml')


def test_load_invalid_yaml(tmp_path):
    """Test error with invalid YAML file."""
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("{ invalid yaml [")

    with pytest.raises(ConnectionConfigError, match="Invalid YAML"):
        load_connection_config('oracle', str(config_file))


def test_load_yaml_not_dict(tmp_path):
    """Test error when YAML is not a dictionary."""
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- item1\n- item2")

    with pytest.raises(ConnectionConfigError, match="dictionary"):
        load_connection_config('oracle', str(config_file))


@pytest.mark.parametrize("database, port", [('oracle', 1521), ('postgres', 5432)])
def test_get_defaults(tmp_path, database, port):
    """Test default config per database."""
    with patch.dict(os.environ, {}, clear=True):
        with patch('pathlib.Path.home', return_value=tmp_path):
            config = load_connection_config(database)

    assert config['host'] == 'localhost'
    assert config['port'] == port


def test_validate_config():
    """Test validation of a complete config."""
    config = {
        'host': 'localhost',
        'user': 'user',
        'password': 'pass',
        'database': 'mydb'
    }

    assert validate_connection_config('postgres', config) is True


def test_validate_accepts_short_keys():
    """Test validation of coordinates.json style keys."""
    config = {
        'host': 'localhost',
        'username': 'user',
        'pwd': 'pass',
        'dbname': 'ORCL'
    }

    assert validate_connection_config('oracle', config) is True


def test_validate_missing_required_field():
    """Test validation fails with missing required field."""
    config = {
        'host': 'localhost',
        'user': 'user',
        'database': 'mydb'
    }

    with pytest.raises(ConnectionConfigError, match="Missing required.*password"):
        validate_connection_config('postgres', config)


def test_validate_empty_field():
    """Test validation with empty string field."""
    config = {
        'host': '',
        'user': 'user',
        'password': 'pass',
        'database': 'mydb'
    }

    with pytest.raises(ConnectionConfigError, match="Missing required.*host"):
        validate_connection_config('oracle', config)


def test_load_coordinates_from_defaults_fails(tmp_path):
    """Test that defaults alone do not make usable coordinates."""
    with patch.dict(os.environ, {}, clear=True):
        with patch('pathlib.Path.home', return_value=tmp_path):
            with pytest.raises(ConnectionConfigError, match="Missing required"):
                load_coordinates('oracle')


def test_load_coordinates_bad_port(tmp_path):
    """Test that a malformed port is reported as a config error."""
    config_file = tmp_path / "oracle.yaml"
    config_file.write_text(yaml.dump({
        'host': 'h', 'port': 'abc', 'user': 'u', 'password': 'p', 'database': 'd'
    }))

    with pytest.raises(ConnectionConfigError, match="Invalid connection parameters"):
        load_coordinates('oracle', str(config_file))
