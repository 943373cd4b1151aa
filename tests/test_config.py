"""Tests for configuration loading."""

import json

import pytest

from config import Config, ServiceConfig
from monitoring.exceptions import ConfigurationError


def test_defaults():
    config = Config()

    assert config.server.port == 5082
    assert config.service.timezone == 'UTC'
    assert config.caldav.product_id == '-//Tasklist CalDAV Server//tasklist_caldav//EN'
    assert config.storage.data_file is None


def test_from_env(monkeypatch):
    monkeypatch.setenv('SERVER_PORT', '8080')
    monkeypatch.setenv('SERVER_DEBUG', 'true')
    monkeypatch.setenv('SERVICE_TIMEZONE', 'Europe/Berlin')
    monkeypatch.setenv('STORAGE_DATA_FILE', '/tmp/seed.json')
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    config = Config.from_env()

    assert config.server.port == 8080
    assert config.server.debug is True
    assert str(config.service.get_time_zone()) == 'Europe/Berlin'
    assert config.storage.data_file == '/tmp/seed.json'
    assert config.logging.level == 'DEBUG'


def test_from_file(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({
        'caldav': {'realm': 'Tasks'},
        'service': {'timezone': 'America/New_York'},
        'logging': {'level': 'warning'},
    }))

    config = Config.from_file(str(path))

    assert config.caldav.realm == 'Tasks'
    assert config.service.timezone == 'America/New_York'
    assert config.logging.level == 'WARNING'
    assert config.server.port == 5082


def test_from_file_round_trips_to_dict(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps(Config().to_dict()))

    assert Config.from_file(str(path)).to_dict() == Config().to_dict()


def test_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.from_file(str(tmp_path / 'nope.json'))


def test_from_invalid_file(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text('{not json')

    with pytest.raises(ValueError):
        Config.from_file(str(path))


def test_unknown_time_zone():
    with pytest.raises(ConfigurationError):
        Config(service=ServiceConfig(timezone='Mars/Olympus_Mons'))
