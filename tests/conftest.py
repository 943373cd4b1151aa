"""Pytest configuration and fixtures for Tasklist CalDAV tests."""

import base64
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from werkzeug.security import generate_password_hash

from config import Config, ServiceConfig
from infrastructure import InMemoryRepository
from presentation import create_app

PASSWORD = '1234'


@pytest.fixture
def utc():
    return ZoneInfo('UTC')


@pytest.fixture
def berlin():
    return ZoneInfo('Europe/Berlin')


@pytest.fixture
def unix(utc):
    """Turn unix seconds into an aware datetime, like the stored timestamps."""
    def _unix(seconds, tz=utc):
        return datetime.fromtimestamp(seconds, tz=tz)
    return _unix


def _seed_data():
    password_hash = generate_password_hash(PASSWORD, method='pbkdf2:sha256:1000')
    return {
        'users': [
            {'id': 1, 'username': 'user1', 'password_hash': password_hash},
            {'id': 2, 'username': 'user2', 'password_hash': password_hash},
            {'id': 3, 'username': 'user3', 'password_hash': password_hash},
        ],
        'namespaces': [
            {'id': 1, 'title': 'Personal', 'owner_id': 1},
            {'id': 2, 'title': 'Shared', 'owner_id': 2},
        ],
        'projects': [
            {'id': 1, 'title': 'List title', 'namespace_id': 1, 'owner_id': 1},
            {'id': 2, 'title': 'In my namespace', 'namespace_id': 1, 'owner_id': 2},
            {'id': 3, 'title': 'Shared with team one', 'namespace_id': 2, 'owner_id': 2},
            {'id': 4, 'title': 'Not mine', 'namespace_id': 2, 'owner_id': 3},
        ],
        'tasks': [
            {
                'id': 1,
                'uid': 'uid-1',
                'title': 'Existing task',
                'description': 'Already stored',
                'project_id': 1,
                'priority': 2,
                'created': 1543626721,
                'updated': 1543626725,
                'labels': [{'id': 1, 'title': 'home'}],
                'comments': [{'id': 1, 'author_id': 1, 'comment': 'first!'}],
            },
        ],
        'teams': [
            {'id': 1, 'name': 'team one', 'members': [{'user_id': 1, 'admin': True}]},
            {'id': 2, 'name': 'team two', 'members': [{'user_id': 2}, {'user_id': 3}]},
        ],
        'team_lists': [
            {'team_id': 1, 'list_id': 3, 'right': 0},
            {'team_id': 2, 'list_id': 1, 'right': 1},
        ],
    }


@pytest.fixture
def seed_data():
    return _seed_data()


@pytest.fixture
def repository(seed_data):
    repo = InMemoryRepository()
    repo.load(seed_data)
    return repo


@pytest.fixture
def app_config():
    return Config(service=ServiceConfig(timezone='UTC'))


@pytest.fixture
def app(app_config, repository):
    app = create_app(app_config, repository=repository)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header():
    """Build a Basic auth header for one of the seeded users."""
    def _auth_header(username='user1', password=PASSWORD):
        token = base64.b64encode(f'{username}:{password}'.encode('utf-8')).decode('ascii')
        return {'Authorization': f'Basic {token}'}
    return _auth_header
