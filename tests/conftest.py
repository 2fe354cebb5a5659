"""Shared fixtures: every test gets its own SQLite file under tmp_path."""

import pytest

from app import create_app
from models import db
from repository import PostRepository


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / 'poultry.db')


@pytest.fixture
def app(db_path):
    app = create_app(db_path)
    app.config['TESTING'] = True
    yield app
    with app.app_context():
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repository(app):
    with app.app_context():
        yield PostRepository(db)
