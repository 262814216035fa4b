"""
Shared test fixtures.
Real app with an in-memory SQLite database, no network.
"""

import pytest

from backend.app import create_app
from backend.models import db, Script


@pytest.fixture
def app():
    """Testing app with fresh tables."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_script(app):
    """Insert a script row directly, bypassing the API."""
    def _make(name='script', content='print(1)', status='valid'):
        script = Script(name=name, content=content, status=status)
        db.session.add(script)
        db.session.commit()
        return script
    return _make
