import os
import sys
from datetime import datetime

import pytest

# Ensure the backend root (containing the `fantanome` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from fantanome import create_app, db


FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0)


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = []
    INVITE_CODE_MAX_ATTEMPTS = 12
    MIN_PREFERENCE_NAMES = 1
    CLOCK = staticmethod(lambda: FIXED_NOW)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import fantanome.models  # noqa: F401
        db.create_all()
    # No app context stays pushed while tests run: Flask-Login caches the
    # user on `g`, which would otherwise leak between test clients.
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_client(flask_app):
    """Factory for independent logged-in clients (one cookie jar per user)."""

    def _make(email, user_type='participant', first_name=None, last_name=None):
        c = flask_app.test_client()
        res = c.post('/api/register', json={
            'email': email,
            'password': 'password',
            'userType': user_type,
            'firstName': first_name,
            'lastName': last_name,
        })
        assert res.status_code == 201, res.get_json()
        c.user = res.get_json()['user']
        return c

    return _make


@pytest.fixture()
def set_clock(flask_app):
    def _set(now):
        flask_app.config['CLOCK'] = lambda: now
    return _set
