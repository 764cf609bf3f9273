import os
import re
import sys
import httpx
import pytest

# Ensure the backend root (containing the `lasertag` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from lasertag import create_app, db, game_status
from lasertag.client import LaserTagClient


class TestConfig:
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = [
        'http://localhost:5173',
        'http://localhost:3000',
        re.compile(r'^https://.*\.vercel\.app$'),
    ]
    STRICT_GAME_CONTROL = False
    STRICT_MATCH_LIFECYCLE = False
    LOG_LEVEL = 'DEBUG'
    LOG_REQUESTS = False


class StrictConfig(TestConfig):
    STRICT_GAME_CONTROL = True
    STRICT_MATCH_LIFECYCLE = True


def _build_app(config_class):
    application = create_app(config_class)
    with application.app_context():
        # Ensure models are imported so tables are created
        import lasertag.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def flask_app():
    yield from _build_app(TestConfig)


@pytest.fixture()
def strict_app():
    yield from _build_app(StrictConfig)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def strict_client(strict_app):
    return strict_app.test_client()


@pytest.fixture()
def controller(flask_app):
    return game_status.controller


@pytest.fixture()
def api_client(flask_app):
    transport = httpx.WSGITransport(app=flask_app)
    with LaserTagClient(base_url='http://testserver', transport=transport) as c:
        yield c
