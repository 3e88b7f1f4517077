"""
Pytest fixtures and configuration for the portal tests
"""
import os
import sys
import pytest
from unittest.mock import MagicMock
from werkzeug.security import generate_password_hash

# Add app directory to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'app'))

ADMIN_PASSWORD = 'correct-horse-battery'
CSRF_TOKEN = 'test-csrf-token'
CSRF_HEADERS = {'X-CSRF-Token': CSRF_TOKEN}


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Settings file in a temp dir, with an admin password and reCAPTCHA secret"""
    import settings

    for var in ('DATABASE_URL', 'ADMIN_PASSWORD', 'RECAPTCHA_SECRET_KEY'):
        monkeypatch.delenv(var, raising=False)

    path = tmp_path / 'settings.yaml'
    monkeypatch.setattr(settings, 'CONFIG_FILE', str(path))
    settings.reload_conf()
    settings.save_section('auth', {'admin_password_hash': generate_password_hash(ADMIN_PASSWORD)})
    settings.save_section('recaptcha', {'secret_key': 'test-recaptcha-secret'})
    yield path
    settings._cached_settings = None


@pytest.fixture
def app(config_file):
    """Application bound to an in-memory SQLite database"""
    from app import create_app
    from db import db

    _app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SECRET_KEY': 'test-secret-key',
        'SECURE_COOKIES': False,
        'RATELIMIT_ENABLED': False,
    })

    with _app.app_context():
        yield _app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def session(app):
    from db import db
    return db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client carrying the auth cookie and a CSRF cookie"""
    client = app.test_client()
    client.set_cookie('admin_auth', 'true')
    client.set_cookie('csrf_token', CSRF_TOKEN)
    return client


@pytest.fixture
def make_game(session):
    """Insert a game directly, bypassing the API"""
    from models import Game

    def _make_game(title, slug=None, **kwargs):
        from slugs import slugify
        game = Game(title=title, slug=slug or slugify(title), **kwargs)
        session.add(game)
        session.commit()
        return game

    return _make_game


@pytest.fixture
def make_post(session):
    from models import BlogPost

    def _make_post(title, slug=None, **kwargs):
        from slugs import slugify
        post = BlogPost(title=title, slug=slug or slugify(title), **kwargs)
        session.add(post)
        session.commit()
        return post

    return _make_post


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing"""
    logger = MagicMock()
    logger.info = MagicMock()
    logger.error = MagicMock()
    logger.warning = MagicMock()
    logger.debug = MagicMock()
    return logger
