import pytest

import config
from db import dispose_db, get_session
from jobs import celery_app
from main import create_app
from tests.factories import ALL_FACTORIES


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Flask app on an in-memory database with a temporary upload dir."""
    monkeypatch.setattr(config, "DB_URL", "sqlite://")
    monkeypatch.setattr(config, "IMPORTS_DIR", tmp_path / "imports")
    monkeypatch.setattr(config, "IMPORT_SYNC_MAX_BYTES", 1024 * 1024)
    celery_app.conf.task_always_eager = True

    app = create_app()
    app.config["TESTING"] = True
    yield app
    dispose_db()


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def session(app):
    """Open session; factories persist through it."""
    s = get_session()
    for factory in ALL_FACTORIES:
        factory._meta.sqlalchemy_session = s
    yield s
    s.close()
