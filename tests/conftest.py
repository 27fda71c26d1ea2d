import os
import pytest

from app import create_app
from history_store import HistoryStore


@pytest.fixture
def db_file(tmp_path) -> str:
    """
    Path to a fresh sqlite file under pytest's tmp dir.
    """
    return os.path.join(str(tmp_path), "bmi.db")


@pytest.fixture
def store(db_file: str) -> HistoryStore:
    history = HistoryStore(db_file)
    assert history.initialize()
    yield history
    history.close()


@pytest.fixture
def app(db_file: str):
    flask_app = create_app(db_file=db_file)
    flask_app.config["TESTING"] = True
    yield flask_app
    flask_app.extensions["history_store"].close()


@pytest.fixture
def client(app):
    return app.test_client()
