import os
import tempfile

# Settings are read at import time; point them at throwaway storage first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault(
    "PREFERENCES_PATH", os.path.join(tempfile.mkdtemp(prefix="realty_crm_"), "prefs.json")
)

import pytest
from fastapi.testclient import TestClient

from realty_crm.db.database import build_engine, build_session_factory, init_db
from realty_crm.services.commands import CommandHandlers
from realty_crm.services.data_service import DataService
from realty_crm.services.preferences import PreferenceStore
from realty_crm.services.view_state import ViewStateStore


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def data_service(session_factory):
    return DataService(session_factory)


@pytest.fixture
def view_state(data_service):
    store = ViewStateStore(data_service)
    store.start()
    yield store
    store.stop()


@pytest.fixture
def commands(data_service, view_state):
    return CommandHandlers(data_service, view_state)


@pytest.fixture
def preference_store(tmp_path):
    return PreferenceStore(tmp_path / "prefs.json")


@pytest.fixture
def client(session_factory, tmp_path):
    from realty_crm.main import create_app

    app = create_app(session_factory=session_factory, preference_path=str(tmp_path / "prefs.json"))
    with TestClient(app) as c:
        yield c
    app.state.view_state.stop()
