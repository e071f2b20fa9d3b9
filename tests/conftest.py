import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.db.session import Base, make_engine, make_session_factory, get_db
from app.models.ticket import Ticket  # noqa: F401
from app.models.rescuer import Rescuer  # noqa: F401
from app.models.message import Message  # noqa: F401
from app.api.deps import get_blob_store
from app.services.blob_store import LocalBlobStore
from app.services.dispatch_service import DispatchManager


@pytest.fixture
def engine():
    # one shared in-memory database per test
    eng = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def blobs(tmp_path):
    return LocalBlobStore(str(tmp_path / "blobs"))


@pytest.fixture
def dispatch(db, blobs):
    return DispatchManager(db, blobs)


@pytest.fixture
def client(session_factory, blobs):
    from app.main import app

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_blob_store] = lambda: blobs
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
