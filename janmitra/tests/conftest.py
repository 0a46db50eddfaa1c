import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("IMAGE_DIR", tempfile.mkdtemp(prefix="janmitra-uploads-"))

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError
from sqlalchemy import event
from janmitra.main import app
from janmitra.config import Settings
from janmitra.database import create_session_factory
from janmitra.dependencies import get_db
from janmitra.storage import PhotoStorage
from janmitra.domain.model_base import Base
from janmitra.domain.user.models import User
from janmitra.domain.session.service import SessionLedger
from janmitra.tests.utils import create_test_user, TEST_PASSWORD
from typing import Callable, Generator
import pytest

engine = app.state.engine

TestingSessionLocal = create_session_factory(engine)


@pytest.fixture
def settings() -> Settings:
    return app.state.settings

@pytest.fixture
def storage(tmp_path) -> PhotoStorage:
    return PhotoStorage(str(tmp_path / "uploads"))

@pytest.fixture
def session() -> Generator[Session, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def ledger(session: Session, settings: Settings) -> SessionLedger:
    return SessionLedger(session, settings)

@pytest.fixture
def client(session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

@pytest.fixture
def create_user(session: Session) -> User:
    return create_test_user(session, username='admin', role='admin')

@pytest.fixture
def create_citizen(session: Session) -> User:
    return create_test_user(session, username='citizen', role='citizen')

@pytest.fixture
def create_token(create_user: User, ledger: SessionLedger) -> str:
    return ledger.issue(create_user).token

@pytest.fixture
def authorized_client(client: TestClient, create_token: str) -> TestClient:
    client.headers['Authorization'] = f'Bearer {create_token}'

    return client

@pytest.fixture
def citizen_client(client: TestClient, create_citizen: User, ledger: SessionLedger) -> TestClient:
    client.headers['Authorization'] = f'Bearer {ledger.issue(create_citizen).token}'

    return client

@pytest.fixture
def password() -> str:
    return TEST_PASSWORD

@pytest.fixture
def break_history_writes(session: Session) -> Generator[Callable[[], None], None, None]:
    """
    Returns a switch that makes every later INSERT into issue_updates fail
    like a lost disk. The listener is removed when the test ends.
    """

    def fail_insert(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith('INSERT INTO ISSUE_UPDATES'):
            raise OperationalError(statement, parameters, Exception('disk I/O error'))

    def arm() -> None:
        event.listen(engine, 'before_cursor_execute', fail_insert)

    try:
        yield arm
    finally:
        if event.contains(engine, 'before_cursor_execute', fail_insert):
            event.remove(engine, 'before_cursor_execute', fail_insert)
