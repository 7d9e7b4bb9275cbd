import os

# Must be set before the application modules build their engine and settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["EMAIL_USER"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""

from types import SimpleNamespace

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from hobby_planner.core.config import Settings, get_settings
from hobby_planner.core.redis_config import get_redis_client
from hobby_planner.database.db import Base, get_db, make_engine
from hobby_planner.main import app
from hobby_planner.models.attendees import Attendee
from hobby_planner.models.sessions import HobbySession
from hobby_planner.services.notifications import Mailer, get_mailer
from hobby_planner.services.suggestions import SuggestionClient, get_suggestion_client


@pytest.fixture(scope="session")
def engine(tmp_path_factory):
    # A file database so concurrent requests each get their own connection
    db_path = tmp_path_factory.mktemp("data") / "hobby_planner_test.db"
    engine = make_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest.fixture(scope="session")
def testing_session_local(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database(engine):
    """Give every test empty tables."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(testing_session_local) -> Session:
    db: Session = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


class RecordingMailer(Mailer):
    """Mailer that keeps messages in memory instead of talking SMTP."""

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.outbox: list[dict] = []
        self.fail = False

    def send(self, to, subject, text_body, html_body=None, sender=None) -> bool:
        if self.fail:
            return False
        self.outbox.append(
            {"to": to, "subject": subject, "text": text_body, "html": html_body}
        )
        return True


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer(Settings(FRONTEND_URL="http://frontend.test"))


class StubMessages:
    def __init__(self):
        self.calls: list[dict] = []
        self.reply = "Board game evening at the park, bring snacks!"
        self.error: Exception | None = None

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.reply)])


class StubAnthropic:
    def __init__(self):
        self.messages = StubMessages()


@pytest.fixture
def anthropic_stub() -> StubAnthropic:
    return StubAnthropic()


@pytest.fixture
def app_settings() -> Settings:
    return Settings(ATTENDEE_EMAIL_REQUIRED=True)


@pytest.fixture
def client(testing_session_local, fake_redis, mailer, anthropic_stub, app_settings):
    def override_get_db():
        db: Session = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = lambda: fake_redis
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_suggestion_client] = lambda: SuggestionClient(
        app_settings, client=anthropic_stub
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_session(db_session: Session):
    """Insert a session row directly and return it."""

    def _make(
        title: str = "Chess Night",
        max_participants: int = 5,
        management_code: str = "manage-me",
        reserved_seats: int = 0,
        email: str | None = None,
    ) -> HobbySession:
        hobby_session = HobbySession(
            title=title,
            description="Bring a board",
            date="2026-11-01",
            time="19:00",
            max_participants=max_participants,
            type="games",
            management_code=management_code,
            reserved_seats=reserved_seats,
            email=email,
        )
        db_session.add(hobby_session)
        db_session.commit()
        db_session.refresh(hobby_session)
        return hobby_session

    return _make


@pytest.fixture
def make_attendee(db_session: Session):
    def _make(hobby_session: HobbySession, name: str = "Ada Lovelace", code: str = "att-code") -> Attendee:
        attendee = Attendee(
            session_id=hobby_session.id,
            name=name,
            email="ada@example.com",
            attendance_code=code,
        )
        db_session.add(attendee)
        hobby_session.reserved_seats += 1
        db_session.commit()
        db_session.refresh(attendee)
        return attendee

    return _make
