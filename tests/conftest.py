import os
from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

from backend.auth.errors import DispatchFailure  # noqa: E402
from backend.auth.secret_issuer import SecretIssuer  # noqa: E402
from backend.auth.service import AuthService  # noqa: E402
from backend.auth.store import CredentialStore  # noqa: E402
from backend.core.clock import utcnow  # noqa: E402
from backend.database import Base  # noqa: E402
from backend.models.user import User  # noqa: E402

TEST_SECRET = 'test-signing-key-with-enough-length-for-hs256'
CLIENT_URL = 'http://localhost:5173'


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


class RecordingDispatcher:
    def __init__(self):
        self.sent = []
        self.fail = False

    def _record(self, kind, email, value=None):
        if self.fail:
            raise DispatchFailure()
        self.sent.append((kind, email, value))

    def send_verification(self, email, code):
        self._record('verification', email, code)

    def send_welcome(self, email, name):
        self._record('welcome', email, name)

    def send_password_reset(self, email, url):
        self._record('password_reset', email, url)

    def send_reset_success(self, email):
        self._record('reset_success', email)

    def last(self, kind):
        matches = [entry for entry in self.sent if entry[0] == kind]
        return matches[-1] if matches else None


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[User.__table__])

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine, tables=[User.__table__])


@pytest.fixture
def clock():
    return FakeClock(utcnow())


@pytest.fixture
def issuer(clock):
    return SecretIssuer(TEST_SECRET, clock=clock)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def store(db):
    return CredentialStore(db)


@pytest.fixture
def service(store, issuer, dispatcher):
    return AuthService(store, issuer, dispatcher, client_url=CLIENT_URL)
