"""
Pytest configuration and fixtures for EduNex tests.

The Supabase client is replaced by an in-memory fake covering the calls
the application makes: ``auth.get_session``, ``auth.on_auth_state_change``,
``auth.sign_in_with_password``, ``auth.sign_up``, ``auth.sign_out`` and
``table(...).select/eq/maybe_single/upsert/execute``.
"""

import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, Callable, Optional

# Keep test runs from writing edunex.log into the working tree.
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "edunex-tests.log"))

import pytest  # noqa: E402

from edunex.auth import SessionManager  # noqa: E402
from edunex.database import DatabaseManager  # noqa: E402
from edunex.logger import StructuredLogger  # noqa: E402
from edunex.models.auth_models import Notification, SessionSnapshot  # noqa: E402
from edunex.repositories.profile_repository import ProfileRepository  # noqa: E402
from edunex.services.auth_service import AuthService  # noqa: E402
from edunex.services.notifications import NotificationCenter  # noqa: E402
from edunex.services.profile_provisioning import ProfileProvisioningService  # noqa: E402


# ---------------------------------------------------------------------------
# Fake Supabase: auth
# ---------------------------------------------------------------------------

class FakeAuthApiError(Exception):
    """Shaped like the provider's API errors: a message plus a ``code``."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


class FakeAuthUser:
    def __init__(self, id: str, email: str, user_metadata: Optional[dict] = None) -> None:
        self.id = id
        self.email = email
        self.user_metadata = user_metadata or {}


class FakeSession:
    def __init__(self, user: FakeAuthUser) -> None:
        self.user = user
        self.access_token = f"token-{user.id}"


class FakeAuthResponse:
    def __init__(self, user: Optional[FakeAuthUser], session: Optional[FakeSession]) -> None:
        self.user = user
        self.session = session


class FakeSubscription:
    def __init__(self, owner: "FakeAuth", callback: Callable) -> None:
        self._owner = owner
        self.callback = callback
        self.unsubscribe_calls = 0

    @property
    def active(self) -> bool:
        return self.unsubscribe_calls == 0

    def unsubscribe(self) -> None:
        self.unsubscribe_calls += 1


class FakeAuth:
    """In-memory identity provider."""

    def __init__(self) -> None:
        self.session: Optional[FakeSession] = None
        self.accounts: dict[str, tuple[str, FakeAuthUser]] = {}
        self.subscriptions: list[FakeSubscription] = []
        self.calls: list[str] = []

        self.get_session_error: Optional[BaseException] = None
        self.sign_in_error: Optional[BaseException] = None
        self.sign_up_error: Optional[BaseException] = None
        self.sign_out_error: Optional[BaseException] = None
        self.sign_up_returns_user: bool = True
        self.block_get_session: Optional[threading.Event] = None

    # -- helpers -----------------------------------------------------------

    def add_account(self, email: str, password: str = "secret123", name: Optional[str] = None) -> FakeAuthUser:
        metadata = {"name": name} if name else {}
        user = FakeAuthUser(id=str(uuid.uuid4()), email=email, user_metadata=metadata)
        self.accounts[email] = (password, user)
        return user

    def restore(self, user: FakeAuthUser) -> FakeSession:
        """Pretend a session was persisted by a previous run."""
        self.session = FakeSession(user)
        return self.session

    def emit(self, event: str, session: Optional[FakeSession]) -> None:
        for sub in list(self.subscriptions):
            if sub.active:
                sub.callback(event, session)

    def emit_to_all(self, event: str, session: Optional[FakeSession]) -> None:
        """Deliver even to cancelled subscriptions (a late callback)."""
        for sub in list(self.subscriptions):
            sub.callback(event, session)

    # -- client surface ----------------------------------------------------

    def on_auth_state_change(self, callback: Callable) -> FakeSubscription:
        self.calls.append("on_auth_state_change")
        sub = FakeSubscription(self, callback)
        self.subscriptions.append(sub)
        return sub

    def get_session(self) -> Optional[FakeSession]:
        self.calls.append("get_session")
        if self.block_get_session is not None:
            self.block_get_session.wait(timeout=5)
        if self.get_session_error is not None:
            raise self.get_session_error
        return self.session

    def sign_in_with_password(self, credentials: dict) -> FakeAuthResponse:
        self.calls.append("sign_in_with_password")
        if self.sign_in_error is not None:
            raise self.sign_in_error
        account = self.accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise FakeAuthApiError("Invalid login credentials", code="invalid_credentials")
        self.session = FakeSession(account[1])
        self.emit("SIGNED_IN", self.session)
        return FakeAuthResponse(account[1], self.session)

    def sign_up(self, payload: dict) -> FakeAuthResponse:
        self.calls.append("sign_up")
        self.last_sign_up = payload
        if self.sign_up_error is not None:
            raise self.sign_up_error
        if payload["email"] in self.accounts:
            raise FakeAuthApiError("User already registered", code="user_already_exists")
        if not self.sign_up_returns_user:
            return FakeAuthResponse(None, None)
        user = FakeAuthUser(
            id=str(uuid.uuid4()),
            email=payload["email"],
            user_metadata=dict(payload.get("options", {}).get("data", {})),
        )
        self.accounts[payload["email"]] = (payload["password"], user)
        return FakeAuthResponse(user, None)

    def sign_out(self) -> None:
        self.calls.append("sign_out")
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.session = None
        self.emit("SIGNED_OUT", None)


# ---------------------------------------------------------------------------
# Fake Supabase: PostgREST
# ---------------------------------------------------------------------------

class FakeResponse:
    def __init__(self, data: Any) -> None:
        self.data = data


class FakeTable:
    """Rows of one table keyed by ``id``, with failure injection."""

    def __init__(self) -> None:
        self.rows: dict[str, dict] = {}
        self.selects: list[str] = []
        self.upserts: list[dict] = []
        self.select_error: Optional[BaseException] = None
        self.upsert_error: Optional[BaseException] = None
        self.drop_writes: bool = False
        self.before_upsert: Optional[Callable[[dict], None]] = None
        # Set ``select_started`` when a select begins, then wait for ``release_select``.
        self.select_started: Optional[threading.Event] = None
        self.release_select: Optional[threading.Event] = None


class FakeQuery:
    def __init__(self, table: FakeTable) -> None:
        self._table = table
        self._op: Optional[str] = None
        self._filters: dict[str, Any] = {}
        self._payload: Optional[dict] = None
        self._ignore_duplicates = False

    def select(self, *columns: str) -> "FakeQuery":
        self._op = "select"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters[column] = value
        return self

    def maybe_single(self) -> "FakeQuery":
        return self

    def upsert(self, payload: dict, on_conflict: str = "", ignore_duplicates: bool = False) -> "FakeQuery":
        self._op = "upsert"
        self._payload = payload
        self._ignore_duplicates = ignore_duplicates
        return self

    def execute(self) -> Optional[FakeResponse]:
        table = self._table
        if self._op == "select":
            user_id = self._filters.get("id")
            table.selects.append(user_id)
            if table.select_started is not None:
                table.select_started.set()
            if table.release_select is not None:
                table.release_select.wait(timeout=5)
            if table.select_error is not None:
                raise table.select_error
            row = table.rows.get(user_id)
            return FakeResponse(dict(row)) if row is not None else None

        payload = dict(self._payload or {})
        table.upserts.append(payload)
        if table.before_upsert is not None:
            table.before_upsert(payload)
        if table.upsert_error is not None:
            raise table.upsert_error
        if table.drop_writes:
            return FakeResponse([])
        if payload["id"] in table.rows and self._ignore_duplicates:
            return FakeResponse([])
        table.rows[payload["id"]] = payload
        return FakeResponse([dict(payload)])


class FakeSupabaseClient:
    def __init__(self) -> None:
        self.auth = FakeAuth()
        self.tables: dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, FakeTable()))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def inline_dispatch(task: Callable[[], None]) -> None:
    task()


@pytest.fixture(scope="session")
def logger(tmp_path_factory) -> StructuredLogger:
    log_file = tmp_path_factory.mktemp("logs") / "tests.log"
    return StructuredLogger(name="tests", log_file=str(log_file))


@pytest.fixture
def client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def fake_auth(client: FakeSupabaseClient) -> FakeAuth:
    return client.auth


@pytest.fixture
def users_table(client: FakeSupabaseClient) -> FakeTable:
    return client.tables.setdefault("users", FakeTable())


@pytest.fixture
def db(client: FakeSupabaseClient, logger: StructuredLogger) -> DatabaseManager:
    return DatabaseManager.from_client(client, logger)


@pytest.fixture
def session() -> SessionManager:
    return SessionManager()


@pytest.fixture
def snapshots(session: SessionManager) -> list[SessionSnapshot]:
    """Every snapshot the session publishes, starting with the initial one."""
    recorded = [session.snapshot()]
    session.subscribe(recorded.append)
    return recorded


@pytest.fixture
def notifications(logger: StructuredLogger) -> NotificationCenter:
    return NotificationCenter(logger)


@pytest.fixture
def notified(notifications: NotificationCenter) -> list[Notification]:
    received: list[Notification] = []
    notifications.subscribe(received.append)
    return received


@pytest.fixture
def profile_repo(db: DatabaseManager, logger: StructuredLogger) -> ProfileRepository:
    return ProfileRepository(db=db, logger=logger)


@pytest.fixture
def provisioning(profile_repo: ProfileRepository, logger: StructuredLogger) -> ProfileProvisioningService:
    return ProfileProvisioningService(repo=profile_repo, logger=logger)


@pytest.fixture
def make_auth_service(db, session, provisioning, notifications, logger):
    """Factory so tests can pick the timeout; every service is closed afterwards."""
    created: list[AuthService] = []

    def _make(call_timeout_s: float = 2.0) -> AuthService:
        service = AuthService(
            db=db,
            session=session,
            provisioning=provisioning,
            notifications=notifications,
            logger=logger,
            call_timeout_s=call_timeout_s,
            max_workers=4,
            dispatch=inline_dispatch,
        )
        created.append(service)
        return service

    yield _make
    for service in created:
        service.close()


@pytest.fixture
def auth_service(make_auth_service) -> AuthService:
    return make_auth_service()
