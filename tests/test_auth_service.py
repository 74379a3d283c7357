"""
Tests for the session/profile lifecycle driven by AuthService.
"""

import threading

import httpx
import pytest

from edunex.models.auth_models import AuthErrorCode
from edunex.models.enums import AuthState, NotificationLevel, Role, ViewId
from edunex.services.auth_errors import (
    AuthError,
    CredentialsRejectedError,
    DomainRejectedError,
    ProfileCreateFailedError,
    ProviderUnavailableError,
)
from edunex.ui.view_router import ViewRouter, default_view_for

from .conftest import FakeAuthApiError, FakeSession


def _loading_drops(snapshots) -> int:
    """How many times ``loading`` went from True to False."""
    values = [snap.loading for snap in snapshots]
    return sum(1 for before, after in zip(values, values[1:]) if before and not after)


def _profile_row(user, role: str, name: str = "Existing Name") -> dict:
    return {"id": user.id, "email": user.email, "name": name, "role": role}


class TestStartup:
    """Session restore on launch."""

    def test_no_saved_session_settles_unauthenticated(self, auth_service, session, snapshots):
        """Without a stored session the manager ends in UNAUTHENTICATED."""
        auth_service.start()

        assert session.state == AuthState.UNAUTHENTICATED
        assert session.current_user is None
        assert session.loading is False
        assert _loading_drops(snapshots) == 1

    def test_subscribes_once_even_if_started_twice(self, auth_service, fake_auth):
        auth_service.start()
        auth_service.start()

        assert len(fake_auth.subscriptions) == 1
        assert fake_auth.calls.count("get_session") == 1

    def test_restored_session_with_existing_profile(
        self, auth_service, session, snapshots, fake_auth, users_table,
    ):
        """Existing session + stored profile: no insert, loading drops once."""
        user = fake_auth.add_account("asha@faculty.matrusri.edu.in")
        users_table.rows[user.id] = _profile_row(user, "faculty", name="Asha Rao")
        fake_auth.restore(user)

        auth_service.start()

        assert users_table.upserts == []
        assert session.state == AuthState.AUTHENTICATED
        assert session.current_user.name == "Asha Rao"
        assert session.current_user.role == Role.FACULTY
        assert [snap.state for snap in snapshots] == [
            AuthState.INITIALIZING,
            AuthState.RESOLVING_PROFILE,
            AuthState.AUTHENTICATED,
        ]
        assert _loading_drops(snapshots) == 1

    def test_missing_profile_is_created_with_derived_role(
        self, auth_service, session, fake_auth, users_table, notified,
    ):
        """Profile not found: exactly one insert, role from the session email."""
        user = fake_auth.add_account("ravi@warden.matrusri.edu.in")
        fake_auth.restore(user)

        auth_service.start()

        assert len(users_table.upserts) == 1
        assert users_table.upserts[0]["role"] == "warden"
        assert users_table.upserts[0]["name"] == "ravi"
        assert session.current_user.role == Role.WARDEN
        assert session.state == AuthState.AUTHENTICATED
        assert notified == []

    def test_created_profile_prefers_metadata_name(self, auth_service, session, fake_auth, users_table):
        user = fake_auth.add_account("k.lee@admin.matrusri.edu.in", name="Kim Lee")
        fake_auth.restore(user)

        auth_service.start()

        assert users_table.rows[user.id]["name"] == "Kim Lee"
        assert session.current_user.name == "Kim Lee"

    def test_profile_insert_failure_notifies_once(
        self, auth_service, session, snapshots, fake_auth, users_table, notified,
    ):
        """Insert failure: user stays null, loading false, one notification."""
        user = fake_auth.add_account("new@student.matrusri.edu.in")
        fake_auth.restore(user)
        users_table.upsert_error = FakeAuthApiError("permission denied for table users", code="42501")

        auth_service.start()

        assert len(users_table.upserts) == 1
        assert users_table.upserts[0]["role"] == "student"
        assert session.current_user is None
        assert session.loading is False
        assert session.state == AuthState.UNAUTHENTICATED
        assert len(notified) == 1
        assert notified[0].level == NotificationLevel.ERROR
        assert notified[0].message == "Failed to create user profile"
        assert _loading_drops(snapshots) == 1

    def test_profile_fetch_failure_notifies(self, auth_service, session, fake_auth, users_table, notified):
        user = fake_auth.add_account("x@matrusri.edu.in")
        fake_auth.restore(user)
        users_table.select_error = httpx.ConnectError("connection refused")

        auth_service.start()

        assert users_table.upserts == []
        assert session.state == AuthState.UNAUTHENTICATED
        assert [n.message for n in notified] == ["Failed to load user profile"]

    def test_get_session_transport_error_notifies(self, auth_service, session, fake_auth, notified):
        fake_auth.get_session_error = httpx.ConnectError("offline")

        auth_service.start()

        assert session.state == AuthState.UNAUTHENTICATED
        assert len(notified) == 1
        assert notified[0].message == ProviderUnavailableError.default_message

    def test_stored_profile_with_unknown_role_gets_dashboard_only(
        self, auth_service, session, fake_auth, users_table, notified,
    ):
        user = fake_auth.add_account("odd@matrusri.edu.in")
        users_table.rows[user.id] = _profile_row(user, "janitor")
        fake_auth.restore(user)

        auth_service.start()

        assert session.state == AuthState.AUTHENTICATED
        assert session.current_user.role == "janitor"
        assert notified == []

        router = ViewRouter()
        router.on_session_changed(session.snapshot())
        assert router.active_view == ViewId.DASHBOARD
        assert [e.id for e in router.navigation] == [ViewId.DASHBOARD]


class TestSignIn:
    """Credential sign-in."""

    def test_non_institutional_email_rejected_before_network(self, auth_service, fake_auth):
        with pytest.raises(DomainRejectedError) as exc_info:
            auth_service.sign_in("user@gmail.com", "whatever")

        assert exc_info.value.code == AuthErrorCode.DOMAIN_REJECTED
        assert fake_auth.calls == []

    def test_lookalike_domain_rejected(self, auth_service, fake_auth):
        with pytest.raises(DomainRejectedError):
            auth_service.sign_in("x@matrusri.edu.inx", "whatever")
        assert fake_auth.calls == []

    def test_success_authenticates_through_subscription(self, auth_service, session, fake_auth, users_table):
        user = fake_auth.add_account("meena@librarian.matrusri.edu.in", password="pw-123456")
        auth_service.start()
        assert session.state == AuthState.UNAUTHENTICATED

        auth_service.sign_in("meena@librarian.matrusri.edu.in", "pw-123456")

        assert session.state == AuthState.AUTHENTICATED
        assert session.current_user.id == user.id
        assert session.current_user.role == Role.LIBRARIAN
        assert len(users_table.upserts) == 1

    def test_wrong_password_rejected(self, auth_service, session, fake_auth):
        fake_auth.add_account("a@matrusri.edu.in", password="right-password")
        auth_service.start()

        with pytest.raises(CredentialsRejectedError) as exc_info:
            auth_service.sign_in("a@matrusri.edu.in", "wrong-password")

        assert exc_info.value.user_message == "Incorrect email or password."
        assert session.state == AuthState.UNAUTHENTICATED

    def test_unrecognised_provider_error_is_credentials_rejected(self, auth_service, fake_auth):
        fake_auth.sign_in_error = FakeAuthApiError("something odd happened")

        with pytest.raises(CredentialsRejectedError):
            auth_service.sign_in("a@matrusri.edu.in", "pw")

    def test_transport_failure_is_provider_unavailable(self, auth_service, fake_auth):
        fake_auth.sign_in_error = httpx.ConnectError("no route to host")

        with pytest.raises(ProviderUnavailableError):
            auth_service.sign_in("a@matrusri.edu.in", "pw")

    def test_unconfirmed_email_maps_to_its_own_code(self, auth_service, fake_auth):
        fake_auth.sign_in_error = FakeAuthApiError("Email not confirmed", code="email_not_confirmed")

        with pytest.raises(CredentialsRejectedError) as exc_info:
            auth_service.sign_in("a@matrusri.edu.in", "pw")

        assert exc_info.value.code == AuthErrorCode.EMAIL_NOT_CONFIRMED


class TestSignUp:
    """Account creation plus profile insert."""

    def test_new_student_gets_profile_and_fees_default(self, auth_service, fake_auth, users_table):
        profile = auth_service.sign_up("new.student@matrusri.edu.in", "pw-123456", "New Student")

        assert profile is not None
        assert profile.role == Role.STUDENT
        row = users_table.rows[profile.id]
        assert row["email"] == "new.student@matrusri.edu.in"
        assert row["role"] == "student"
        assert row["name"] == "New Student"
        assert default_view_for(profile.role) == ViewId.FEES

    def test_metadata_carries_name_and_role(self, auth_service, fake_auth):
        auth_service.sign_up("p.k@faculty.matrusri.edu.in", "pw-123456", "P K")

        assert fake_auth.last_sign_up["options"]["data"] == {"name": "P K", "role": "faculty"}

    def test_non_institutional_email_rejected_before_network(self, auth_service, fake_auth):
        with pytest.raises(DomainRejectedError):
            auth_service.sign_up("someone@gmail.com", "pw-123456", "Someone")
        assert fake_auth.calls == []

    def test_profile_insert_failure_propagates(self, auth_service, fake_auth, users_table):
        users_table.upsert_error = FakeAuthApiError("insert blocked by policy")

        with pytest.raises(ProfileCreateFailedError) as exc_info:
            auth_service.sign_up("s@student.matrusri.edu.in", "pw-123456", "S")

        assert exc_info.value.user_message == "Failed to create user profile"
        assert "s@student.matrusri.edu.in" in fake_auth.accounts

    def test_existing_account_reports_email_taken(self, auth_service, fake_auth):
        fake_auth.add_account("dup@matrusri.edu.in")

        with pytest.raises(AuthError) as exc_info:
            auth_service.sign_up("dup@matrusri.edu.in", "pw-123456", "Dup")

        assert exc_info.value.code == AuthErrorCode.EMAIL_ALREADY_EXISTS

    def test_no_user_returned_skips_profile(self, auth_service, fake_auth, users_table):
        fake_auth.sign_up_returns_user = False

        assert auth_service.sign_up("later@matrusri.edu.in", "pw-123456", "Later") is None
        assert users_table.upserts == []


class TestSignOutAndEvents:
    """Sign-out and provider auth-state events."""

    def _signed_in(self, auth_service, fake_auth):
        fake_auth.add_account("t@faculty.matrusri.edu.in", password="pw-123456")
        auth_service.start()
        auth_service.sign_in("t@faculty.matrusri.edu.in", "pw-123456")

    def test_sign_out_clears_session(self, auth_service, session, fake_auth):
        self._signed_in(auth_service, fake_auth)

        auth_service.sign_out()

        assert "sign_out" in fake_auth.calls
        assert session.state == AuthState.UNAUTHENTICATED
        assert session.current_user is None

    def test_sign_out_failure_propagates_and_keeps_user(self, auth_service, session, fake_auth):
        self._signed_in(auth_service, fake_auth)
        fake_auth.sign_out_error = FakeAuthApiError("session_not_found")

        with pytest.raises(AuthError):
            auth_service.sign_out()

        assert session.state == AuthState.AUTHENTICATED

    def test_sign_out_transport_failure(self, auth_service, fake_auth):
        self._signed_in(auth_service, fake_auth)
        fake_auth.sign_out_error = ConnectionError("reset by peer")

        with pytest.raises(ProviderUnavailableError):
            auth_service.sign_out()

    def test_same_identity_event_does_not_refetch(self, auth_service, session, fake_auth, users_table):
        self._signed_in(auth_service, fake_auth)
        selects_before = len(users_table.selects)

        fake_auth.emit("TOKEN_REFRESHED", fake_auth.session)

        assert len(users_table.selects) == selects_before
        assert session.state == AuthState.AUTHENTICATED

    def test_external_sign_out_event(self, auth_service, session, fake_auth):
        self._signed_in(auth_service, fake_auth)

        fake_auth.emit("SIGNED_OUT", None)

        assert session.state == AuthState.UNAUTHENTICATED

    def test_different_identity_replaces_user(self, auth_service, session, fake_auth):
        self._signed_in(auth_service, fake_auth)
        other = fake_auth.add_account("w@warden.matrusri.edu.in")

        fake_auth.emit("SIGNED_IN", FakeSession(other))

        assert session.current_user.id == other.id
        assert session.current_user.role == Role.WARDEN

    def test_sign_out_during_profile_lookup_wins(
        self, make_auth_service, session, fake_auth, users_table, notified,
    ):
        """A lookup still in flight when the session is cleared is discarded."""
        service = make_auth_service(call_timeout_s=5.0)
        user = fake_auth.add_account("a@faculty.matrusri.edu.in", name="A")
        users_table.rows[user.id] = _profile_row(user, "faculty", name="A")
        fake_auth.restore(user)
        users_table.select_started = threading.Event()
        users_table.release_select = threading.Event()

        restore = threading.Thread(target=service.start)
        restore.start()
        assert users_table.select_started.wait(timeout=5)

        fake_auth.emit("SIGNED_OUT", None)
        users_table.release_select.set()
        restore.join(timeout=5)

        assert not restore.is_alive()
        assert session.state == AuthState.UNAUTHENTICATED
        assert session.current_user is None
        assert notified == []

    def test_lookup_started_after_sign_out_still_resolves(
        self, auth_service, session, fake_auth, users_table,
    ):
        self._signed_in(auth_service, fake_auth)
        auth_service.sign_out()
        again = fake_auth.add_account("b@warden.matrusri.edu.in")

        fake_auth.emit("SIGNED_IN", FakeSession(again))

        assert session.state == AuthState.AUTHENTICATED
        assert session.current_user.id == again.id


class TestDuplicateProfileRace:
    """Two sessions creating the same profile converge on one row."""

    def test_concurrent_insert_returns_existing_row(self, auth_service, session, fake_auth, users_table):
        user = fake_auth.add_account("race@student.matrusri.edu.in")
        fake_auth.restore(user)

        def other_session_wins(payload):
            users_table.rows.setdefault(
                payload["id"], _profile_row(user, "student", name="Created Elsewhere"),
            )

        users_table.before_upsert = other_session_wins

        auth_service.start()

        assert len(users_table.rows) == 1
        assert session.state == AuthState.AUTHENTICATED
        assert session.current_user.name == "Created Elsewhere"


class TestTeardown:
    """close(): single disposal, late callbacks, pending calls."""

    def test_close_unsubscribes_exactly_once(self, auth_service, fake_auth):
        auth_service.start()

        auth_service.close()
        auth_service.close()

        assert fake_auth.subscriptions[0].unsubscribe_calls == 1
        assert auth_service.is_closed

    def test_late_callback_after_close_is_ignored(self, auth_service, session, fake_auth, users_table):
        auth_service.start()
        auth_service.close()
        user = fake_auth.add_account("late@matrusri.edu.in")

        fake_auth.emit_to_all("SIGNED_IN", FakeSession(user))

        assert users_table.selects == []
        assert session.state == AuthState.UNAUTHENTICATED

    def test_calls_after_close_fail_fast(self, auth_service):
        auth_service.close()

        with pytest.raises(ProviderUnavailableError):
            auth_service.sign_in("a@matrusri.edu.in", "pw")

    def test_start_after_close_does_nothing(self, auth_service, fake_auth):
        auth_service.close()
        auth_service.start()

        assert fake_auth.calls == []

    def test_hung_provider_call_times_out(self, make_auth_service, session, fake_auth, notified):
        release = threading.Event()
        fake_auth.block_get_session = release
        service = make_auth_service(call_timeout_s=0.2)

        try:
            service.start()
        finally:
            release.set()

        assert session.state == AuthState.UNAUTHENTICATED
        assert len(notified) == 1
        assert "too long" in notified[0].message
