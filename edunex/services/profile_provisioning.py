"""
Lazy Profile Provisioning.

Makes sure every authenticated identity has exactly one institutional
profile.  On the first successful authentication the profile does not
exist yet; it is created here with the role derived from the email
domain.

Rules:
    - The role is derived once, at creation, and never re-synced.
    - Creation is insert-if-absent keyed by the identity id, so two
      sessions racing through first login end up with one row.
    - Failures are raised as ``ProfileFetchFailedError`` or
      ``ProfileCreateFailedError``; callers decide whether to surface
      them inline or as a notification.
"""

from __future__ import annotations

from typing import Optional

from edunex.logger import StructuredLogger
from edunex.models.user import User
from edunex.repositories.profile_repository import ProfileRepository
from edunex.services.auth_errors import ProfileCreateFailedError, ProfileFetchFailedError
from edunex.services.base_service import BaseService
from edunex.services.identity import default_display_name, derive_role
from edunex.utils.audit import log_audit_event


class ProfileProvisioningService(BaseService):
    """Fetch-or-create for ``users`` profiles."""

    def __init__(self, repo: ProfileRepository, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._repo = repo

    def fetch_profile(self, user_id: str) -> Optional[User]:
        """Return the stored profile, or ``None`` if it does not exist.

        Raises:
            ProfileFetchFailedError: On any failure other than "not found".
        """
        try:
            return self._repo.get_by_id(user_id)
        except Exception as exc:
            self._logger.error(
                "Profile fetch failed for %s: %s", user_id, exc, exc_info=True,
            )
            raise ProfileFetchFailedError(original_error=exc) from exc

    def create_profile(self, user: User) -> User:
        """Insert *user*'s profile unless one exists; return the stored row.

        Raises:
            ProfileCreateFailedError: If the insert (or the read-back
                after a lost race) fails.
        """
        self._logger.info(
            "Provisioning profile for %s (ID: %s, role: %s)",
            user.email,
            user.id,
            user.role,
        )
        try:
            created, inserted = self._repo.insert_if_absent(user)
        except Exception as exc:
            self._logger.error(
                "Profile creation failed for %s: %s", user.id, exc, exc_info=True,
            )
            raise ProfileCreateFailedError(original_error=exc) from exc

        if not inserted:
            return created

        log_audit_event(
            logger=self._logger,
            action="PROFILE_CREATE",
            entity_type="User",
            entity_id=created.id,
            user_id=created.id,
            details={"email": created.email, "role": str(created.role)},
        )
        return created

    def ensure_profile(
        self,
        user_id: str,
        email: str,
        metadata_name: Optional[str] = None,
    ) -> User:
        """Return the profile for *user_id*, creating it on first login.

        A new profile takes its role from ``derive_role(email)`` and its
        name from the provider metadata or the email's local part.
        """
        existing = self.fetch_profile(user_id)
        if existing is not None:
            return existing

        self._logger.info("No profile for %s yet; creating one.", user_id)
        return self.create_profile(
            User(
                id=user_id,
                email=email,
                name=default_display_name(email, metadata_name),
                role=derive_role(email),
            )
        )
