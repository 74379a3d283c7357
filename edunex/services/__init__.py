"""
Business Logic Services Package.

Identity rules, session/profile orchestration, notifications and the
dashboard content providers.  Services depend on the Repository layer
for data access and on ``SessionManager`` for user context.

The ``create_services()`` factory wires every repository and service
together, returning a typed dict the shell and views consume without
knowing the internal dependency graph.
"""

from __future__ import annotations

from typing import Optional, TypedDict

from edunex.auth import SessionManager
from edunex.config import AppConfig
from edunex.database import DatabaseManager
from edunex.logger import get_logger
from edunex.repositories.profile_repository import ProfileRepository
from edunex.services.auth_service import AuthService, Dispatcher
from edunex.services.notifications import NotificationCenter
from edunex.services.profile_provisioning import ProfileProvisioningService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    auth_service: AuthService
    provisioning_service: ProfileProvisioningService
    notifications: NotificationCenter


def create_services(
    db: DatabaseManager,
    config: AppConfig,
    session: SessionManager,
    notifications: NotificationCenter,
    dispatch: Optional[Dispatcher] = None,
) -> ServiceContainer:
    """
    Wire all repositories and services together.

    This is the single composition root for the service layer.  The
    entry point calls it once at startup; tests call it with a fake
    Supabase client and an inline *dispatch*.

    Args:
        db: DatabaseManager holding the Supabase client (or offline).
        config: Application configuration.
        session: Session state driven by ``AuthService``.
        notifications: Channel for failures that have no caller.
        dispatch: Optional runner for auth-callback work.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = get_logger("services")

    # ------------------------------------------------------------------
    # 1. Repositories (data-access layer)
    # ------------------------------------------------------------------
    profile_repo = ProfileRepository(
        db=db,
        logger=logger,
        table=config.PROFILE_TABLE,
    )

    # ------------------------------------------------------------------
    # 2. Leaf services
    # ------------------------------------------------------------------
    provisioning_service = ProfileProvisioningService(
        repo=profile_repo,
        logger=logger,
    )

    # ------------------------------------------------------------------
    # 3. Orchestration
    # ------------------------------------------------------------------
    auth_service = AuthService(
        db=db,
        session=session,
        provisioning=provisioning_service,
        notifications=notifications,
        logger=get_logger("auth"),
        call_timeout_s=config.AUTH_CALL_TIMEOUT_S,
        max_workers=config.AUTH_WORKER_THREADS,
        dispatch=dispatch,
    )

    return ServiceContainer(
        auth_service=auth_service,
        provisioning_service=provisioning_service,
        notifications=notifications,
    )
