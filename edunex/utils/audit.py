"""
Structured Audit Logging.

Every session state change (sign-in, sign-up, sign-out, profile
creation) is logged as one validated JSON object.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, Field

from edunex.logger import StructuredLogger

__all__ = ["AuditEvent", "log_audit_event"]

# Flat scalars only; nested structures do not belong in audit details.
DetailValue = Union[str, int, float, bool, None]


class AuditEvent(BaseModel):
    """Schema-validated audit trail entry."""

    timestamp: str
    action: str
    entity_type: str
    entity_id: str
    user_id: str
    details: dict[str, DetailValue] = Field(default_factory=dict)


def log_audit_event(
    logger: StructuredLogger,
    action: str,
    entity_type: str,
    entity_id: str,
    user_id: str,
    details: Optional[dict[str, DetailValue]] = None,
) -> AuditEvent:
    """Validate and log an audit event; returns the event for callers
    that want to inspect it.

    Args:
        logger: Destination logger.
        action: What happened (``"PROFILE_CREATE"``, ``"SIGN_IN"``...).
        entity_type: Kind of entity affected (``"User"``).
        entity_id: Primary key of the affected entity.
        user_id: Identity that performed the action.
        details: Extra flat context.
    """
    event = AuditEvent(
        timestamp=datetime.now(timezone.utc).isoformat(),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user_id,
        details=details or {},
    )
    logger.info("AUDIT: %s", json.dumps(event.model_dump(), default=str))
    return event
