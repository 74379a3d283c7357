"""
User Profile Model.

Mirrors a row of the ``users`` table: the institution-specific profile
kept alongside the provider's bare identity record.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from edunex.models.enums import Role


class User(BaseModel):
    """Authenticated principal with its institutional profile.

    ``id`` is the provider-assigned UUID and never changes.
    ``student_id`` is only meaningful for students.  ``role`` is a
    ``Role`` when the stored value names one; any other stored value
    is kept as the raw string, and the view router gives such users
    the dashboard only.
    """

    id: str
    email: str
    name: str
    role: Union[Role, str] = Field(union_mode="left_to_right")
    student_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}

    @field_validator("role")
    @classmethod
    def _role_not_blank(cls, value: Union[Role, str]) -> Union[Role, str]:
        if not str(value).strip():
            raise ValueError("role must not be empty")
        return value

    @model_validator(mode="after")
    def _student_id_only_for_students(self) -> "User":
        if self.student_id and self.role != Role.STUDENT:
            raise ValueError(
                f"student_id is only valid for students, not {self.role}"
            )
        return self

    @property
    def initials(self) -> str:
        """Up to two uppercase initials for the avatar badge."""
        parts = self.name.strip().split()
        if len(parts) >= 2:
            return (parts[0][0] + parts[-1][0]).upper()
        if parts:
            return parts[0][0].upper()
        return "?"
