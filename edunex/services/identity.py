"""
Identity Resolver.

Pure functions mapping an institutional email address to domain
validity and to a ``Role``.  No I/O, no exceptions.

The role is chosen by the first matching subdomain in priority order
faculty > admin > warden > librarian > student; any other address
(including the bare institutional domain, an empty string, or
garbage) falls back to ``Role.STUDENT``.  Comparison is case-sensitive
and performs no normalisation.
"""

from __future__ import annotations

from typing import Final, Optional

from edunex.models.enums import Role

INSTITUTION_DOMAIN: Final[str] = "matrusri.edu.in"

ACCEPTED_EMAIL_SUFFIXES: Final[tuple[str, ...]] = (
    f"@{INSTITUTION_DOMAIN}",
    f"@faculty.{INSTITUTION_DOMAIN}",
    f"@admin.{INSTITUTION_DOMAIN}",
    f"@warden.{INSTITUTION_DOMAIN}",
    f"@librarian.{INSTITUTION_DOMAIN}",
    f"@student.{INSTITUTION_DOMAIN}",
)

# Order matters: the first marker found in the address wins.
ROLE_SUBDOMAINS: Final[tuple[tuple[str, Role], ...]] = (
    (f"@faculty.{INSTITUTION_DOMAIN}", Role.FACULTY),
    (f"@admin.{INSTITUTION_DOMAIN}", Role.ADMIN),
    (f"@warden.{INSTITUTION_DOMAIN}", Role.WARDEN),
    (f"@librarian.{INSTITUTION_DOMAIN}", Role.LIBRARIAN),
    (f"@student.{INSTITUTION_DOMAIN}", Role.STUDENT),
    (f"@{INSTITUTION_DOMAIN}", Role.STUDENT),
)

DOMAIN_REJECTED_MESSAGE: Final[str] = (
    f"Please use your official college email (@{INSTITUTION_DOMAIN})"
)


def is_institutional_email(email: str) -> bool:
    """Return ``True`` iff *email* ends with an accepted suffix."""
    if not email:
        return False
    return email.endswith(ACCEPTED_EMAIL_SUFFIXES)


def derive_role(email: str) -> Role:
    """Return the role encoded in *email*'s domain.  Never fails."""
    if not email:
        return Role.STUDENT
    for marker, role in ROLE_SUBDOMAINS:
        if marker in email:
            return role
    return Role.STUDENT


def default_display_name(email: str, metadata_name: Optional[str] = None) -> str:
    """Display name for a profile created without an explicit name.

    Prefers the name stored in the provider's user metadata, then the
    local part of the email, then ``"User"``.
    """
    if metadata_name and metadata_name.strip():
        return metadata_name.strip()
    local_part = (email or "").split("@", 1)[0]
    return local_part or "User"
