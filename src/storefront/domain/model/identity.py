"""Shopper identity.

Shoppers sign in either with an email/password account or through an
OAuth provider. Both sources are folded into one normalized Identity at
the boundary; nothing downstream knows which one produced it.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import IdentityError

IDENTITY_SOURCES = ("password", "oauth")
GUEST_KEY = "guest"


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    name: str = ""

    @property
    def owner_key(self) -> str:
        """Storage key for data scoped to this shopper."""
        return f"user:{self.id}"

    @property
    def first_name(self) -> str:
        return self.name.split(" ", 1)[0] if self.name else ""

    @property
    def last_name(self) -> str:
        parts = self.name.split(" ", 1)
        return parts[1] if len(parts) > 1 else ""

    def require_complete(self) -> None:
        """Raise IdentityError unless both id and email are present."""
        if not self.id.strip():
            raise IdentityError("User ID is missing. Please sign in again.")
        if not self.email.strip():
            raise IdentityError("User email is missing. Please sign in again.")


def resolve_identity(raw: dict | None) -> Identity | None:
    """Normalize a raw identity payload.

    ``raw`` carries a ``source`` tag plus the fields that source exposes.
    Password accounts hand out ``id``; OAuth sessions may only carry
    ``sub``. Returns None for a signed-out shopper.
    """
    if not raw:
        return None

    source = raw.get("source", "password")
    if source not in IDENTITY_SOURCES:
        raise IdentityError(f"Unknown identity source: {source!r}")

    if source == "oauth":
        user_id = raw.get("id") or raw.get("sub") or ""
    else:
        user_id = raw.get("id") or ""

    return Identity(
        id=str(user_id).strip(),
        email=str(raw.get("email") or "").strip(),
        name=str(raw.get("name") or "").strip(),
    )


def owner_key_for(identity: Identity | None) -> str:
    return identity.owner_key if identity is not None else GUEST_KEY
