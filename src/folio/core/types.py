"""Core type definitions."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, NewType

# URL path for routing (e.g., "/about", "/about/mission")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)


@dataclass(frozen=True)
class Viewer:
    """Identity of whoever is making the request.

    ``user_id`` identifies an end-user (website member). Administrators
    are recognised through ``roles``; the authorizer decides what they
    may do.
    """

    user_id: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)
    plugins: frozenset[str] = field(default_factory=frozenset)
    must_change_password: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "Viewer":
        return cls()

    @classmethod
    def from_session(cls, session: Mapping[str, Any]) -> "Viewer":
        """Build a viewer from the ``viewer`` entry of a session.

        The entry is written by the host's authentication layer. Missing
        or malformed entries yield an anonymous viewer.
        """
        data = session.get("viewer")
        if not isinstance(data, dict):
            return cls.anonymous()

        user_id = data.get("user_id")
        return cls(
            user_id=str(user_id) if user_id is not None else None,
            roles=frozenset(str(r) for r in data.get("roles", [])),
            plugins=frozenset(str(p) for p in data.get("plugins", [])),
            must_change_password=bool(data.get("must_change_password", False)),
        )
