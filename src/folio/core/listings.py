"""Marketplace listings shown on the marketplace home page.

Posts, categories, suppliers and members live outside the page tree. The
home page only needs a handful of them, so they come through a small
provider interface.
"""

import json
import logging
import random
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Listing = dict[str, Any]


class ListingsProvider(Protocol):
    """Protocol for marketplace listing sources."""

    def recent_posts(self, limit: int) -> list[Listing]: ...

    def categories(self) -> list[Listing]: ...

    def featured_suppliers(self, limit: int) -> list[Listing]: ...

    def featured_member(self) -> Listing | None: ...


class EmptyListings:
    """Provider used when no listings source is configured."""

    def recent_posts(self, limit: int) -> list[Listing]:
        return []

    def categories(self) -> list[Listing]:
        return []

    def featured_suppliers(self, limit: int) -> list[Listing]:
        return []

    def featured_member(self) -> Listing | None:
        return None


class JsonListings:
    """Listings read from a JSON document.

    Expected structure::

        {
            "posts": [{"title": ..., "url": ..., "live": true, "published_at": ...}],
            "categories": [{"name": ..., "url": ...}],
            "suppliers": [{"name": ..., "logo": ..., "created_at": ...}],
            "members": [{"name": ..., "roles": ["Featured Member"]}]
        }
    """

    FEATURED_MEMBER_ROLE = "Featured Member"

    def __init__(self, path: Path, *, rng: random.Random | None = None) -> None:
        """Load listings from a file.

        Args:
            path: Path to the JSON document
            rng: Random source for picking the featured member

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the document is not a JSON object
        """
        if not path.exists():
            raise FileNotFoundError(f"Listings file not found: {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Listings file is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Listings file must contain an object")

        self._data: dict[str, list[Listing]] = {
            key: [item for item in data.get(key, []) if isinstance(item, dict)]
            for key in ("posts", "categories", "suppliers", "members")
        }
        self._rng = rng or random.Random()
        logger.debug(f"Loaded listings from {path}")

    def recent_posts(self, limit: int) -> list[Listing]:
        live = [post for post in self._data["posts"] if post.get("live", True)]
        live.sort(key=lambda post: str(post.get("published_at", "")), reverse=True)
        return live[:limit]

    def categories(self) -> list[Listing]:
        return list(self._data["categories"])

    def featured_suppliers(self, limit: int) -> list[Listing]:
        """Newest suppliers that have a logo."""
        with_logo = [s for s in self._data["suppliers"] if s.get("logo")]
        with_logo.sort(key=lambda s: str(s.get("created_at", "")), reverse=True)
        return with_logo[:limit]

    def featured_member(self) -> Listing | None:
        featured = [
            member
            for member in self._data["members"]
            if self.FEATURED_MEMBER_ROLE in member.get("roles", [])
        ]
        if not featured:
            return None
        return self._rng.choice(featured)
