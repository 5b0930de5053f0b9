"""Page records.

``Page`` is the full content entity as the page store hands it out.
``PagePointer`` is a lightweight read-only projection used for listing
and navigation, where loading whole pages would be wasteful.
"""

import json
from dataclasses import dataclass, field

from folio.core.types import URLPath


@dataclass(frozen=True)
class Page:
    """Page data relevant to resolution and routing."""

    id: int
    title: str
    friendly_id: str
    lft: int
    parent_id: int | None = None
    live: bool = True
    menu_title: str | None = None
    link_url: str | None = None
    skip_to_first_child: bool = False
    members_only: bool = False
    allowed_users: frozenset[str] = field(default_factory=frozenset)
    # int: another page id, str: external target
    canonical: int | str | None = None
    view_template: str | None = None

    @property
    def slug(self) -> str:
        """Last segment of the friendly id."""
        return self.friendly_id.rstrip("/").rsplit("/", 1)[-1]

    @property
    def menu_label(self) -> str:
        return self.menu_title or self.title

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def allowed_user(self, user_id: str | None) -> bool:
        """Check if a user is on the members-only allow list."""
        return user_id is not None and user_id in self.allowed_users


@dataclass(frozen=True)
class PagePointer:
    """Lightweight pointer to a page.

    The pointer's identity is the page id it points to. ``nested_url`` is
    stored as JSON text and decoded on read.
    """

    page_id: int
    title: str
    lft: int
    nested_url_json: str = "[]"
    parent_id: int | None = None

    def __post_init__(self) -> None:
        if self.page_id is None:
            raise ValueError("page_id must be present")
        if not self.title:
            raise ValueError("title must be present")

    @property
    def id(self) -> int:
        return self.page_id

    @property
    def nested_url(self) -> list[str]:
        data = json.loads(self.nested_url_json)
        if not isinstance(data, list):
            raise ValueError(f"nested_url of page {self.page_id} must be a JSON list")
        return [str(segment) for segment in data]

    @property
    def url(self) -> URLPath:
        return URLPath("/" + "/".join(self.nested_url))


class PointerIndex:
    """Set of page pointers with ordered traversal.

    Ordering always comes from ``lft``; input order is never trusted.
    """

    __slots__ = ("_by_parent", "_pointers")

    def __init__(self, pointers: list[PagePointer]) -> None:
        self._pointers = list(pointers)
        self._by_parent: dict[int | None, list[PagePointer]] = {}
        for pointer in self._pointers:
            self._by_parent.setdefault(pointer.parent_id, []).append(pointer)
        for siblings in self._by_parent.values():
            siblings.sort(key=lambda p: p.lft)

    def __len__(self) -> int:
        return len(self._pointers)

    def roots(self) -> list[PagePointer]:
        """Pointers without a parent, ordered by ``lft``."""
        return list(self._by_parent.get(None, []))

    def children(self, pointer: PagePointer) -> list[PagePointer]:
        """Pointers whose parent is ``pointer``'s page, ordered by ``lft``."""
        return list(self._by_parent.get(pointer.page_id, []))
