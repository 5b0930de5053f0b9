"""Page tree with nested-set ordering.

Pages are kept in a flat index with parent/children relationships resolved
once at construction. Children are always sorted by ``lft`` here rather
than relying on the order the store returned them in. The tree is never
mutated after construction, so concurrent readers are safe.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from folio.core.page import Page
from folio.errors import IntegrityError

logger = logging.getLogger(__name__)

HOME_LINK_URL = "/"


class PageTree:
    """Read-only page hierarchy with traversal and lookup queries."""

    __slots__ = ("_by_id", "_children", "_pages", "_roots")

    def __init__(self, pages: list[Page]) -> None:
        """Initialize page tree.

        Args:
            pages: All pages, in any order

        Raises:
            IntegrityError: If page ids or ``lft`` values are not unique
        """
        self._pages = sorted(pages, key=lambda p: p.lft)
        self._by_id: dict[int, Page] = {}
        self._children: dict[int, list[Page]] = {}
        self._roots: list[Page] = []

        seen_lft: set[int] = set()
        for page in self._pages:
            if page.id in self._by_id:
                raise IntegrityError(f"Duplicate page id: {page.id}")
            if page.lft in seen_lft:
                raise IntegrityError(f"Duplicate lft {page.lft} on page {page.id}")
            seen_lft.add(page.lft)
            self._by_id[page.id] = page

        # self._pages is sorted by lft, so children lists come out sorted too
        for page in self._pages:
            if page.parent_id is None:
                self._roots.append(page)
            else:
                self._children.setdefault(page.parent_id, []).append(page)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)

    def get(self, page_id: int) -> Page | None:
        return self._by_id.get(page_id)

    def parent(self, page: Page) -> Page | None:
        """Get the parent of a page.

        Raises:
            IntegrityError: If the parent id names a page that doesn't exist
        """
        if page.parent_id is None:
            return None
        parent = self._by_id.get(page.parent_id)
        if parent is None:
            raise IntegrityError(
                f"Page {page.id} references missing parent {page.parent_id}",
            )
        return parent

    def children(self, page: Page) -> list[Page]:
        """Direct children of a page, ordered by ``lft``."""
        return list(self._children.get(page.id, []))

    def first_live_child(self, page: Page) -> Page | None:
        for child in self._children.get(page.id, []):
            if child.live:
                return child
        return None

    def parent_chain(self, page: Page) -> list[Page]:
        """Ancestors of a page, root first, ending with the page itself.

        The walk is bounded by the number of pages in the tree, so cyclic
        data fails instead of looping forever.

        Raises:
            IntegrityError: If the parent chain is cyclic or dangling
        """
        chain = [page]
        limit = len(self._pages) + 1
        current = self.parent(page)
        while current is not None:
            chain.append(current)
            if len(chain) > limit:
                raise IntegrityError(f"Cyclic parent chain at page {page.id}")
            current = self.parent(current)

        chain.reverse()
        return chain

    def root(self, page: Page) -> Page:
        return self.parent_chain(page)[0]

    def roots(self) -> list[Page]:
        """Pages without a parent, ordered by ``lft``."""
        return list(self._roots)

    def first(self) -> Page | None:
        """Page with the lowest id."""
        if not self._by_id:
            return None
        return self._by_id[min(self._by_id)]

    def find_home(self) -> Page | None:
        """Find the page marked as home by its link url."""
        for page in self._pages:
            if page.link_url == HOME_LINK_URL:
                return page
        return None

    def find_by_friendly_id(self, requested: str, *, scoped: bool) -> list[Page]:
        """Find pages by friendly id.

        With slugs scoped by parent, only the last segment of each page's
        friendly id takes part in the comparison; otherwise the whole
        friendly id must match.

        Returns:
            Matching pages ordered by ``lft``
        """
        if scoped:
            return [page for page in self._pages if page.slug == requested]
        return [page for page in self._pages if page.friendly_id == requested]


class PageTreeBuilder:
    """Builder for constructing PageTree instances."""

    def __init__(self) -> None:
        self._pages: list[Page] = []

    def add_page(
        self,
        title: str,
        friendly_id: str,
        parent_id: int | None = None,
        *,
        page_id: int | None = None,
        lft: int | None = None,
        **attrs: object,
    ) -> int:
        """Add a page to the tree.

        Args:
            title: Page title
            friendly_id: Friendly identifier (slug)
            parent_id: Id of the parent page, None for root
            page_id: Explicit page id (defaults to the next free id)
            lft: Explicit ordering key (defaults to insertion order)
            **attrs: Remaining Page fields

        Returns:
            Id of the added page
        """
        if page_id is None:
            page_id = max((p.id for p in self._pages), default=0) + 1
        if lft is None:
            lft = max((p.lft for p in self._pages), default=0) + 1

        self._pages.append(
            Page(
                id=page_id,
                title=title,
                friendly_id=friendly_id,
                lft=lft,
                parent_id=parent_id,
                **attrs,  # type: ignore[arg-type]
            ),
        )
        return page_id

    def build(self) -> PageTree:
        return PageTree(list(self._pages))


def load_tree(path: Path) -> PageTree:
    """Load a page tree from a JSON document.

    The document holds a ``pages`` list of page objects.

    Args:
        path: Path to the JSON file

    Returns:
        PageTree with all pages from the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the document structure is invalid
        IntegrityError: If ids or ``lft`` values are not unique
    """
    if not path.exists():
        raise FileNotFoundError(f"Pages file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Pages file is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("pages"), list):
        raise ValueError("Pages file must contain a 'pages' list")

    pages = [_parse_page(item) for item in data["pages"]]
    logger.debug(f"Loaded {len(pages)} pages from {path}")
    return PageTree(pages)


def _parse_page(data: object) -> Page:
    """Parse a single page object."""
    if not isinstance(data, dict):
        raise ValueError("pages items must be objects")

    page_id = data.get("id")
    if not isinstance(page_id, int):
        raise ValueError("page.id must be an integer")

    title = data.get("title")
    if not isinstance(title, str):
        raise ValueError(f"page {page_id}: title must be a string")

    friendly_id = data.get("friendly_id")
    if not isinstance(friendly_id, str):
        raise ValueError(f"page {page_id}: friendly_id must be a string")

    lft = data.get("lft")
    if not isinstance(lft, int):
        raise ValueError(f"page {page_id}: lft must be an integer")

    parent_id = data.get("parent_id")
    if parent_id is not None and not isinstance(parent_id, int):
        raise ValueError(f"page {page_id}: parent_id must be an integer")

    canonical = data.get("canonical")
    if canonical is not None and not isinstance(canonical, (int, str)):
        raise ValueError(f"page {page_id}: canonical must be a page id or a url")

    allowed_users = data.get("allowed_users", [])
    if not isinstance(allowed_users, list):
        raise ValueError(f"page {page_id}: allowed_users must be a list")

    return Page(
        id=page_id,
        title=title,
        friendly_id=friendly_id,
        lft=lft,
        parent_id=parent_id,
        live=bool(data.get("live", True)),
        menu_title=data.get("menu_title") or None,
        link_url=data.get("link_url") or None,
        skip_to_first_child=bool(data.get("skip_to_first_child", False)),
        members_only=bool(data.get("members_only", False)),
        allowed_users=frozenset(str(u) for u in allowed_users),
        canonical=canonical,
        view_template=data.get("view_template") or None,
    )
