"""Navigation tree builder.

Builds navigation trees from page pointers for UI presentation. Pointers
are derived from the live pages of a page tree.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import TypedDict

from folio.core.page import PagePointer, PointerIndex
from folio.core.tree import PageTree
from folio.core.types import URLPath
from folio.core.urls import nested_slugs
from folio.errors import IntegrityError

logger = logging.getLogger(__name__)


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    id: int
    title: str
    path: str
    children: list["NavItemDict"]


@dataclass
class NavItem:
    """Navigation item with children for UI tree."""

    id: int
    title: str
    path: URLPath
    children: list["NavItem"] = field(default_factory=list)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {"id": self.id, "title": self.title, "path": self.path}
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def build_pointers(tree: PageTree, *, scoped: bool) -> PointerIndex:
    """Project the live pages of a tree into pointers.

    Args:
        tree: Page tree to project
        scoped: Whether slugs are scoped by parent (affects nested urls)

    Pages with a broken parent chain are left out and logged.

    Returns:
        PointerIndex over all live pages
    """
    pointers: list[PagePointer] = []
    for page in tree:
        if not page.live:
            continue
        try:
            slugs = nested_slugs(page, tree, scoped=scoped)
        except IntegrityError as e:
            logger.error(f"Leaving page {page.id} out of navigation: {e}")
            continue
        pointers.append(
            PagePointer(
                page_id=page.id,
                title=page.menu_label,
                lft=page.lft,
                parent_id=page.parent_id,
                nested_url_json=json.dumps(slugs),
            ),
        )
    return PointerIndex(pointers)


def build_navigation(index: PointerIndex) -> list[NavItem]:
    """Build navigation tree from page pointers.

    Args:
        index: Pointers to build navigation from

    Returns:
        List of NavItem trees for navigation UI
    """
    return [_build_nav_item(index, pointer) for pointer in index.roots()]


def _build_nav_item(index: PointerIndex, pointer: PagePointer) -> NavItem:
    """Recursively build NavItem from pointer."""
    return NavItem(
        id=pointer.id,
        title=pointer.title,
        path=pointer.url,
        children=[_build_nav_item(index, child) for child in index.children(pointer)],
    )
