"""Breadcrumb trail construction."""

from dataclasses import dataclass

from folio.core.page import Page
from folio.core.tree import PageTree
from folio.core.types import URLPath
from folio.core.urls import page_path

HOME_CRUMB_TITLE = "Home"


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    title: str
    path: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "path": self.path}


def home_breadcrumb() -> BreadcrumbItem:
    return BreadcrumbItem(title=HOME_CRUMB_TITLE, path=URLPath("/"))


def build_breadcrumbs(page: Page, tree: PageTree, *, scoped: bool) -> list[BreadcrumbItem]:
    """Build the breadcrumb trail for a page.

    Starts with "Home", followed by every ancestor root-first. The current
    page is included as the last entry.

    Args:
        page: Page being viewed
        tree: Tree the page belongs to
        scoped: Whether slugs are scoped by parent (affects crumb paths)

    Returns:
        List of BreadcrumbItem for navigation

    Raises:
        IntegrityError: If the parent chain is cyclic or dangling
    """
    breadcrumbs = [home_breadcrumb()]
    for ancestor in tree.parent_chain(page):
        breadcrumbs.append(
            BreadcrumbItem(
                title=ancestor.menu_label,
                path=page_path(ancestor, tree, scoped=scoped),
            ),
        )
    return breadcrumbs
