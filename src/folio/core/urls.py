"""Page URL computation."""

from folio.core.page import Page
from folio.core.tree import PageTree
from folio.core.types import URLPath
from folio.errors import IntegrityError


def nested_slugs(page: Page, tree: PageTree, *, scoped: bool) -> list[str]:
    """URL segments addressing a page.

    With slugs scoped by parent every ancestor contributes its slug.
    Otherwise the friendly id is globally unique and is used on its own,
    split on its internal separators.
    """
    if scoped:
        return [p.slug for p in tree.parent_chain(page)]
    return [segment for segment in page.friendly_id.split("/") if segment]


def page_path(page: Page, tree: PageTree, *, scoped: bool) -> URLPath:
    return URLPath("/" + "/".join(nested_slugs(page, tree, scoped=scoped)))


def page_url(page: Page, tree: PageTree, *, scoped: bool) -> str:
    """URL a visitor following a link to the page ends up at."""
    if page.link_url:
        return page.link_url
    return page_path(page, tree, scoped=scoped)


def canonical_url(page: Page, tree: PageTree, *, scoped: bool) -> str:
    """Single authoritative URL of a page.

    Raises:
        IntegrityError: If the canonical reference names a missing page
    """
    if page.canonical is None:
        return page_path(page, tree, scoped=scoped)
    if isinstance(page.canonical, str):
        return page.canonical

    target = tree.get(page.canonical)
    if target is None:
        raise IntegrityError(
            f"Page {page.id} has canonical reference to missing page {page.canonical}",
        )
    return page_path(target, tree, scoped=scoped)
