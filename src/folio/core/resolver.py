"""Friendly URL resolution.

Assuming a page named "mission" that is a child of "about", the page can
be requested at any of:

    GET /pages/mission
    GET /about/mission
    GET /mission

Which of these resolve, and which are redirected to the canonical URL,
depends on whether slugs are scoped by parent.
"""

import enum
import logging

from folio.core.page import Page
from folio.core.tree import PageTree

logger = logging.getLogger(__name__)


class Action(enum.Enum):
    """Entry action a request is served by."""

    HOME = "home"
    SHOW = "show"


def requested_friendly_id(
    path: str | None,
    identifier: str | None,
    *,
    scoped: bool,
) -> str | None:
    """Compute the friendly id a request asks for.

    Args:
        path: Request path, possibly with several segments
        identifier: Trailing identifier (e.g. from ``/pages/{id}``)
        scoped: Whether slugs are scoped by parent

    Returns:
        Requested friendly id, or None if the request names nothing
    """
    if scoped:
        # Last path component, or the identifier if present
        segments = [s for s in f"{path or ''}/{identifier or ''}".split("/") if s]
        return segments[-1] if segments else None

    # Keep internal slashes, friendly ids are global compound slugs here
    stripped = (path or "").strip("/")
    return stripped or identifier or None


class FriendlyUrlResolver:
    """Turns request paths into pages."""

    def __init__(self, tree: PageTree, *, scoped: bool) -> None:
        self._tree = tree
        self._scoped = scoped

    def resolve(
        self,
        action: Action,
        path: str | None = None,
        identifier: str | None = None,
    ) -> Page | None:
        """Find the page for an entry action.

        Returns:
            Page if found, None otherwise
        """
        match action:
            case Action.HOME:
                return self.find_home()
            case Action.SHOW:
                return self.find_by_path_or_id(path, identifier)

    def find_home(self) -> Page | None:
        return self._tree.find_home()

    def find_by_path_or_id(
        self,
        path: str | None,
        identifier: str | None,
    ) -> Page | None:
        """Find a page by friendly path, falling back to the identifier.

        When several pages share the requested slug, the one whose id
        equals the identifier wins; otherwise the first in tree order.
        """
        requested = requested_friendly_id(path, identifier, scoped=self._scoped)
        if requested is None:
            return None

        candidates = self._tree.find_by_friendly_id(requested, scoped=self._scoped)
        if identifier is not None:
            for page in candidates:
                if str(page.id) == identifier:
                    return page

        if candidates:
            if len(candidates) > 1:
                logger.debug(
                    f"{len(candidates)} pages share friendly id {requested!r}, "
                    f"using page {candidates[0].id}",
                )
            return candidates[0]

        if identifier is not None and identifier.isdigit():
            return self._tree.get(int(identifier))
        return None
