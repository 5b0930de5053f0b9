"""Routing decisions for resolved pages.

Given a request, decide whether to reject it, redirect it somewhere else,
or render the page it resolves to. Checks run in a fixed order and the
first one that produces an outcome wins:

1. resolve the page (none: reject)
2. visibility (not live and viewer can't manage pages: reject)
3. members-only gate
4. skip to first live child
5. external link override
6. canonical friendly URL
7. render
"""

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any

from folio.config import PagesConfig
from folio.core.auth import PAGES_PLUGIN, Authorizer
from folio.core.page import Page
from folio.core.resolver import Action, FriendlyUrlResolver, requested_friendly_id
from folio.core.tree import PageTree
from folio.core.types import Viewer
from folio.core.urls import canonical_url, page_url

logger = logging.getLogger(__name__)

RETURN_TO_SESSION_KEY = "redirect_to_uri"
MARKETPLACE_HOME_TEMPLATE = "marketplaces/pages/home.html"


@dataclass(frozen=True)
class RoutingContext:
    """Request-scoped routing inputs."""

    action: Action
    viewer: Viewer
    session: MutableMapping[str, Any]
    path: str | None = None
    identifier: str | None = None
    # Path plus query string, remembered for returning after login
    full_path: str = "/"
    # Path without query string, used for cache keys
    request_path: str = "/"


@dataclass(frozen=True)
class Reject:
    """Respond with not found."""

    reason: str


@dataclass(frozen=True)
class Redirect:
    """Send the viewer elsewhere."""

    location: str
    status: int = 302


@dataclass(frozen=True)
class Render:
    """Render a page."""

    page: Page
    template: str
    layout: str
    canonical_url: str
    marketplace: bool = False


Outcome = Reject | Redirect | Render


class RoutingDecider:
    """Decides how to answer a request for a page."""

    def __init__(
        self,
        tree: PageTree,
        config: PagesConfig,
        authorizer: Authorizer,
    ) -> None:
        """Initialize decider.

        Args:
            tree: Page tree to resolve against
            config: Routing configuration
            authorizer: Answers administrator and plugin access questions
        """
        self._tree = tree
        self._config = config
        self._authorizer = authorizer
        self._resolver = FriendlyUrlResolver(tree, scoped=config.scope_slug_by_parent)

    @property
    def layout(self) -> str:
        return "marketplace" if self._config.marketplace else "application"

    def decide(self, context: RoutingContext) -> Outcome:
        """Decide the outcome for a request.

        Raises:
            IntegrityError: If the page tree is malformed around the page
        """
        page = self._resolver.resolve(context.action, context.path, context.identifier)
        if page is None:
            return Reject("no page matches the request")

        if not self.can_view(page, context.viewer):
            return Reject(f"page {page.id} is not live")

        if context.action is Action.HOME and self._config.marketplace:
            return self._marketplace_home(page, context)

        outcome = self._check_members_gate(page, context) or self._check_first_child(page)
        if outcome is not None:
            return outcome

        if context.action is Action.SHOW:
            outcome = self._check_link_url(page) or self._check_friendly_url(page, context)
            if outcome is not None:
                return outcome

        return self._render(page, context.action)

    def can_view(self, page: Page, viewer: Viewer) -> bool:
        return page.live or self._can_manage_pages(viewer)

    def _can_manage_pages(self, viewer: Viewer) -> bool:
        return self._authorizer.is_administrator(viewer) and self._authorizer.has_plugin_access(
            viewer,
            PAGES_PLUGIN,
        )

    def _marketplace_home(self, page: Page, context: RoutingContext) -> Outcome:
        if context.viewer.must_change_password:
            return Redirect(self._config.password_change_path)

        # The marketplace home shows the first page regardless of the home marker
        first = self._tree.first() or page
        return Render(
            page=first,
            template=MARKETPLACE_HOME_TEMPLATE,
            layout=self.layout,
            canonical_url=self._canonical(first),
            marketplace=True,
        )

    def _check_members_gate(self, page: Page, context: RoutingContext) -> Redirect | None:
        if not page.members_only:
            return None

        context.session[RETURN_TO_SESSION_KEY] = context.full_path

        viewer = context.viewer
        if not viewer.is_authenticated or not page.allowed_user(viewer.user_id):
            logger.debug(f"Viewer not allowed on members-only page {page.id}")
            return Redirect(self._config.members_only_path)
        return None

    def _check_first_child(self, page: Page) -> Redirect | None:
        if not page.skip_to_first_child:
            return None

        child = self._tree.first_live_child(page)
        if child is None:
            return None
        return Redirect(page_url(child, self._tree, scoped=self._config.scope_slug_by_parent))

    def _check_link_url(self, page: Page) -> Redirect | None:
        if page.link_url:
            return Redirect(page.link_url)
        return None

    def _check_friendly_url(self, page: Page, context: RoutingContext) -> Redirect | None:
        scoped = self._config.scope_slug_by_parent
        requested = requested_friendly_id(context.path, context.identifier, scoped=scoped)

        mismatch = requested != page.friendly_id
        if not mismatch and scoped and context.path:
            mismatch = self._tree.root(page).slug not in context.path

        if mismatch:
            location = self._canonical(page)
            logger.debug(f"Redirecting {requested!r} to canonical {location}")
            return Redirect(location, status=301)
        return None

    def _render(self, page: Page, action: Action) -> Render:
        return Render(
            page=page,
            template=self._template_for(page, action),
            layout=self.layout,
            canonical_url=self._canonical(page),
        )

    def _template_for(self, page: Page, action: Action) -> str:
        name = page.view_template if page.view_template and page.view_template.isidentifier() else None
        return f"pages/{name or action.value}.html"

    def _canonical(self, page: Page) -> str:
        return canonical_url(page, self._tree, scoped=self._config.scope_slug_by_parent)
