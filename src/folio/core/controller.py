"""Page request handling.

Ties resolution, routing, breadcrumbs, rendering and the cache gate
together for one request. Framework independent: the HTTP layer turns a
``PageResponse`` into a real response.
"""

import logging
from dataclasses import dataclass
from typing import Any

from folio.config import PagesConfig
from folio.core.auth import Authorizer
from folio.core.breadcrumbs import BreadcrumbItem, build_breadcrumbs, home_breadcrumb
from folio.core.cache import CacheDecision, CacheGate
from folio.core.layout import layout_class
from folio.core.listings import EmptyListings, ListingsProvider
from folio.core.renderer import Renderer
from folio.core.resolver import Action
from folio.core.routing import Redirect, Reject, Render, RoutingContext, RoutingDecider
from folio.core.tree import PageTree
from folio.errors import IntegrityError

logger = logging.getLogger(__name__)

NOT_FOUND_TEMPLATE = "errors/404.html"
RECENT_POSTS_LIMIT = 5
FEATURED_SUPPLIERS_LIMIT = 3


@dataclass(frozen=True)
class PageResponse:
    """Framework independent response description."""

    status: int
    body: str = ""
    location: str | None = None
    cache: CacheDecision | None = None

    @property
    def is_redirect(self) -> bool:
        return self.location is not None


class PageController:
    """Handles page requests end to end."""

    def __init__(
        self,
        tree: PageTree,
        config: PagesConfig,
        authorizer: Authorizer,
        renderer: Renderer,
        *,
        listings: ListingsProvider | None = None,
    ) -> None:
        self._tree = tree
        self._config = config
        self._renderer = renderer
        self._listings = listings or EmptyListings()
        self._decider = RoutingDecider(tree, config, authorizer)
        self._cache_gate = CacheGate(authorizer, enabled=config.cache_pages_full)

    @property
    def cache_gate(self) -> CacheGate:
        return self._cache_gate

    def handle(self, context: RoutingContext) -> PageResponse:
        """Answer a page request.

        Authorization failures propagate to the caller.
        """
        try:
            outcome = self._decider.decide(context)
            match outcome:
                case Reject(reason=reason):
                    logger.debug(f"Not found {context.full_path}: {reason}")
                    return self.not_found()
                case Redirect(location=location, status=status):
                    return PageResponse(status=status, location=location)
                case Render():
                    return self._render(outcome, context)
        except IntegrityError as e:
            logger.error(f"Page tree integrity error serving {context.full_path}: {e}")
            return self.not_found()

    def not_found(self) -> PageResponse:
        body = self._renderer.render(
            NOT_FOUND_TEMPLATE,
            {"layout": self._decider.layout, "breadcrumbs": [home_breadcrumb()]},
        )
        return PageResponse(status=404, body=body)

    def _render(self, outcome: Render, context: RoutingContext) -> PageResponse:
        render_context: dict[str, Any] = {
            "page": outcome.page,
            "layout": outcome.layout,
            "canonical": outcome.canonical_url,
            "breadcrumbs": self._breadcrumbs(outcome, context),
        }
        if outcome.marketplace:
            render_context.update(self._marketplace_listings())

        body = self._renderer.render(outcome.template, render_context)
        decision = self._cache_gate.decide(
            context.request_path,
            context.viewer,
            body.encode("utf-8"),
        )
        return PageResponse(status=200, body=body, cache=decision)

    def _breadcrumbs(self, outcome: Render, context: RoutingContext) -> list[BreadcrumbItem]:
        if context.action is Action.SHOW:
            return build_breadcrumbs(
                outcome.page,
                self._tree,
                scoped=self._config.scope_slug_by_parent,
            )
        return [home_breadcrumb()]

    def _marketplace_listings(self) -> dict[str, Any]:
        categories = self._listings.categories()
        return {
            "posts": self._listings.recent_posts(RECENT_POSTS_LIMIT),
            "categories": categories,
            "categories_layout_class": layout_class(len(categories)),
            "featured_suppliers": self._listings.featured_suppliers(FEATURED_SUPPLIERS_LIMIT),
            "featured_member": self._listings.featured_member(),
        }
