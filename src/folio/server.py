"""aiohttp server for Folio.

Application factory and route registration.
"""

import asyncio
import logging

from aiohttp import web

from folio.api.navigation import create_navigation_routes
from folio.api.pages import create_pages_routes
from folio.app_keys import (
    cache_key,
    controller_key,
    pending_cache_writes_key,
    pointers_key,
    session_config_key,
    session_serializer_key,
)
from folio.config import Config
from folio.core.auth import Authorizer, RoleAuthorizer
from folio.core.cache import FileCache
from folio.core.controller import PageController
from folio.core.listings import EmptyListings, JsonListings, ListingsProvider
from folio.core.navigation import build_pointers
from folio.core.renderer import Renderer, TemplateRenderer
from folio.core.tree import PageTree, load_tree
from folio.sessions import create_serializer, session_middleware

logger = logging.getLogger(__name__)


def create_app(
    config: Config,
    *,
    tree: PageTree | None = None,
    authorizer: Authorizer | None = None,
    renderer: Renderer | None = None,
    listings: ListingsProvider | None = None,
) -> web.Application:
    """Create aiohttp application.

    Collaborators not given explicitly are built from the configuration.

    Args:
        config: Application configuration
        tree: Page tree (default: loaded from data.pages_file)
        authorizer: Authorization checks (default: RoleAuthorizer)
        renderer: Template renderer (default: bundled Jinja2 templates)
        listings: Marketplace listings (default: data.listings_file, if set)

    Returns:
        Configured aiohttp application

    Raises:
        FileNotFoundError: If a configured data file doesn't exist
        ValueError: If a data file is invalid
    """
    app = web.Application(middlewares=[session_middleware])

    if tree is None:
        tree = load_tree(config.data.pages_file)
    if config.pages.scope_slug_by_parent:
        _warn_compound_friendly_ids(tree)
    if listings is None:
        listings = _load_listings(config)

    controller = PageController(
        tree,
        config.pages,
        authorizer or RoleAuthorizer(),
        renderer or TemplateRenderer(),
        listings=listings,
    )

    app[controller_key] = controller
    app[cache_key] = FileCache(config.cache.cache_dir)
    app[pointers_key] = build_pointers(tree, scoped=config.pages.scope_slug_by_parent)
    app[session_serializer_key] = create_serializer(config.session)
    app[session_config_key] = config.session
    app[pending_cache_writes_key] = set()

    # API routes (must be registered first to take precedence over page paths)
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_pages_routes())

    app.on_cleanup.append(_drain_cache_writes)

    logger.info(f"Serving {len(tree)} pages")
    return app


def _warn_compound_friendly_ids(tree: PageTree) -> None:
    # Scoped lookups match the last segment only, so these pages redirect to themselves
    for page in tree:
        if "/" in page.friendly_id.strip("/"):
            logger.warning(
                f"Page {page.id} has compound friendly id {page.friendly_id!r}, "
                "which is unreachable with slugs scoped by parent",
            )


def _load_listings(config: Config) -> ListingsProvider:
    if config.data.listings_file is None:
        return EmptyListings()
    return JsonListings(config.data.listings_file)


async def _drain_cache_writes(app: web.Application) -> None:
    """Wait for in-flight cache writes on application cleanup."""
    pending = list(app[pending_cache_writes_key])
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
