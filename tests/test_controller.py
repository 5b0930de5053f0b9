"""Tests for PageController."""

import json
import logging
from pathlib import Path
from typing import Any

import pytest
from folio.config import PagesConfig
from folio.core.auth import RoleAuthorizer
from folio.core.controller import PageController
from folio.core.listings import JsonListings
from folio.core.page import Page
from folio.core.renderer import TemplateRenderer
from folio.core.resolver import Action
from folio.core.routing import RoutingContext
from folio.core.tree import PageTree
from folio.core.types import Viewer


def _context(
    action: Action = Action.SHOW,
    *,
    path: str | None = None,
    viewer: Viewer | None = None,
    request_path: str = "/",
) -> RoutingContext:
    return RoutingContext(
        action=action,
        viewer=viewer or Viewer.anonymous(),
        session={},
        path=path,
        full_path=request_path,
        request_path=request_path,
    )


def _controller(tree: PageTree, **config: Any) -> PageController:
    return PageController(
        tree,
        PagesConfig(**config),
        RoleAuthorizer(),
        TemplateRenderer(),
    )


class TestHandle:
    """Tests for PageController.handle()."""

    def test__render__body_includes_page_and_breadcrumbs(self, tree: PageTree) -> None:
        """Rendered pages carry their title, trail and canonical link."""
        controller = _controller(tree)

        response = controller.handle(_context(path="about/mission", request_path="/about/mission"))

        assert response.status == 200
        assert "<h1>Mission</h1>" in response.body
        assert '<a href="/about">About us</a>' in response.body
        assert '<link rel="canonical" href="/about/mission">' in response.body

    def test__reject__renders_not_found(self, tree: PageTree) -> None:
        """Unknown pages get a 404 body."""
        response = _controller(tree).handle(_context(path="nowhere"))

        assert response.status == 404
        assert "Page not found" in response.body
        assert response.cache is None

    def test__redirect__carries_location(self, tree: PageTree) -> None:
        """Redirect outcomes become redirect responses."""
        response = _controller(tree).handle(_context(path="blog"))

        assert response.status == 302
        assert response.location == "https://blog.example.com"
        assert response.is_redirect

    def test__integrity_error__not_found_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Malformed trees fail closed as not found."""
        tree = PageTree(
            [
                Page(id=1, title="A", friendly_id="a", lft=1, parent_id=2),
                Page(id=2, title="B", friendly_id="b", lft=2, parent_id=1),
            ],
        )

        with caplog.at_level(logging.ERROR):
            response = _controller(tree).handle(_context(path="a"))

        assert response.status == 404
        assert "integrity error" in caplog.text

    def test__home__only_home_crumb(self, tree: PageTree) -> None:
        """Home pages render with the Home crumb alone."""
        response = _controller(tree).handle(_context(Action.HOME))

        assert response.status == 200
        assert response.body.count("<li>") == 1


class TestCacheDecision:
    """Tests for the cache decision attached to rendered responses."""

    def test__caching_on__anonymous__persist(self, tree: PageTree) -> None:
        """Public renders may be cached under the request path."""
        controller = _controller(tree, cache_pages_full=True)

        response = controller.handle(_context(path="about", request_path="/about"))

        assert response.cache is not None
        assert response.cache.persist is True
        assert response.cache.key == "/refinery/cache/pages/about"
        assert response.cache.body == response.body.encode("utf-8")

    def test__caching_on__admin__not_persisted(self, tree: PageTree, admin: Viewer) -> None:
        """Administrator renders are not cached."""
        controller = _controller(tree, cache_pages_full=True)

        response = controller.handle(_context(path="about", viewer=admin, request_path="/about"))

        assert response.cache is not None
        assert response.cache.persist is False

    def test__caching_off__not_persisted(self, tree: PageTree) -> None:
        """Nothing is cached with full-page caching off."""
        response = _controller(tree).handle(_context(path="about", request_path="/about"))

        assert response.cache is not None
        assert response.cache.persist is False


class TestMarketplaceHome:
    """Tests for the marketplace home page."""

    @pytest.fixture
    def listings_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "listings.json"
        path.write_text(
            json.dumps(
                {
                    "posts": [{"title": "Hello", "url": "/blog/hello", "published_at": "2026-01-01"}],
                    "categories": [{"name": f"Cat {i}", "url": f"/c/{i}"} for i in range(8)],
                    "suppliers": [{"name": "Acme", "logo": "/acme.png", "created_at": "2026-02-01"}],
                    "members": [{"name": "Ada", "roles": ["Featured Member"]}],
                },
            ),
        )
        return path

    def test__renders_listings(self, tree: PageTree, listings_file: Path) -> None:
        """The marketplace home shows listings and the category layout."""
        controller = PageController(
            tree,
            PagesConfig(marketplace=True),
            RoleAuthorizer(),
            TemplateRenderer(),
            listings=JsonListings(listings_file),
        )

        response = controller.handle(_context(Action.HOME))

        assert response.status == 200
        assert "categories category-layout-4" in response.body
        assert "Hello" in response.body
        assert 'alt="Acme"' in response.body
        assert "Ada" in response.body
        assert "| Marketplace" in response.body

    def test__without_listings__renders_empty(self, tree: PageTree) -> None:
        """No listings source still renders the page."""
        response = _controller(tree, marketplace=True).handle(_context(Action.HOME))

        assert response.status == 200
        assert "categories justify" in response.body
