"""Tests for friendly URL resolution."""

import pytest
from folio.core.page import Page
from folio.core.resolver import Action, FriendlyUrlResolver, requested_friendly_id
from folio.core.tree import PageTree


class TestRequestedFriendlyId:
    """Tests for requested_friendly_id()."""

    @pytest.mark.parametrize(
        ("path", "identifier", "expected"),
        [
            ("about/mission", None, "about/mission"),
            ("/about/mission/", None, "about/mission"),
            ("//about", None, "about"),
            ("", "mission", "mission"),
            (None, "mission", "mission"),
            (None, None, None),
            ("about", "ignored", "about"),
        ],
    )
    def test__unscoped(self, path: str | None, identifier: str | None, expected: str | None) -> None:
        """Keep internal separators, fall back to the identifier."""
        assert requested_friendly_id(path, identifier, scoped=False) == expected

    @pytest.mark.parametrize(
        ("path", "identifier", "expected"),
        [
            ("about/mission", None, "mission"),
            ("about/mission/", None, "mission"),
            ("", "mission", "mission"),
            ("about", "mission", "mission"),
            (None, None, None),
        ],
    )
    def test__scoped(self, path: str | None, identifier: str | None, expected: str | None) -> None:
        """Take the last segment, the identifier when present."""
        assert requested_friendly_id(path, identifier, scoped=True) == expected


class TestFriendlyUrlResolver:
    """Tests for FriendlyUrlResolver."""

    def test__home__finds_home_marker(self, tree: PageTree) -> None:
        """Home lookup uses the root link marker."""
        resolver = FriendlyUrlResolver(tree, scoped=True)

        page = resolver.resolve(Action.HOME)

        assert page is not None
        assert page.id == 1

    def test__home__no_marker__returns_none(self) -> None:
        """Home lookup yields nothing when no page is marked."""
        tree = PageTree([Page(id=1, title="A", friendly_id="a", lft=1)])

        assert FriendlyUrlResolver(tree, scoped=True).resolve(Action.HOME) is None

    def test__show__scoped__uses_last_segment(self, tree: PageTree) -> None:
        """Ancestor segments don't take part in scoped lookups."""
        resolver = FriendlyUrlResolver(tree, scoped=True)

        page = resolver.resolve(Action.SHOW, path="anything/mission")

        assert page is not None
        assert page.id == 3

    def test__show__unscoped__compound_slug(self) -> None:
        """Unscoped lookups match compound friendly ids."""
        tree = PageTree([Page(id=1, title="Mission", friendly_id="about/mission", lft=1)])
        resolver = FriendlyUrlResolver(tree, scoped=False)

        page = resolver.resolve(Action.SHOW, path="about/mission")

        assert page is not None
        assert page.id == 1

    def test__show__not_found__returns_none(self, tree: PageTree) -> None:
        """Unknown slugs resolve to nothing."""
        resolver = FriendlyUrlResolver(tree, scoped=True)

        assert resolver.resolve(Action.SHOW, path="nowhere") is None

    def test__show__shared_slug__identifier_breaks_tie(self) -> None:
        """When a slug is shared, the identifier picks the page."""
        tree = PageTree(
            [
                Page(id=1, title="A", friendly_id="a", lft=1),
                Page(id=2, title="News", friendly_id="news", lft=2, parent_id=1),
                Page(id=3, title="B", friendly_id="b", lft=3),
                Page(id=4, title="News", friendly_id="news", lft=4, parent_id=3),
            ],
        )
        resolver = FriendlyUrlResolver(tree, scoped=True)

        assert resolver.find_by_path_or_id("news", None).id == 2
        unscoped = FriendlyUrlResolver(tree, scoped=False)
        assert unscoped.find_by_path_or_id("news", "4").id == 4

    def test__show__numeric_identifier__falls_back_to_id(self, tree: PageTree) -> None:
        """A numeric identifier with no matching slug finds by page id."""
        resolver = FriendlyUrlResolver(tree, scoped=True)

        page = resolver.resolve(Action.SHOW, identifier="3")

        assert page is not None
        assert page.friendly_id == "mission"

    def test__show__empty_request__returns_none(self, tree: PageTree) -> None:
        """A request naming nothing resolves to nothing."""
        resolver = FriendlyUrlResolver(tree, scoped=False)

        assert resolver.resolve(Action.SHOW, path="") is None
