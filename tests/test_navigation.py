"""Tests for page pointers and navigation."""

import json

import pytest
from folio.core.navigation import build_navigation, build_pointers
from folio.core.page import PagePointer, PointerIndex
from folio.core.tree import PageTree


class TestPagePointer:
    """Tests for PagePointer."""

    def test__id__is_page_id(self) -> None:
        """A pointer's identity is the page it points to."""
        pointer = PagePointer(page_id=7, title="Consulting", lft=7)

        assert pointer.id == 7

    def test__nested_url__decoded_from_json(self) -> None:
        """Nested url is stored as text and decoded on read."""
        pointer = PagePointer(
            page_id=3,
            title="Mission",
            lft=3,
            nested_url_json=json.dumps(["about", "mission"]),
        )

        assert pointer.nested_url == ["about", "mission"]
        assert pointer.url == "/about/mission"

    def test__nested_url__not_a_list__raises_value_error(self) -> None:
        """Reject nested urls that aren't lists."""
        pointer = PagePointer(page_id=3, title="Mission", lft=3, nested_url_json='"about"')

        with pytest.raises(ValueError, match="JSON list"):
            _ = pointer.nested_url

    def test__missing_title__raises_value_error(self) -> None:
        """Title must be present."""
        with pytest.raises(ValueError, match="title"):
            PagePointer(page_id=3, title="", lft=3)


class TestPointerIndex:
    """Tests for PointerIndex."""

    def test__children__ordered_by_lft(self) -> None:
        """Children are sorted explicitly, not by input order."""
        parent = PagePointer(page_id=1, title="Parent", lft=1)
        index = PointerIndex(
            [
                PagePointer(page_id=3, title="Second", lft=5, parent_id=1),
                parent,
                PagePointer(page_id=2, title="First", lft=2, parent_id=1),
            ],
        )

        assert [p.title for p in index.children(parent)] == ["First", "Second"]
        assert index.roots() == [parent]


class TestBuildNavigation:
    """Tests for build_pointers() and build_navigation()."""

    def test__live_pages_only(self, tree: PageTree) -> None:
        """Drafts are left out of the pointers."""
        index = build_pointers(tree, scoped=True)

        assert len(index) == 7

    def test__tree_structure(self, tree: PageTree) -> None:
        """Navigation mirrors the live page tree."""
        items = build_navigation(build_pointers(tree, scoped=True))

        assert [item.title for item in items] == ["Home", "About us", "Services", "Members", "Blog"]
        about = items[1]
        assert [child.path for child in about.children] == ["/about/mission"]

    def test__to_dict__omits_empty_children(self, tree: PageTree) -> None:
        """Leaves have no children key."""
        items = build_navigation(build_pointers(tree, scoped=True))

        data = items[1].to_dict()

        assert data["path"] == "/about"
        assert data["children"] == [{"id": 3, "title": "Mission", "path": "/about/mission"}]
