"""Shared test fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest
from folio.config import (
    CacheConfig,
    Config,
    DataConfig,
    PagesConfig,
    ServerConfig,
    SessionConfig,
)
from folio.core.tree import PageTree, PageTreeBuilder
from folio.core.types import Viewer

SAMPLE_PAGES: list[dict[str, Any]] = [
    {"id": 1, "title": "Home", "friendly_id": "home", "lft": 1, "link_url": "/"},
    {"id": 2, "title": "About", "friendly_id": "about", "lft": 2, "menu_title": "About us"},
    {"id": 3, "title": "Mission", "friendly_id": "mission", "lft": 3, "parent_id": 2},
    {"id": 4, "title": "Team", "friendly_id": "team", "lft": 4, "parent_id": 2, "live": False},
    {
        "id": 5,
        "title": "Services",
        "friendly_id": "services",
        "lft": 5,
        "skip_to_first_child": True,
    },
    {"id": 6, "title": "Draft", "friendly_id": "draft", "lft": 6, "parent_id": 5, "live": False},
    {"id": 7, "title": "Consulting", "friendly_id": "consulting", "lft": 7, "parent_id": 5},
    {
        "id": 8,
        "title": "Members",
        "friendly_id": "members",
        "lft": 8,
        "members_only": True,
        "allowed_users": ["42"],
    },
    {
        "id": 9,
        "title": "Blog",
        "friendly_id": "blog",
        "lft": 9,
        "link_url": "https://blog.example.com",
    },
]


def build_sample_tree() -> PageTree:
    """Build the sample tree used across tests.

    Structure (lft order):
        Home (link_url "/")
        About
          Mission
          Team (draft)
        Services (skip to first child)
          Draft (draft)
          Consulting
        Members (members only, user 42)
        Blog (external link)
    """
    builder = PageTreeBuilder()
    for data in SAMPLE_PAGES:
        attrs = dict(data)
        attrs["page_id"] = attrs.pop("id")
        if "allowed_users" in attrs:
            attrs["allowed_users"] = frozenset(attrs["allowed_users"])
        builder.add_page(attrs.pop("title"), attrs.pop("friendly_id"), attrs.pop("parent_id", None), **attrs)
    return builder.build()


@pytest.fixture
def tree() -> PageTree:
    return build_sample_tree()


@pytest.fixture
def pages_file(tmp_path: Path) -> Path:
    """Write the sample pages to a JSON file."""
    path = tmp_path / "pages.json"
    path.write_text(json.dumps({"pages": SAMPLE_PAGES}), encoding="utf-8")
    return path


@pytest.fixture
def anonymous() -> Viewer:
    return Viewer.anonymous()


@pytest.fixture
def admin() -> Viewer:
    return Viewer(user_id="1", roles=frozenset({"refinery", "superuser"}))


@pytest.fixture
def test_config(tmp_path: Path, pages_file: Path) -> Config:
    """Create a test configuration with tmp_path directories."""
    return Config(
        server=ServerConfig(),
        pages=PagesConfig(),
        data=DataConfig(pages_file=pages_file),
        cache=CacheConfig(cache_dir=tmp_path / ".cache"),
        session=SessionConfig(secret_key="test-secret"),
    )
