"""Full-page cache.

Cache structure:
    .cache/
    ├── .gitignore
    └── refinery/
        └── cache/
            └── pages/
                ├── index.html            # "/"
                └── about/
                    └── mission.html      # "/about/mission"

Rendered pages are written after delivery, keyed by request path. Pages
rendered with the administrator site bar are never written, so the cache
only ever holds the public variant of a page.
"""

import logging
import posixpath
import shutil
from dataclasses import dataclass
from pathlib import Path

from folio.core.auth import SITE_BAR_CAPABILITY, Authorizer
from folio.core.types import Viewer

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "/refinery/cache/pages"


def cache_key(request_path: str) -> str:
    """Build the cache key for a request path."""
    return posixpath.join(CACHE_KEY_PREFIX, request_path.lstrip("/"))


@dataclass(frozen=True)
class CacheDecision:
    """Result of the post-render cache check."""

    persist: bool
    key: str
    body: bytes


class FileCache:
    """File-based full-page cache.

    Keys are filesystem-style paths; each maps to an ``.html`` file under
    the cache directory. Keys ending in a separator map to ``index.html``.
    Keys must stay under the page cache prefix.
    """

    _GITIGNORE_CONTENT = "# Ignore everything in this directory\n*\n"

    def __init__(self, cache_dir: Path) -> None:
        """Initialize cache with directory path.

        Args:
            cache_dir: Root directory for cache files (e.g., .cache/)
        """
        self._cache_dir = cache_dir

    @property
    def cache_dir(self) -> Path:
        """Root cache directory."""
        return self._cache_dir

    def _ensure_cache_dir(self) -> None:
        """Create cache directory with .gitignore if it doesn't exist."""
        if not self._cache_dir.exists():
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            gitignore_path = self._cache_dir / ".gitignore"
            gitignore_path.write_text(self._GITIGNORE_CONTENT, encoding="utf-8")

    def path_for(self, key: str) -> Path:
        """Map a cache key to a file path.

        Raises:
            ValueError: If the key falls outside the page cache prefix
        """
        relative = key.strip("/")
        if not relative or key.endswith("/"):
            relative = posixpath.join(relative, "index")
        normalized = posixpath.normpath(relative)
        if not normalized.startswith(f"{CACHE_KEY_PREFIX.strip('/')}/"):
            raise ValueError(f"Cache key escapes page cache: {key}")
        return self._cache_dir / f"{normalized}.html"

    def write(self, key: str, body: bytes) -> None:
        """Store a rendered page.

        Args:
            key: Cache key (e.g., "/refinery/cache/pages/about")
            body: Response body bytes

        Raises:
            OSError: If the file can't be written
            ValueError: If the key falls outside the page cache prefix
        """
        path = self.path_for(key)
        self._ensure_cache_dir()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)

    def read(self, key: str) -> bytes | None:
        """Retrieve a cached page.

        Returns:
            Cached body, or None if not cached
        """
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            return path.read_bytes()
        except OSError:
            return None

    def clear(self) -> None:
        """Remove all cached pages."""
        pages_dir = self._cache_dir / CACHE_KEY_PREFIX.strip("/")
        if pages_dir.exists():
            shutil.rmtree(pages_dir)


class CacheGate:
    """Decides whether a rendered page may go into the full-page cache."""

    def __init__(self, authorizer: Authorizer, *, enabled: bool) -> None:
        """Initialize the gate.

        Args:
            authorizer: Used to check whether the viewer sees the site bar
            enabled: Whether full-page caching is on
        """
        self._authorizer = authorizer
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def decide(self, request_path: str, viewer: Viewer, body: bytes) -> CacheDecision:
        """Decide whether to persist a rendered page.

        Don't cache the page with the site bar showing.
        """
        persist = self._enabled and not self._authorizer.has_capability(
            viewer,
            SITE_BAR_CAPABILITY,
        )
        return CacheDecision(persist=persist, key=cache_key(request_path), body=body)

    def persist(self, decision: CacheDecision, cache: FileCache) -> bool:
        """Write a page to the cache if the decision allows it.

        Write failures are logged and swallowed; the response has already
        been decided by the time this runs.

        Returns:
            True if the page was written
        """
        if not decision.persist:
            return False

        try:
            cache.write(decision.key, decision.body)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to write page cache {decision.key}: {e}")
            return False

        logger.debug(f"Cached page at {decision.key}")
        return True
