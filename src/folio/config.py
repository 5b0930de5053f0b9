"""Configuration management for Folio.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "folio.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(frozen=True)
class PagesConfig:
    """Page resolution and routing configuration."""

    scope_slug_by_parent: bool = True
    marketplace: bool = False
    cache_pages_full: bool = False
    members_only_path: str = "/members-only"
    password_change_path: str = "/members/password/edit"


@dataclass
class DataConfig:
    """Page and listings data sources."""

    pages_file: Path = field(default_factory=lambda: Path("pages.json"))
    listings_file: Path | None = None


@dataclass
class CacheConfig:
    """Full-page cache configuration."""

    cache_dir: Path = field(default_factory=lambda: Path(".cache"))


@dataclass
class SessionConfig:
    """Signed cookie session configuration."""

    secret_key: str = ""
    cookie_name: str = "folio_session"
    max_age: int = 86400


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    pages: PagesConfig
    data: DataConfig
    cache: CacheConfig
    session: SessionConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for folio.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls.default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def default(cls) -> "Config":
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            pages=PagesConfig(),
            data=DataConfig(),
            cache=CacheConfig(),
            session=SessionConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            pages=cls._parse_pages(data.get("pages")),
            data=cls._parse_data(data.get("data"), config_dir),
            cache=cls._parse_cache(data.get("cache"), config_dir),
            session=cls._parse_session(data.get("session")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section."""
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_pages(cls, data: object) -> PagesConfig:
        """Parse pages configuration section.

        Args:
            data: Raw pages section data

        Returns:
            PagesConfig instance
        """
        if data is None:
            return PagesConfig()

        if not isinstance(data, dict):
            raise ValueError("pages section must be a dictionary")

        defaults = PagesConfig()
        flags: dict[str, bool] = {}
        for name in ("scope_slug_by_parent", "marketplace", "cache_pages_full"):
            value = data.get(name, getattr(defaults, name))
            if not isinstance(value, bool):
                raise ValueError(f"pages.{name} must be a boolean")
            flags[name] = value

        locations: dict[str, str] = {}
        for name in ("members_only_path", "password_change_path"):
            value = data.get(name, getattr(defaults, name))
            if not isinstance(value, str) or not value.startswith("/"):
                raise ValueError(f"pages.{name} must be an absolute path")
            locations[name] = value

        return PagesConfig(**flags, **locations)

    @classmethod
    def _parse_data(cls, data: object, config_dir: Path) -> DataConfig:
        """Parse data configuration section.

        Args:
            data: Raw data section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DataConfig instance
        """
        if data is None:
            return DataConfig(pages_file=config_dir / "pages.json")

        if not isinstance(data, dict):
            raise ValueError("data section must be a dictionary")

        pages_file = data.get("pages_file", "pages.json")
        if not isinstance(pages_file, str):
            raise ValueError("data.pages_file must be a string")

        listings_file = data.get("listings_file")
        if listings_file is not None and not isinstance(listings_file, str):
            raise ValueError("data.listings_file must be a string")

        return DataConfig(
            pages_file=config_dir / pages_file,
            listings_file=config_dir / listings_file if listings_file else None,
        )

    @classmethod
    def _parse_cache(cls, data: object, config_dir: Path) -> CacheConfig:
        """Parse cache configuration section."""
        if data is None:
            return CacheConfig(cache_dir=config_dir / ".cache")

        if not isinstance(data, dict):
            raise ValueError("cache section must be a dictionary")

        cache_dir = data.get("cache_dir", ".cache")
        if not isinstance(cache_dir, str):
            raise ValueError("cache.cache_dir must be a string")

        return CacheConfig(cache_dir=config_dir / cache_dir)

    @classmethod
    def _parse_session(cls, data: object) -> SessionConfig:
        """Parse session configuration section."""
        if data is None:
            return SessionConfig()

        if not isinstance(data, dict):
            raise ValueError("session section must be a dictionary")

        defaults = SessionConfig()

        secret_key = data.get("secret_key", defaults.secret_key)
        if not isinstance(secret_key, str) or not secret_key:
            raise ValueError("session.secret_key must be a non-empty string")

        cookie_name = data.get("cookie_name", defaults.cookie_name)
        if not isinstance(cookie_name, str) or not cookie_name:
            raise ValueError("session.cookie_name must be a non-empty string")

        max_age = data.get("max_age", defaults.max_age)
        if not isinstance(max_age, int) or isinstance(max_age, bool) or max_age <= 0:
            raise ValueError("session.max_age must be a positive integer")

        return SessionConfig(secret_key=secret_key, cookie_name=cookie_name, max_age=max_age)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        pages_file: Path | None = None,
        cache_dir: Path | None = None,
        cache_pages_full: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            pages_file: Override data.pages_file
            cache_dir: Override cache.cache_dir
            cache_pages_full: Override pages.cache_pages_full

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        data = self.data
        if pages_file is not None:
            data = replace(self.data, pages_file=pages_file)

        cache = self.cache
        if cache_dir is not None:
            cache = replace(self.cache, cache_dir=cache_dir)

        pages = self.pages
        if cache_pages_full is not None:
            pages = replace(self.pages, cache_pages_full=cache_pages_full)

        return replace(self, server=server, data=data, cache=cache, pages=pages)
