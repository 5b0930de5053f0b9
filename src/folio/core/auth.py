"""Authorization collaborator.

The routing core only asks three questions about a viewer. Anything that
can answer them can stand in for ``RoleAuthorizer``.
"""

from typing import Protocol

from folio.core.types import Viewer

ADMIN_ROLE = "refinery"
SUPERUSER_ROLE = "superuser"
PAGES_PLUGIN = "refinery_pages"
SITE_BAR_CAPABILITY = "site_bar"


class Authorizer(Protocol):
    """Protocol for authorization checks."""

    def is_administrator(self, viewer: Viewer) -> bool: ...

    def has_plugin_access(self, viewer: Viewer, plugin: str) -> bool: ...

    def has_capability(self, viewer: Viewer, capability: str) -> bool: ...


class RoleAuthorizer:
    """Authorizer backed by the roles and plugins carried on the viewer."""

    def is_administrator(self, viewer: Viewer) -> bool:
        return ADMIN_ROLE in viewer.roles

    def has_plugin_access(self, viewer: Viewer, plugin: str) -> bool:
        if not self.is_administrator(viewer):
            return False
        return SUPERUSER_ROLE in viewer.roles or plugin in viewer.plugins

    def has_capability(self, viewer: Viewer, capability: str) -> bool:
        if capability == SITE_BAR_CAPABILITY:
            return self.is_administrator(viewer)
        return False
