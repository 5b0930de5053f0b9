"""Navigation API endpoint.

Serves the navigation tree of live pages, built from page pointers.
"""

from aiohttp import web

from folio.app_keys import pointers_key
from folio.core.navigation import build_navigation


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/navigation", get_navigation),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    index = request.app[pointers_key]
    nav_items = build_navigation(index)
    return web.json_response({"items": [item.to_dict() for item in nav_items]})
