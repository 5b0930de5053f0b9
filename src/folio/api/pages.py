"""Page routes.

Serves pages as HTML. Assuming a page named "mission" that is a child of
"about":

    GET /                   home page
    GET /pages/mission      page by friendly id or numeric id
    GET /about/mission      page by path
"""

import asyncio

from aiohttp import web

from folio.app_keys import cache_key, controller_key, pending_cache_writes_key
from folio.core.controller import PageResponse
from folio.core.resolver import Action
from folio.core.routing import RoutingContext
from folio.core.types import Viewer
from folio.sessions import get_session


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/", home),
        web.get("/pages/{id}", show_by_id),
        web.get("/{path:.*}", show_by_path),
    ]


async def home(request: web.Request) -> web.Response:
    return _serve(request, Action.HOME)


async def show_by_id(request: web.Request) -> web.Response:
    return _serve(request, Action.SHOW, identifier=request.match_info["id"])


async def show_by_path(request: web.Request) -> web.Response:
    return _serve(request, Action.SHOW, path=request.match_info["path"])


def _serve(
    request: web.Request,
    action: Action,
    *,
    path: str | None = None,
    identifier: str | None = None,
) -> web.Response:
    controller = request.app[controller_key]
    session = get_session(request)

    context = RoutingContext(
        action=action,
        viewer=Viewer.from_session(session),
        session=session,
        path=path,
        identifier=identifier,
        full_path=request.path_qs,
        request_path=request.path,
    )
    result = controller.handle(context)

    if result.is_redirect:
        return web.Response(status=result.status, headers={"Location": str(result.location)})

    _schedule_cache_write(request, result)
    return web.Response(text=result.body, status=result.status, content_type="text/html")


def _schedule_cache_write(request: web.Request, result: PageResponse) -> None:
    """Write the page to the full-page cache off the request path.

    The write runs in the default executor and is not awaited, so it never
    delays the response.
    """
    if result.cache is None or not result.cache.persist:
        return

    controller = request.app[controller_key]
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(
        None,
        controller.cache_gate.persist,
        result.cache,
        request.app[cache_key],
    )
    pending = request.app[pending_cache_writes_key]
    pending.add(future)
    future.add_done_callback(pending.discard)
