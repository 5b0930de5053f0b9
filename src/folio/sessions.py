"""Signed cookie sessions.

Session data is serialized as JSON and signed using ``itsdangerous``. The
session is a plain dict stored on the request; changes are written back
to a Set-Cookie header on the response.
"""

import logging
from typing import Any

from aiohttp import web
from aiohttp.typedefs import Handler
from itsdangerous import BadSignature, URLSafeTimedSerializer

from folio.app_keys import session_config_key, session_serializer_key
from folio.config import SessionConfig

logger = logging.getLogger(__name__)

SESSION_REQUEST_KEY = "folio_session"
SESSION_SALT = "folio.session"


def create_serializer(config: SessionConfig) -> URLSafeTimedSerializer:
    if not config.secret_key:
        raise ValueError("session.secret_key must not be empty")
    return URLSafeTimedSerializer(config.secret_key, salt=SESSION_SALT)


def get_session(request: web.Request) -> dict[str, Any]:
    """Return the session dict for a request.

    Raises:
        LookupError: If the session middleware isn't installed
    """
    session = request.get(SESSION_REQUEST_KEY)
    if session is None:
        raise LookupError(
            "No active session. Ensure session_middleware is added to the app.",
        )
    return session


def load_session(
    serializer: URLSafeTimedSerializer,
    cookie_value: str | None,
    *,
    max_age: int,
) -> dict[str, Any]:
    """Deserialize and verify a session cookie.

    Missing, expired or tampered cookies yield an empty session.
    """
    if not cookie_value:
        return {}

    try:
        data = serializer.loads(cookie_value, max_age=max_age)
    except BadSignature:
        logger.debug("Discarding session cookie with bad signature")
        return {}

    if not isinstance(data, dict):
        return {}
    return data


@web.middleware
async def session_middleware(
    request: web.Request,
    handler: Handler,
) -> web.StreamResponse:
    serializer = request.app[session_serializer_key]
    config = request.app[session_config_key]
    cookie_name, max_age = config.cookie_name, config.max_age

    session = load_session(serializer, request.cookies.get(cookie_name), max_age=max_age)
    original = dict(session)
    request[SESSION_REQUEST_KEY] = session

    response = await handler(request)

    if session != original:
        response.set_cookie(
            cookie_name,
            serializer.dumps(session),
            max_age=max_age,
            httponly=True,
            samesite="Lax",
        )
    return response
