"""Application keys for type-safe app configuration access."""

import asyncio

from aiohttp import web
from itsdangerous import URLSafeTimedSerializer

from folio.config import SessionConfig
from folio.core.cache import FileCache
from folio.core.controller import PageController
from folio.core.page import PointerIndex

controller_key = web.AppKey("controller", PageController)
cache_key = web.AppKey("cache", FileCache)
pointers_key = web.AppKey("pointers", PointerIndex)
session_serializer_key = web.AppKey("session_serializer", URLSafeTimedSerializer)
session_config_key = web.AppKey("session_config", SessionConfig)
pending_cache_writes_key = web.AppKey("pending_cache_writes", set[asyncio.Future[bool]])
