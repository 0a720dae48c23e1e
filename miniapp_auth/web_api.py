"""HTTP adapter for Telegram Mini App requests.

Extracts initData from the `Authorization: tma <initData>` header, validates
it, checks freshness and attaches the caller's identity to the request.
Uses aiohttp.

Signature failures and expired payloads get the same 401 response, and
both checks always run so neither outcome is cheaper than the other.
"""

import logging
import time
from datetime import datetime, timezone

from aiohttp import web

from .config import Config
from .errors import StructuralError
from .user import user_from_init_data
from .web_auth import validate_init_data


logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", Config)

PUBLIC_PATHS = frozenset({"/api/health"})

# Clock skew tolerated for auth_date values slightly in the future
FUTURE_SKEW_SECONDS = 300

UNAUTHORIZED = {"error": "unauthorized"}
MALFORMED = {"error": "malformed init data"}


def is_fresh(issued_at: datetime, max_age_seconds: int, now: datetime | None = None) -> bool:
    """True if issued_at is less than max_age_seconds old and not too far ahead."""
    if now is None:
        now = datetime.now(timezone.utc)
    age = (now - issued_at).total_seconds()
    return -FUTURE_SKEW_SECONDS <= age < max_age_seconds


def extract_init_data(request: web.Request, scheme: str) -> str | None:
    """Return the initData carried by the Authorization header, if any."""
    header = request.headers.get("Authorization", "")
    prefix, _, value = header.partition(" ")
    value = value.strip()
    if prefix.lower() != scheme.lower() or not value:
        return None
    return value


@web.middleware
async def auth_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Reject requests without valid, fresh init data."""
    if request.method == "OPTIONS" or request.path in PUBLIC_PATHS:
        return await handler(request)

    config = request.app[CONFIG_KEY]
    init_data = extract_init_data(request, config.auth_scheme)
    if init_data is None:
        return web.json_response(UNAUTHORIZED, status=401)

    try:
        result = validate_init_data(
            init_data, config.bot_token,
            scratch_threshold=config.scratch_threshold,
            strict=config.strict_decoding,
        )
    except StructuralError as e:
        logger.debug("[Auth] Malformed init data: %s", e)
        return web.json_response(MALFORMED, status=400)

    fresh = is_fresh(result.issued_at, config.max_age_seconds)
    if not (result.is_valid and fresh):
        logger.info("[Auth] Rejected init data from %s", request.remote)
        return web.json_response(UNAUTHORIZED, status=401)

    try:
        user = user_from_init_data(init_data)
    except StructuralError as e:
        logger.debug("[Auth] Unusable user field: %s", e)
        return web.json_response(MALFORMED, status=400)

    request["init_data"] = init_data
    request["issued_at"] = result.issued_at
    request["auth_date"] = result.issued_at_unix
    request["telegram_user"] = user
    return await handler(request)


async def handle_health(request: web.Request) -> web.Response:
    """GET /api/health — simple health check, no auth required."""
    return web.json_response({"status": "ok", "time": int(time.time())})


async def handle_me(request: web.Request) -> web.Response:
    """GET /api/me — return the authenticated Telegram user."""
    user = request["telegram_user"]
    return web.json_response({
        "user": user.to_dict() if user else None,
        "auth_date": request["auth_date"],
        "issued_at": request["issued_at"].isoformat(),
    })


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Add CORS headers for the Mini App frontend."""
    if request.method == "OPTIONS":
        response = web.Response()
    else:
        response = await handler(request)

    response.headers["Access-Control-Allow-Origin"] = request.app[CONFIG_KEY].cors_origin
    response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
    return response


@web.middleware
async def logging_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Log all incoming requests."""
    start = time.time()
    try:
        response = await handler(request)
        elapsed = (time.time() - start) * 1000
        logger.info("[API] %s %s → %s (%.0fms)", request.method, request.path, response.status, elapsed)
        return response
    except Exception as e:
        elapsed = (time.time() - start) * 1000
        logger.error("[API] %s %s → ERROR: %s (%.0fms)", request.method, request.path, e, elapsed)
        raise


def create_web_app(config: Config) -> web.Application:
    """Create and configure the aiohttp web application."""
    app = web.Application(middlewares=[logging_middleware, cors_middleware, auth_middleware])
    app[CONFIG_KEY] = config

    app.router.add_get("/api/health", handle_health)
    app.router.add_get("/api/me", handle_me)

    return app
