"""
Static basic-auth gate.

Enabled only when both CARDBINDER_BASIC_AUTH_USER and
CARDBINDER_BASIC_AUTH_PASS are set; otherwise every request passes.
Health probes stay open so orchestrators can reach them.
"""

import base64
import binascii
import logging
import secrets
from collections.abc import Awaitable, Callable

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse

from cardbinder.config import settings

logger = logging.getLogger(__name__)

OPEN_PATHS = frozenset({"/health", "/ready"})
REALM_HEADER = 'Basic realm="Protected", charset="UTF-8"'


def auth_enabled() -> bool:
    return bool(settings.basic_auth_user and settings.basic_auth_pass)


def parse_basic_credentials(header: str | None) -> tuple[str, str] | None:
    """
    Decode an `Authorization: Basic ...` header.

    Returns (user, password), or None if the header is absent or malformed.
    """
    if not header or not header.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(header[len("Basic ") :], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return user, password


def credentials_match(user: str, password: str) -> bool:
    user_ok = secrets.compare_digest(user.encode(), settings.basic_auth_user.encode())
    pass_ok = secrets.compare_digest(password.encode(), settings.basic_auth_pass.encode())
    return user_ok and pass_ok


def unauthorized() -> Response:
    return PlainTextResponse(
        "Auth required",
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": REALM_HEADER},
    )


async def basic_auth_gate(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """HTTP middleware enforcing the static credentials."""
    if not auth_enabled() or request.url.path in OPEN_PATHS:
        return await call_next(request)

    credentials = parse_basic_credentials(request.headers.get("authorization"))
    if credentials is None or not credentials_match(*credentials):
        logger.warning("Rejected unauthenticated request to %s", request.url.path)
        return unauthorized()

    return await call_next(request)
