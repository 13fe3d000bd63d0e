from functools import wraps
from typing import Any, Callable, TypeVar

from flask import request, g

from course_chat.core.exceptions import UnauthorizedError
from course_chat.core.security_context import reset_current_user_id, set_current_user_id
from course_chat.infrastructure.security.jwt_provider import JwtProvider

F = TypeVar("F", bound=Callable[..., Any])


def _get_bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    parts = auth.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    raise UnauthorizedError("Missing token")


def require_auth(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _get_bearer_token()
        claims = JwtProvider().decode(token)

        if claims.get("typ", "access") != "access":
            raise UnauthorizedError("Invalid token")

        g.auth = claims

        # visible to background tasks submitted from this request
        ctx_token = set_current_user_id(str(claims["sub"]))
        try:
            return fn(*args, **kwargs)
        finally:
            reset_current_user_id(ctx_token)

    return wrapper  # type: ignore[return-value]


def auth_user_id() -> str:
    auth = getattr(g, "auth", None)
    if not auth:
        raise UnauthorizedError("Missing token")
    return str(auth["sub"])
