# course_chat/core/security_context.py
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Authenticated user id for the current request. Background tasks run inside a
# copy of the submitting context, so they see the value captured at submit time.
_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)


def get_current_user_id() -> str | None:
    return _current_user_id.get()


def set_current_user_id(user_id: str | None):
    return _current_user_id.set(user_id)


def reset_current_user_id(token) -> None:
    _current_user_id.reset(token)


@contextmanager
def authenticated_as(user_id: str | None) -> Iterator[None]:
    token = set_current_user_id(user_id)
    try:
        yield
    finally:
        reset_current_user_id(token)
