"""A single, process-wide hook that can rewrite requests before they are sent."""

from __future__ import annotations

import abc
from typing import Callable

from yab.transport.interface import Request


class RequestInterceptor(abc.ABC):
    """Modifies a request before it is sent."""

    @abc.abstractmethod
    def apply(self, request: Request) -> Request:
        """Mutate and return the request, raising to abort the call."""


_registered: RequestInterceptor | None = None


def register_interceptor(interceptor: RequestInterceptor | None) -> Callable[[], None]:
    """Make ``interceptor`` the one used by :func:`apply_interceptor`.

    Any previously registered interceptor is replaced. The returned function
    undoes this registration.
    """
    global _registered
    previous = _registered
    _registered = interceptor

    def restore() -> None:
        global _registered
        _registered = previous

    return restore


def registered_interceptor() -> RequestInterceptor | None:
    """Return the interceptor currently in use, or None."""
    return _registered


def apply_interceptor(request: Request) -> Request:
    """Run the registered interceptor on ``request``, if there is one."""
    if _registered is None:
        return request
    return _registered.apply(request)