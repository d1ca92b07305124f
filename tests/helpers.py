"""Shared test helpers for retrykit tests."""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import httpx


def http_error(status: int, url: str = "https://api.example.test/universities") -> httpx.HTTPStatusError:
    """Build an httpx.HTTPStatusError carrying a real response with ``status``."""
    request = httpx.Request("GET", url)
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class ResponseError(Exception):
    """Error exposing ``response.status``, like a typical HTTP client wrapper."""

    def __init__(self, status: int | None) -> None:
        super().__init__(f"status {status}")
        self.response = {"status": status} if status is not None else {}


def scripted(outcomes: Iterable[Any]) -> tuple[Callable[[], Awaitable[Any]], list[int]]:
    """Build an async operation that plays back ``outcomes`` in order.

    Exceptions are raised, anything else is returned. The last outcome
    repeats once the script runs out. Returns the operation and a one-item
    list holding the call count.
    """
    script = list(outcomes)
    calls = [0]

    async def operation() -> Any:
        index = min(calls[0], len(script) - 1)
        calls[0] += 1
        outcome = script[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return operation, calls
