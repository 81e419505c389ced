"""A single eventual outcome that many observers can await."""

import asyncio
from collections.abc import Awaitable, Callable, Generator
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class SharedResult(Generic[T]):
    """Handle on one in-flight (or finished) fetch.

    The underlying awaitable runs at most once. Every ``await`` observes the
    same outcome, and cancelling an observer never cancels the fetch itself,
    so a superseded caller can walk away while the result still lands.
    """

    def __init__(self, future: "asyncio.Future[T]") -> None:
        self._future = future

    @classmethod
    def start(cls, awaitable: Awaitable[T]) -> "SharedResult[T]":
        """Schedule ``awaitable`` on the running loop and share its outcome."""
        return cls(asyncio.ensure_future(awaitable))

    @classmethod
    def resolved(cls, value: T) -> "SharedResult[T]":
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        future.set_result(value)
        return cls(future)

    @classmethod
    def failed(cls, error: BaseException) -> "SharedResult[T]":
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        future.set_exception(error)
        return cls(future)

    def __await__(self) -> Generator[Any, None, T]:
        return asyncio.shield(self._future).__await__()

    def done(self) -> bool:
        return self._future.done()

    def exception(self) -> BaseException | None:
        """Error the fetch ended with, if any. Only valid once ``done()``.

        A cancelled fetch reports ``asyncio.CancelledError``.
        """
        if self._future.cancelled():
            return asyncio.CancelledError()
        return self._future.exception()

    def result(self) -> T:
        return self._future.result()

    def add_done_callback(self, callback: Callable[["SharedResult[T]"], None]) -> None:
        """Run ``callback(self)`` once the outcome is known (immediately scheduled if done)."""
        self._future.add_done_callback(lambda _: callback(self))

    def cancel(self) -> bool:
        """Abort the underlying fetch (service teardown)."""
        return self._future.cancel()
