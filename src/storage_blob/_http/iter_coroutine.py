"""Drive a non-suspending coroutine to completion without an event loop."""

from __future__ import annotations

import typing

_T = typing.TypeVar("_T")


def iter_coroutine(coro: typing.Coroutine[None, None, _T]) -> _T:
    """
    Run ``coro`` by sending it ``None`` once.

    The blocking client shares its operation logic with the async client as
    coroutines; with a ``BlockingTransport`` underneath they never suspend,
    so a single step runs them to the end.

    Raises:
        RuntimeError: If the coroutine suspended instead of returning.
    """
    try:
        coro.send(None)
    except StopIteration as ex:
        return ex.value  # type: ignore [no-any-return]
    else:
        raise RuntimeError(f"coroutine {coro!r} suspended; it needs an event loop")
    finally:
        coro.close()


__all__ = ["iter_coroutine"]
