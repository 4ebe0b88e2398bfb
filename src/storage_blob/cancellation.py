"""Cooperative cancellation handle passed through to the transport."""

from __future__ import annotations

import threading
from typing import ClassVar


class CancellationToken:
    """A one-shot cancellation flag.

    The transport checks the token before a request is sent and again when
    the response arrives. Cancelling does not abort a request that is
    already on the wire, so a cancelled write may still take effect on the
    service.
    """

    NONE: ClassVar[CancellationToken]

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()


class _NoneToken(CancellationToken):
    def cancel(self) -> None:
        pass


CancellationToken.NONE = _NoneToken()


__all__ = ["CancellationToken"]
