"""In-process "configuration updated" signal."""

from __future__ import annotations

import itertools
from collections.abc import Callable

import structlog

logger = structlog.get_logger()

Handler = Callable[[], object]


class ChangeNotifier:
    """Zero-payload publish/subscribe within one running process.

    Every :meth:`subscribe` call is its own registration, even for a handler
    that is already registered, and the returned function removes exactly
    that registration.  Nothing is delivered across processes.
    """

    def __init__(self) -> None:
        self._handlers: dict[int, Handler] = {}
        self._tokens = itertools.count()

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        token = next(self._tokens)
        self._handlers[token] = handler

        def unsubscribe() -> None:
            self._handlers.pop(token, None)

        return unsubscribe

    def notify(self) -> None:
        """Run every registered handler once."""
        # Snapshot so handlers may (un)subscribe during the broadcast
        for token, handler in list(self._handlers.items()):
            try:
                handler()
            except Exception as e:
                logger.warning("config_update_handler_failed", token=token, error=str(e))

    def __len__(self) -> int:
        return len(self._handlers)
