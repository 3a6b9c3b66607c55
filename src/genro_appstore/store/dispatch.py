# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Fire-and-forget delivery of subscriber callbacks.

Each notification runs as its own asyncio task. The writer that triggered
it never waits for it, and a failing callback is logged and isolated: it
neither reaches the writer nor prevents delivery to other callbacks.

Example:
    >>> dispatcher = Dispatcher()
    >>> dispatcher.dispatch(callback, 'user.name', 'Bob')
    >>> await dispatcher.drain()  # only in tests / shutdown
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from ..exceptions import SubscriberCallbackError

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[[str, Any], Union[None, Awaitable[None]]]
ErrorHook = Callable[[SubscriberCallbackError], Any]


class Dispatcher:
    """Runs subscriber callbacks as independent units of work.

    Args:
        on_error: Optional hook called with a SubscriberCallbackError after
            a callback failure has been logged.
    """

    def __init__(self, on_error: ErrorHook | None = None) -> None:
        self._on_error = on_error
        self._tasks: set[asyncio.Task[None]] = set()

    def __repr__(self) -> str:
        return f"Dispatcher(pending={self.pending})"

    @property
    def pending(self) -> int:
        """Number of dispatched callbacks not yet finished."""
        return len(self._tasks)

    def dispatch(self, callback: SubscriberCallback, path: str, value: Any) -> None:
        """Schedule callback(path, value) without waiting for it.

        Outside a running event loop the callback runs inline, with the
        same failure isolation.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._run_inline(callback, path, value)
            return
        task = loop.create_task(self._run(callback, path, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every dispatched callback has finished.

        Callbacks dispatched while draining are waited for as well.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, callback: SubscriberCallback, path: str, value: Any) -> None:
        try:
            result = callback(path, value)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            self._report(callback, path, exc)

    def _run_inline(self, callback: SubscriberCallback, path: str, value: Any) -> None:
        try:
            result = callback(path, value)
            if inspect.isawaitable(result):
                asyncio.run(_awaited(result))
        except Exception as exc:
            self._report(callback, path, exc)

    def _report(self, callback: SubscriberCallback, path: str, exc: Exception) -> None:
        error = SubscriberCallbackError(path, callback, exc)
        logger.exception("%s", error)
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception:
            logger.exception("Error hook failed for '%s'", path)


async def _awaited(awaitable: Awaitable[Any]) -> Any:
    return await awaitable
