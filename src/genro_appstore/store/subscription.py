# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Subscription registry for Store.

Subscriptions are keyed by topic (a dotted path) and subscriber id. A
write to 'a.b.c' is delivered to the topics 'a', 'a.b' and 'a.b.c',
always with the full written path, never the topic.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..node import MISSING, split_path
from .dispatch import SubscriberCallback

if TYPE_CHECKING:
    from .dispatch import Dispatcher

logger = logging.getLogger(__name__)


class SubscriptionMixin:
    """Topic/subscriber registry with prefix-aware notification.

    Expects the host class to provide:
    - _subscriptions: dict[str, dict[str, SubscriberCallback]]
    - _dispatcher: Dispatcher
    - get_item(path): current value or MISSING
    """

    __slots__ = ()

    _subscriptions: dict[str, dict[str, SubscriberCallback]]
    _dispatcher: Dispatcher

    def get_item(self, path: str, default: Any = MISSING) -> Any:
        raise NotImplementedError

    async def subscribe(
        self, topic: str, subscriber_id: str, callback: SubscriberCallback
    ) -> None:
        """Register callback under (topic, subscriber_id).

        Re-subscribing the same pair replaces the previous callback. If the
        topic currently holds a value, callback receives it once as
        (topic, value).

        Example:
            >>> await store.subscribe('user', 'c1', on_user)
        """
        split_path(topic)
        self._subscriptions.setdefault(topic, {})[subscriber_id] = callback
        logger.debug("Subscribed %r to '%s'", subscriber_id, topic)
        current = self.get_item(topic)
        if current is not MISSING:
            self._dispatcher.dispatch(callback, topic, current)

    async def unsubscribe(self, topic: str, subscriber_id: str) -> None:
        """Remove (topic, subscriber_id). Unknown pairs are ignored."""
        bucket = self._subscriptions.get(topic)
        if bucket is None or subscriber_id not in bucket:
            return
        del bucket[subscriber_id]
        if not bucket:
            del self._subscriptions[topic]
        logger.debug("Unsubscribed %r from '%s'", subscriber_id, topic)

    def unsubscribe_all(self, subscriber_id: str) -> list[str]:
        """Remove subscriber_id from every topic.

        Returns:
            The topics it was removed from.
        """
        removed = []
        for topic in list(self._subscriptions):
            bucket = self._subscriptions[topic]
            if bucket.pop(subscriber_id, None) is not None:
                removed.append(topic)
                if not bucket:
                    del self._subscriptions[topic]
        return removed

    def subscribers(self, topic: str) -> list[str]:
        """Return the subscriber ids registered on topic, in order."""
        return list(self._subscriptions.get(topic, ()))

    @property
    def topics(self) -> list[str]:
        """Topics with at least one subscriber."""
        return list(self._subscriptions)

    def _collect_callbacks(self, path: str) -> list[SubscriberCallback]:
        """Callbacks for every prefix of path, shortest topic first."""
        segments = split_path(path)
        callbacks: list[SubscriberCallback] = []
        for i in range(1, len(segments) + 1):
            bucket = self._subscriptions.get('.'.join(segments[:i]))
            if bucket:
                callbacks.extend(bucket.values())
        return callbacks

    def _notify(self, path: str, value: Any) -> None:
        """Dispatch (path, value) to all interested subscribers."""
        for callback in self._collect_callbacks(path):
            self._dispatcher.dispatch(callback, path, value)
