# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store - the shared reactive data tree of an application.

This module provides the Store class: a nested key-value tree addressed by
dotted paths, with a staging buffer for deferred writes and prefix-aware
subscriptions.

Key Features:
    - **Path access**: 'user.address.city' reads and writes nested values
    - **No autocreate**: writes require every intermediate branch to exist
    - **Staged writes**: stage() buffers values, commit() applies them
    - **Prefix notification**: a write to 'a.b' reaches subscribers of 'a'
    - **Fire-and-forget**: subscriber callbacks never block the writer

Example:
    Basic usage::

        store = Store({'user': {'name': 'Ann'}})
        await store.subscribe('user', 'c1', on_user)   # on_user('user', {...})
        await store.set('user.name', 'Bob')            # on_user('user.name', 'Bob')
        await store.get('user.age')                    # MISSING

    Staged writes::

        await store.stage('user.name', 'Cy')
        await store.stage('user.age', 40)
        result = await store.commit()
        result.applied  # ['user.name', 'user.age']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..exceptions import PathMissingError
from ..node import MISSING, Branch, resolve, split_path
from .dispatch import Dispatcher
from .loading import from_node, load_from_dict, to_node
from .subscription import SubscriptionMixin

logger = logging.getLogger(__name__)


@dataclass
class CommitResult:
    """Outcome of Store.commit().

    Attributes:
        applied: Keys written, in commit order.
        failed: Keys whose write failed, mapped to the error.
    """

    applied: list[str] = field(default_factory=list)
    failed: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class Store(SubscriptionMixin):
    """A nested, path-addressed data tree with subscriptions.

    The async methods (get, set, delete, stage, commit, subscribe,
    unsubscribe) are the public surface used by components. Each of them
    mutates state in a single synchronous step; the sync counterparts
    get_item, set_item and del_item do the actual work.

    Args:
        data: Optional initial tree as a nested mapping.
        dispatcher: Dispatcher used for subscriber callbacks. A new one is
            created if not given.

    Example:
        >>> store = Store({'user': {'name': 'Ann'}})
        >>> store.get_item('user.name')
        'Ann'
    """

    __slots__ = ('_data', '_stage', '_subscriptions', '_dispatcher')

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self._data = Branch()
        self._stage: dict[str, Any] = {}
        self._subscriptions = {}
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher()

        if data is not None:
            if not isinstance(data, Mapping):
                raise TypeError(
                    f"data must be a mapping, not {type(data).__name__}"
                )
            load_from_dict(self._data, data)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return (
            f"Store({list(self._data.children)}, "
            f"staged={len(self._stage)}, topics={len(self._subscriptions)})"
        )

    def __contains__(self, path: str) -> bool:
        """Check if path currently holds a value."""
        return self.get_item(path) is not MISSING

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def pending(self) -> dict[str, Any]:
        """Copy of the staged writes not yet committed."""
        return dict(self._stage)

    # ==================== Path Utilities ====================

    def _parent_of(self, path: str) -> tuple[Branch, str]:
        """Walk to the branch containing the last segment of path.

        Returns:
            Tuple of (parent_branch, final_label)

        Raises:
            PathMissingError: If an intermediate segment is absent or a leaf.
        """
        parts = split_path(path)
        current = self._data
        for part in parts[:-1]:
            node = current.children.get(part)
            if node is None:
                raise PathMissingError(path, part)
            if not isinstance(node, Branch):
                raise PathMissingError(path, part, reason='is a leaf')
            current = node
        return current, parts[-1]

    # ==================== Sync API ====================

    def get_item(self, path: str, default: Any = MISSING) -> Any:
        """Return the value at path, or default if unreachable.

        Branches are returned as plain nested dicts.
        """
        node = resolve(self._data, path)
        if node is None:
            return default
        return from_node(node)

    def set_item(self, path: str, value: Any) -> None:
        """Write value at path and notify subscribers of every prefix.

        Raises:
            PathMissingError: If an intermediate branch does not exist.
        """
        parent, label = self._parent_of(path)
        parent.children[label] = to_node(value)
        logger.debug("Set '%s'", path)
        self._notify(path, value)

    def del_item(self, path: str) -> None:
        """Remove the value at path. Subscribers are not notified.

        Raises:
            PathMissingError: If an intermediate branch does not exist.
        """
        parent, label = self._parent_of(path)
        if parent.children.pop(label, None) is not None:
            logger.debug("Deleted '%s'", path)

    def as_dict(self) -> dict[str, Any]:
        """Return the whole tree as a plain nested dict."""
        return from_node(self._data)

    def discard(self, key: str | None = None) -> None:
        """Drop one staged write, or all of them if key is None."""
        if key is None:
            self._stage.clear()
        else:
            self._stage.pop(key, None)

    # ==================== Async API ====================

    async def get(self, path: str) -> Any:
        """Return the value at path, or MISSING if unreachable."""
        return self.get_item(path)

    async def set(self, path: str, value: Any) -> None:
        """Write value at path (last write wins) and notify subscribers."""
        self.set_item(path, value)

    async def delete(self, path: str) -> None:
        """Remove the value at path without notifying subscribers."""
        self.del_item(path)

    async def stage(self, key: str, value: Any) -> None:
        """Buffer a write for the next commit, replacing any pending one."""
        split_path(key)
        self._stage[key] = value

    async def commit(self) -> CommitResult:
        """Apply and clear all staged writes in the order they were staged.

        Each entry leaves the buffer before it is written, and a failing
        entry does not stop the others.

        Returns:
            CommitResult listing applied and failed keys.
        """
        result = CommitResult()
        while self._stage:
            key = next(iter(self._stage))
            value = self._stage.pop(key)
            try:
                self.set_item(key, value)
            except Exception as exc:
                logger.warning("Staged write to '%s' failed: %s", key, exc)
                result.failed[key] = exc
            else:
                result.applied.append(key)
        return result
