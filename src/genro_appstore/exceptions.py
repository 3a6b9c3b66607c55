# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""AppStore exceptions."""

from __future__ import annotations

from typing import Any


class AppStoreError(Exception):
    """Base exception for AppStore errors."""

    pass


class PathMissingError(AppStoreError, KeyError):
    """Raised when a write or delete walks through a missing container.

    Intermediate containers are never created on the fly, so writing
    'a.b.c' requires 'a.b' to already hold a branch.

    Attributes:
        path: The full dotted path of the operation.
        segment: The segment that could not be resolved.
    """

    def __init__(self, path: str, segment: str, reason: str = 'not found') -> None:
        self.path = path
        self.segment = segment
        super().__init__(f"Path segment '{segment}' {reason} in '{path}'")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class SubscriberCallbackError(AppStoreError):
    """Wraps a failure raised inside a dispatched subscriber callback.

    Never raised to writers: built for logging and for the dispatcher's
    on_error hook.
    """

    def __init__(self, path: str, callback: Any, error: BaseException) -> None:
        self.path = path
        self.callback = callback
        self.error = error
        name = getattr(callback, '__qualname__', repr(callback))
        super().__init__(f"Subscriber {name} failed on '{path}': {error!r}")


class ComponentError(AppStoreError):
    """Base exception for component host errors."""

    pass


class ComponentDefinitionError(ComponentError):
    """Raised when a component name is defined twice or is unknown."""

    pass
