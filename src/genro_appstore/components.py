# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Component base class and lifecycle hook pipeline.

A component class is generated by ComponentHost for each template. Its
behavior comes from an optional mixin that may define any of these hooks
(sync or async):

- init(): first connection only
- handle_connected()
- handle_disconnected()
- handle_adopted()
- handle_attribute_changed(name, old, new)

A hook that the class does not define is simply skipped. A hook that is
defined and raises propagates to the caller.
"""

from __future__ import annotations

import inspect
import secrets
from typing import TYPE_CHECKING, Any, ClassVar

from .store.dispatch import SubscriberCallback

if TYPE_CHECKING:
    from .host import ComponentHost
    from .store import Store
    from .templates import Template

HOOKS = (
    'init',
    'handle_connected',
    'handle_disconnected',
    'handle_adopted',
    'handle_attribute_changed',
)


def generate_id() -> str:
    """Return a random 12 hex digit component id."""
    return secrets.token_hex(6)


def implements(component: Any, hook: str) -> bool:
    """True if the component's class defines the given hook."""
    return callable(getattr(type(component), hook, None))


async def call_hook(component: Any, hook: str, *args: Any) -> Any:
    """Run hook on component if it implements it.

    Returns:
        The hook's result, or None if the hook is not implemented.
    """
    if not implements(component, hook):
        return None
    result = getattr(component, hook)(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class Component:
    """Base class of every defined component.

    Subclasses are created by ComponentHost.define_component, which fills
    the class attributes below.

    Attributes:
        component_id: Identity used for all store subscriptions.
        attributes: Current attribute values.
        content: Template content cloned for this instance.
        connected: True once init() has run.
    """

    name: ClassVar[str]
    template: ClassVar[Template]
    host: ClassVar[ComponentHost]
    observed_attributes: ClassVar[tuple[str, ...]] = ()

    def __init__(self, **attributes: Any) -> None:
        self.component_id: str = self.host.id_factory()
        self.attributes: dict[str, Any] = dict(attributes)
        self.content: str = self.template.content
        self.connected = False
        self._topics: set[str] = set()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, id={self.component_id!r})"

    @property
    def store(self) -> Store:
        return self.host.store

    async def subscribe(self, key: str, callback: SubscriberCallback) -> None:
        """Subscribe callback to key under this component's id."""
        self._topics.add(key)
        await self.store.subscribe(key, self.component_id, callback)

    async def unsubscribe(self, key: str) -> None:
        self._topics.discard(key)
        await self.store.unsubscribe(key, self.component_id)

    async def unsubscribe_all(self) -> None:
        """Drop every subscription made by this component."""
        for key in sorted(self._topics):
            await self.unsubscribe(key)

    # ==================== Lifecycle ====================

    async def connect(self) -> None:
        """Attach the component: init() on first connection, then handle_connected()."""
        if not self.connected:
            await call_hook(self, 'init')
            self.connected = True
        await call_hook(self, 'handle_connected')

    async def disconnect(self) -> None:
        await call_hook(self, 'handle_disconnected')

    async def adopt(self) -> None:
        await call_hook(self, 'handle_adopted')

    async def attribute_changed(self, name: str, old: Any, new: Any) -> None:
        """Forward a change of an observed attribute to handle_attribute_changed()."""
        if name not in self.observed_attributes:
            return
        await call_hook(self, 'handle_attribute_changed', name, old, new)

    async def set_attribute(self, name: str, value: Any) -> None:
        """Set an attribute and forward the change if it is observed."""
        old = self.attributes.get(name)
        self.attributes[name] = value
        await self.attribute_changed(name, old, value)
