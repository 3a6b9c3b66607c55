# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ComponentHost - loads templates and defines components bound to a Store.

Example:
    >>> host = ComponentHost(
    ...     ['/components/user.html'],
    ...     {'user': {'name': 'Ann'}},
    ...     version='3',
    ...     fetch=fetch_text,
    ...     behaviors={'user-card': UserCardBehavior},
    ... )
    >>> await host.load_components()
    ['user-card']
    >>> card = host.create('user-card')
    >>> await card.connect()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping, MutableMapping

from .components import HOOKS, Component, generate_id
from .exceptions import ComponentDefinitionError
from .store import Dispatcher, Store
from .templates import Template, extract_templates

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[str | None]]


def _class_name(component_name: str) -> str:
    """'user-card' -> 'UserCard'"""
    parts = component_name.replace('_', '-').split('-')
    return ''.join(part[:1].upper() + part[1:] for part in parts if part) or 'Component'


class ComponentHost:
    """Owns the application Store and the registry of defined components.

    Args:
        sources: Locations of the template sources, fetched in this order.
        data: Initial data tree for the Store.
        version: Cache tag. When set, the concatenated template text is
            read from and written to cache under 'components-<version>'.
        fetch: Coroutine function returning the text at a location, or
            None when the response was not successful.
        cache: Mutable mapping used as template cache (default: a dict).
        id_factory: Callable producing component ids (default: 12 hex digits).
        behaviors: Mixin classes providing hooks, keyed by component name.
        dispatcher: Dispatcher for the Store's subscriber callbacks.
    """

    def __init__(
        self,
        sources: Iterable[str],
        data: Mapping[str, Any] | None = None,
        version: str | None = None,
        *,
        fetch: Fetch,
        cache: MutableMapping[str, str] | None = None,
        id_factory: Callable[[], str] | None = None,
        behaviors: Mapping[str, type] | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.store = Store(data, dispatcher=dispatcher)
        self.sources = list(sources)
        self.version = version
        self.cache: MutableMapping[str, str] = cache if cache is not None else {}
        self.id_factory = id_factory or generate_id
        self.behaviors = dict(behaviors or {})
        self.registry: dict[str, type[Component]] = {}
        self._fetch = fetch

    def __repr__(self) -> str:
        return f"ComponentHost({list(self.registry)}, version={self.version!r})"

    @property
    def cache_key(self) -> str | None:
        if not self.version:
            return None
        return f"components-{self.version}"

    async def fetch_template_text(self) -> str:
        """Fetch every source concurrently and join the successful texts."""
        texts = await asyncio.gather(*(self._fetch(url) for url in self.sources))
        skipped = [url for url, text in zip(self.sources, texts) if text is None]
        if skipped:
            logger.warning("Skipped failed template sources: %s", skipped)
        return ''.join(text for text in texts if text is not None)

    async def load_components(self) -> list[str]:
        """Load template text (through the cache if versioned) and define components.

        Returns:
            Names of the components defined.
        """
        key = self.cache_key
        if key is None:
            text = await self.fetch_template_text()
        else:
            text = self.cache.get(key)
            if text:
                logger.debug("Templates loaded from cache '%s'", key)
            else:
                text = await self.fetch_template_text()
                self.cache[key] = text

        names = []
        for template in extract_templates(text):
            try:
                defined = self.define_component(template)
            except ComponentDefinitionError as exc:
                logger.warning("Template skipped: %s", exc)
                continue
            if defined is not None:
                names.append(template.id)
        return names

    def define_component(self, template: Template) -> type[Component] | None:
        """Create and register the component class for template.

        Returns:
            The new class, or None if the template has no id.

        Raises:
            ComponentDefinitionError: If the name is already defined.
        """
        name = template.id
        if not name:
            logger.warning("Template without id skipped")
            return None
        if name in self.registry:
            raise ComponentDefinitionError(f"Component '{name}' already defined")

        behavior = self.behaviors.get(name)
        bases = (behavior, Component) if behavior is not None else (Component,)
        cls = type(_class_name(name), bases, {
            'name': name,
            'template': template,
            'host': self,
            'observed_attributes': template.observed_attributes,
        })
        self.registry[name] = cls
        logger.debug(
            "Defined component '%s' (hooks: %s)",
            name, [hook for hook in HOOKS if callable(getattr(cls, hook, None))],
        )
        return cls

    def create(self, name: str, **attributes: Any) -> Component:
        """Instantiate the component registered as name.

        Raises:
            ComponentDefinitionError: If name is not defined.
        """
        cls = self.registry.get(name)
        if cls is None:
            raise ComponentDefinitionError(f"Unknown component '{name}'")
        return cls(**attributes)
