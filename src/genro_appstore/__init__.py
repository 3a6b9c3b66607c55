# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-AppStore - Reactive application store with template components.

A lightweight, zero-dependency library providing a shared hierarchical
data store with staged writes and prefix-aware subscriptions, plus a thin
host that turns HTML templates into components bound to the store.
"""

__version__ = "0.1.0"

from .components import Component, call_hook, generate_id, implements
from .exceptions import (
    AppStoreError,
    ComponentDefinitionError,
    ComponentError,
    PathMissingError,
    SubscriberCallbackError,
)
from .host import ComponentHost
from .node import MISSING, Branch, Leaf, resolve
from .store import CommitResult, Dispatcher, Store
from .templates import Template, extract_templates

__all__ = [
    # Core classes
    "Store",
    "CommitResult",
    "Dispatcher",
    # Tree
    "MISSING",
    "Branch",
    "Leaf",
    "resolve",
    # Components
    "Component",
    "ComponentHost",
    "Template",
    "extract_templates",
    "call_hook",
    "implements",
    "generate_id",
    # Exceptions
    "AppStoreError",
    "PathMissingError",
    "SubscriberCallbackError",
    "ComponentError",
    "ComponentDefinitionError",
]
