# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store package - the reactive application data tree.

The package is organized into:
- core: Store class with path access, staging and commit
- loading: Conversion between plain mappings and the node tree
- subscription: Topic registry and prefix-aware notification
- dispatch: Fire-and-forget delivery of subscriber callbacks

Example:
    >>> from genro_appstore import Store
    >>> store = Store({'config': {'name': 'MyApp'}})
    >>> store.get_item('config.name')
    'MyApp'
"""

from .core import CommitResult, Store
from .dispatch import Dispatcher, SubscriberCallback
from .subscription import SubscriptionMixin

__all__ = [
    "Store",
    "CommitResult",
    "Dispatcher",
    "SubscriberCallback",
    "SubscriptionMixin",
]
