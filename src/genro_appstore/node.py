# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store tree nodes and path resolution.

The data tree is made of two node kinds:
- Leaf: holds a single value of any type
- Branch: holds a dict of labelled child nodes

Traversal only descends into branches, so reaching a leaf before the
path is exhausted is an explicit "missing" case rather than an error.
"""

from __future__ import annotations

from typing import Any, Union


class _Missing:
    """Type of the MISSING sentinel."""

    __slots__ = ()
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'MISSING'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return 'MISSING'


MISSING = _Missing()
"""Returned by reads of unreachable paths. Distinct from a stored None."""


class Leaf:
    """A node holding a scalar (non-dict) value.

    Example:
        >>> Leaf('Ann').value
        'Ann'
    """

    __slots__ = ('value',)

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Leaf({self.value!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Leaf) and other.value == self.value

    @property
    def is_branch(self) -> bool:
        return False

    @property
    def is_leaf(self) -> bool:
        return True


class Branch:
    """A node holding labelled children.

    Example:
        >>> b = Branch({'name': Leaf('Ann')})
        >>> b.children['name'].value
        'Ann'
    """

    __slots__ = ('children',)

    def __init__(self, children: dict[str, Node] | None = None) -> None:
        self.children: dict[str, Node] = children if children is not None else {}

    def __repr__(self) -> str:
        return f"Branch({list(self.children.keys())})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Branch) and other.children == self.children

    def __len__(self) -> int:
        return len(self.children)

    def __contains__(self, label: str) -> bool:
        return label in self.children

    @property
    def is_branch(self) -> bool:
        return True

    @property
    def is_leaf(self) -> bool:
        return False


Node = Union[Leaf, Branch]


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments.

    Raises:
        ValueError: If path is empty.
    """
    if not path:
        raise ValueError("Empty path")
    return path.split('.')


def resolve(root: Branch, path: str) -> Node | None:
    """Walk path from root and return the node it addresses.

    Args:
        root: The branch to start from.
        path: Dotted path ('user.name').

    Returns:
        The addressed node, or None if path is empty, any segment is
        absent, or the walk reaches a leaf before the last segment.
    """
    if not path:
        return None
    current: Node = root
    for segment in path.split('.'):
        if not isinstance(current, Branch):
            return None
        child = current.children.get(segment)
        if child is None:
            return None
        current = child
    return current
