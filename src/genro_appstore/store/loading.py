# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Conversion between plain nested mappings and the node tree.

Mappings become Branch nodes (recursively), everything else becomes a
Leaf. Reading a branch back produces a fresh nested dict.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..node import Branch, Leaf, Node


def to_node(value: Any) -> Node:
    """Convert a value to a node, recursing into mappings."""
    if isinstance(value, Mapping):
        branch = Branch()
        load_from_dict(branch, value)
        return branch
    return Leaf(value)


def load_from_dict(branch: Branch, source: Mapping[str, Any]) -> None:
    """Load a nested mapping into branch, replacing same-named children.

    Raises:
        TypeError: If a key is not a string.
    """
    for label, value in source.items():
        if not isinstance(label, str):
            raise TypeError(f"keys must be str, not {type(label).__name__}")
        branch.children[label] = to_node(value)


def from_node(node: Node) -> Any:
    """Return the plain value of a node (dict for branches)."""
    if isinstance(node, Branch):
        return {label: from_node(child) for label, child in node.children.items()}
    return node.value
