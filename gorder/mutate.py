"""The only code that writes to a tree."""

from __future__ import annotations

from typing import Sequence

from .errors import InvariantViolation
from .syntax import NodeList


def apply_order(node_list: NodeList, order: Sequence[int]) -> bool:
    """Rearrange node_list.items so that item i is the old item order[i].

    Nodes are moved, never copied, so their comments go with them. Slots
    stay where they are. Returns True when anything moved.
    """
    if sorted(order) != list(range(len(node_list.items))):
        raise InvariantViolation(
            f"order {list(order)} is not a permutation of {len(node_list.items)} items"
        )
    if list(order) == sorted(order):
        return False
    node_list.items[:] = [node_list.items[i] for i in order]
    return True
