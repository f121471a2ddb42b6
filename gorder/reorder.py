"""Apply the canonical order to every list of a parsed file."""

from __future__ import annotations

import logging

from .classify import classify_declaration, classify_member
from .compare import sorted_order
from .mutate import apply_order
from .syntax import ListKind, NodeList, SourceFile, parse, render
from .walk import iter_lists

logger = logging.getLogger(__name__)


def sort_list(node_list: NodeList) -> bool:
    """Sort one declaration or member list in place. True if it changed."""
    if node_list.kind is ListKind.DECLARATIONS:
        keys = [classify_declaration(item.shape) for item in node_list.items]
    else:
        keys = [classify_member(item.shape) for item in node_list.items]
    return apply_order(node_list, sorted_order(keys))


def reorder(tree: SourceFile) -> int:
    """Sort every list of tree; return how many of them changed."""
    changed = 0
    for node_list in iter_lists(tree):
        if sort_list(node_list):
            changed += 1
            logger.debug("reordered %d %s", len(node_list), node_list.kind.name.lower())
    return changed


def reorder_source(source: bytes) -> bytes:
    """Parse, reorder and print Go source."""
    tree = parse(source)
    reorder(tree)
    return render(tree)
