"""
compare.py - Ordering relation over sort keys

Keys are compared field by field, and ties fall back to the original index,
which makes the resulting order total and stable:

    band -> weight -> group key -> name rule -> original index

Bands pin anchored declarations. With k anchors before it, an ordinary item
is in band 2k and an anchor is alone in band 2k+1, so no item ever crosses a
package clause or an import.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import List, Sequence

from .classify import COMMON_PREFIXES, SortKey, name_weight, trim_common_prefix


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_names(a: str, b: str) -> int:
    """The secondary name rule: weight, then common prefix, then the name."""
    diff = _cmp(name_weight(a), name_weight(b))
    if diff:
        return diff

    a_prefix, a_rest = trim_common_prefix(a)
    b_prefix, b_rest = trim_common_prefix(b)

    if a_prefix and b_prefix:
        diff = _cmp(COMMON_PREFIXES.index(a_prefix), COMMON_PREFIXES.index(b_prefix))
        if diff:
            return diff
        diff = _cmp(a_rest, b_rest)
    elif a_prefix or b_prefix:
        # A recognised prefix sorts before a plain name.
        return -1 if a_prefix else 1

    return diff or _cmp(a, b)


def compare_keys(a: SortKey, b: SortKey) -> int:
    """Compare two keys, ignoring anchoring and position."""
    diff = _cmp(a.weight, b.weight)
    if diff:
        return diff
    diff = _cmp(a.group_key, b.group_key)
    if diff:
        return diff
    return compare_names(a.display_name, b.display_name)


@dataclass(frozen=True)
class Entry:
    """A key together with its place in the original list."""
    key: SortKey
    index: int
    band: int


def rank(keys: Sequence[SortKey]) -> List[Entry]:
    entries = []
    anchors = 0
    for index, key in enumerate(keys):
        if key.anchored:
            entries.append(Entry(key, index, 2 * anchors + 1))
            anchors += 1
        else:
            entries.append(Entry(key, index, 2 * anchors))
    return entries


def compare_entries(a: Entry, b: Entry) -> int:
    diff = _cmp(a.band, b.band)
    if diff:
        return diff
    if not (a.key.anchored or b.key.anchored):
        diff = compare_keys(a.key, b.key)
        if diff:
            return diff
    return _cmp(a.index, b.index)


def sorted_order(keys: Sequence[SortKey]) -> List[int]:
    """Permutation of original indices that puts keys in canonical order."""
    entries = sorted(rank(keys), key=cmp_to_key(compare_entries))
    return [entry.index for entry in entries]
