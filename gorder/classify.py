"""
classify.py - Sort keys for declarations and interface members

Every list item gets a SortKey (group_key, weight, display_name). Lower weight
sorts first; the group key keeps a type together with its methods; the
display name is compared with the name rule in gorder.compare.

DECLARATION BUCKETS (weight):
    package / import           anchored, never moves
    anything else              -1, original order (const, var, ...)
    func main                  10
    func NewThing (exported)   29
    func Thing (exported)      30
    func newThing              50
    type T / func (T) M        100, grouped under T
    func thing                 200

INTERFACE MEMBERS (weight):
    embedded (io.Reader)       0
    methods                    1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import InvariantViolation
from .syntax import (
    Declaration,
    Embedded,
    Function,
    InterfaceMember,
    Named,
    Other,
    PackageOrImport,
    Type,
    is_exported,
)

ANCHORED_WEIGHT = -2
OTHER_WEIGHT = -1
MAIN_FUNC_WEIGHT = 10
EXPORTED_FUNC_WEIGHT = 30  # one less for NewThing
CONSTRUCTOR_FUNC_WEIGHT = 50
TYPE_WEIGHT = 100
FUNC_WEIGHT = 200

EMBEDDED_WEIGHT = 0
METHOD_WEIGHT = 1

# Member-name component of a type declaration. Collates before any method
# name of the same group, see compare.name_weight.
TYPE_MARKER = ""

# Tried in this order; the first match wins, so "Error..." strips as "Err".
COMMON_PREFIXES = (
    "Is", "Has", "Get", "All", "Create", "New",
    "Err", "Error", "Init", "Find", "Set", "Render",
)


@dataclass(frozen=True)
class SortKey:
    group_key: str
    weight: int
    display_name: str

    @property
    def anchored(self) -> bool:
        return self.weight == ANCHORED_WEIGHT


def split_qualified(name: str) -> Tuple[str, str]:
    """Split "T.M" into ("T", "M") and "M" into ("", "M").

    Raises InvariantViolation for anything with more than one dot; no valid
    declaration produces such a name.
    """
    parts = name.split(".")
    if len(parts) > 2:
        raise InvariantViolation(f"cannot key {name!r}: too many dot-separated parts")
    if len(parts) == 1:
        return "", name
    return parts[0], parts[1]


def trim_common_prefix(name: str) -> Tuple[str, str]:
    """Return (prefix, remainder); prefix is "" when none of COMMON_PREFIXES match.

    The prefix is reported in its canonical case, so "getX" and "GetX" both
    give ("Get", "X").
    """
    for prefix in COMMON_PREFIXES:
        if name.startswith(prefix):
            return prefix, name[len(prefix):]
        lower = prefix.lower()
        if name.startswith(lower):
            return prefix, name[len(lower):]
    return "", name


def classify_declaration(decl: Declaration) -> SortKey:
    """Compute the sort key of one top-level declaration."""
    if isinstance(decl, PackageOrImport):
        return SortKey("", ANCHORED_WEIGHT, "")
    if isinstance(decl, Other):
        return SortKey("", OTHER_WEIGHT, "")
    if isinstance(decl, Type):
        return _grouped(decl.name, TYPE_MARKER)
    if isinstance(decl, Function):
        if decl.receiver:
            # Methods sit below their receiver's type declaration.
            return _grouped(decl.receiver, decl.name)
        return SortKey("", _free_function_weight(decl), decl.name)
    raise InvariantViolation(f"unknown declaration shape {decl!r}")


def classify_member(member: InterfaceMember) -> SortKey:
    """Compute the sort key of one interface element."""
    if isinstance(member, Embedded):
        if _is_type_name(member.type_expr):
            group, name = split_qualified(member.type_expr)
            return SortKey(group, EMBEDDED_WEIGHT, name)
        return SortKey("", EMBEDDED_WEIGHT, member.type_expr)
    if isinstance(member, Named):
        return SortKey("", METHOD_WEIGHT, member.name)
    raise InvariantViolation(f"unknown interface member shape {member!r}")


def _grouped(receiver: str, name: str) -> SortKey:
    group, member = split_qualified(f"{receiver}.{name}")
    return SortKey(group, TYPE_WEIGHT, member)


def _free_function_weight(func: Function) -> int:
    name = func.name
    if name == "main":
        return MAIN_FUNC_WEIGHT
    if name.startswith("new"):
        return CONSTRUCTOR_FUNC_WEIGHT
    if func.exported:
        if name.startswith("New"):
            return EXPORTED_FUNC_WEIGHT - 1
        return EXPORTED_FUNC_WEIGHT
    return FUNC_WEIGHT


def _is_type_name(expr: str) -> bool:
    """True for identifiers and dotted names: Reader, io.Reader."""
    return bool(expr) and all(part.isidentifier() for part in expr.split("."))


def name_weight(name: str) -> int:
    """Adjustment applied before any name comparison inside a group."""
    weight = 100
    if name == TYPE_MARKER:
        weight -= 5
    if is_exported(name):
        weight -= 2
    if name.startswith("New"):
        weight -= 1
    return weight
