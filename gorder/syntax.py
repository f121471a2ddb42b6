"""
syntax.py - Comment-aware Go syntax tree for declaration reordering

Go source is parsed with tree-sitter and folded into a small tree that only
knows about the lists gorder reorders: the top-level declaration list and the
member list of every interface type. Everything else is kept as raw bytes, so
rendering an untouched tree gives back the input byte for byte.

LAYOUT:
    NodeList = slot[0] item[0] slot[1] item[1] ... slot[n-1] item[n-1] tail
    Node     = lead part[0] part[1] ... trail

    slot   separator bytes that stay where they are when items move
           (the ';' between members of a single-line interface)
    lead   blank lines and comments above an item; moves with the item
    parts  the item's own text, with nested interface member lists spliced in
    trail  comments on the same line as the end of the item; moves with it

Comment attachment follows what a reader expects from Go source: a comment
block belongs to the declaration below it, a same-line comment belongs to the
declaration on its left (together with a ';' between them when the comment
ends the line). A comment on the line of an interface's '{' stays in the first
slot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple, Union

import tree_sitter_go
from tree_sitter import Language, Node as TSNode, Parser

from .errors import ParseError

GO_LANGUAGE = Language(tree_sitter_go.language())


class ListKind(Enum):
    """What an orderable list holds."""
    DECLARATIONS = auto()  # top-level declarations of a file
    MEMBERS = auto()       # elements of an interface type


# ---------------------------------------------------------------------------
# Classification view of list items
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Function:
    """A function, or a method when receiver is set."""
    name: str
    receiver: Optional[str] = None
    exported: bool = False


@dataclass(frozen=True)
class Type:
    """A type declaration; grouped declarations are named by their first spec."""
    name: str


@dataclass(frozen=True)
class PackageOrImport:
    keyword: str  # "package" or "import"


@dataclass(frozen=True)
class Other:
    """Any other top-level construct (const and var blocks mostly)."""
    kind: str


@dataclass(frozen=True)
class Embedded:
    """An embedded interface element: io.Reader, ~int | ~string, ..."""
    type_expr: str


@dataclass(frozen=True)
class Named:
    """An interface method."""
    name: str
    type_expr: str


Declaration = Union[Function, Type, PackageOrImport, Other]
InterfaceMember = Union[Embedded, Named]


def is_exported(name: str) -> bool:
    """Go exports identifiers whose first rune is an upper case letter."""
    return name[:1].isupper()


# ---------------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Node:
    """One item of an orderable list. Compared by identity."""
    shape: Union[Declaration, InterfaceMember]
    lead: bytes = b""
    parts: List[Union[bytes, NodeList]] = field(default_factory=list)
    trail: bytes = b""

    def lists(self) -> List[NodeList]:
        """Member lists of interfaces nested directly in this item."""
        return [part for part in self.parts if isinstance(part, NodeList)]

    def render(self) -> bytes:
        out = [self.lead]
        for part in self.parts:
            out.append(part if isinstance(part, bytes) else part.render())
        out.append(self.trail)
        return b"".join(out)


@dataclass(eq=False)
class NodeList:
    """An orderable list: items moving through fixed separator slots."""
    kind: ListKind
    items: List[Node] = field(default_factory=list)
    slots: List[bytes] = field(default_factory=list)
    tail: bytes = b""

    def __len__(self) -> int:
        return len(self.items)

    def render(self) -> bytes:
        out = []
        for slot, item in zip(self.slots, self.items):
            out.append(slot)
            out.append(item.render())
        out.append(self.tail)
        return b"".join(out)


@dataclass(eq=False)
class SourceFile:
    """A parsed Go file. ``source`` keeps the original bytes."""
    source: bytes
    decls: NodeList

    def render(self) -> bytes:
        return self.decls.render()


def parse(source: bytes, filename: str = "") -> SourceFile:
    """Parse Go source into a SourceFile, raising ParseError on bad input."""
    return _Builder(source, filename).build()


def render(tree: SourceFile) -> bytes:
    """Print a SourceFile back to bytes."""
    return tree.render()


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class _Builder:
    """Folds a tree-sitter parse of one file into Nodes and NodeLists."""

    ANCHORED = {
        "package_clause": "package",
        "import_declaration": "import",
    }

    # Older tree-sitter-go releases call method elements method_spec.
    NAMED_MEMBERS = frozenset(["method_elem", "method_spec"])

    TYPE_SPECS = frozenset(["type_spec", "type_alias"])

    # Wrappers around a receiver's base type name: *T, (T), (*T)
    RECEIVER_WRAPPERS = frozenset(["pointer_type", "parenthesized_type"])

    def __init__(self, source: bytes, filename: str = ""):
        self.source = source
        self.filename = filename
        self.parser = Parser(GO_LANGUAGE)

    def build(self) -> SourceFile:
        root = self.parser.parse(self.source).root_node
        if root.has_error:
            raise self._parse_error(root)
        decls = self._build_list(
            ListKind.DECLARATIONS, root.children, 0, len(self.source)
        )
        return SourceFile(self.source, decls)

    def _parse_error(self, root: TSNode) -> ParseError:
        """Locate the first ERROR or MISSING node in source order."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                row, column = node.start_point
                if node.is_missing:
                    message = f"syntax error: missing {node.type!r}"
                else:
                    message = "syntax error"
                return ParseError(message, row + 1, column + 1, self.filename)
            stack.extend(
                child for child in reversed(node.children)
                if child.has_error or child.is_missing
            )
        return ParseError("syntax error", filename=self.filename)

    def _text(self, node: Optional[TSNode]) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte:node.end_byte].decode("utf-8", "replace")

    # -- lists ---------------------------------------------------------------

    def _build_list(
        self,
        kind: ListKind,
        children: List[TSNode],
        lo: int,
        hi: int,
        head_row: int = -1,
    ) -> NodeList:
        """Partition source[lo:hi] into slots, items and a tail.

        ``children`` are the tree-sitter children of the list's owner; only
        those lying inside [lo, hi) are considered. Comments on ``head_row``
        (the line of an interface's opening brace) stay in the first slot.
        """
        src = self.source
        result = NodeList(kind)
        pos = lo
        keep = lo
        semicolon = -1
        last: Optional[Node] = None
        last_row = -1

        for child in children:
            if child.start_byte < lo or child.end_byte > hi:
                continue

            if child.type == "comment":
                row = child.start_point[0]
                if last is None:
                    between = src[keep:child.start_byte]
                    if row == head_row and not between.strip(b" \t"):
                        keep = child.end_byte
                elif row == last_row and self._trails(pos, child):
                    last.trail += src[pos:child.end_byte]
                    pos = child.end_byte
                    last_row = child.end_point[0]
                continue

            if not child.is_named:
                if child.type == ";":
                    semicolon = child.end_byte
                continue

            slot, lead = self._split_gap(pos, child.start_byte, max(semicolon, keep))
            node = Node(self._shape(kind, child), lead=lead, parts=self._segment(child))
            result.slots.append(slot)
            result.items.append(node)

            pos = child.end_byte
            semicolon = -1
            last, last_row = node, child.end_point[0]

        result.tail = src[pos:hi]
        return result

    def _trails(self, pos: int, comment: TSNode) -> bool:
        """Whether a comment on the previous item's last line belongs to it.

        Only blanks may separate them, or a semicolon when the comment then
        ends the line: ``B(); // about B``.
        """
        between = self.source[pos:comment.start_byte]
        if not between.strip(b" \t"):
            return True
        if between.strip(b" \t;"):
            return False
        rest = self.source[comment.end_byte:]
        newline = rest.find(b"\n")
        return not (rest if newline < 0 else rest[:newline]).strip()

    def _split_gap(self, start: int, end: int, keep: int) -> Tuple[bytes, bytes]:
        """Split the bytes before an item into (slot, lead).

        A gap without a newline is pure separation (``; `` or a single space)
        and stays put. Otherwise everything up to ``keep`` (the last
        semicolon, or a comment on the opening brace line) stays and the
        remaining blank lines and comments travel with the item.
        """
        gap = self.source[start:end]
        if b"\n" not in gap:
            return gap, b""
        cut = keep if keep > start else start
        return self.source[start:cut], self.source[cut:end]

    def _segment(self, node: TSNode) -> List[Union[bytes, NodeList]]:
        """The node's bytes, with every outermost interface body spliced out."""
        src = self.source
        parts: List[Union[bytes, NodeList]] = []
        pos = node.start_byte
        for iface in self._interfaces(node):
            braces = [c for c in iface.children if c.type in ("{", "}")]
            lbrace, rbrace = braces[0], braces[-1]
            parts.append(src[pos:lbrace.end_byte])
            parts.append(self._build_list(
                ListKind.MEMBERS, iface.children, lbrace.end_byte, rbrace.start_byte,
                head_row=lbrace.end_point[0],
            ))
            pos = rbrace.start_byte
        parts.append(src[pos:node.end_byte])
        return parts

    def _interfaces(self, node: TSNode) -> Iterator[TSNode]:
        """Outermost interface_type nodes below node, in source order."""
        stack = list(reversed(node.children))
        while stack:
            child = stack.pop()
            if child.type == "interface_type":
                yield child
                continue
            stack.extend(reversed(child.children))

    # -- shapes --------------------------------------------------------------

    def _shape(self, kind: ListKind, node: TSNode) -> Union[Declaration, InterfaceMember]:
        if kind is ListKind.MEMBERS:
            return self._member(node)
        return self._declaration(node)

    def _declaration(self, node: TSNode) -> Declaration:
        if node.type in self.ANCHORED:
            return PackageOrImport(self.ANCHORED[node.type])

        if node.type == "function_declaration":
            name = self._text(node.child_by_field_name("name"))
            return Function(name, None, is_exported(name))

        if node.type == "method_declaration":
            name = self._text(node.child_by_field_name("name"))
            receiver = self._receiver_name(node.child_by_field_name("receiver"))
            return Function(name, receiver or None, is_exported(name))

        if node.type == "type_declaration":
            for spec in node.named_children:
                if spec.type in self.TYPE_SPECS:
                    return Type(self._text(spec.child_by_field_name("name")))

        return Other(node.type)

    def _member(self, node: TSNode) -> InterfaceMember:
        name = node.child_by_field_name("name") if node.type in self.NAMED_MEMBERS else None
        if name is None:
            return Embedded(self._text(node))
        signature = self.source[name.end_byte:node.end_byte].decode("utf-8", "replace")
        return Named(self._text(name), signature.strip())

    def _receiver_name(self, receiver: Optional[TSNode]) -> str:
        """Base type name of a method receiver: T for t T, *T, *T[K, V] ..."""
        if receiver is None:
            return ""
        names = []
        for param in receiver.named_children:
            if param.type != "parameter_declaration":
                continue
            names.append(self._base_type_name(param.child_by_field_name("type")))
        return "".join(names)

    def _base_type_name(self, node: Optional[TSNode]) -> str:
        while node is not None and node.type in self.RECEIVER_WRAPPERS:
            inner = [c for c in node.named_children if c.type != "comment"]
            node = inner[0] if inner else None
        if node is not None and node.type == "generic_type":
            node = node.child_by_field_name("type")
        return self._text(node)
