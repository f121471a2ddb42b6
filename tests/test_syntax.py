"""Parsing Go into the reorderable tree and printing it back."""

import pytest

from gorder.errors import ParseError
from gorder.syntax import (
    Embedded,
    Function,
    ListKind,
    Named,
    Other,
    PackageOrImport,
    Type,
    parse,
    render,
)

from conftest import FIXTURES


def shapes(source: bytes):
    return [item.shape for item in parse(source).decls.items]


@pytest.mark.parametrize("path", sorted(FIXTURES.glob("reorder/*.go")), ids=lambda p: p.name)
def test_render_reproduces_input(path):
    source = path.read_bytes()
    assert render(parse(source)) == source


def test_single_declaration_round_trip():
    source = b"// Package p does things.\npackage p // trailing\n"
    assert render(parse(source)) == source


def test_declaration_shapes():
    source = (
        b"package p\n"
        b"\n"
        b'import "fmt"\n'
        b"\n"
        b"const Answer = 42\n"
        b"\n"
        b"type (\n\tA int\n\tB string\n)\n"
        b"\n"
        b"func Run() {}\n"
        b"\n"
        b"func (a *A) Set(v int) {}\n"
        b"\n"
        b"func (A) value() int { return 0 }\n"
    )
    assert shapes(source) == [
        PackageOrImport("package"),
        PackageOrImport("import"),
        Other("const_declaration"),
        Type("A"),
        Function("Run", None, True),
        Function("Set", "A", True),
        Function("value", "A", False),
    ]


def test_generic_receiver_uses_base_type_name():
    source = b"package p\n\nfunc (s *Stack[T]) Push(v T) {}\n"
    assert shapes(source)[1] == Function("Push", "Stack", True)


def test_interface_member_shapes():
    source = b"package p\n\ntype I interface {\n\tio.Reader\n\tRead(p []byte) (int, error)\n}\n"
    decl = parse(source).decls.items[1]
    (members,) = decl.lists()
    assert members.kind is ListKind.MEMBERS
    assert [item.shape for item in members.items] == [
        Embedded("io.Reader"),
        Named("Read", "(p []byte) (int, error)"),
    ]


def test_comments_attach_to_declarations():
    source = b"package p\n\nfunc b() {} // bee\n\n// about a\nfunc a() {}\n"
    decls = parse(source).decls
    package, b, a = decls.items
    assert package.lead == b""
    assert b.lead == b"\n\n"
    assert b.trail == b" // bee"
    assert a.lead == b"\n\n// about a\n"
    assert decls.tail == b"\n"


def test_header_comment_belongs_to_package_clause():
    source = b"// Copyright notice.\n\n// Package p.\npackage p\n\nfunc f() {}\n"
    package = parse(source).decls.items[0]
    assert package.lead == b"// Copyright notice.\n\n// Package p.\n"


def test_single_line_interface_separators_stay_in_slots():
    source = b"package p\n\ntype I interface{ b(); a() }\n"
    (members,) = parse(source).decls.items[1].lists()
    assert members.slots == [b" ", b"; "]
    assert [item.lead for item in members.items] == [b"", b""]
    assert members.tail == b" "


def test_brace_line_comment_stays_in_first_slot():
    source = b"package p\n\ntype I interface { // note\n\tB()\n\tA()\n}\n"
    (members,) = parse(source).decls.items[1].lists()
    assert members.slots[0] == b" // note"
    assert [item.lead for item in members.items] == [b"\n\t", b"\n\t"]
    assert render(parse(source)) == source


def test_same_line_comment_after_semicolon_is_trail():
    source = b"package p\n\ntype I interface {\n\tB(); // about B\n\tA()\n}\n"
    (members,) = parse(source).decls.items[1].lists()
    b, a = members.items
    assert b.trail == b"; // about B"
    assert a.lead == b"\n\t"
    assert render(parse(source)) == source


def test_inline_comment_between_members_is_separator():
    source = b"package p\n\ntype I interface{ b(); /* x */ a() }\n"
    (members,) = parse(source).decls.items[1].lists()
    assert members.items[0].trail == b""
    assert members.slots[1] == b"; /* x */ "


def test_nested_interfaces_are_separate_lists():
    source = (
        b"package p\n\n"
        b"type I interface {\n"
        b"\tVisit(v interface{ Leave(); Enter() }) error\n"
        b"}\n"
    )
    (outer,) = parse(source).decls.items[1].lists()
    (visit,) = outer.items
    (inner,) = visit.lists()
    assert [item.shape.name for item in inner.items] == ["Leave", "Enter"]


def test_parse_error_reports_position():
    with pytest.raises(ParseError) as excinfo:
        parse(b"package p\n\nfunc main( {\n", "bad.go")
    assert excinfo.value.line >= 1
    assert excinfo.value.filename == "bad.go"
    assert str(excinfo.value).startswith("bad.go:")
