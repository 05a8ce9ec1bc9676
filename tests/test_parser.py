"""Tests for dbus_xmlgen.parser."""

from __future__ import annotations

import pytest

from dbus_xmlgen.diagnostics import Diagnostics
from dbus_xmlgen.errors import ParseError, SignatureError
from dbus_xmlgen.parser import IntrospectionParser, parse_introspection
from dbus_xmlgen.signature import Array, DictEntry, Primitive, TypeCode
from dbus_xmlgen.types import Access, Direction, join_path


def test_parses_sample_document(cat_xml: str) -> None:
    node = parse_introspection(cat_xml)

    assert node.name == "/org/example/Cat"
    assert [i.name for i in node.interfaces] == [
        "org.freedesktop.DBus.Introspectable",
        "org.freedesktop.DBus.Properties",
        "org.example.Cat",
    ]
    assert [child.name for child in node.nodes] == ["kitten"]

    cat = node.find_interface("org.example.Cat")
    feed = cat.find_method("Feed")
    assert [a.name for a in feed.in_args] == ["food", "portions"]
    assert [a.name for a in feed.out_args] == ["accepted", "leftovers"]
    assert feed.in_signature == "sa(ii)"
    assert feed.out_signature == "ba{sv}"

    assert cat.find_property("Name").access is Access.READWRITE
    assert cat.find_property("Toys").access is Access.WRITE
    assert cat.annotation("org.example.Owner") == "Whiskers Team"

    hungry = cat.find_signal("Hungry")
    assert hungry.signature == "yv"
    assert hungry.args[1].name is None
    assert all(a.direction is None for a in hungry.args)


def test_arg_direction_defaults_to_in() -> None:
    node = parse_introspection(
        '<node><interface name="a.B"><method name="M">'
        '<arg name="x" type="i"/></method></interface></node>'
    )
    (arg,) = node.interfaces[0].methods[0].args
    assert arg.direction is Direction.IN
    assert arg.type == Primitive(TypeCode.INT32)


def test_property_access_defaults_to_read() -> None:
    node = parse_introspection(
        '<node><interface name="a.B"><property name="P" type="a{sv}"/></interface></node>'
    )
    prop = node.interfaces[0].properties[0]
    assert prop.access is Access.READ
    assert prop.type == Array(DictEntry(Primitive(TypeCode.STRING), Primitive(TypeCode.VARIANT)))


def test_unknown_elements_and_attributes_are_ignored() -> None:
    node = parse_introspection(
        '<node extra="1"><future/><interface name="a.B" flavour="x">'
        '<doc:doc xmlns:doc="urn:doc">text</doc:doc>'
        '<method name="M" since="2"><arg type="s" hint="h"/><tag/></method>'
        "<!-- comment --></interface></node>"
    )
    (iface,) = node.interfaces
    assert iface.methods[0].name == "M"
    assert iface.methods[0].args[0].name is None


def test_nested_nodes_are_kept() -> None:
    node = parse_introspection(
        '<node name="/"><node name="a"><interface name="x.Y"/>'
        '<node name="b"/></node></node>'
    )
    paths = [path for path, _ in node.walk()]
    assert paths == ["/", "/a", "/a/b"]
    assert node.nodes[0].interfaces[0].name == "x.Y"


def test_empty_node_name_keeps_the_parent_path() -> None:
    node = parse_introspection('<node name="/x"><node name=""><interface name="x.Y"/></node></node>')
    assert [path for path, _ in node.walk()] == ["/x", "/x"]
    assert join_path("/x", "") == "/x"
    assert join_path("/", "") == "/"
    assert join_path(None, "") is None


def test_malformed_xml_is_fatal() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_introspection("<node><interface name='a.B'></node>", Diagnostics())
    assert "malformed XML" in str(excinfo.value)
    assert excinfo.value.line == 1


def test_root_must_be_node() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_introspection("<interface name='a.B'/>")
    assert excinfo.value.element == "interface"


@pytest.mark.parametrize(
    ("body", "fragment"),
    [
        ("<interface/>", "'name'"),
        ('<interface name="a.B"><method/></interface>', "'name'"),
        ('<interface name="a.B"><signal/></interface>', "'name'"),
        ('<interface name="a.B"><property type="s"/></interface>', "'name'"),
        ('<interface name="a.B"><property name="P"/></interface>', "'type'"),
        ('<interface name="a.B"><method name="M"><arg name="x"/></method></interface>', "'type'"),
    ],
)
def test_missing_mandatory_attributes(body: str, fragment: str) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_introspection(f"<node>{body}</node>")
    assert "missing required attribute" in str(excinfo.value)
    assert fragment in str(excinfo.value)


def test_invalid_access_is_rejected() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_introspection(
            '<node><interface name="a.B">'
            '<property name="P" type="s" access="sometimes"/></interface></node>'
        )
    assert excinfo.value.member == "P"
    assert "sometimes" in str(excinfo.value)


def test_invalid_direction_is_rejected() -> None:
    with pytest.raises(ParseError):
        parse_introspection(
            '<node><interface name="a.B"><method name="M">'
            '<arg type="s" direction="sideways"/></method></interface></node>'
        )


@pytest.mark.parametrize("name", ["NoDots", "a..b", "1a.b", "a.b-c"])
def test_invalid_interface_names(name: str) -> None:
    with pytest.raises(ParseError):
        parse_introspection(f'<node><interface name="{name}"/></node>')


def test_invalid_member_name() -> None:
    with pytest.raises(ParseError):
        parse_introspection('<node><interface name="a.B"><method name="2Fast"/></interface></node>')


def test_duplicate_members_are_rejected() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_introspection(
            '<node><interface name="a.B"><method name="M"/><method name="M"/></interface></node>'
        )
    assert "duplicate method" in str(excinfo.value)


def test_signature_error_is_wrapped_with_context() -> None:
    xml = (
        '<node><interface name="org.example.Cat">\n'
        '<method name="Feed">\n'
        '<arg name="bowl" type="a{s}"/>\n'
        "</method></interface></node>"
    )
    with pytest.raises(ParseError) as excinfo:
        parse_introspection(xml)

    err = excinfo.value
    assert err.interface == "org.example.Cat"
    assert err.member == "Feed"
    assert err.element == "arg"
    assert err.line == 3
    assert isinstance(err.signature_error, SignatureError)
    assert err.signature_error.offset == 3
    assert isinstance(err.__cause__, SignatureError)
    assert "a{s}" in str(err)


def test_interface_errors_are_collected_and_skipped() -> None:
    diagnostics = Diagnostics()
    node = IntrospectionParser(
        '<node><interface name="a.Broken"><property name="P" type="a{s}"/></interface>'
        '<interface name="a.Fine"><method name="M"/></interface></node>',
        diagnostics,
    ).parse()

    assert [i.name for i in node.interfaces] == ["a.Fine"]
    (diag,) = diagnostics.errors
    assert diag.interface == "a.Broken"
    assert diag.member == "P"
    assert "a{s}" in diag.message


def test_accepts_bytes_with_encoding_declaration() -> None:
    xml = b'<?xml version="1.0" encoding="UTF-8"?><node><interface name="a.B"/></node>'
    assert parse_introspection(xml).interfaces[0].name == "a.B"


def test_parse_tree_is_immutable(cat_xml: str) -> None:
    node = parse_introspection(cat_xml)
    with pytest.raises(AttributeError):
        node.name = "/elsewhere"  # type: ignore[misc]
    assert isinstance(node.interfaces, tuple)
