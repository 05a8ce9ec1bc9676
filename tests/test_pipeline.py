"""End-to-end tests for dbus_xmlgen.pipeline."""

from __future__ import annotations

import pytest

from dbus_xmlgen.config import ErrorPolicy, GenerationConfig
from dbus_xmlgen.errors import ParseError
from dbus_xmlgen.pipeline import generate

PURR = (
    '<node><interface name="org.example.Cat"><method name="Purr">'
    '<arg name="volume" type="u" direction="in"/></method></interface></node>'
)


def test_single_method_interface(exec_source) -> None:
    result = generate(PURR)

    assert result.ok
    (iface,) = result.model.interfaces
    (method,) = iface.methods
    assert [(a.ident, a.type_expr) for a in method.in_args] == [("volume", "UInt32")]
    assert method.return_type == "None"

    unit = result.unit("org_example_cat")
    namespace = exec_source(unit.source, unit.name)
    assert namespace["CatProxy"].__dbus_members__["purr"].in_signature == "u"


def test_readwrite_property_gets_getter_and_setter() -> None:
    result = generate(
        '<node><interface name="org.example.Cat">'
        '<property name="Name" type="s" access="readwrite"/></interface></node>'
    )
    (prop,) = result.model.interfaces[0].properties
    assert (prop.getter, prop.setter, prop.type_expr) == ("name", "set_name", "str")
    source = result.units[0].source
    assert "def name(self) -> str: ..." in source
    assert "def set_name(self, value: str) -> None: ..." in source


def test_named_arg_that_looks_positional_keeps_the_interface() -> None:
    result = generate(
        '<node><interface name="org.example.Cat"><method name="Feed">'
        '<arg name="arg_1" type="s" direction="in"/><arg type="u" direction="in"/>'
        "</method></interface></node>"
    )
    assert result.ok
    assert "def feed(self, arg_1: str, arg_2: UInt32) -> None: ..." in result.units[0].source


def test_container_signatures() -> None:
    result = generate(
        '<node><interface name="org.example.Cat"><method name="Feed">'
        '<arg name="portions" type="a(ii)"/><arg name="extras" type="a{sv}"/>'
        "</method></interface></node>"
    )
    source = result.units[0].source
    assert "portions: list[tuple[Int32, Int32]]" in source
    assert "extras: dict[str, Variant]" in source


def test_properties_interface_exclusion_is_configurable(cat_xml: str) -> None:
    excluded = generate(cat_xml)
    assert excluded.model.find("org.freedesktop.DBus.Properties") is None
    assert "org.freedesktop.DBus.Properties" in excluded.model.standard_interfaces
    assert "class PropertiesProxy" not in "".join(u.source for u in excluded.units)

    config = GenerationConfig()
    config.standard_interfaces.skip = False
    included = generate(cat_xml, config)
    props = included.model.find("org.freedesktop.DBus.Properties")
    assert [m.ident for m in props.methods] == ["get", "get_all", "set"]
    assert included.unit("org_freedesktop_dbus_properties") is not None


BROKEN_AND_FINE = """
<node>
  <interface name="org.example.Broken">
    <method name="Feed">
      <arg name="bowl" type="a{s}" direction="in"/>
    </method>
  </interface>
  <interface name="org.example.Clash">
    <method name="GetName"/>
    <method name="get_name"/>
  </interface>
  <interface name="org.example.Fine">
    <method name="Ping"/>
  </interface>
</node>
"""


def test_collect_policy_reports_every_failure_and_keeps_going() -> None:
    result = generate(BROKEN_AND_FINE)

    assert not result.ok
    assert [u.name for u in result.units] == ["org_example_fine"]
    errors = result.diagnostics.errors
    assert [(d.code, d.interface) for d in errors] == [
        ("XML001", "org.example.Broken"),
        ("NAM001", "org.example.Clash"),
    ]
    assert "a{s}" in errors[0].message
    assert errors[0].line == 5


def test_fail_fast_policy_raises_first_failure() -> None:
    with pytest.raises(ParseError) as excinfo:
        generate(BROKEN_AND_FINE, GenerationConfig(errors=ErrorPolicy.FAIL_FAST))
    assert excinfo.value.interface == "org.example.Broken"
    assert excinfo.value.signature_error.offset == 3


def test_malformed_document_is_fatal_under_both_policies() -> None:
    with pytest.raises(ParseError):
        generate("<node>")
    with pytest.raises(ParseError):
        generate("<node>", GenerationConfig(errors=ErrorPolicy.FAIL_FAST))


def test_generation_is_deterministic(cat_xml: str) -> None:
    first = generate(cat_xml, source="cat.xml")
    second = generate(cat_xml, source="cat.xml")
    assert [u.source for u in first.units] == [u.source for u in second.units]


def test_document_without_interfaces() -> None:
    result = generate('<node name="/"><node name="child"/></node>')
    assert result.ok
    assert result.units == ()
