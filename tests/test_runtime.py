"""Tests for dbus_xmlgen.runtime and the diagnostics collector."""

from __future__ import annotations

from dbus_xmlgen.diagnostics import Diagnostics, Severity, codes
from dbus_xmlgen.errors import ConfigError, NameCollisionError, SignatureError, XmlgenError
from dbus_xmlgen.runtime import (
    STANDARD_PROXIES,
    MemberInfo,
    ObjectPath,
    PropertiesProxy,
    Proxy,
    dbus_method,
    dbus_property,
)


class _Base(Proxy, interface="org.example.Base", default_path="/base"):

    @dbus_method("Ping")
    def ping(self) -> None: ...


class _Child(_Base, interface="org.example.Child"):

    @dbus_property("Level", "u", setter=True)
    def set_level(self, value: int) -> None: ...


def test_members_are_inherited() -> None:
    assert set(_Child.__dbus_members__) == {"ping", "set_level"}
    assert set(_Base.__dbus_members__) == {"ping"}
    assert _Child.__dbus_members__["set_level"] == MemberInfo(
        kind="property", name="Level", signature="u", setter=True
    )
    assert _Child.__dbus_interface__ == "org.example.Child"
    assert _Base.__dbus_default_path__ == "/base"


def test_proxy_instance_falls_back_to_defaults() -> None:
    proxy = _Base(connection="bus", destination="org.example.Service")
    assert proxy._connection == "bus"
    assert proxy._destination == "org.example.Service"
    assert proxy._path == "/base"


def test_object_path_is_a_distinct_str() -> None:
    path = ObjectPath("/org/example")
    assert path == "/org/example"
    assert repr(path) == "ObjectPath('/org/example')"


def test_standard_proxies() -> None:
    assert STANDARD_PROXIES["org.freedesktop.DBus.Properties"] == "PropertiesProxy"
    assert len(STANDARD_PROXIES) == 4
    assert PropertiesProxy.__dbus_members__["get_all"].out_signature == "a{sv}"


def test_diagnostics_collect_and_format() -> None:
    diagnostics = Diagnostics()
    diagnostics.info(codes.STANDARD_SKIPPED, interface="org.freedesktop.DBus.Peer")
    diagnostics.error_from(NameCollisionError("x", ("X", "x_"), interface="a.B", member="X"))

    assert len(diagnostics) == 2
    assert diagnostics.has_errors
    (error,) = diagnostics.errors
    assert error.severity is Severity.ERROR
    assert str(error).startswith("ERROR NAM001 @ a.B X: ")
    assert list(diagnostics)[0].message == "Skipped standard interface org.freedesktop.DBus.Peer."
    assert error.message == "Name collision: identifier 'x' is produced by 'X', 'x_'."


def test_raised_errors_use_their_code_template() -> None:
    diagnostics = Diagnostics()
    bad = diagnostics.error_from(SignatureError("a{s}", 3, "dict entry needs two types"))
    plain = diagnostics.error_from(XmlgenError("boom", interface="a.B"))
    config = diagnostics.error_from(ConfigError("bad key"))

    assert bad.code == "SIG001"
    assert bad.message.startswith("Invalid signature: invalid signature 'a{s}' at offset 3")
    assert (plain.code, plain.message, plain.interface) == ("GEN000", "boom", "a.B")
    assert (config.code, config.message) == ("CFG001", "bad key")
    assert all(d.severity is Severity.ERROR for d in diagnostics)


def test_missing_template_values_do_not_raise() -> None:
    diag = Diagnostics().warn(codes.DUPLICATE_CLASS, interface="a.B")
    assert "(missing: name)" in diag.message
