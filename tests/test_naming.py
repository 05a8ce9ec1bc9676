"""Tests for dbus_xmlgen.naming."""

from __future__ import annotations

import pytest

from dbus_xmlgen.config import CaseStyle, NamingConfig, ReservedWordPolicy
from dbus_xmlgen.errors import NameCollisionError, UnsupportedFeatureError
from dbus_xmlgen.naming import IdentifierNormalizer, Role, check_unique, split_words


def test_split_words_handles_acronyms_and_digits() -> None:
    assert split_words("GetURLHandler2") == ["Get", "URL", "Handler", "2"]
    assert split_words("org.example.Cat") == ["org", "example", "Cat"]
    assert split_words("already_snake") == ["already", "snake"]


def test_dbus_is_one_word() -> None:
    assert split_words("org.freedesktop.DBus.Properties") == [
        "org", "freedesktop", "DBus", "Properties",
    ]
    assert split_words("GetDBusName") == ["Get", "DBus", "Name"]
    assert split_words("DBusy") == ["D", "Busy"]
    assert IdentifierNormalizer().normalize("org.freedesktop.DBus.Peer", Role.FIELD) == (
        "org_freedesktop_dbus_peer"
    )


@pytest.mark.parametrize(
    ("name", "role", "expected"),
    [
        ("Purr", Role.FUNCTION, "purr"),
        ("GetManagedObjects", Role.FUNCTION, "get_managed_objects"),
        ("GetURLHandler2", Role.FUNCTION, "get_url_handler_2"),
        ("Cat_Proxy", Role.TYPE, "CatProxy"),
        ("network-manager", Role.TYPE, "NetworkManager"),
        ("org.example.Cat", Role.FIELD, "org_example_cat"),
        ("interfaceName", Role.FIELD, "interface_name"),
    ],
)
def test_default_styles(name: str, role: Role, expected: str) -> None:
    assert IdentifierNormalizer().normalize(name, role) == expected


def test_camel_style() -> None:
    names = IdentifierNormalizer(NamingConfig(functions=CaseStyle.CAMEL))
    assert names.normalize("GetVolume", Role.FUNCTION) == "getVolume"
    assert names.normalize("get_volume", Role.FUNCTION) == "getVolume"


def test_preserve_style_only_replaces_invalid_characters() -> None:
    names = IdentifierNormalizer(NamingConfig(functions=CaseStyle.PRESERVE))
    assert names.normalize("GetVolume", Role.FUNCTION) == "GetVolume"
    assert names.normalize("Get-Volume", Role.FUNCTION) == "Get_Volume"


@pytest.mark.parametrize(
    ("name", "role", "expected"),
    [
        ("Class", Role.FUNCTION, "class_"),
        ("Import", Role.FIELD, "import_"),
        ("self", Role.FIELD, "self_"),
        ("true", Role.TYPE, "True_"),
        ("None", Role.TYPE, "None_"),
        ("Proxy", Role.TYPE, "Proxy_"),
        ("int32", Role.TYPE, "Int32_"),
        ("variant", Role.TYPE, "Variant_"),
    ],
)
def test_reserved_words_get_a_suffix(name: str, role: Role, expected: str) -> None:
    assert IdentifierNormalizer().normalize(name, role) == expected


def test_self_is_fine_outside_parameters() -> None:
    assert IdentifierNormalizer().normalize("Self", Role.FUNCTION) == "self"


def test_reserved_words_can_be_rejected() -> None:
    names = IdentifierNormalizer(NamingConfig(reserved_words=ReservedWordPolicy.ERROR))
    with pytest.raises(NameCollisionError) as excinfo:
        names.normalize("Lambda", Role.FUNCTION, interface="a.B")
    assert excinfo.value.identifier == "lambda"
    assert excinfo.value.interface == "a.B"


def test_leading_digit_is_prefixed() -> None:
    assert IdentifierNormalizer().normalize("2Fast", Role.FUNCTION) == "_2_fast"


def test_name_without_identifier_characters_is_unsupported() -> None:
    names = IdentifierNormalizer()
    assert not names.has_identifier("---")
    assert not names.has_identifier(None)
    with pytest.raises(UnsupportedFeatureError):
        names.normalize("---", Role.FIELD)
    with pytest.raises(UnsupportedFeatureError):
        IdentifierNormalizer(NamingConfig(fields=CaseStyle.PRESERVE)).normalize("..", Role.FIELD)


@pytest.mark.parametrize("style", [CaseStyle.SNAKE, CaseStyle.CAMEL, CaseStyle.PASCAL])
@pytest.mark.parametrize(
    "name",
    [
        "GetURLHandler2", "class", "2Fast", "org.example.Cat", "HTTPServer", "self",
        "org.freedesktop.DBus", "GetAValue", "get_a_value", "Proxy", "dbus_method",
    ],
)
def test_normalization_is_idempotent(style: CaseStyle, name: str) -> None:
    names = IdentifierNormalizer(NamingConfig(types=style, functions=style, fields=style))
    for role in Role:
        once = names.normalize(name, role)
        assert names.normalize(once, role) == once
        assert once.isidentifier()


def test_check_unique_reports_both_wire_names() -> None:
    with pytest.raises(NameCollisionError) as excinfo:
        check_unique(
            [("method GetName", "get_name"), ("method get_name", "get_name")],
            interface="a.B",
        )
    err = excinfo.value
    assert err.names == ("method GetName", "method get_name")
    assert err.identifier == "get_name"
    assert "get_name" in str(err)


def test_check_unique_accepts_distinct_identifiers() -> None:
    check_unique([("A", "a"), ("B", "b")])


def test_runtime_names_stay_usable_as_functions_and_fields() -> None:
    names = IdentifierNormalizer()
    assert names.normalize("Proxy", Role.FUNCTION) == "proxy"
    assert names.normalize("Variant", Role.FIELD) == "variant"


def test_runtime_class_names_can_be_rejected() -> None:
    names = IdentifierNormalizer(NamingConfig(reserved_words=ReservedWordPolicy.ERROR))
    with pytest.raises(NameCollisionError):
        names.normalize("Proxy", Role.TYPE)
