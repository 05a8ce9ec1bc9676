"""Support library imported by generated proxy modules.

Generated code only declares proxies: the decorators below attach a
MemberInfo record to each stub and Proxy collects them per class. Wiring
the declarations to a bus connection is left to the consumer.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, NewType, Optional

# Fixed-width integers
Byte = NewType('Byte', int)
Int16 = NewType('Int16', int)
UInt16 = NewType('UInt16', int)
Int32 = NewType('Int32', int)
UInt32 = NewType('UInt32', int)
Int64 = NewType('Int64', int)
UInt64 = NewType('UInt64', int)
UnixFd = NewType('UnixFd', int)

# Dynamically typed value
Variant = Any


class ObjectPath(str):
    """D-Bus object path, kept apart from plain strings"""
    __slots__ = ()

    def __repr__(self):
        return f"ObjectPath({str.__repr__(self)})"


class Signature(str):
    """D-Bus type signature, kept apart from plain strings"""
    __slots__ = ()

    def __repr__(self):
        return f"Signature({str.__repr__(self)})"


@dataclass(frozen=True)
class MemberInfo:
    """Wire-level description of one proxy member"""
    kind: str                       # "method", "property" or "signal"
    name: str                       # wire name
    signature: str = ""             # property type or signal payload
    in_signature: str = ""
    out_signature: str = ""
    setter: bool = False
    no_reply: bool = False
    emits_changed_signal: Optional[str] = None
    deprecated: bool = False


def _attach(info: MemberInfo):
    def decorator(func):
        func.__dbus_member__ = info
        return func
    return decorator


def dbus_method(name: str, in_signature: str = "", out_signature: str = "", *,
                no_reply: bool = False, deprecated: bool = False):
    return _attach(MemberInfo(
        kind="method", name=name, in_signature=in_signature,
        out_signature=out_signature, no_reply=no_reply, deprecated=deprecated))


def dbus_property(name: str, signature: str, *, setter: bool = False,
                  emits_changed_signal: Optional[str] = None, deprecated: bool = False):
    return _attach(MemberInfo(
        kind="property", name=name, signature=signature, setter=setter,
        emits_changed_signal=emits_changed_signal, deprecated=deprecated))


def dbus_signal(name: str, signature: str = "", *, deprecated: bool = False):
    return _attach(MemberInfo(kind="signal", name=name, signature=signature, deprecated=deprecated))


class Proxy:
    """Base class of generated proxies"""

    __dbus_interface__: ClassVar[str] = ""
    __dbus_default_service__: ClassVar[Optional[str]] = None
    __dbus_default_path__: ClassVar[Optional[str]] = None
    __dbus_deprecated__: ClassVar[bool] = False
    __dbus_members__: ClassVar[dict] = {}

    def __init_subclass__(cls, *, interface: Optional[str] = None,
                          default_service: Optional[str] = None,
                          default_path: Optional[str] = None,
                          deprecated: bool = False, **kwargs):
        super().__init_subclass__(**kwargs)
        if interface is not None:
            cls.__dbus_interface__ = interface
        cls.__dbus_default_service__ = default_service
        cls.__dbus_default_path__ = default_path
        cls.__dbus_deprecated__ = deprecated
        members = {}
        for base in reversed(cls.__mro__[1:]):
            members.update(getattr(base, '__dbus_members__', {}))
        for attr, value in vars(cls).items():
            info = getattr(value, '__dbus_member__', None)
            if info is not None:
                members[attr] = info
        cls.__dbus_members__ = members

    def __init__(self, connection: Any = None, destination: Optional[str] = None,
                 path: Optional[str] = None):
        self._connection = connection
        self._destination = destination or self.__dbus_default_service__
        self._path = path or self.__dbus_default_path__


# Standard interfaces, provided here instead of being generated

class IntrospectableProxy(Proxy, interface="org.freedesktop.DBus.Introspectable"):

    @dbus_method("Introspect", out_signature="s")
    def introspect(self) -> str: ...


class PeerProxy(Proxy, interface="org.freedesktop.DBus.Peer"):

    @dbus_method("Ping")
    def ping(self) -> None: ...

    @dbus_method("GetMachineId", out_signature="s")
    def get_machine_id(self) -> str: ...


class PropertiesProxy(Proxy, interface="org.freedesktop.DBus.Properties"):

    @dbus_method("Get", in_signature="ss", out_signature="v")
    def get(self, interface_name: str, property_name: str) -> Variant: ...

    @dbus_method("Set", in_signature="ssv")
    def set(self, interface_name: str, property_name: str, value: Variant) -> None: ...

    @dbus_method("GetAll", in_signature="s", out_signature="a{sv}")
    def get_all(self, interface_name: str) -> dict[str, Variant]: ...

    @dbus_signal("PropertiesChanged", "sa{sv}as")
    def properties_changed(self, interface_name: str, changed_properties: dict[str, Variant],
                           invalidated_properties: list[str]) -> None: ...


class ObjectManagerProxy(Proxy, interface="org.freedesktop.DBus.ObjectManager"):

    @dbus_method("GetManagedObjects", out_signature="a{oa{sa{sv}}}")
    def get_managed_objects(self) -> dict[ObjectPath, dict[str, dict[str, Variant]]]: ...

    @dbus_signal("InterfacesAdded", "oa{sa{sv}}")
    def interfaces_added(self, object_path: ObjectPath,
                         interfaces_and_properties: dict[str, dict[str, Variant]]) -> None: ...

    @dbus_signal("InterfacesRemoved", "oas")
    def interfaces_removed(self, object_path: ObjectPath, interfaces: list[str]) -> None: ...


STANDARD_PROXIES = {
    proxy.__dbus_interface__: proxy.__name__
    for proxy in (IntrospectableProxy, PeerProxy, PropertiesProxy, ObjectManagerProxy)
}
