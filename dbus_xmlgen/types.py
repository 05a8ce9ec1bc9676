"""Data types for parsed introspection documents"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from .signature import SignatureNode, to_signature

DEPRECATED_ANNOTATION = "org.freedesktop.DBus.Deprecated"
NO_REPLY_ANNOTATION = "org.freedesktop.DBus.Method.NoReply"
EMITS_CHANGED_ANNOTATION = "org.freedesktop.DBus.Property.EmitsChangedSignal"


class Direction(Enum):
    IN = "in"
    OUT = "out"


class Access(Enum):
    READ = "read"
    WRITE = "write"
    READWRITE = "readwrite"

    @property
    def readable(self) -> bool:
        return self is not Access.WRITE

    @property
    def writable(self) -> bool:
        return self is not Access.READ


@dataclass(frozen=True)
class Annotation:
    """Key/value pair attached to an interface, member or argument"""
    name: str
    value: str


def _annotation(annotations: tuple, name: str) -> Optional[str]:
    return next((a.value for a in annotations if a.name == name), None)


@dataclass(frozen=True)
class Arg:
    """Method or signal argument"""
    name: Optional[str]
    type: SignatureNode
    direction: Optional[Direction] = None
    annotations: tuple = ()

    @property
    def signature(self) -> str:
        return self.type.signature


@dataclass(frozen=True)
class Method:
    name: str
    args: tuple = ()
    annotations: tuple = ()

    @property
    def in_args(self) -> tuple:
        return tuple(a for a in self.args if a.direction is Direction.IN)

    @property
    def out_args(self) -> tuple:
        return tuple(a for a in self.args if a.direction is Direction.OUT)

    @property
    def in_signature(self) -> str:
        return to_signature(a.type for a in self.in_args)

    @property
    def out_signature(self) -> str:
        return to_signature(a.type for a in self.out_args)

    def annotation(self, name: str) -> Optional[str]:
        return _annotation(self.annotations, name)


@dataclass(frozen=True)
class Signal:
    """Signal; its arguments are implicitly outgoing"""
    name: str
    args: tuple = ()
    annotations: tuple = ()

    @property
    def signature(self) -> str:
        return to_signature(a.type for a in self.args)

    def annotation(self, name: str) -> Optional[str]:
        return _annotation(self.annotations, name)


@dataclass(frozen=True)
class Property:
    name: str
    type: SignatureNode
    access: Access = Access.READ
    annotations: tuple = ()

    @property
    def signature(self) -> str:
        return self.type.signature

    def annotation(self, name: str) -> Optional[str]:
        return _annotation(self.annotations, name)


@dataclass(frozen=True)
class Interface:
    """Named set of methods, signals and properties"""
    name: str
    methods: tuple = ()
    signals: tuple = ()
    properties: tuple = ()
    annotations: tuple = ()

    def find_method(self, name: str) -> Optional[Method]:
        return next((m for m in self.methods if m.name == name), None)

    def find_signal(self, name: str) -> Optional[Signal]:
        return next((s for s in self.signals if s.name == name), None)

    def find_property(self, name: str) -> Optional[Property]:
        return next((p for p in self.properties if p.name == name), None)

    def annotation(self, name: str) -> Optional[str]:
        return _annotation(self.annotations, name)


@dataclass(frozen=True)
class Node:
    """Object node; may describe a subtree of child nodes"""
    name: Optional[str] = None
    interfaces: tuple = ()
    nodes: tuple = ()

    def find_interface(self, name: str) -> Optional[Interface]:
        return next((i for i in self.interfaces if i.name == name), None)

    def walk(self, parent: Optional[str] = None, *, root: Optional[str] = None) -> Iterator[tuple]:
        """Yield (absolute path or None, node) pairs depth-first in document order.

        ``root`` replaces this node's own path; children resolve against it.
        """
        path = root if root is not None else join_path(parent, self.name)
        yield path, self
        for child in self.nodes:
            yield from child.walk(path)


def join_path(parent: Optional[str], name: Optional[str]) -> Optional[str]:
    """Resolve a node name against its parent's object path"""
    if not name:
        return parent
    if name.startswith("/"):
        return name
    if parent is None:
        return None
    if parent == "/":
        return f"/{name}"
    return f"{parent}/{name}"
