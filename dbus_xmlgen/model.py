"""Generation model: interfaces with normalized names and mapped types"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class GenArg:
    """Argument ready for emission"""
    ident: str
    type_expr: str
    signature: str
    wire_name: Optional[str] = None
    docs: tuple = ()


@dataclass(frozen=True)
class GenMethod:
    wire_name: str
    ident: str
    in_args: tuple
    out_args: tuple
    return_type: str
    in_signature: str
    out_signature: str
    no_reply: bool = False
    deprecated: bool = False
    docs: tuple = ()


@dataclass(frozen=True)
class GenProperty:
    wire_name: str
    getter: Optional[str]
    setter: Optional[str]
    type_expr: str
    signature: str
    access: str
    emits_changed_signal: Optional[str] = None
    deprecated: bool = False
    docs: tuple = ()


@dataclass(frozen=True)
class GenSignal:
    wire_name: str
    ident: str
    args: tuple
    signature: str
    deprecated: bool = False
    docs: tuple = ()


@dataclass(frozen=True)
class GenInterface:
    """One independently emittable proxy class"""
    name: str
    class_name: str
    module_name: str
    methods: tuple = ()
    properties: tuple = ()
    signals: tuple = ()
    node_path: Optional[str] = None
    default_service: Optional[str] = None
    default_path: Optional[str] = None
    deprecated: bool = False
    docs: tuple = ()
    runtime_names: frozenset = field(default_factory=frozenset)


@dataclass(frozen=True)
class GenerationModel:
    interfaces: tuple = ()
    standard_interfaces: tuple = ()
    source: Optional[str] = None

    def find(self, name: str) -> Optional[GenInterface]:
        return next((i for i in self.interfaces if i.name == name), None)
