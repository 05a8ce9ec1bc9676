"""Interface Model Builder - turns a Node tree into the generation model"""

from typing import Optional

from .config import ErrorPolicy, GenerationConfig
from .diagnostics import Diagnostics, codes
from .errors import XmlgenError
from .logging import get_logger
from .model import GenArg, GenerationModel, GenInterface, GenMethod, GenProperty, GenSignal
from .naming import IdentifierNormalizer, Role, check_unique
from .type_mapper import TypeMapper
from .types import (
    DEPRECATED_ANNOTATION, EMITS_CHANGED_ANNOTATION, NO_REPLY_ANNOTATION,
    Arg, Interface, Method, Node, Property, Signal,
)

logger = get_logger("builder")

# Annotations that change the shape of the emitted code instead of its docs
SHAPE_ANNOTATIONS = frozenset({
    DEPRECATED_ANNOTATION, NO_REPLY_ANNOTATION, EMITS_CHANGED_ANNOTATION,
})

EMITS_CHANGED_VALUES = ('true', 'invalidates', 'const', 'false')


def _is_true(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() == 'true'


def _doc_lines(annotations: tuple) -> tuple:
    return tuple(f"{a.name} = {a.value}" for a in annotations if a.name not in SHAPE_ANNOTATIONS)


class InterfaceModelBuilder:
    """Builds GenInterface units from every node of a parsed document"""

    def __init__(self, config: Optional[GenerationConfig] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.config = config or GenerationConfig()
        self.diagnostics = diagnostics
        self.names = IdentifierNormalizer(self.config.naming)

    @property
    def fail_fast(self) -> bool:
        return self.diagnostics is None or self.config.errors is ErrorPolicy.FAIL_FAST

    def build(self, node: Node, source: Optional[str] = None) -> GenerationModel:
        std = self.config.standard_interfaces
        interfaces: list[GenInterface] = []
        standard: list[str] = []
        emitted: dict[str, list[Interface]] = {}
        class_names: set[str] = set()
        module_names: set[str] = set()

        for path, current in node.walk(root=self.config.path):
            for iface in current.interfaces:
                if std.skip and std.matches(iface.name):
                    if iface.name not in standard:
                        standard.append(iface.name)
                        if self.diagnostics is not None:
                            self.diagnostics.info(codes.STANDARD_SKIPPED, interface=iface.name)
                        else:
                            logger.info("Skipping standard interface %s", iface.name)
                    continue

                copies = emitted.setdefault(iface.name, [])
                if iface in copies:
                    logger.debug("Interface %s on %s already emitted", iface.name, path)
                    continue
                copies.append(iface)

                gen = self._build_scoped(iface, path)
                if gen is None:
                    continue
                gen = self._disambiguate(gen, class_names, module_names)
                interfaces.append(gen)

        return GenerationModel(
            interfaces=tuple(interfaces),
            standard_interfaces=tuple(standard),
            source=source,
        )

    def _build_scoped(self, iface: Interface, path: Optional[str]) -> Optional[GenInterface]:
        if self.fail_fast:
            return self.build_interface(iface, path)
        try:
            return self.build_interface(iface, path)
        except XmlgenError as exc:
            if exc.interface is None:
                exc.interface = iface.name
            self.diagnostics.error_from(exc)
            return None

    def _disambiguate(self, gen: GenInterface, class_names: set, module_names: set) -> GenInterface:
        class_name, module_name = gen.class_name, gen.module_name
        index = 1
        while class_name in class_names or module_name in module_names:
            index += 1
            class_name = f"{gen.class_name}{index}"
            module_name = f"{gen.module_name}_{index}"
        class_names.add(class_name)
        module_names.add(module_name)
        if index == 1:
            return gen

        if self.diagnostics is not None:
            self.diagnostics.warn(codes.DUPLICATE_CLASS, interface=gen.name, name=class_name)
        else:
            logger.warning("Interface %s emitted as %s", gen.name, class_name)
        return GenInterface(
            name=gen.name,
            class_name=class_name,
            module_name=module_name,
            methods=gen.methods,
            properties=gen.properties,
            signals=gen.signals,
            node_path=gen.node_path,
            default_service=gen.default_service,
            default_path=gen.default_path,
            deprecated=gen.deprecated,
            docs=gen.docs,
            runtime_names=gen.runtime_names,
        )

    def build_interface(self, iface: Interface, path: Optional[str] = None) -> GenInterface:
        """Translate one interface; raises on the first problem found"""
        name = iface.name
        logger.debug("Building interface %s", name)

        last = name.rsplit('.', 1)[-1]
        suffix = self.config.naming.class_suffix
        class_name = self.names.normalize(f"{last}_{suffix}" if suffix else last,
                                          Role.TYPE, interface=name)
        module_name = self.names.normalize(name, Role.FIELD, interface=name)

        methods = tuple(self._method(name, m) for m in iface.methods)
        properties = tuple(self._property(name, p) for p in iface.properties)
        signals = tuple(self._signal(name, s) for s in iface.signals)

        members = []
        for m in methods:
            members.append((f"method {m.wire_name}", m.ident))
        for p in properties:
            if p.getter:
                members.append((f"property {p.wire_name}", p.getter))
            if p.setter:
                members.append((f"property {p.wire_name} (setter)", p.setter))
        for s in signals:
            members.append((f"signal {s.wire_name}", s.ident))
        check_unique(members, interface=name)

        runtime_names = set()
        for m in iface.methods:
            for arg in m.args:
                runtime_names |= TypeMapper.runtime_names(arg.type)
        for s in iface.signals:
            for arg in s.args:
                runtime_names |= TypeMapper.runtime_names(arg.type)
        for p in iface.properties:
            runtime_names |= TypeMapper.runtime_names(p.type)

        return GenInterface(
            name=name,
            class_name=class_name,
            module_name=module_name,
            methods=methods,
            properties=properties,
            signals=signals,
            node_path=path,
            default_service=self.config.service,
            default_path=path,
            deprecated=_is_true(iface.annotation(DEPRECATED_ANNOTATION)),
            docs=_doc_lines(iface.annotations),
            runtime_names=frozenset(runtime_names),
        )

    def _method(self, iface: str, method: Method) -> GenMethod:
        in_args = self._args(iface, method.in_args)
        out_args = self._args(iface, method.out_args)
        check_unique(((a.wire_name or a.ident, a.ident) for a in in_args),
                     interface=iface, member=method.name)
        return GenMethod(
            wire_name=method.name,
            ident=self.names.normalize(method.name, Role.FUNCTION, interface=iface),
            in_args=in_args,
            out_args=out_args,
            return_type=TypeMapper.return_type(a.type for a in method.out_args),
            in_signature=method.in_signature,
            out_signature=method.out_signature,
            no_reply=_is_true(method.annotation(NO_REPLY_ANNOTATION)),
            deprecated=_is_true(method.annotation(DEPRECATED_ANNOTATION)),
            docs=_doc_lines(method.annotations),
        )

    def _property(self, iface: str, prop: Property) -> GenProperty:
        getter = setter = None
        if prop.access.readable:
            getter = self.names.normalize(prop.name, Role.FUNCTION, interface=iface)
        if prop.access.writable:
            setter = self.names.normalize(f"set_{prop.name}", Role.FUNCTION, interface=iface)

        docs = list(_doc_lines(prop.annotations))
        emits = prop.annotation(EMITS_CHANGED_ANNOTATION)
        if emits is not None and emits not in EMITS_CHANGED_VALUES:
            docs.append(f"{EMITS_CHANGED_ANNOTATION} = {emits}")
            emits = None

        return GenProperty(
            wire_name=prop.name,
            getter=getter,
            setter=setter,
            type_expr=TypeMapper.to_python(prop.type),
            signature=prop.signature,
            access=prop.access.value,
            emits_changed_signal=emits,
            deprecated=_is_true(prop.annotation(DEPRECATED_ANNOTATION)),
            docs=tuple(docs),
        )

    def _signal(self, iface: str, signal: Signal) -> GenSignal:
        args = self._args(iface, signal.args)
        check_unique(((a.wire_name or a.ident, a.ident) for a in args),
                     interface=iface, member=signal.name)
        return GenSignal(
            wire_name=signal.name,
            ident=self.names.normalize(signal.name, Role.FUNCTION, interface=iface),
            args=args,
            signature=signal.signature,
            deprecated=_is_true(signal.annotation(DEPRECATED_ANNOTATION)),
            docs=_doc_lines(signal.annotations),
        )

    def _args(self, iface: str, args: tuple) -> tuple:
        idents = [
            self.names.normalize(arg.name, Role.FIELD, interface=iface)
            if self.names.has_identifier(arg.name) else None
            for arg in args
        ]
        # Placeholders for unnamed args skip identifiers already taken
        taken = {ident for ident in idents if ident is not None}
        for index, ident in enumerate(idents):
            if ident is None:
                number = index
                while f"arg_{number}" in taken:
                    number += 1
                idents[index] = f"arg_{number}"
                taken.add(idents[index])
        return tuple(self._arg(ident, arg) for ident, arg in zip(idents, args))

    def _arg(self, ident: str, arg: Arg) -> GenArg:
        return GenArg(
            ident=ident,
            type_expr=TypeMapper.to_python(arg.type),
            signature=arg.signature,
            wire_name=arg.name,
            docs=tuple(f"{ident}: {line}" for line in _doc_lines(arg.annotations)),
        )

