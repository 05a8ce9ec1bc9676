"""Python Generator - generates typed proxy declarations from the generation model"""

from dataclasses import dataclass
from typing import Callable, Optional

from .common_generator import CommonGenerator, escape_docstring
from .config import CallStyle, GenerationConfig, OutputMode
from .logging import get_logger
from .model import GenArg, GenerationModel, GenInterface, GenMethod, GenProperty, GenSignal

logger = get_logger("python_generator")

INDENT = "    "


@dataclass(frozen=True)
class GeneratedUnit:
    """One emitted Python module"""
    name: str
    interfaces: tuple
    source: str

    @property
    def filename(self) -> str:
        return f"{self.name}.py"


class ProxyGenerator:
    """Generates proxy classes deriving from dbus_xmlgen.runtime.Proxy"""

    def __init__(self, model: GenerationModel, config: Optional[GenerationConfig] = None,
                 formatter: Optional[Callable[[str], str]] = None):
        self.model = model
        self.config = config or GenerationConfig()
        self.formatter = formatter
        self.common = CommonGenerator(model.source, model.standard_interfaces)

    @property
    def is_async(self) -> bool:
        return self.config.output.call_style is CallStyle.ASYNC

    def generate(self) -> list[GeneratedUnit]:
        """Generate every unit according to the configured output mode"""
        if self.config.output.mode is OutputMode.AGGREGATE:
            return [self._unit(self.config.output.module_name, self.model.interfaces)]
        return [self._unit(iface.module_name, (iface,)) for iface in self.model.interfaces]

    def generate_module(self, interfaces) -> str:
        """Generate the source of one module declaring ``interfaces``"""
        interfaces = tuple(interfaces)
        lines = self.common.generate_header([i.name for i in interfaces])
        lines.extend(self.common.generate_imports(self._imports(interfaces)))

        for iface in interfaces:
            lines.extend(["", ""])
            lines.extend(self._generate_interface(iface))

        source = "\n".join(lines).rstrip() + "\n"
        if self.formatter is not None:
            source = self.formatter(source)
        return source

    def _unit(self, name: str, interfaces: tuple) -> GeneratedUnit:
        logger.debug("Emitting unit %s (%d interfaces)", name, len(interfaces))
        return GeneratedUnit(
            name=name,
            interfaces=tuple(i.name for i in interfaces),
            source=self.generate_module(interfaces),
        )

    def _imports(self, interfaces: tuple) -> set:
        names = set()
        for iface in interfaces:
            names |= iface.runtime_names
            names.add("Proxy")
            if iface.methods:
                names.add("dbus_method")
            if iface.properties:
                names.add("dbus_property")
            if iface.signals:
                names.add("dbus_signal")
        return names

    def _generate_interface(self, iface: GenInterface) -> list[str]:
        """Generate the proxy class for one interface"""
        kwargs = [f"interface={iface.name!r}"]
        if iface.default_service:
            kwargs.append(f"default_service={iface.default_service!r}")
        if iface.default_path:
            kwargs.append(f"default_path={iface.default_path!r}")
        if iface.deprecated:
            kwargs.append("deprecated=True")

        lines = [f"class {iface.class_name}(Proxy, {', '.join(kwargs)}):"]
        lines.extend(self._docstring(
            f"Proxy for the `{iface.name}` interface.", iface.docs, iface.deprecated, INDENT))

        for method in iface.methods:
            lines.append("")
            lines.extend(self._generate_method(method))

        for prop in iface.properties:
            if prop.getter:
                lines.append("")
                lines.extend(self._generate_getter(prop))
            if prop.setter:
                lines.append("")
                lines.extend(self._generate_setter(prop))

        for signal in iface.signals:
            lines.append("")
            lines.extend(self._generate_signal(signal))

        return lines

    def _generate_method(self, method: GenMethod) -> list[str]:
        args = [repr(method.wire_name)]
        if method.in_signature:
            args.append(f"in_signature={method.in_signature!r}")
        if method.out_signature:
            args.append(f"out_signature={method.out_signature!r}")
        if method.no_reply:
            args.append("no_reply=True")
        if method.deprecated:
            args.append("deprecated=True")

        docs = list(method.docs)
        for arg in method.in_args + method.out_args:
            docs.extend(arg.docs)
        if method.out_args and any(a.wire_name for a in method.out_args):
            names = ", ".join(a.wire_name or a.ident for a in method.out_args)
            docs.append(f"Returns: {names}")

        return [f"{INDENT}@dbus_method({', '.join(args)})"] + self._def(
            method.ident, method.in_args, method.return_type,
            f"`{method.wire_name}` method.", tuple(docs), method.deprecated, self.is_async)

    def _generate_getter(self, prop: GenProperty) -> list[str]:
        return [f"{INDENT}@dbus_property({self._property_args(prop, setter=False)})"] + self._def(
            prop.getter, (), prop.type_expr,
            f"`{prop.wire_name}` property ({prop.access}).",
            prop.docs, prop.deprecated, self.is_async)

    def _generate_setter(self, prop: GenProperty) -> list[str]:
        value = GenArg(ident="value", type_expr=prop.type_expr, signature=prop.signature)
        return [f"{INDENT}@dbus_property({self._property_args(prop, setter=True)})"] + self._def(
            prop.setter, (value,), "None",
            f"Set the `{prop.wire_name}` property.",
            prop.docs, prop.deprecated, self.is_async)

    def _property_args(self, prop: GenProperty, setter: bool) -> str:
        args = [repr(prop.wire_name), repr(prop.signature)]
        if setter:
            args.append("setter=True")
        if prop.emits_changed_signal is not None:
            args.append(f"emits_changed_signal={prop.emits_changed_signal!r}")
        if prop.deprecated:
            args.append("deprecated=True")
        return ", ".join(args)

    def _generate_signal(self, signal: GenSignal) -> list[str]:
        args = [repr(signal.wire_name)]
        if signal.signature:
            args.append(repr(signal.signature))
        if signal.deprecated:
            args.append("deprecated=True")

        docs = list(signal.docs)
        for arg in signal.args:
            docs.extend(arg.docs)

        # Signals only describe their payload; delivery is up to the consumer
        return [f"{INDENT}@dbus_signal({', '.join(args)})"] + self._def(
            signal.ident, signal.args, "None",
            f"`{signal.wire_name}` signal.", tuple(docs), signal.deprecated, False)

    def _def(self, ident: str, params: tuple, return_type: str, summary: str,
             docs: tuple, deprecated: bool, is_async: bool) -> list[str]:
        keyword = "async def" if is_async else "def"
        params_str = ", ".join(["self"] + [f"{p.ident}: {p.type_expr}" for p in params])
        head = f"{INDENT}{keyword} {ident}({params_str}) -> {return_type}:"
        if not docs and not deprecated:
            return [f"{head} ..."]
        return [head] + self._docstring(summary, docs, deprecated, INDENT * 2)

    def _docstring(self, summary: str, docs: tuple, deprecated: bool, indent: str) -> list[str]:
        if not docs and not deprecated:
            return [f'{indent}"""{escape_docstring(summary)}"""']
        lines = [f'{indent}"""{escape_docstring(summary)}', ""]
        for doc in docs:
            lines.append(f"{indent}{escape_docstring(doc)}")
        if deprecated:
            if docs:
                lines.append("")
            lines.append(f"{indent}.. deprecated:: marked deprecated in the introspection data")
        lines.append(f'{indent}"""')
        return lines
