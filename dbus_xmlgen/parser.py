"""D-Bus introspection XML parser"""

import re
from typing import Optional, Union

from lxml import etree

from .diagnostics import Diagnostics
from .errors import ParseError, SignatureError, XmlgenError
from .logging import get_logger
from .signature import parse_single_type
from .types import (
    Access, Annotation, Arg, Direction, Interface, Method, Node, Property, Signal,
)

logger = get_logger("parser")

_ELEMENT = r'[A-Za-z_][A-Za-z0-9_]*'
INTERFACE_NAME_RE = re.compile(rf'{_ELEMENT}(\.{_ELEMENT})+')
MEMBER_NAME_RE = re.compile(_ELEMENT)
MAX_NAME_LENGTH = 255


class IntrospectionParser:
    """Parses introspection XML into an immutable Node tree.

    Failures inside an ``<interface>`` element are local to it: when a
    Diagnostics collector is given they are recorded and the interface is
    dropped, otherwise the first one is raised. Malformed markup is always
    fatal.
    """

    def __init__(self, content: Union[str, bytes], diagnostics: Optional[Diagnostics] = None):
        self.content = content.encode('utf-8') if isinstance(content, str) else content
        self.diagnostics = diagnostics

    def parse(self) -> Node:
        parser = etree.XMLParser(
            resolve_entities=False, no_network=True, remove_comments=True, remove_pis=True)
        try:
            root = etree.fromstring(self.content, parser)
        except etree.XMLSyntaxError as exc:
            line, column = exc.position if exc.position else (exc.lineno, None)
            raise ParseError(f"malformed XML: {exc.msg}", line=line, column=column) from exc

        if root.tag != 'node':
            raise ParseError(
                f"root element must be <node>, got <{root.tag}>",
                element=str(root.tag), line=root.sourceline)
        return self._parse_node(root)

    def _parse_node(self, elem) -> Node:
        interfaces = []
        nodes = []
        for child in self._children(elem):
            if child.tag == 'interface':
                iface = self._parse_interface_scoped(child)
                if iface is not None:
                    interfaces.append(iface)
            elif child.tag == 'node':
                nodes.append(self._parse_node(child))
            else:
                self._ignore(child)
        return Node(
            name=elem.get('name'),
            interfaces=tuple(interfaces),
            nodes=tuple(nodes),
        )

    def _parse_interface_scoped(self, elem) -> Optional[Interface]:
        if self.diagnostics is None:
            return self._parse_interface(elem)
        try:
            return self._parse_interface(elem)
        except XmlgenError as exc:
            self.diagnostics.error_from(exc)
            return None

    def _parse_interface(self, elem) -> Interface:
        name = self._required(elem, 'name')
        if len(name) > MAX_NAME_LENGTH or not INTERFACE_NAME_RE.fullmatch(name):
            raise ParseError(
                f"invalid interface name '{name}'",
                element='interface', interface=name, line=elem.sourceline)

        methods, signals, properties, annotations = [], [], [], []
        for child in self._children(elem):
            if child.tag == 'method':
                methods.append(self._parse_method(child, name))
            elif child.tag == 'signal':
                signals.append(self._parse_signal(child, name))
            elif child.tag == 'property':
                properties.append(self._parse_property(child, name))
            elif child.tag == 'annotation':
                annotations.append(self._parse_annotation(child, name))
            else:
                self._ignore(child)

        for kind, members in (('method', methods), ('signal', signals), ('property', properties)):
            seen = set()
            for member in members:
                if member.name in seen:
                    raise ParseError(
                        f"duplicate {kind} '{member.name}'",
                        element=kind, interface=name, member=member.name)
                seen.add(member.name)

        logger.debug("Parsed interface %s: %d methods, %d signals, %d properties",
                     name, len(methods), len(signals), len(properties))
        return Interface(
            name=name,
            methods=tuple(methods),
            signals=tuple(signals),
            properties=tuple(properties),
            annotations=tuple(annotations),
        )

    def _parse_method(self, elem, iface: str) -> Method:
        name = self._member_name(elem, iface)
        args, annotations = [], []
        for child in self._children(elem):
            if child.tag == 'arg':
                direction = child.get('direction', 'in')
                try:
                    direction = Direction(direction)
                except ValueError:
                    raise ParseError(
                        f"invalid arg direction '{direction}'",
                        element='arg', interface=iface, member=name,
                        line=child.sourceline) from None
                args.append(self._parse_arg(child, iface, name, direction))
            elif child.tag == 'annotation':
                annotations.append(self._parse_annotation(child, iface, name))
            else:
                self._ignore(child)
        return Method(name=name, args=tuple(args), annotations=tuple(annotations))

    def _parse_signal(self, elem, iface: str) -> Signal:
        name = self._member_name(elem, iface)
        args, annotations = [], []
        for child in self._children(elem):
            if child.tag == 'arg':
                args.append(self._parse_arg(child, iface, name, None))
            elif child.tag == 'annotation':
                annotations.append(self._parse_annotation(child, iface, name))
            else:
                self._ignore(child)
        return Signal(name=name, args=tuple(args), annotations=tuple(annotations))

    def _parse_property(self, elem, iface: str) -> Property:
        name = self._member_name(elem, iface)
        prop_type = self._type(elem, iface, name)

        access = elem.get('access', 'read')
        try:
            access = Access(access)
        except ValueError:
            raise ParseError(
                f"invalid property access '{access}', expected read, write or readwrite",
                element='property', interface=iface, member=name,
                line=elem.sourceline) from None

        annotations = []
        for child in self._children(elem):
            if child.tag == 'annotation':
                annotations.append(self._parse_annotation(child, iface, name))
            else:
                self._ignore(child)
        return Property(name=name, type=prop_type, access=access, annotations=tuple(annotations))

    def _parse_arg(self, elem, iface: str, member: str, direction: Optional[Direction]) -> Arg:
        arg_type = self._type(elem, iface, member)
        annotations = []
        for child in self._children(elem):
            if child.tag == 'annotation':
                annotations.append(self._parse_annotation(child, iface, member))
            else:
                self._ignore(child)
        return Arg(
            name=elem.get('name') or None,
            type=arg_type,
            direction=direction,
            annotations=tuple(annotations),
        )

    def _parse_annotation(self, elem, iface: str, member: Optional[str] = None) -> Annotation:
        name = self._required(elem, 'name', iface, member)
        value = self._required(elem, 'value', iface, member)
        return Annotation(name=name, value=value)

    def _member_name(self, elem, iface: str) -> str:
        name = self._required(elem, 'name', iface)
        if len(name) > MAX_NAME_LENGTH or not MEMBER_NAME_RE.fullmatch(name):
            raise ParseError(
                f"invalid {elem.tag} name '{name}'",
                element=elem.tag, interface=iface, member=name, line=elem.sourceline)
        return name

    def _type(self, elem, iface: str, member: str):
        text = self._required(elem, 'type', iface, member)
        try:
            return parse_single_type(text)
        except SignatureError as exc:
            arg = elem.get('name')
            where = f"{elem.tag} '{arg}'" if arg else f"<{elem.tag}>"
            raise ParseError(
                f"{where}: {exc.message}",
                element=elem.tag, interface=iface, member=member,
                line=elem.sourceline, signature_error=exc) from exc

    def _required(self, elem, attr: str, iface: Optional[str] = None,
                  member: Optional[str] = None) -> str:
        value = elem.get(attr)
        if value is None:
            raise ParseError(
                f"<{elem.tag}> missing required attribute '{attr}'",
                element=elem.tag, interface=iface, member=member, line=elem.sourceline)
        return value

    def _children(self, elem):
        return (child for child in elem if isinstance(child.tag, str))

    def _ignore(self, elem):
        logger.debug("Ignoring unknown element <%s> at line %s", elem.tag, elem.sourceline)


def parse_introspection(content: Union[str, bytes],
                        diagnostics: Optional[Diagnostics] = None) -> Node:
    return IntrospectionParser(content, diagnostics).parse()
