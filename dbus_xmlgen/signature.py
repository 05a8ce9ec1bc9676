"""D-Bus type signature grammar.

A signature is a string of single-letter type codes. ``a`` prefixes an
element type, ``(`` ``)`` delimit a struct and ``{`` ``}`` delimit a dict
entry, which is only legal as the element type of an array. The parser
turns a signature into a tuple of SignatureNode values, e.g. "a{sv}i"
becomes (Array(DictEntry(STRING, VARIANT)), Primitive(INT32)).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import SignatureDepthError, SignatureError

# Limits from the D-Bus specification
MAX_SIGNATURE_LENGTH = 255
MAX_ARRAY_DEPTH = 32
MAX_STRUCT_DEPTH = 32


class TypeCode(Enum):
    """Single-letter type codes"""
    BYTE = 'y'
    BOOLEAN = 'b'
    INT16 = 'n'
    UINT16 = 'q'
    INT32 = 'i'
    UINT32 = 'u'
    INT64 = 'x'
    UINT64 = 't'
    DOUBLE = 'd'
    STRING = 's'
    OBJECT_PATH = 'o'
    SIGNATURE = 'g'
    UNIX_FD = 'h'
    VARIANT = 'v'

    @property
    def is_basic(self) -> bool:
        """Basic types are the ones allowed as dict keys"""
        return self is not TypeCode.VARIANT


_CODES = {code.value: code for code in TypeCode}


@dataclass(frozen=True)
class Primitive:
    """Scalar or variant"""
    code: TypeCode

    @property
    def signature(self) -> str:
        return self.code.value


@dataclass(frozen=True)
class Array:
    element: 'SignatureNode'

    @property
    def signature(self) -> str:
        return 'a' + self.element.signature


@dataclass(frozen=True)
class DictEntry:
    key: 'SignatureNode'
    value: 'SignatureNode'

    @property
    def signature(self) -> str:
        return '{' + self.key.signature + self.value.signature + '}'


@dataclass(frozen=True)
class Struct:
    fields: tuple

    @property
    def signature(self) -> str:
        return '(' + ''.join(f.signature for f in self.fields) + ')'


SignatureNode = Union[Primitive, Array, DictEntry, Struct]


def is_basic(node: SignatureNode) -> bool:
    return isinstance(node, Primitive) and node.code.is_basic


def to_signature(nodes) -> str:
    """Serialize nodes back to their canonical signature string"""
    if isinstance(nodes, (Primitive, Array, DictEntry, Struct)):
        return nodes.signature
    return ''.join(node.signature for node in nodes)


class SignatureParser:
    """Recursive-descent parser with one character of lookahead"""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._array_depth = 0
        self._struct_depth = 0

    def parse(self) -> tuple:
        """Parse zero or more complete types"""
        self._check_length()
        nodes = []
        while self.pos < len(self.text):
            if self.text[self.pos] == ')':
                self._fail("unmatched ')'")
            nodes.append(self._parse_type())
        return tuple(nodes)

    def parse_single(self) -> SignatureNode:
        """Parse exactly one complete type"""
        self._check_length()
        if not self.text:
            self._fail("expected a single complete type, got an empty signature")
        if self.text[0] == ')':
            self._fail("unmatched ')'")
        node = self._parse_type()
        if self.pos != len(self.text):
            self._fail("expected a single complete type")
        return node

    def _check_length(self):
        if len(self.text) > MAX_SIGNATURE_LENGTH:
            raise SignatureError(
                self.text, MAX_SIGNATURE_LENGTH,
                f"signature is longer than {MAX_SIGNATURE_LENGTH} characters")

    def _peek(self):
        return self.text[self.pos] if self.pos < len(self.text) else None

    def _fail(self, reason: str, offset=None):
        raise SignatureError(self.text, self.pos if offset is None else offset, reason)

    def _parse_type(self, in_array: bool = False) -> SignatureNode:
        char = self._peek()
        if char is None:
            self._fail("unexpected end of signature")

        if char == 'a':
            return self._parse_array()
        if char == '(':
            return self._parse_struct()
        if char == '{':
            if not in_array:
                self._fail("dict entry is only allowed as an array element")
            return self._parse_dict_entry()
        if char in (')', '}'):
            self._fail(f"unexpected '{char}'")

        code = _CODES.get(char)
        if code is None:
            self._fail(f"unknown type code '{char}'")
        self.pos += 1
        return Primitive(code)

    def _parse_array(self) -> Array:
        self._array_depth += 1
        if self._array_depth > MAX_ARRAY_DEPTH:
            raise SignatureDepthError(
                self.text, self.pos, f"more than {MAX_ARRAY_DEPTH} nested arrays")
        self.pos += 1
        if self._peek() is None:
            self._fail("array is missing its element type")
        element = self._parse_type(in_array=True)
        self._array_depth -= 1
        return Array(element)

    def _enter_struct(self):
        self._struct_depth += 1
        if self._struct_depth > MAX_STRUCT_DEPTH:
            raise SignatureDepthError(
                self.text, self.pos, f"more than {MAX_STRUCT_DEPTH} nested structs")

    def _parse_struct(self) -> Struct:
        self._enter_struct()
        start = self.pos
        self.pos += 1
        fields = []
        while True:
            char = self._peek()
            if char is None:
                self._fail("unterminated struct", offset=start)
            if char == ')':
                break
            fields.append(self._parse_type())
        if not fields:
            self._fail("empty struct")
        self.pos += 1
        self._struct_depth -= 1
        return Struct(tuple(fields))

    def _parse_dict_entry(self) -> DictEntry:
        self._enter_struct()
        start = self.pos
        self.pos += 1

        if self._peek() in (None, '}'):
            self._fail("dict entry is missing its key type")
        key_pos = self.pos
        key = self._parse_type()
        if not is_basic(key):
            self._fail("dict entry key must be a basic type", offset=key_pos)

        char = self._peek()
        if char is None:
            self._fail("unterminated dict entry", offset=start)
        if char == '}':
            self._fail("dict entry is missing its value type")
        value = self._parse_type()

        char = self._peek()
        if char is None:
            self._fail("unterminated dict entry", offset=start)
        if char != '}':
            self._fail("dict entry must hold exactly two types")
        self.pos += 1
        self._struct_depth -= 1
        return DictEntry(key, value)


def parse_signature(text: str) -> tuple:
    return SignatureParser(text).parse()


def parse_single_type(text: str) -> SignatureNode:
    return SignatureParser(text).parse_single()
