"""Conversion of wire names into Python identifiers"""

import keyword
import re
from enum import Enum
from typing import Iterable, Optional

from .config import CaseStyle, NamingConfig, ReservedWordPolicy
from .errors import NameCollisionError, UnsupportedFeatureError
from .type_mapper import TypeMapper

# Mixed-case words kept whole instead of split at their inner capital
COMPOUND_WORDS = ('DBus',)

# Compound word, acronym before a capitalized word, capitalized or lowercase
# word, remaining acronym, digit run: GetURLHandler2 -> Get URL Handler 2
_WORD_RE = re.compile(
    ''.join(rf'{word}(?![a-z])|' for word in COMPOUND_WORDS)
    + r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+')

PYTHON_RESERVED_NAMES = frozenset(keyword.kwlist)

# Names every generated module may import from dbus_xmlgen.runtime
RUNTIME_NAMES = frozenset(
    {'Proxy', 'dbus_method', 'dbus_property', 'dbus_signal'}
    | set(TypeMapper.PY_TYPES.values())
)


class Role(Enum):
    TYPE = "type"
    FUNCTION = "function"
    FIELD = "field"


# Names that are legal identifiers but unusable in the role's position
_ROLE_RESERVED = {
    Role.TYPE: RUNTIME_NAMES,
    Role.FUNCTION: frozenset(),
    Role.FIELD: frozenset({'self'}),
}


def split_words(name: str) -> list[str]:
    """Split on separators and case boundaries"""
    return _WORD_RE.findall(name)


def join_words(words: list[str], style: CaseStyle) -> str:
    if style is CaseStyle.SNAKE:
        return '_'.join(w.lower() for w in words)
    if style is CaseStyle.PASCAL:
        return ''.join(w.capitalize() for w in words)
    if style is CaseStyle.CAMEL:
        return words[0].lower() + ''.join(w.capitalize() for w in words[1:])
    raise ValueError(f"cannot join words in {style} style")


class IdentifierNormalizer:
    """Produces role-appropriate, keyword-safe identifiers"""

    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()

    def style_for(self, role: Role) -> CaseStyle:
        return {
            Role.TYPE: self.config.types,
            Role.FUNCTION: self.config.functions,
            Role.FIELD: self.config.fields,
        }[role]

    def has_identifier(self, name: Optional[str]) -> bool:
        """True when the name holds at least one letter or digit"""
        return bool(name) and bool(split_words(name))

    def normalize(self, name: str, role: Role, *, interface: Optional[str] = None) -> str:
        style = self.style_for(role)
        if style is CaseStyle.PRESERVE:
            ident = re.sub(r'[^A-Za-z0-9_]', '_', name)
            if not ident.strip('_'):
                raise UnsupportedFeatureError(
                    f"name '{name}' has no identifier characters", interface=interface)
        else:
            words = split_words(name)
            if not words:
                raise UnsupportedFeatureError(
                    f"name '{name}' has no identifier characters", interface=interface)
            ident = join_words(words, style)

        if ident[0].isdigit():
            ident = f'_{ident}'
        return self._resolve_reserved(name, ident, role, interface)

    def _resolve_reserved(self, name: str, ident: str, role: Role,
                          interface: Optional[str]) -> str:
        if ident not in PYTHON_RESERVED_NAMES and ident not in _ROLE_RESERVED[role]:
            return ident
        if self.config.reserved_words is ReservedWordPolicy.ERROR:
            raise NameCollisionError(ident, (name,), interface=interface, member=name)
        return f'{ident}_'


def check_unique(pairs: Iterable[tuple], *, interface: Optional[str] = None,
                 member: Optional[str] = None) -> None:
    """Raise NameCollisionError if two wire names share one identifier.

    ``pairs`` holds (wire name, identifier) tuples.
    """
    seen = {}
    for wire_name, ident in pairs:
        other = seen.get(ident)
        if other is not None:
            raise NameCollisionError(
                ident, (other, wire_name), interface=interface, member=member or wire_name)
        seen[ident] = wire_name
