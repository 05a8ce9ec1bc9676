"""
D-Bus XML Proxy Generator Package

Parses D-Bus introspection XML and generates typed Python proxy
declarations:
  1. Signature grammar parsing (type signature -> SignatureNode tree)
  2. Introspection parsing (XML -> Node / Interface tree)
  3. Identifier normalization and type mapping
  4. Proxy module emission against dbus_xmlgen.runtime
"""

from .common_generator import GENERATOR_VERSION as __version__
from .types import Access, Annotation, Arg, Direction, Interface, Method, Node, Property, Signal
from .signature import (
    Array, DictEntry, Primitive, SignatureParser, Struct, TypeCode,
    parse_signature, parse_single_type, to_signature,
)
from .errors import (
    ConfigError, NameCollisionError, ParseError, SignatureDepthError, SignatureError,
    UnsupportedFeatureError, XmlgenError,
)
from .config import (
    CallStyle, CaseStyle, ErrorPolicy, GenerationConfig, OutputMode, ReservedWordPolicy,
    load_config,
)
from .diagnostics import Diagnostic, Diagnostics
from .parser import IntrospectionParser, parse_introspection
from .naming import IdentifierNormalizer, Role
from .type_mapper import TypeMapper
from .builder import InterfaceModelBuilder
from .python_generator import GeneratedUnit, ProxyGenerator
from .pipeline import GenerationResult, generate

__all__ = [
    '__version__',
    'Access', 'Annotation', 'Arg', 'Direction', 'Interface', 'Method', 'Node', 'Property',
    'Signal',
    'Array', 'DictEntry', 'Primitive', 'SignatureParser', 'Struct', 'TypeCode',
    'parse_signature', 'parse_single_type', 'to_signature',
    'ConfigError', 'NameCollisionError', 'ParseError', 'SignatureDepthError',
    'SignatureError', 'UnsupportedFeatureError', 'XmlgenError',
    'CallStyle', 'CaseStyle', 'ErrorPolicy', 'GenerationConfig', 'OutputMode',
    'ReservedWordPolicy', 'load_config',
    'Diagnostic', 'Diagnostics',
    'IntrospectionParser', 'parse_introspection',
    'IdentifierNormalizer', 'Role',
    'TypeMapper',
    'InterfaceModelBuilder',
    'GeneratedUnit', 'ProxyGenerator',
    'GenerationResult', 'generate',
]
