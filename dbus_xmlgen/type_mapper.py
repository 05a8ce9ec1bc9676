"""Type mapping from D-Bus signatures to Python type expressions"""

from .signature import Array, DictEntry, Primitive, SignatureNode, Struct, TypeCode


class TypeMapper:
    """Maps SignatureNode values to Python annotations.

    Names that are not builtins come from dbus_xmlgen.runtime; generated
    modules import them from there.
    """

    # Direct Python type mappings
    PY_TYPES = {
        TypeCode.BYTE: 'Byte',
        TypeCode.BOOLEAN: 'bool',
        TypeCode.INT16: 'Int16',
        TypeCode.UINT16: 'UInt16',
        TypeCode.INT32: 'Int32',
        TypeCode.UINT32: 'UInt32',
        TypeCode.INT64: 'Int64',
        TypeCode.UINT64: 'UInt64',
        TypeCode.DOUBLE: 'float',
        TypeCode.STRING: 'str',
        TypeCode.OBJECT_PATH: 'ObjectPath',
        TypeCode.SIGNATURE: 'Signature',
        TypeCode.UNIX_FD: 'UnixFd',
        TypeCode.VARIANT: 'Variant',
    }

    BUILTINS = frozenset({'bool', 'float', 'str'})

    @classmethod
    def to_python(cls, node: SignatureNode) -> str:
        """Convert a signature node to a Python type expression"""
        if isinstance(node, Primitive):
            return cls.PY_TYPES[node.code]

        if isinstance(node, Array):
            # a{KV} is a mapping, never a list of pairs
            if isinstance(node.element, DictEntry):
                key = cls.to_python(node.element.key)
                value = cls.to_python(node.element.value)
                return f'dict[{key}, {value}]'
            return f'list[{cls.to_python(node.element)}]'

        if isinstance(node, Struct):
            return f"tuple[{', '.join(cls.to_python(f) for f in node.fields)}]"

        if isinstance(node, DictEntry):
            # Only reachable for hand-built nodes; the parser keeps dict
            # entries inside arrays.
            return f'tuple[{cls.to_python(node.key)}, {cls.to_python(node.value)}]'

        raise TypeError(f"not a signature node: {node!r}")

    @classmethod
    def return_type(cls, nodes) -> str:
        """Return annotation for a sequence of output types"""
        nodes = tuple(nodes)
        if not nodes:
            return 'None'
        if len(nodes) == 1:
            return cls.to_python(nodes[0])
        return f"tuple[{', '.join(cls.to_python(n) for n in nodes)}]"

    @classmethod
    def runtime_names(cls, node: SignatureNode) -> set[str]:
        """Names from dbus_xmlgen.runtime that an expression refers to"""
        if isinstance(node, Primitive):
            name = cls.PY_TYPES[node.code]
            return set() if name in cls.BUILTINS else {name}
        if isinstance(node, Array):
            return cls.runtime_names(node.element)
        if isinstance(node, DictEntry):
            return cls.runtime_names(node.key) | cls.runtime_names(node.value)
        if isinstance(node, Struct):
            names = set()
            for f in node.fields:
                names |= cls.runtime_names(f)
            return names
        raise TypeError(f"not a signature node: {node!r}")
