"""Error taxonomy for the generator pipeline"""

from typing import Optional


class XmlgenError(Exception):
    """Base class for every error raised by the generator"""

    code = "GEN000"

    def __init__(self, message: str, *, interface: Optional[str] = None,
                 member: Optional[str] = None, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.interface = interface
        self.member = member
        self.line = line

    def location(self) -> str:
        """Human readable pointer to the offending construct"""
        parts = []
        if self.interface:
            parts.append(f"interface {self.interface}")
        if self.member:
            parts.append(f"member {self.member}")
        if self.line is not None:
            parts.append(f"line {self.line}")
        return ", ".join(parts)

    def __str__(self) -> str:
        loc = self.location()
        return f"{self.message} ({loc})" if loc else self.message


class ConfigError(XmlgenError):
    """Raised when the configuration file cannot be parsed."""

    code = "CFG001"


class SignatureError(XmlgenError):
    """Malformed D-Bus type signature"""

    code = "SIG001"

    def __init__(self, signature: str, offset: int, reason: str):
        super().__init__(f"invalid signature '{signature}' at offset {offset}: {reason}")
        self.signature = signature
        self.offset = offset
        self.reason = reason

    @property
    def fragment(self) -> str:
        """The signature text up to and including the offending position"""
        return self.signature[:self.offset + 1]


class SignatureDepthError(SignatureError):
    """Signature nests containers deeper than the wire format allows"""

    code = "SIG002"


class ParseError(XmlgenError):
    """Malformed introspection XML or a missing mandatory attribute"""

    code = "XML001"

    def __init__(self, message: str, *, element: Optional[str] = None,
                 column: Optional[int] = None,
                 signature_error: Optional[SignatureError] = None, **context):
        super().__init__(message, **context)
        self.element = element
        self.column = column
        self.signature_error = signature_error

    def location(self) -> str:
        loc = super().location()
        if self.element:
            loc = f"<{self.element}>, {loc}" if loc else f"<{self.element}>"
        if self.column is not None:
            loc = f"{loc}, column {self.column}"
        return loc


class NameCollisionError(XmlgenError):
    """Two wire names end up on the same Python identifier"""

    code = "NAM001"

    def __init__(self, identifier: str, names: tuple, **context):
        joined = ", ".join(f"'{n}'" for n in names)
        super().__init__(f"identifier '{identifier}' is produced by {joined}", **context)
        self.identifier = identifier
        self.names = tuple(names)


class UnsupportedFeatureError(XmlgenError):
    """A construct the generator declines to translate"""

    code = "GEN001"

    def __init__(self, feature: str, **context):
        super().__init__(f"unsupported: {feature}", **context)
        self.feature = feature
