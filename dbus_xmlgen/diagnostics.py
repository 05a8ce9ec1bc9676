"""Structured diagnostics collected while generating proxies"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .errors import XmlgenError
from .logging import get_logger

logger = get_logger("diagnostics")


class Severity(Enum):
    INFO = auto()
    WARN = auto()
    ERROR = auto()


@dataclass(frozen=True)
class Code:
    id: str                  # e.g. "XML001"
    severity: Severity       # default severity
    template: str            # message template (format kwargs allowed)


class Codes:
    # XML / introspection
    XML_INVALID = Code("XML001", Severity.ERROR, "Invalid introspection data: {reason}.")

    # Signatures
    BAD_SIGNATURE = Code("SIG001", Severity.ERROR, "Invalid signature: {reason}.")
    DEEP_SIGNATURE = Code("SIG002", Severity.ERROR, "Signature nests too deeply: {reason}.")

    # Naming
    NAME_COLLISION = Code("NAM001", Severity.ERROR, "Name collision: {reason}.")
    DUPLICATE_CLASS = Code("NAM002", Severity.WARN,
                           "Interface {interface} defined differently on several nodes; "
                           "emitted as {name}.")

    # Generation
    UNSUPPORTED = Code("GEN001", Severity.ERROR, "Unsupported construct: {reason}.")
    STANDARD_SKIPPED = Code("GEN002", Severity.INFO,
                            "Skipped standard interface {interface}.")
    INTERNAL = Code("GEN000", Severity.ERROR, "{reason}")


codes = Codes()

_BY_ID = {
    value.id: value
    for value in vars(Codes).values()
    if isinstance(value, Code)
}


@dataclass(frozen=True)
class Diagnostic:
    """One reported problem with enough context to find it in the XML"""
    severity: Severity
    code: str
    message: str
    interface: Optional[str] = None
    member: Optional[str] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        loc = []
        if self.interface:
            loc.append(self.interface)
        if self.member:
            loc.append(self.member)
        if self.line is not None:
            loc.append(f"line {self.line}")
        loc_str = f" @ {' '.join(loc)}" if loc else ""
        return f"{self.severity.name} {self.code}{loc_str}: {self.message}"


class Diagnostics:
    """Collects diagnostics so one run reports every interface-local failure"""

    def __init__(self):
        self.items: list[Diagnostic] = []

    def info(self, code: Code, **kwargs) -> Diagnostic:
        return self._emit(code, Severity.INFO, kwargs)

    def warn(self, code: Code, **kwargs) -> Diagnostic:
        return self._emit(code, Severity.WARN, kwargs)

    def error_from(self, exc: XmlgenError) -> Diagnostic:
        """Record a raised generator error under its code's template"""
        code = _BY_ID.get(exc.code) or Code(exc.code, Severity.ERROR, codes.INTERNAL.template)
        return self._emit(code, Severity.ERROR, {
            "reason": exc.message,
            "interface": exc.interface,
            "member": exc.member,
            "line": exc.line,
        })

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity is Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def _emit(self, code: Code, level: Severity, kv: dict) -> Diagnostic:
        try:
            message = code.template.format(**kv)
        except KeyError as e:
            missing = str(e).strip("'")
            message = f"{code.template} (missing: {missing})"

        diag = Diagnostic(
            severity=level,
            code=code.id,
            message=message,
            interface=kv.get("interface"),
            member=kv.get("member"),
            line=kv.get("line"),
        )
        if level is Severity.ERROR:
            logger.error("%s", diag)
        elif level is Severity.WARN:
            logger.warning("%s", diag)
        else:
            logger.info("%s", diag)
        self.items.append(diag)
        return diag
