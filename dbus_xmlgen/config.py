"""Generation options and their loading from .xmlgen.yml."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".xmlgen.yml"

DEFAULT_STANDARD_INTERFACES = (
    "org.freedesktop.DBus.Introspectable",
    "org.freedesktop.DBus.Properties",
    "org.freedesktop.DBus.Peer",
    "org.freedesktop.DBus.ObjectManager",
)


class CaseStyle(Enum):
    """How the words of a wire name are joined back together."""

    SNAKE = "snake"        # get_volume
    CAMEL = "camel"        # getVolume
    PASCAL = "pascal"      # GetVolume
    PRESERVE = "preserve"  # wire name, with invalid characters replaced by "_"


class ReservedWordPolicy(Enum):
    """What happens when a normalized name is a Python keyword."""

    SUFFIX = "suffix"  # append "_" (PEP 8 convention, class -> class_)
    ERROR = "error"    # report a NameCollisionError


class OutputMode(Enum):
    PER_INTERFACE = "per_interface"
    AGGREGATE = "aggregate"


class CallStyle(Enum):
    """Calling convention of emitted methods and property accessors."""

    SYNC = "sync"
    ASYNC = "async"


class ErrorPolicy(Enum):
    COLLECT = "collect"      # report interface-local failures, keep going
    FAIL_FAST = "fail_fast"  # raise the first failure


@dataclass
class NamingConfig:
    """Identifier conventions per role."""

    types: CaseStyle = CaseStyle.PASCAL
    functions: CaseStyle = CaseStyle.SNAKE
    fields: CaseStyle = CaseStyle.SNAKE
    reserved_words: ReservedWordPolicy = ReservedWordPolicy.SUFFIX
    class_suffix: str = "Proxy"


@dataclass
class StandardInterfacesConfig:
    """Interfaces covered by the runtime support library."""

    skip: bool = True
    names: List[str] = field(default_factory=lambda: list(DEFAULT_STANDARD_INTERFACES))
    prefixes: List[str] = field(default_factory=list)

    def matches(self, interface_name: str) -> bool:
        if interface_name in self.names:
            return True
        return any(interface_name.startswith(prefix) for prefix in self.prefixes)


@dataclass
class OutputConfig:
    mode: OutputMode = OutputMode.PER_INTERFACE
    module_name: str = "proxies"
    call_style: CallStyle = CallStyle.SYNC


@dataclass
class GenerationConfig:
    """Options record consumed by the pipeline."""

    naming: NamingConfig = field(default_factory=NamingConfig)
    standard_interfaces: StandardInterfacesConfig = field(default_factory=StandardInterfacesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    errors: ErrorPolicy = ErrorPolicy.COLLECT
    service: Optional[str] = None
    path: Optional[str] = None


def load_config(config_path: Path) -> GenerationConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return GenerationConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")
    return config_from_dict(data)


def config_from_dict(data: Dict[str, Any]) -> GenerationConfig:
    """Build a GenerationConfig from already-parsed YAML data."""
    config = GenerationConfig()

    naming_data = _as_dict(data.get("naming"), "naming")
    if naming_data:
        naming = config.naming
        naming.types = _as_enum(CaseStyle, naming_data.get("types"), naming.types, "naming.types")
        naming.functions = _as_enum(
            CaseStyle, naming_data.get("functions"), naming.functions, "naming.functions"
        )
        naming.fields = _as_enum(CaseStyle, naming_data.get("fields"), naming.fields, "naming.fields")
        naming.reserved_words = _as_enum(
            ReservedWordPolicy,
            naming_data.get("reserved_words"),
            naming.reserved_words,
            "naming.reserved_words",
        )
        suffix = _as_str(naming_data.get("class_suffix"))
        if suffix is not None:
            naming.class_suffix = suffix

    std_data = _as_dict(data.get("standard_interfaces"), "standard_interfaces")
    if std_data:
        std = config.standard_interfaces
        skip = _as_bool(std_data.get("skip"))
        if skip is not None:
            std.skip = skip
        if "names" in std_data:
            std.names = _as_str_list(std_data.get("names"), "standard_interfaces.names")
        if "prefixes" in std_data:
            std.prefixes = _as_str_list(std_data.get("prefixes"), "standard_interfaces.prefixes")

    output_data = _as_dict(data.get("output"), "output")
    if output_data:
        output = config.output
        output.mode = _as_enum(OutputMode, output_data.get("mode"), output.mode, "output.mode")
        output.call_style = _as_enum(
            CallStyle, output_data.get("call_style"), output.call_style, "output.call_style"
        )
        module_name = _as_str(output_data.get("module_name"))
        if module_name:
            if not module_name.isidentifier():
                raise ConfigError(f"output.module_name '{module_name}' is not a valid module name")
            output.module_name = module_name

    config.errors = _as_enum(ErrorPolicy, data.get("errors"), config.errors, "errors")
    config.service = _as_str(data.get("service"))
    config.path = _as_str(data.get("path"))
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


E = TypeVar("E", bound=Enum)


def _as_enum(enum_type: Type[E], value: Any, default: E, key: str) -> E:
    if value is None:
        return default
    text = str(value).strip().lower().replace("-", "_")
    for member in enum_type:
        if member.value == text:
            return member
    allowed = ", ".join(m.value for m in enum_type)
    raise ConfigError(f"{key} must be one of: {allowed} (got '{value}')")


def _as_dict(value: Any, key: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping")
    return value


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            return True
        if lowered in {"false", "no", "off", "0"}:
            return False
    return None


def _as_str_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list of strings")
    return [str(item).strip() for item in value if str(item).strip()]


__all__ = [
    "CONFIG_FILENAME",
    "CallStyle",
    "CaseStyle",
    "ErrorPolicy",
    "GenerationConfig",
    "NamingConfig",
    "OutputConfig",
    "OutputMode",
    "ReservedWordPolicy",
    "StandardInterfacesConfig",
    "config_from_dict",
    "load_config",
]
