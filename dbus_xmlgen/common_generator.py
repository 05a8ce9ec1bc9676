"""Common Generator - generates the module header shared by every proxy unit"""

from typing import Optional

from .runtime import STANDARD_PROXIES

GENERATOR_NAME = "dbus-xmlgen"
RUNTIME_MODULE = "dbus_xmlgen.runtime"
GENERATOR_VERSION = "0.1.0"


def escape_docstring(text: str) -> str:
    """Make arbitrary text safe inside a triple-quoted docstring"""
    return text.replace('\\', '\\\\').replace('"""', '\\"\\"\\"')


class CommonGenerator:
    """Generates module docstrings and the runtime import block"""

    def __init__(self, source: Optional[str] = None, standard_interfaces: tuple = (),
                 version: str = GENERATOR_VERSION):
        self.version = version
        self.source = source
        self.standard_interfaces = standard_interfaces

    def generate_header(self, interface_names: list[str]) -> list[str]:
        """Module docstring naming the interfaces a unit declares"""
        lines = ['"""']
        if interface_names:
            noun = "proxy" if len(interface_names) == 1 else "proxies"
            names = ", ".join(f"`{escape_docstring(n)}`" for n in interface_names)
            lines.append(f"DBus interface {noun} for: {names}")
            lines.append("")

        lines.append(f"This code was generated by `{GENERATOR_NAME}` `{self.version}` "
                     "from DBus introspection data.")
        if self.source:
            lines.append(f"Source: `{escape_docstring(self.source)}`.")
        lines.extend([
            "",
            "You may prefer to adapt it, instead of using it verbatim.",
        ])

        if self.standard_interfaces:
            lines.extend([
                "",
                "This DBus object implements standard DBus interfaces",
                "(`org.freedesktop.DBus.*`) for which the following proxies can be used:",
                "",
            ])
            for name in self.standard_interfaces:
                proxy = STANDARD_PROXIES.get(name)
                if proxy:
                    lines.append(f"* `{RUNTIME_MODULE}.{proxy}` (`{name}`)")
                else:
                    lines.append(f"* `{name}`")
            lines.extend([
                "",
                f"...consequently `{GENERATOR_NAME}` did not generate code for the above interfaces.",
            ])

        lines.extend(['"""', ""])
        return lines

    def generate_imports(self, names: set) -> list[str]:
        """Import block pulling the used names from the runtime module"""
        lines = ["from __future__ import annotations", ""]
        if names:
            lines.append(f"from {RUNTIME_MODULE} import (")
            for name in sorted(names):
                lines.append(f"    {name},")
            lines.append(")")
        return lines
