"""CLI entrypoint for dbus-xmlgen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .common_generator import GENERATOR_VERSION
from .config import CallStyle, ErrorPolicy, GenerationConfig, OutputMode, load_config
from .errors import ConfigError, XmlgenError
from .logging import configure_logging, get_logger, timed
from .pipeline import generate

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dbus-xmlgen",
        description="Generate typed Python proxy declarations from D-Bus introspection XML.",
    )
    parser.add_argument("xml_file", help="Path to the introspection XML file")
    parser.add_argument(
        "--output-dir", "-o", default=None,
        help="Write one module per unit here (defaults to printing an aggregate module)",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to .xmlgen.yml")
    parser.add_argument("--async", dest="use_async", action="store_true",
                        help="Emit async methods and property accessors")
    parser.add_argument("--aggregate", action="store_true",
                        help="Emit a single module holding every interface")
    parser.add_argument("--module-name", default=None, help="Name of the aggregate module")
    parser.add_argument("--include-standard", action="store_true",
                        help="Also generate the standard org.freedesktop.DBus interfaces")
    parser.add_argument("--service", default=None, help="Default bus name for the proxies")
    parser.add_argument("--path", default=None, help="Object path of the root node")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop at the first interface that fails to translate")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log more (-v for progress, -vv for debug detail)")
    parser.add_argument("--log-file", default=None, help="Also write debug logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {GENERATOR_VERSION}")
    return parser


def _resolve_config(args: argparse.Namespace, xml_path: Path) -> GenerationConfig:
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            raise ConfigError(f"config file {config_path} does not exist")
    else:
        config_path = xml_path.parent
    config = load_config(config_path)

    if args.use_async:
        config.output.call_style = CallStyle.ASYNC
    if args.aggregate or args.output_dir is None:
        config.output.mode = OutputMode.AGGREGATE
    if args.module_name:
        config.output.module_name = args.module_name
    if args.include_standard:
        config.standard_interfaces.skip = False
    if args.service:
        config.service = args.service
    if args.path:
        config.path = args.path
    if args.fail_fast:
        config.errors = ErrorPolicy.FAIL_FAST
    return config


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint; returns the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, Path(args.log_file) if args.log_file else None)

    xml_path = Path(args.xml_file)
    try:
        config = _resolve_config(args, xml_path)
        content = xml_path.read_bytes()
        with timed(logger, f"Generating from {xml_path.name}"):
            result = generate(content, config, source=xml_path.name)
    except OSError as exc:
        parser.exit(1, f"dbus-xmlgen: cannot read {xml_path}: {exc}\n")
    except XmlgenError as exc:
        parser.exit(1, f"dbus-xmlgen: {exc}\n")

    for diag in result.diagnostics.errors:
        print(f"dbus-xmlgen: {diag}", file=sys.stderr)

    if args.output_dir is None:
        for unit in result.units:
            sys.stdout.write(unit.source)
    else:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        for unit in result.units:
            path = output_dir / unit.filename
            path.write_text(unit.source, encoding="utf-8")
            print(f"Generated: {path}")

    return 0 if result.ok else 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
