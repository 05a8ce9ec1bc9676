from __future__ import annotations

import logging
from pathlib import Path

import pytest

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "samples"


@pytest.fixture
def cat_xml() -> str:
    """The sample document describing org.example.Cat."""
    return (SAMPLES_DIR / "org.example.Cat.xml").read_text(encoding="utf-8")


@pytest.fixture
def exec_source():
    """Compile and execute generated source, returning its namespace."""

    def _exec(source: str, name: str = "generated") -> dict:
        namespace: dict = {"__name__": name}
        exec(compile(source, f"<{name}>", "exec"), namespace)
        return namespace

    return _exec


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the CLI so later tests log normally."""
    yield
    logger = logging.getLogger("dbus_xmlgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
