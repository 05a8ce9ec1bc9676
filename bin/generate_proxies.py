#!/usr/bin/env python3
"""
D-Bus Proxy Generator

Parses D-Bus introspection XML and generates typed Python proxy
declarations, one module per interface or a single aggregate module.

Usage:
    python generate_proxies.py interface.xml
    python generate_proxies.py interface.xml --output-dir generated/ --async
"""

import sys
from pathlib import Path

# Add parent directory to path so dbus_xmlgen package can be found
sys.path.insert(0, str(Path(__file__).parent.parent))

from dbus_xmlgen.cli import main


if __name__ == "__main__":
    sys.exit(main())
