"""
Tools: plugin trees, one directory per server profile.

Files below this package are NOT imported as regular modules. The registry
discovers them by walking the tree (see registry.py) and reads each file's
module-level `tool` attribute.

Layout:
- examples/test/    hello_world
- docker/           containers/, images/
- git/              repository/, commits/, branches/
- rest/             get, post, patch, delete

Files starting with `_` are helpers and are never loaded as tools.
"""

from pathlib import Path

TOOLS_DIR = Path(__file__).parent

__all__ = ["TOOLS_DIR"]
