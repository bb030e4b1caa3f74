"""proxyctl package.

Modules:
- proxyctl.cli: CLI entry point package (proxyctl)
- proxyctl.lib.core: Document model, structural merge, precedence, defaults, codec
- proxyctl.lib._util: Internal helpers (logging, ANSI colors)
"""

__all__ = ["cli", "lib"]

# Version information - single source of truth using importlib.metadata
try:
    from importlib.metadata import version

    __version__ = version("proxyctl")
except Exception:
    __version__ = "unknown"
