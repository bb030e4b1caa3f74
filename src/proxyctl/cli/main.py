#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import argparse

from .. import __version__
from ..lib._util.logging_utils import _log_debug
from .commands import defaults as _defaults_cmd, resolve as _resolve_cmd

_COMMANDS = (_resolve_cmd, _defaults_cmd)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="proxyctl",
        description="proxyctl – resolve layered proxy data-plane configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Precedence (highest wins):\n"
            "  instance  >  class  >  template\n"
            "\n"
            "Examples:\n"
            "  proxyctl resolve --template t.yml --class c.yml --instance i.yml\n"
            "  proxyctl resolve --instance i.yml --with-defaults --format json\n"
            "  proxyctl defaults --role shutdown-manager\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"proxyctl {__version__}")
    sub = parser.add_subparsers(dest="cmd", required=True)
    for command in _COMMANDS:
        command.register(sub)

    args = parser.parse_args()
    _log_debug(f"cli: cmd={args.cmd}")
    for command in _COMMANDS:
        if command.dispatch(args):
            return
    parser.error(f"Unknown command: {args.cmd}")


if __name__ == "__main__":
    main()
