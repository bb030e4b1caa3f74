# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""``defaults`` command: print the baseline proxy defaults."""

from __future__ import annotations

import argparse

from ...lib.core.codec import dump_json, dump_yaml
from ...lib.core.defaults import ContainerRole, default_container_shape, default_proxy_spec


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the defaults subcommand."""
    p = subparsers.add_parser("defaults", help="Show the baseline default proxy spec")
    p.add_argument(
        "--role",
        choices=[role.value for role in ContainerRole],
        help="Only show the default container settings for this role",
    )
    p.add_argument("--format", choices=["yaml", "json"], default="yaml", help="Output format")


def dispatch(args: argparse.Namespace) -> bool:
    """Handle the defaults command.  Returns True if handled."""
    if args.cmd != "defaults":
        return False
    if args.role:
        doc = default_container_shape(ContainerRole(args.role))
    else:
        doc = default_proxy_spec()
    if args.format == "json":
        print(dump_json(doc))
    else:
        print(dump_yaml(doc), end="")
    return True
