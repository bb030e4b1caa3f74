# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""``resolve`` command: merge template, class and instance proxy configs."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ...lib._util.ansi import (
    gray as _gray,
    green as _green,
    supports_color as _supports_color,
)
from ...lib._util.logging_utils import _log_debug
from ...lib.core.codec import InvalidDocumentError, dump_json, dump_yaml, load_document
from ...lib.core.paths import config_root as _config_root
from ...lib.core.defaults import apply_defaults
from ...lib.core.model import ProxyConfig, ProxyWorkloadSpec, UnsupportedProviderError
from ...lib.core.precedence import ConfigLayer, LayerStack, wrap_template
from ...lib.core.schema import SchemaMismatch

_SUFFIXES = (".yml", ".yaml", ".json")


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the resolve subcommand."""
    p = subparsers.add_parser(
        "resolve",
        help="Merge template, class and instance proxy configs (instance wins)",
    )
    p.add_argument("--template", help="Template spec file (bare spec, lowest priority)")
    p.add_argument("--class", dest="class_file", help="Class-level proxy config file")
    p.add_argument("--instance", help="Instance-level proxy config file (highest priority)")
    p.add_argument(
        "--config-dir",
        help="Directory searched for template/class/instance files not given explicitly "
        "(default: PROXYCTL_CONFIG_DIR or the user config dir)",
    )
    p.add_argument(
        "--with-defaults",
        action="store_true",
        help="Fill fields left unset with the baseline defaults",
    )
    p.add_argument("--format", choices=["yaml", "json"], default="yaml", help="Output format")
    p.add_argument(
        "--show-levels",
        action="store_true",
        help="Report which levels contributed (on stderr)",
    )


def dispatch(args: argparse.Namespace) -> bool:
    """Handle the resolve command.  Returns True if handled."""
    if args.cmd != "resolve":
        return False
    _cmd_resolve(
        template=args.template,
        class_file=args.class_file,
        instance=args.instance,
        config_dir=args.config_dir,
        with_defaults=args.with_defaults,
        fmt=args.format,
        show_levels=args.show_levels,
    )
    return True


def _layer_path(explicit: str | None, config_dir: Path, level: str) -> Path | None:
    """Return the file for *level*: the explicit one, else one found in *config_dir*."""
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise SystemExit(f"{level} file not found: {path}")
        return path
    for suffix in _SUFFIXES:
        candidate = config_dir / f"{level}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def _load(path: Path | None, cls: type) -> object | None:
    if path is None:
        return None
    try:
        return load_document(path, cls)
    except InvalidDocumentError as e:
        raise SystemExit(f"Invalid proxy config: {e}")


def _cmd_resolve(
    template: str | None,
    class_file: str | None,
    instance: str | None,
    config_dir: str | None,
    with_defaults: bool,
    fmt: str,
    show_levels: bool,
) -> None:
    base_dir = Path(config_dir).expanduser() if config_dir else _config_root()
    template_path = _layer_path(template, base_dir, "template")
    class_path = _layer_path(class_file, base_dir, "class")
    instance_path = _layer_path(instance, base_dir, "instance")
    _log_debug(
        f"resolve: template={template_path} class={class_path} instance={instance_path}"
    )

    template_config = wrap_template(_load(template_path, ProxyWorkloadSpec))

    stack = LayerStack()
    stack.push(ConfigLayer("template", template_path, template_config))
    stack.push(ConfigLayer("class", class_path, _load(class_path, ProxyConfig)))
    stack.push(ConfigLayer("instance", instance_path, _load(instance_path, ProxyConfig)))

    try:
        resolved = stack.resolve()
    except SchemaMismatch as e:
        _log_debug(f"resolve: schema mismatch: {e}")
        raise SystemExit(f"Cannot merge proxy config layers: {e}")

    if show_levels:
        color_enabled = _supports_color()
        for layer in stack.layers:
            if layer.document is not None:
                state = _green(str(layer.source), color_enabled)
            else:
                state = "absent"
            print(f"[{_gray(layer.level, color_enabled)}] {state}", file=sys.stderr)

    if resolved is None and not with_defaults:
        print("No proxy config layers found")
        return
    if with_defaults:
        try:
            resolved = apply_defaults(resolved)
        except UnsupportedProviderError as e:
            raise SystemExit(str(e))

    _log_debug(f"resolve: levels={','.join(stack.levels) or '-'} defaults={with_defaults}")
    if fmt == "json":
        print(dump_json(resolved))
    else:
        print(dump_yaml(resolved), end="")
