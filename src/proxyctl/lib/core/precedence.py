# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Layered proxy config resolution.

Terminology
-----------
- **Layer**: one optional document ("template", "class", "instance").
- **Stack**: an ordered list of layers, lowest-priority first.
- **resolve**: fold the present layers through :func:`merge.merge`.

The first present layer seeds the result as-is; every later one is merged
on top of it.  Absent layers are skipped, so a single present layer comes
back as the very same object.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from .merge import merge
from .model import ObjectMeta, ProxyConfig, ProxyWorkloadSpec

D = TypeVar("D")


def resolve_layers(*layers: D | None) -> D | None:
    """Merge *layers* in order of increasing priority, skipping ``None``.

    Returns ``None`` only if every layer is absent.  Propagates
    :class:`~proxyctl.lib.core.schema.SchemaMismatch` from the merge.
    """
    result: D | None = None
    for layer in layers:
        if layer is None:
            continue
        result = layer if result is None else merge(result, layer)
    return result


def resolve(
    template: D | None = None,
    class_override: D | None = None,
    instance_override: D | None = None,
) -> D | None:
    """Resolve the three-level hierarchy: instance > class > template."""
    return resolve_layers(template, class_override, instance_override)


def merge_proxy_configs(
    template: ProxyWorkloadSpec | None,
    class_proxy: ProxyConfig | None,
    instance_proxy: ProxyConfig | None,
) -> ProxyConfig | None:
    """Merge a template spec with class- and instance-level proxy configs.

    The template is a bare spec (it has no identity of its own), so it is
    wrapped into a :class:`ProxyConfig` with empty metadata before merging.
    Settings none of the levels supply are left unset; they are filled later
    by :func:`~proxyctl.lib.core.defaults.apply_defaults`.
    """
    return resolve(wrap_template(template), class_proxy, instance_proxy)


def wrap_template(template: ProxyWorkloadSpec | None) -> ProxyConfig | None:
    """Wrap a bare template spec into an anonymous :class:`ProxyConfig`."""
    if template is None:
        return None
    return ProxyConfig(metadata=ObjectMeta(), spec=template)


# ---------------------------------------------------------------------------
# Layer / Stack
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConfigLayer:
    """A single level in the proxy config stack."""

    level: str
    source: Path | None
    document: Any


class LayerStack:
    """Ordered collection of config layers, lowest-priority first.

    Usage::

        stack = LayerStack()
        stack.push(ConfigLayer("template", tmpl_path, template_config))
        stack.push(ConfigLayer("instance", inst_path, instance_config))
        resolved = stack.resolve()
    """

    def __init__(self) -> None:
        self._layers: list[ConfigLayer] = []

    def push(self, layer: ConfigLayer) -> None:
        """Append a layer (higher priority than all previous)."""
        self._layers.append(layer)

    def resolve(self) -> Any:
        """Merge all present layers in order and return the result (or ``None``)."""
        return resolve_layers(*(layer.document for layer in self._layers))

    @property
    def levels(self) -> list[str]:
        """Names of the layers that carry a document, in priority order."""
        return [layer.level for layer in self._layers if layer.document is not None]

    @property
    def layers(self) -> list[ConfigLayer]:
        """Read-only access to the layer list (for diagnostics)."""
        return list(self._layers)
