# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Proxy config core: document model, structural merge, precedence and defaults.

Everything in this package except ``codec`` loaders and ``paths`` is pure:
no I/O, no environment reads, no shared state.
"""

from .defaults import (
    ContainerRole,
    apply_defaults,
    default_container_shape,
    default_daemon_shape,
    default_deployment_shape,
    default_pod_shape,
    default_proxy_spec,
)
from .merge import merge
from .precedence import ConfigLayer, LayerStack, merge_proxy_configs, resolve, resolve_layers
from .schema import SchemaMismatch

__all__ = [
    "merge", "SchemaMismatch",
    "resolve", "resolve_layers", "merge_proxy_configs", "ConfigLayer", "LayerStack",
    "ContainerRole", "apply_defaults", "default_proxy_spec",
    "default_deployment_shape", "default_daemon_shape",
    "default_pod_shape", "default_container_shape",
]
