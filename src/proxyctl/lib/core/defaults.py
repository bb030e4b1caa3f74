# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Baseline defaults for proxy workloads.

The constructors return fresh, fully populated values with a hardened
security posture.  They are only consulted after resolution, through
:func:`apply_defaults`, and never override a field the resolved document
sets.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any

from .model import (
    Capabilities,
    ContainerShape,
    DaemonShape,
    DeploymentShape,
    KubernetesProvider,
    PodShape,
    Provider,
    ProviderType,
    ProxyConfig,
    ProxyWorkloadSpec,
    ResourceRequirements,
    SeccompProfile,
    SeccompProfileType,
    SecurityPosture,
    UpdateStrategy,
    UpdateStrategyType,
)
from .schema import FieldKind, document_fields

DEFAULT_DEPLOYMENT_REPLICAS = 1

DEFAULT_PROXY_IMAGE = "docker.io/envoyproxy/envoy:distroless-dev"
DEFAULT_PROXY_CPU_REQUEST = "100m"
DEFAULT_PROXY_MEMORY_REQUEST = "512Mi"

DEFAULT_SHUTDOWN_MANAGER_IMAGE = "docker.io/envoyproxy/gateway-dev:latest"
DEFAULT_SHUTDOWN_MANAGER_CPU_REQUEST = "10m"
DEFAULT_SHUTDOWN_MANAGER_MEMORY_REQUEST = "32Mi"

# Fixed non-root identity ("nonroot" in distroless images).
DEFAULT_RUN_AS_ID = 65532


class ContainerRole(enum.Enum):
    PROXY_DATA_PLANE = "proxy"
    LIFECYCLE_MANAGER = "shutdown-manager"


_ROLE_SETTINGS = {
    ContainerRole.PROXY_DATA_PLANE: (
        DEFAULT_PROXY_IMAGE,
        DEFAULT_PROXY_CPU_REQUEST,
        DEFAULT_PROXY_MEMORY_REQUEST,
    ),
    ContainerRole.LIFECYCLE_MANAGER: (
        DEFAULT_SHUTDOWN_MANAGER_IMAGE,
        DEFAULT_SHUTDOWN_MANAGER_CPU_REQUEST,
        DEFAULT_SHUTDOWN_MANAGER_MEMORY_REQUEST,
    ),
}


def default_security_posture() -> SecurityPosture:
    """Return the hardened container security posture.

    ``read_only_root_filesystem`` stays unset: both the proxy and the
    shutdown manager write sockets and log files to local disk.
    """
    return SecurityPosture(
        run_as_user=DEFAULT_RUN_AS_ID,
        run_as_group=DEFAULT_RUN_AS_ID,
        run_as_non_root=True,
        capabilities=Capabilities(drop=["ALL"]),
        allow_privilege_escalation=False,
        privileged=False,
        seccomp_profile=SeccompProfile(type=SeccompProfileType.RUNTIME_DEFAULT),
    )


def default_container_shape(role: ContainerRole = ContainerRole.PROXY_DATA_PLANE) -> ContainerShape:
    """Return the default container settings for *role*."""
    image, cpu, memory = _ROLE_SETTINGS[role]
    return ContainerShape(
        image=image,
        resources=ResourceRequirements(requests={"cpu": cpu, "memory": memory}),
        security_context=default_security_posture(),
    )


def default_pod_shape() -> PodShape:
    """Return the default pod settings: an empty (present) security posture."""
    return PodShape(security_context=SecurityPosture())


def default_deployment_shape() -> DeploymentShape:
    return DeploymentShape(
        replicas=DEFAULT_DEPLOYMENT_REPLICAS,
        strategy=UpdateStrategy(type=UpdateStrategyType.ROLLING_UPDATE),
        pod=default_pod_shape(),
        container=default_container_shape(ContainerRole.PROXY_DATA_PLANE),
    )


def default_daemon_shape() -> DaemonShape:
    return DaemonShape(
        pod=default_pod_shape(),
        container=default_container_shape(ContainerRole.PROXY_DATA_PLANE),
    )


def default_proxy_spec() -> ProxyWorkloadSpec:
    """Return a spec carrying every baseline default."""
    return ProxyWorkloadSpec(
        provider=Provider(
            type=ProviderType.KUBERNETES,
            kubernetes=KubernetesProvider(
                envoy_deployment=default_deployment_shape(),
                envoy_daemon_set=default_daemon_shape(),
                shutdown_manager=default_container_shape(ContainerRole.LIFECYCLE_MANAGER),
            ),
        )
    )


# ---------------------------------------------------------------------------
# Gap filling
# ---------------------------------------------------------------------------


def apply_defaults(config: ProxyConfig | None) -> ProxyConfig:
    """Fill the fields *config* leaves unset with the baseline defaults.

    If neither a deployment nor a daemon set is configured, the proxy runs
    as the default deployment.  Otherwise only the configured shape(s) are
    completed.  Explicit settings are never overridden; set mappings and
    lists are kept as they are.
    """
    if config is None:
        config = ProxyConfig()
    spec = config.spec or ProxyWorkloadSpec()
    provider = spec.provider or Provider()
    if provider.type is None:
        provider = dataclasses.replace(provider, type=ProviderType.KUBERNETES)
    kube = provider.kubernetes_provider() or KubernetesProvider()

    deployment = kube.envoy_deployment
    daemon_set = kube.envoy_daemon_set
    if deployment is None and daemon_set is None:
        deployment = default_deployment_shape()
    else:
        if deployment is not None:
            deployment = fill_unset(deployment, default_deployment_shape())
        if daemon_set is not None:
            daemon_set = fill_unset(daemon_set, default_daemon_shape())
    shutdown_manager = fill_unset(
        kube.shutdown_manager, default_container_shape(ContainerRole.LIFECYCLE_MANAGER)
    )

    kube = dataclasses.replace(
        kube,
        envoy_deployment=deployment,
        envoy_daemon_set=daemon_set,
        shutdown_manager=shutdown_manager,
    )
    provider = dataclasses.replace(provider, kubernetes=kube)
    return dataclasses.replace(config, spec=dataclasses.replace(spec, provider=provider))


def fill_unset(value: Any, default: Any) -> Any:
    """Return *value* with unset fields taken from *default*.

    Recurses through nested documents only.  This is not a merge: a set
    mapping or list is never combined with the default one.
    """
    if value is None:
        return default
    if default is None:
        return value

    changes: dict[str, Any] = {}
    for spec in document_fields(type(value)):
        current = getattr(value, spec.name)
        fallback = getattr(default, spec.name)
        if current is None:
            if fallback is not None:
                changes[spec.name] = fallback
        elif spec.kind is FieldKind.COMPOSITE and fallback is not None:
            filled = fill_unset(current, fallback)
            if filled is not current:
                changes[spec.name] = filled
    if not changes:
        return value
    return dataclasses.replace(value, **changes)
