# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Proxy workload document types.

Pure data types with no filesystem or merge logic.  Every field is optional
and defaults to ``None`` (unset); the companion ``merge`` module combines
documents and ``codec`` converts them to and from decoded YAML/JSON.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .schema import composite, keyed_list, mapping, scalar, scalar_list


class SeccompProfileType(str, enum.Enum):
    RUNTIME_DEFAULT = "RuntimeDefault"
    UNCONFINED = "Unconfined"
    LOCALHOST = "Localhost"


class UpdateStrategyType(str, enum.Enum):
    ROLLING_UPDATE = "RollingUpdate"
    RECREATE = "Recreate"
    ON_DELETE = "OnDelete"


class ProviderType(str, enum.Enum):
    KUBERNETES = "Kubernetes"


class UnsupportedProviderError(ValueError):
    """Raised when a provider accessor meets a tag it does not know."""


# ---------- Security ----------


@dataclass(frozen=True)
class SeccompProfile:
    type: SeccompProfileType | None = scalar("type", SeccompProfileType)
    localhost_profile: str | None = scalar("localhostProfile")


@dataclass(frozen=True)
class Capabilities:
    add: list[str] | None = scalar_list("add")
    drop: list[str] | None = scalar_list("drop")


@dataclass(frozen=True)
class SecurityPosture:
    """Security settings shared by pods and containers."""

    run_as_user: int | None = scalar("runAsUser")
    run_as_group: int | None = scalar("runAsGroup")
    run_as_non_root: bool | None = scalar("runAsNonRoot")
    capabilities: Capabilities | None = composite("capabilities", Capabilities)
    allow_privilege_escalation: bool | None = scalar("allowPrivilegeEscalation")
    privileged: bool | None = scalar("privileged")
    seccomp_profile: SeccompProfile | None = composite("seccompProfile", SeccompProfile)
    # Left unset by the baseline defaults: the proxy writes sockets and logs.
    read_only_root_filesystem: bool | None = scalar("readOnlyRootFilesystem")


# ---------- Containers ----------


@dataclass(frozen=True)
class ResourceRequirements:
    # resource name (cpu, memory, ...) -> quantity string ("100m", "64Mi")
    requests: dict[str, str] | None = mapping("requests")
    limits: dict[str, str] | None = mapping("limits")


@dataclass(frozen=True)
class EnvVar:
    name: str | None = scalar("name")
    value: str | None = scalar("value")


@dataclass(frozen=True)
class VolumeMount:
    name: str | None = scalar("name")
    mount_path: str | None = scalar("mountPath")
    read_only: bool | None = scalar("readOnly")


@dataclass(frozen=True)
class ContainerShape:
    """Container settings.  ``name`` identifies the container inside a pod list."""

    name: str | None = scalar("name")
    image: str | None = scalar("image")
    args: list[str] | None = scalar_list("args")
    env: list[EnvVar] | None = keyed_list("env", EnvVar, "name")
    resources: ResourceRequirements | None = composite("resources", ResourceRequirements)
    security_context: SecurityPosture | None = composite("securityContext", SecurityPosture)
    volume_mounts: list[VolumeMount] | None = keyed_list(
        "volumeMounts", VolumeMount, "mount_path"
    )


# ---------- Pods ----------


@dataclass(frozen=True)
class Volume:
    name: str | None = scalar("name")
    empty_dir: bool | None = scalar("emptyDir")
    config_map_name: str | None = scalar("configMapName")
    secret_name: str | None = scalar("secretName")


@dataclass(frozen=True)
class PodShape:
    labels: dict[str, str] | None = mapping("labels")
    annotations: dict[str, str] | None = mapping("annotations")
    node_selector: dict[str, str] | None = mapping("nodeSelector")
    security_context: SecurityPosture | None = composite("securityContext", SecurityPosture)
    volumes: list[Volume] | None = keyed_list("volumes", Volume, "name")
    # Additional containers run next to the proxy, matched by name.
    containers: list[ContainerShape] | None = keyed_list("containers", ContainerShape, "name")
    service_account_name: str | None = scalar("serviceAccountName")


# ---------- Workload shapes ----------


@dataclass(frozen=True)
class RollingUpdate:
    # int or percentage string, e.g. 1 or "25%"
    max_surge: int | str | None = scalar("maxSurge")
    max_unavailable: int | str | None = scalar("maxUnavailable")


@dataclass(frozen=True)
class UpdateStrategy:
    type: UpdateStrategyType | None = scalar("type", UpdateStrategyType)
    rolling_update: RollingUpdate | None = composite("rollingUpdate", RollingUpdate)


@dataclass(frozen=True)
class DeploymentShape:
    """Scaled deployment of the proxy.  ``replicas=None`` defers to the orchestrator."""

    replicas: int | None = scalar("replicas")
    strategy: UpdateStrategy | None = composite("strategy", UpdateStrategy)
    pod: PodShape | None = composite("pod", PodShape)
    container: ContainerShape | None = composite("container", ContainerShape)


@dataclass(frozen=True)
class DaemonShape:
    """One proxy per eligible node; there is no replica count."""

    strategy: UpdateStrategy | None = composite("strategy", UpdateStrategy)
    pod: PodShape | None = composite("pod", PodShape)
    container: ContainerShape | None = composite("container", ContainerShape)


# ---------- Provider ----------


@dataclass(frozen=True)
class KubernetesProvider:
    envoy_deployment: DeploymentShape | None = composite("envoyDeployment", DeploymentShape)
    envoy_daemon_set: DaemonShape | None = composite("envoyDaemonSet", DaemonShape)
    shutdown_manager: ContainerShape | None = composite("shutdownManager", ContainerShape)


@dataclass(frozen=True)
class Provider:
    """Tagged union over deployment mechanisms.

    ``type`` selects the variant; only the field matching the tag is
    meaningful.  Today the only variant is :attr:`ProviderType.KUBERNETES`.
    """

    type: ProviderType | None = scalar("type", ProviderType)
    kubernetes: KubernetesProvider | None = composite("kubernetes", KubernetesProvider)

    def kubernetes_provider(self) -> KubernetesProvider | None:
        """Return the Kubernetes payload, failing for any other tag."""
        try:
            tag = ProviderType(self.type)
        except ValueError:
            raise UnsupportedProviderError(f"Unsupported provider type: {self.type!r}") from None
        if tag is not ProviderType.KUBERNETES:
            raise UnsupportedProviderError(f"Unsupported provider type: {self.type!r}")
        return self.kubernetes


# ---------- Root documents ----------


@dataclass(frozen=True)
class ProxyWorkloadSpec:
    provider: Provider | None = composite("provider", Provider)
    # component name ("default", "upstream", ...) -> log level
    log_level: dict[str, str] | None = mapping("logLevel")
    concurrency: int | None = scalar("concurrency")


@dataclass(frozen=True)
class ObjectMeta:
    name: str | None = scalar("name")
    namespace: str | None = scalar("namespace")
    labels: dict[str, str] | None = mapping("labels")
    annotations: dict[str, str] | None = mapping("annotations")


@dataclass(frozen=True)
class ProxyConfig:
    """A named proxy configuration document, as referenced by a class or instance."""

    metadata: ObjectMeta | None = composite("metadata", ObjectMeta)
    spec: ProxyWorkloadSpec | None = composite("spec", ProxyWorkloadSpec)
