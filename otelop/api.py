"""The OpenTelemetryCollector resource and its admission rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

GROUP = "opentelemetry.io"
VERSION = "v1alpha1"
API_VERSION = f"{GROUP}/{VERSION}"

MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
MANAGED_BY_VALUE = "opentelemetry-operator"

_log = logging.getLogger("opentelemetrycollector-resource")


class Mode(str, Enum):
    """How the collector is deployed."""

    DAEMONSET = "daemonset"
    DEPLOYMENT = "deployment"
    SIDECAR = "sidecar"
    STATEFULSET = "statefulset"


class ValidationError(ValueError):
    """Raised when a collector resource's spec is not acceptable."""


@dataclass
class ObjectMeta:
    """Identifying metadata of a resource."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class OpenTelemetryCollectorSpec:
    """Desired state of an OpenTelemetryCollector."""

    config: str = ""
    args: dict[str, str] | None = None
    replicas: int | None = None
    image: str = ""
    mode: Mode | None = None
    service_account: str = ""
    security_context: dict[str, Any] | None = None
    volume_claim_templates: list[dict[str, Any]] = field(default_factory=list)
    volume_mounts: list[dict[str, Any]] = field(default_factory=list)
    volumes: list[dict[str, Any]] = field(default_factory=list)
    ports: list[dict[str, Any]] = field(default_factory=list)
    env: list[dict[str, Any]] = field(default_factory=list)
    resources: dict[str, Any] = field(default_factory=dict)
    tolerations: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class OpenTelemetryCollectorStatus:
    """Observed state of an OpenTelemetryCollector."""

    replicas: int = 0
    version: str = ""
    messages: list[str] = field(default_factory=list)


@dataclass
class OpenTelemetryCollector:
    """An OpenTelemetry Collector instance managed by the operator."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: OpenTelemetryCollectorSpec = field(default_factory=OpenTelemetryCollectorSpec)
    status: OpenTelemetryCollectorStatus = field(
        default_factory=OpenTelemetryCollectorStatus
    )
    api_version: str = API_VERSION
    kind: str = "OpenTelemetryCollector"

    def default(self) -> None:
        """Fill in defaults for the mode and the managed-by label."""
        if not self.spec.mode:
            self.spec.mode = Mode.DEPLOYMENT
        if self.metadata.labels is None:
            self.metadata.labels = {}
        if not self.metadata.labels.get(MANAGED_BY_LABEL):
            self.metadata.labels[MANAGED_BY_LABEL] = MANAGED_BY_VALUE
        _log.info("default name=%s", self.metadata.name)

    def validate_create(self) -> None:
        """Check the resource on creation; raise ValidationError if invalid."""
        _log.info("validate create name=%s", self.metadata.name)
        self._validate_spec()

    def validate_update(self, old: OpenTelemetryCollector | None) -> None:
        """Check the resource on update; raise ValidationError if invalid."""
        _log.info("validate update name=%s", self.metadata.name)
        self._validate_spec()

    def validate_delete(self) -> None:
        """Deletion is always allowed."""
        _log.info("validate delete name=%s", self.metadata.name)

    def _validate_spec(self) -> None:
        mode = self.spec.mode
        mode_text = mode.value if mode else ""

        def unsupported(attribute: str) -> ValidationError:
            return ValidationError(
                f"the OpenTelemetry Collector mode is set to {mode_text}, "
                f"which does not support the attribute '{attribute}'"
            )

        if mode is not Mode.STATEFULSET and self.spec.volume_claim_templates:
            raise unsupported("volumeClaimTemplates")
        if mode in (Mode.SIDECAR, Mode.DAEMONSET) and self.spec.replicas is not None:
            raise unsupported("replicas")
        if mode is Mode.SIDECAR and self.spec.tolerations:
            raise unsupported("tolerations")


@dataclass
class OpenTelemetryCollectorList:
    """A list of OpenTelemetryCollector resources."""

    items: list[OpenTelemetryCollector] = field(default_factory=list)
    api_version: str = API_VERSION
    kind: str = "OpenTelemetryCollectorList"