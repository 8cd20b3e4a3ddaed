"""Labels and annotations shared by the objects of a managed collector."""

from __future__ import annotations

import hashlib

from otelop.api import OpenTelemetryCollector

_CONFIG_SHA_ANNOTATION = "opentelemetry-operator-config/sha256"


def annotations(instance: OpenTelemetryCollector) -> dict[str, str]:
    """Return the annotations for a collector's pods.

    Prometheus defaults may be overridden by the instance's own annotations;
    the configuration checksum is always computed.
    """
    result = {
        "prometheus.io/scrape": "true",
        "prometheus.io/port": "8888",
        "prometheus.io/path": "/metrics",
    }
    result.update(instance.metadata.annotations or {})
    result[_CONFIG_SHA_ANNOTATION] = hashlib.sha256(
        instance.spec.config.encode("utf-8")
    ).hexdigest()
    return result


def labels(instance: OpenTelemetryCollector) -> dict[str, str]:
    """Return the labels common to all objects of a managed collector."""
    result = dict(instance.metadata.labels or {})
    result["app.kubernetes.io/managed-by"] = "opentelemetry-operator"
    result["app.kubernetes.io/instance"] = (
        f"{instance.metadata.namespace}.{instance.metadata.name}"
    )
    result["app.kubernetes.io/part-of"] = "opentelemetry"
    result["app.kubernetes.io/component"] = "opentelemetry-collector"
    return result