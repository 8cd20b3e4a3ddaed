import pytest

from otelop.api import (
    Mode,
    ObjectMeta,
    OpenTelemetryCollector,
    OpenTelemetryCollectorList,
    OpenTelemetryCollectorSpec,
    ValidationError,
)


def _collector(**spec):
    return OpenTelemetryCollector(
        metadata=ObjectMeta(name="my-instance", namespace="default"),
        spec=OpenTelemetryCollectorSpec(**spec),
    )


def test_default_sets_deployment_mode_and_managed_by_label():
    otelcol = _collector()
    otelcol.default()

    assert otelcol.spec.mode is Mode.DEPLOYMENT
    assert otelcol.metadata.labels["app.kubernetes.io/managed-by"] == (
        "opentelemetry-operator"
    )


def test_default_keeps_existing_mode_and_label():
    otelcol = _collector(mode=Mode.SIDECAR)
    otelcol.metadata.labels["app.kubernetes.io/managed-by"] = "someone-else"
    otelcol.default()

    assert otelcol.spec.mode is Mode.SIDECAR
    assert otelcol.metadata.labels["app.kubernetes.io/managed-by"] == "someone-else"


def test_default_handles_missing_labels():
    otelcol = _collector()
    otelcol.metadata.labels = None
    otelcol.default()

    assert otelcol.metadata.labels == {
        "app.kubernetes.io/managed-by": "opentelemetry-operator"
    }


@pytest.mark.parametrize(
    "value, expected",
    [
        ("daemonset", Mode.DAEMONSET),
        ("deployment", Mode.DEPLOYMENT),
        ("sidecar", Mode.SIDECAR),
        ("statefulset", Mode.STATEFULSET),
    ],
)
def test_mode_values(value, expected):
    assert Mode(value) is expected


def test_unknown_mode_value_is_rejected():
    with pytest.raises(ValueError):
        Mode("replicaset")


@pytest.mark.parametrize("mode", [Mode.DEPLOYMENT, Mode.DAEMONSET, Mode.SIDECAR])
def test_volume_claim_templates_only_for_statefulset(mode):
    otelcol = _collector(mode=mode, volume_claim_templates=[{"metadata": {}}])
    with pytest.raises(ValidationError, match="volumeClaimTemplates") as info:
        otelcol.validate_create()
    assert mode.value in str(info.value)


def test_volume_claim_templates_allowed_for_statefulset():
    otelcol = _collector(mode=Mode.STATEFULSET, volume_claim_templates=[{}])
    assert otelcol.validate_create() is None


@pytest.mark.parametrize("mode", [Mode.SIDECAR, Mode.DAEMONSET])
def test_replicas_rejected_for_sidecar_and_daemonset(mode):
    otelcol = _collector(mode=mode, replicas=2)
    with pytest.raises(ValidationError, match="'replicas'"):
        otelcol.validate_update(None)


def test_replicas_allowed_for_deployment():
    otelcol = _collector(mode=Mode.DEPLOYMENT, replicas=3)
    assert otelcol.validate_update(None) is None


def test_tolerations_rejected_for_sidecar():
    otelcol = _collector(mode=Mode.SIDECAR, tolerations=[{"key": "k"}])
    with pytest.raises(ValidationError, match="tolerations"):
        otelcol.validate_create()


def test_tolerations_allowed_for_daemonset():
    otelcol = _collector(mode=Mode.DAEMONSET, tolerations=[{"key": "k"}])
    assert otelcol.validate_create() is None


def test_validate_delete_always_passes():
    otelcol = _collector(mode=Mode.SIDECAR, replicas=1, tolerations=[{}])
    assert otelcol.validate_delete() is None


def test_unset_mode_rejects_volume_claim_templates():
    otelcol = _collector(volume_claim_templates=[{}])
    with pytest.raises(ValidationError, match="mode is set to ,"):
        otelcol.validate_create()


def test_list_holds_items():
    first, second = _collector(), _collector(mode=Mode.SIDECAR)
    collectors = OpenTelemetryCollectorList(items=[first, second])

    assert collectors.items == [first, second]
    assert collectors.kind == "OpenTelemetryCollectorList"
    assert first.api_version == "opentelemetry.io/v1alpha1"