import pytest

from otelop.api import Mode, ObjectMeta, OpenTelemetryCollector, OpenTelemetryCollectorSpec
from otelop.config import Config
from otelop.controller import NotFoundError, ReconcileParams, Reconciler, Task


class FakeClient:
    def __init__(self, instances=(), error=None):
        self.instances = {
            (i.metadata.namespace, i.metadata.name): i for i in instances
        }
        self.error = error

    def get(self, namespace, name):
        if self.error is not None:
            raise self.error
        try:
            return self.instances[(namespace, name)]
        except KeyError:
            raise NotFoundError(f"{namespace}/{name}") from None


def make_instance():
    return OpenTelemetryCollector(
        metadata=ObjectMeta(name="my-instance", namespace="default"),
        spec=OpenTelemetryCollectorSpec(mode=Mode.DEPLOYMENT),
    )


def test_continue_on_recoverable_failure():
    called = []

    def fail(params):
        raise RuntimeError("should fail!")

    reconciler = Reconciler(
        tasks=[
            Task("should-fail", fail, bail_on_error=False),
            Task("should-be-called", lambda params: called.append(True)),
        ]
    )
    reconciler.run_tasks(ReconcileParams())
    assert called == [True]


def test_break_on_unrecoverable_error():
    expected = RuntimeError("should fail!")
    called = []
    not_called = []

    def fail(params):
        called.append(True)
        raise expected

    reconciler = Reconciler(
        client=FakeClient([make_instance()]),
        config=Config(),
        tasks=[
            Task("should-fail", fail, bail_on_error=True),
            Task("should-not-be-called", lambda params: not_called.append(True)),
        ],
    )
    with pytest.raises(RuntimeError) as info:
        reconciler.reconcile("default", "my-instance")
    assert info.value is expected
    assert called == [True]
    assert not_called == []


def test_skip_when_instance_does_not_exist():
    called = []
    reconciler = Reconciler(
        client=FakeClient(),
        config=Config(),
        tasks=[Task("should-not-be-called", lambda params: called.append(True))],
    )
    assert reconciler.reconcile("default", "non-existing-my-instance") is None
    assert called == []


def test_other_fetch_errors_propagate():
    reconciler = Reconciler(
        client=FakeClient(error=ConnectionError("down")),
        tasks=[Task("task", lambda params: None)],
    )
    with pytest.raises(ConnectionError):
        reconciler.reconcile("default", "my-instance")


def test_tasks_receive_instance_and_config():
    seen = []
    cfg = Config()
    instance = make_instance()
    client = FakeClient([instance])
    reconciler = Reconciler(
        client=client,
        config=cfg,
        recorder="recorder",
        tasks=[Task("collect", seen.append)],
    )
    reconciler.reconcile("default", "my-instance")
    assert len(seen) == 1
    params = seen[0]
    assert params.instance is instance
    assert params.config is cfg
    assert params.client is client
    assert params.recorder == "recorder"


def test_tasks_run_in_order():
    order = []
    reconciler = Reconciler(
        tasks=[Task(name, lambda params, n=name: order.append(n)) for name in "abc"]
    )
    reconciler.run_tasks(ReconcileParams())
    assert order == ["a", "b", "c"]