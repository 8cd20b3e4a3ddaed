# otelop

`otelop` holds the core logic of an operator that manages OpenTelemetry
Collector instances. It works on plain Python objects, so you can use it
without a cluster.

## What it provides

- **`otelop.api`**: the collector resource. `OpenTelemetryCollector` is made of
  an `ObjectMeta`, an `OpenTelemetryCollectorSpec` and an
  `OpenTelemetryCollectorStatus`. The module also has `OpenTelemetryCollectorList`
  and the `Mode` enum, whose values are `daemonset`, `deployment`, `sidecar` and
  `statefulset`.
  - `default()` sets the mode to `deployment` when no mode is given. It also sets
    the `app.kubernetes.io/managed-by` label to `opentelemetry-operator` when
    that label is empty.
  - `validate_create()` and `validate_update(old)` raise `ValidationError` in
    three cases: `volume_claim_templates` are used outside `statefulset` mode,
    `replicas` are set in `sidecar` or `daemonset` mode, or `tolerations` are
    set in `sidecar` mode.
  - `validate_delete()` always succeeds.
- **`otelop.adapters`**: reading a collector configuration.
  - `config_from_string` parses YAML into a dict. Empty text gives `{}`. Text
    that is not valid YAML, or that does not parse to a mapping, raises
    `InvalidYAMLError`.
  - `config_to_receiver_ports(logger, config)` returns the `ServicePort`s the
    receivers need. It raises `NoReceiversError` when the config has no
    `receivers` key, and `ReceiversNotAMapError` when that value is not a
    mapping. If a receiver's parser raises, the error is logged and that
    receiver is skipped.
- **`otelop.ports`** and **`otelop.receivers`**: the receiver parsers.
  - `ServicePort` and the `Protocol` enum describe a port.
  - `port_name`, `port_from_endpoint`, `single_port_from_config_endpoint` and
    `receiver_type` are helpers.
  - Parsers exist for generic receivers and for carbon, collectd, fluentforward,
    opencensus, sapm, signalfx, wavefront, zipkin, zipkin-scribe, jaeger
    (`JaegerReceiverParser`) and otlp (`OTLPReceiverParser`).
  - `register`, `is_registered`, `builder_for` and `parser_for` manage the
    registry of parsers. Each entry is keyed by receiver type, which is the part
    of the name before any `/`. A receiver with no registered parser gets the
    generic one, which reads the receiver's `endpoint`.
- **`otelop.collector`**: labels and annotations for the objects of an instance.
  - `labels(instance)` returns the instance's labels plus the common
    `app.kubernetes.io/*` labels.
  - `annotations(instance)` returns the default Prometheus annotations. The
    instance's own annotations override them. It also adds an
    `opentelemetry-operator-config/sha256` checksum of the instance's config.
- **`otelop.config`**: the `Config` class holds the operator's settings.
  - It stores the collector image, which defaults to
    `otel/opentelemetry-collector:<collector version>`, the config map entry
    name (`collector.yaml`), the platform and the version.
  - `add_arguments` adds an `--otelcol-image` option to an `argparse` parser, and
    `apply_arguments` reads the parsed value back.
  - `auto_detect()` asks an `AutoDetect` for the platform while it is still
    unknown. When the platform changes, it calls the `on_change` callbacks.
  - `start_auto_detect()` runs detection once and then repeats it in a
    background thread. `stop_auto_detect()` stops that thread.
- **`otelop.autodetect`**: platform detection. `AutoDetect.platform()` returns
  `Platform.OPENSHIFT` when the `route.openshift.io` API group is present, and
  `Platform.KUBERNETES` otherwise. `DiscoveryClient(host)` lists the server's
  API groups by sending an unauthenticated HTTP GET to `/api` and `/apis`. It
  raises `DiscoveryError` when that request fails.
- **`otelop.controller`**: the `Reconciler` class.
  - `run_tasks(params)` runs a list of `Task`s in order. A task that fails is
    logged. If its `bail_on_error` is true, the error is re-raised and the run
    stops; otherwise the run goes on.
  - `reconcile(namespace, name)` fetches the instance through the client's
    `get(namespace, name)`. If that raises `NotFoundError`, it returns without
    doing anything. Otherwise it runs the tasks with a `ReconcileParams`.
- **`otelop.version`**: `get()` returns a `Version`. `open_telemetry_collector()`
  returns the default collector version, which is `0.0.0` when none is set at
  build time.

## Installation

```
pip install .
```

## Example

```python
import logging

from otelop.adapters import config_from_string, config_to_receiver_ports

logger = logging.getLogger("otelop")

config = config_from_string("""
receivers:
  otlp:
    protocols:
      grpc:
  jaeger/custom:
    protocols:
      thrift_http:
        endpoint: 0.0.0.0:15268
""")

for port in config_to_receiver_ports(logger, config):
    print(port.name, port.port)
# otlp-grpc 4317
# jaeger-custom-thrift-http 15268
```

Defaulting and validating an instance:

```python
from otelop.api import Mode, ObjectMeta, OpenTelemetryCollector, OpenTelemetryCollectorSpec

otelcol = OpenTelemetryCollector(
    metadata=ObjectMeta(name="my-instance", namespace="default"),
    spec=OpenTelemetryCollectorSpec(mode=Mode.SIDECAR, replicas=2),
)
otelcol.default()
otelcol.validate_create()
```

The last call raises `ValidationError`, because sidecar mode does not support
`replicas`.

Running tasks:

```python
from otelop.controller import ReconcileParams, Reconciler, Task

def check(params):
    raise RuntimeError("not ready")

reconciler = Reconciler(tasks=[
    Task("check", check, bail_on_error=False),
    Task("apply", lambda params: print("applied")),
])
reconciler.run_tasks(ReconcileParams())  # logs the failure, then prints "applied"
```

## What it does not do

- There is no command to run and no long-running operator process.
- Nothing connects to a cluster to watch resources.
- No admission webhook server is included.
- The package does not build or apply deployments, daemon sets, stateful sets,
  services, config maps or service accounts.
- `Reconciler` has no built-in tasks. You supply the tasks, and a client that
  has a `get(namespace, name)` method.

## Running the tests

```
pip install .[test]
pytest
```