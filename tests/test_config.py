import argparse
import threading

import pytest

from otelop.autodetect import Platform
from otelop.config import Config
from otelop.version import Version


class FakeAutoDetect:
    def __init__(self, func=None):
        self.func = func
        self.calls = 0

    def platform(self):
        self.calls += 1
        if self.func is not None:
            return self.func()
        return Platform.UNKNOWN


def test_new_config():
    cfg = Config(
        collector_image="some-image",
        collector_config_map_entry="some-config.yaml",
        platform=Platform.KUBERNETES,
    )
    assert cfg.collector_image() == "some-image"
    assert cfg.collector_config_map_entry() == "some-config.yaml"
    assert cfg.platform() == Platform.KUBERNETES


def test_defaults():
    cfg = Config(version=Version(open_telemetry_collector="1.2.3"))
    assert cfg.collector_config_map_entry() == "collector.yaml"
    assert cfg.platform() == Platform.UNKNOWN
    assert cfg.collector_image() == "otel/opentelemetry-collector:1.2.3"


def test_override_version():
    cfg = Config(version=Version(open_telemetry_collector="the-version"))
    assert "the-version" in cfg.collector_image()
    assert cfg.version().open_telemetry_collector == "the-version"


def test_callback_on_changes():
    called = []
    mock = FakeAutoDetect(lambda: Platform.OPENSHIFT)
    cfg = Config(auto_detect=mock, on_change=[lambda: called.append(True)])
    assert cfg.platform() == Platform.UNKNOWN

    cfg.auto_detect()

    assert cfg.platform() == Platform.OPENSHIFT
    assert called == [True]


def test_no_callback_without_change():
    called = []
    cfg = Config(
        auto_detect=FakeAutoDetect(),
        on_change=[lambda: called.append(True)],
    )
    cfg.auto_detect()
    assert cfg.platform() == Platform.UNKNOWN
    assert called == []


def test_failing_callback_does_not_fail_detection():
    def boom():
        raise RuntimeError("callback failed")

    later = []
    cfg = Config(
        auto_detect=FakeAutoDetect(lambda: Platform.KUBERNETES),
        on_change=[boom, lambda: later.append(True)],
    )
    cfg.auto_detect()
    assert cfg.platform() == Platform.KUBERNETES
    assert later == [True]


def test_detection_error_propagates():
    def fail():
        raise ConnectionError("unreachable")

    cfg = Config(auto_detect=FakeAutoDetect(fail))
    with pytest.raises(ConnectionError):
        cfg.auto_detect()
    assert cfg.platform() == Platform.UNKNOWN


def test_known_platform_skips_detection():
    mock = FakeAutoDetect(lambda: Platform.OPENSHIFT)
    cfg = Config(auto_detect=mock, platform=Platform.KUBERNETES)
    cfg.auto_detect()
    assert mock.calls == 0
    assert cfg.platform() == Platform.KUBERNETES


def test_auto_detect_in_background():
    reached = threading.Event()
    counter = {"n": 0}

    def detect():
        counter["n"] += 1
        if counter["n"] >= 2:
            reached.set()
        return Platform.UNKNOWN

    cfg = Config(auto_detect=FakeAutoDetect(detect), auto_detect_frequency=0.1)
    assert cfg.platform() == Platform.UNKNOWN
    try:
        cfg.start_auto_detect()
        assert reached.wait(5.0)
    finally:
        cfg.stop_auto_detect()
    assert counter["n"] >= 2


def test_start_auto_detect_raises_first_error():
    def fail():
        raise ConnectionError("unreachable")

    cfg = Config(auto_detect=FakeAutoDetect(fail), auto_detect_frequency=60.0)
    try:
        with pytest.raises(ConnectionError):
            cfg.start_auto_detect()
    finally:
        cfg.stop_auto_detect()


def test_command_line_override():
    cfg = Config(collector_image="default-image")
    parser = argparse.ArgumentParser()
    cfg.add_arguments(parser)

    cfg.apply_arguments(parser.parse_args([]))
    assert cfg.collector_image() == "default-image"

    cfg.apply_arguments(parser.parse_args(["--otelcol-image", "custom-image"]))
    assert cfg.collector_image() == "custom-image"