"""The operator's runtime configuration."""

from __future__ import annotations

import argparse
import logging
import threading
from collections.abc import Callable, Iterable

from otelop.autodetect import AutoDetect, Platform
from otelop.version import Version
from otelop.version import get as get_version

DEFAULT_AUTO_DETECT_FREQUENCY = 5.0
DEFAULT_COLLECTOR_CONFIG_MAP_ENTRY = "collector.yaml"


class Config:
    """Static configuration of the operator, refreshed by auto-detection."""

    def __init__(
        self,
        *,
        auto_detect: AutoDetect | None = None,
        auto_detect_frequency: float = DEFAULT_AUTO_DETECT_FREQUENCY,
        collector_image: str = "",
        collector_config_map_entry: str = DEFAULT_COLLECTOR_CONFIG_MAP_ENTRY,
        logger: logging.Logger | None = None,
        on_change: Iterable[Callable[[], None]] = (),
        platform: Platform = Platform.UNKNOWN,
        version: Version | None = None,
    ) -> None:
        self._auto_detect = auto_detect
        self._auto_detect_frequency = auto_detect_frequency
        self._collector_config_map_entry = collector_config_map_entry
        self._logger = logger or logging.getLogger("config")
        self._on_change = list(on_change)
        self._platform = platform
        self._version = version if version is not None else get_version()
        # derived from the version unless set explicitly
        self._collector_image = (
            collector_image
            or f"otel/opentelemetry-collector:{self._version.open_telemetry_collector}"
        )
        self._stop: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Register the user-modifiable options on a command-line parser."""
        parser.add_argument(
            "--otelcol-image",
            dest="otelcol_image",
            default=self._collector_image,
            help=(
                "The default image to use for OpenTelemetry Collector when not "
                "specified in the individual custom resource (CR)"
            ),
        )

    def apply_arguments(self, namespace: argparse.Namespace) -> None:
        """Take over the values parsed from the command line."""
        image = getattr(namespace, "otelcol_image", None)
        if image:
            self._collector_image = image

    def start_auto_detect(self) -> None:
        """Run auto-detection once, then keep refreshing it in the background.

        The background refresh starts even when the first run fails; the first
        run's error is then raised.
        """
        error: Exception | None = None
        try:
            self.auto_detect()
        except Exception as exc:  # noqa: BLE001 - re-raised below
            error = exc

        if self._thread is None or not self._thread.is_alive():
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._periodic_auto_detect,
                args=(self._stop,),
                name="otelop-auto-detect",
                daemon=True,
            )
            self._thread.start()

        if error is not None:
            raise error

    def stop_auto_detect(self) -> None:
        """Stop the background refresh, if running."""
        if self._stop is not None:
            self._stop.set()
        if self._thread is not None:
            self._thread.join()
        self._stop = None
        self._thread = None

    def _periodic_auto_detect(self, stop: threading.Event) -> None:
        while not stop.wait(self._auto_detect_frequency):
            try:
                self.auto_detect()
            except Exception as exc:  # noqa: BLE001 - logged and retried
                self._logger.info("auto-detection failed error=%s", exc)

    def auto_detect(self) -> None:
        """Detect traits of the environment and notify callbacks on change."""
        self._logger.debug("auto-detecting the configuration based on the environment")
        changed = False

        if self._platform is Platform.UNKNOWN:
            if self._auto_detect is None:
                raise RuntimeError("no auto-detection routine configured")
            detected = self._auto_detect.platform()
            if detected != self._platform:
                self._logger.debug("platform detected platform=%s", detected)
                self._platform = detected
                changed = True

        if changed:
            for callback in self._on_change:
                try:
                    callback()
                except Exception:  # noqa: BLE001 - detection itself worked
                    self._logger.exception(
                        "configuration change notification failed for callback"
                    )

    def collector_image(self) -> str:
        """The default OpenTelemetry Collector container image."""
        return self._collector_image

    def collector_config_map_entry(self) -> str:
        """The configuration file name for the collector."""
        return self._collector_config_map_entry

    def platform(self) -> Platform:
        """The platform this operator is running on."""
        return self._platform

    def version(self) -> Version:
        """The versions used by this operator."""
        return self._version