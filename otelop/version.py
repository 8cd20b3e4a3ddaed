"""Versions of the operator and of the components it manages."""

from __future__ import annotations

import platform
from dataclasses import dataclass

# Set during the build; left empty when running from a source checkout.
_version = ""
_build_date = ""
_otel_col = ""

_FALLBACK_COLLECTOR_VERSION = "0.0.0"


@dataclass(frozen=True)
class Version:
    """The operator's version and the versions of components it uses."""

    operator: str = ""
    build_date: str = ""
    open_telemetry_collector: str = ""
    python: str = ""

    def __str__(self) -> str:
        return (
            f"Version(Operator='{self.operator}', BuildDate='{self.build_date}', "
            f"OpenTelemetryCollector='{self.open_telemetry_collector}', "
            f"Python='{self.python}')"
        )


def get() -> Version:
    """Return the version information for this build."""
    return Version(
        operator=_version,
        build_date=_build_date,
        open_telemetry_collector=open_telemetry_collector(),
        python=platform.python_version(),
    )


def open_telemetry_collector() -> str:
    """Return the default collector version, falling back to 0.0.0."""
    if _otel_col:
        return _otel_col
    return _FALLBACK_COLLECTOR_VERSION