"""Core logic for operating OpenTelemetry Collector instances: resources, receiver ports, labels, configuration and reconciliation tasks."""

__version__ = "0.1.0"