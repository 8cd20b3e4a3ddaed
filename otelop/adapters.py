"""Conversion of a collector configuration into the data the operator needs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from otelop.ports import ServicePort
from otelop.receivers import parser_for

_log = logging.getLogger("otelop.adapters")


class InvalidYAMLError(ValueError):
    """The collector configuration could not be parsed."""

    def __init__(self) -> None:
        super().__init__("couldn't parse the opentelemetry-collector configuration")


class NoReceiversError(ValueError):
    """The configuration has no receivers."""

    def __init__(self) -> None:
        super().__init__("no receivers available as part of the configuration")


class ReceiversNotAMapError(ValueError):
    """The receivers property is not a map of receivers."""

    def __init__(self) -> None:
        super().__init__(
            "receivers property in the configuration doesn't contain valid receivers"
        )


def config_from_string(config_str: str) -> dict[Any, Any]:
    """Parse a YAML configuration into a mapping.

    Raises InvalidYAMLError when the text is not YAML or not a mapping.
    """
    try:
        config = yaml.safe_load(config_str)
    except yaml.YAMLError as exc:
        raise InvalidYAMLError() from exc
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise InvalidYAMLError()
    return config


def config_to_receiver_ports(
    logger: logging.Logger | None, config: Mapping[Any, Any]
) -> list[ServicePort]:
    """Return the service ports needed by the receivers of a configuration.

    Raises NoReceiversError or ReceiversNotAMapError for a bad receivers block.
    A receiver whose parser fails is logged and skipped.
    """
    log = logger or _log
    if "receivers" not in config:
        raise NoReceiversError()
    receivers = config["receivers"]
    if not isinstance(receivers, Mapping):
        raise ReceiversNotAMapError()

    ports: list[ServicePort] = []
    for key, value in receivers.items():
        if not isinstance(value, Mapping):
            log.info("receiver doesn't seem to be a map of properties receiver=%s", key)
            value = {}
        name = str(key)
        try:
            receiver_ports = parser_for(logger, name, value).ports()
        except Exception:
            log.exception("parser for '%s' has returned an error", name)
            continue
        ports.extend(receiver_ports or [])
    return ports