"""Service ports derived from the receivers of a collector configuration."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

_log = logging.getLogger("otelop.ports")

# DNS_LABEL constraints for port names.
_DNS_LABEL = re.compile(r"(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?", re.ASCII)
_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)
_MAX_PORT_NAME_LENGTH = 63
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_PARSER_NAME_GENERIC = "__generic"


class Protocol(str, Enum):
    """Transport protocol of a service port."""

    TCP = "TCP"
    UDP = "UDP"
    SCTP = "SCTP"


@dataclass
class ServicePort:
    """A port to be exposed by the collector's service."""

    name: str
    port: int
    protocol: Protocol | None = None
    target_port: int | None = None


class ReceiverParser(ABC):
    """Extracts the service ports a receiver needs from its configuration."""

    @abstractmethod
    def ports(self) -> list[ServicePort]:
        """Return the service ports parsed from the receiver's configuration."""

    @abstractmethod
    def parser_name(self) -> str:
        """Return the name of this parser."""


def port_name(receiver_name: str, port: int) -> str:
    """Return a DNS-label-safe port name, or ``port-<port>`` if none can be made."""
    fallback = f"port-{port}"
    if len(receiver_name.encode("utf-8")) > _MAX_PORT_NAME_LENGTH:
        return fallback

    candidate = receiver_name.replace("/", "-").replace("_", "-")
    if not _DNS_LABEL.fullmatch(candidate):
        return fallback
    return candidate


def port_from_endpoint(endpoint: str) -> int:
    """Return the port after the last colon of an endpoint.

    Raises ValueError if that part is not a 32-bit integer.
    """
    part = endpoint[endpoint.rfind(":") + 1 :]
    if not _INTEGER.fullmatch(part):
        raise ValueError(f"invalid port {part!r} in endpoint {endpoint!r}")
    port = int(part)
    if not _INT32_MIN <= port <= _INT32_MAX:
        raise ValueError(f"port {part!r} in endpoint {endpoint!r} is out of range")
    return port


def single_port_from_config_endpoint(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ServicePort | None:
    """Build a port from the ``endpoint`` entry of a config, or return None."""
    log = logger or _log
    if "endpoint" not in config:
        log.debug("receiver doesn't have an endpoint")
        return None

    endpoint = config["endpoint"]
    if not isinstance(endpoint, str):
        log.info("receiver's endpoint isn't a string")
        return None

    try:
        port = port_from_endpoint(endpoint)
    except ValueError:
        log.info("couldn't parse the endpoint's port endpoint=%s", endpoint)
        return None
    return ServicePort(name=port_name(name, port), port=port)


def receiver_type(name: str) -> str:
    """Return the receiver type, the part of the name before any ``/``."""
    return name.partition("/")[0]


class GenericReceiver(ReceiverParser):
    """Parser for receivers with a single endpoint and an optional default port."""

    def __init__(
        self,
        logger: logging.Logger | None,
        name: str,
        config: Mapping[Any, Any],
        default_port: int = 0,
        parser_name: str = _PARSER_NAME_GENERIC,
    ) -> None:
        self.logger = logger
        self.name = name
        self.config = config
        self.default_port = default_port
        self._parser_name = parser_name

    def ports(self) -> list[ServicePort]:
        port = single_port_from_config_endpoint(self.logger, self.name, self.config)
        if port is not None:
            return [port]
        if self.default_port > 0:
            return [
                ServicePort(
                    name=port_name(self.name, self.default_port),
                    port=self.default_port,
                )
            ]
        return []

    def parser_name(self) -> str:
        return self._parser_name


def new_generic_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for receivers without a dedicated parser."""
    return GenericReceiver(logger, name, config)


def new_carbon_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for Carbon receivers."""
    return GenericReceiver(logger, name, config, 2003, "__carbon")


def new_collectd_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for Collectd receivers."""
    return GenericReceiver(logger, name, config, 8081, "__collectd")


def new_fluent_forward_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for FluentForward receivers."""
    return GenericReceiver(logger, name, config, 8006, "__fluentforward")


def new_opencensus_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for OpenCensus receivers."""
    return GenericReceiver(logger, name, config, 55678, "__opencensus")


def new_sapm_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for SAPM receivers."""
    return GenericReceiver(logger, name, config, 7276, "__sapm")


def new_signalfx_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for SignalFx receivers."""
    return GenericReceiver(logger, name, config, 9943, "__signalfx")


def new_wavefront_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for Wavefront receivers."""
    return GenericReceiver(logger, name, config, 2003, "__wavefront")


def new_zipkin_scribe_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for ZipkinScribe receivers."""
    return GenericReceiver(logger, name, config, 9410, "__zipkinscribe")


def new_zipkin_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for Zipkin receivers."""
    return GenericReceiver(logger, name, config, 9411, "__zipkin")