"""Receiver parsers with several protocols, and the registry of known parsers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from otelop.ports import (
    GenericReceiver,
    Protocol,
    ReceiverParser,
    ServicePort,
    new_carbon_receiver_parser,
    new_collectd_receiver_parser,
    new_fluent_forward_receiver_parser,
    new_generic_receiver_parser,
    new_opencensus_receiver_parser,
    new_sapm_receiver_parser,
    new_signalfx_receiver_parser,
    new_wavefront_receiver_parser,
    new_zipkin_receiver_parser,
    new_zipkin_scribe_receiver_parser,
    port_name,
    receiver_type,
    single_port_from_config_endpoint,
)

Builder = Callable[[logging.Logger | None, str, Mapping[Any, Any]], ReceiverParser]

_PARSER_NAME_JAEGER = "__jaeger"
_PARSER_NAME_OTLP = "__otlp"

# (protocol name, default port, transport protocol)
_JAEGER_PROTOCOLS: tuple[tuple[str, int, Protocol], ...] = (
    ("grpc", 14250, Protocol.TCP),
    ("thrift_http", 14268, Protocol.TCP),
    ("thrift_compact", 6831, Protocol.UDP),
    ("thrift_binary", 6832, Protocol.UDP),
)

# (protocol name, default port)
_OTLP_PROTOCOLS: tuple[tuple[str, int], ...] = (
    ("grpc", 4317),
    ("http", 55681),
)


def _protocols_of(
    logger: logging.Logger | None, config: Mapping[Any, Any]
) -> tuple[logging.Logger | None, Mapping[Any, Any]]:
    protocols = config.get("protocols")
    if isinstance(protocols, Mapping):
        return logger, protocols
    return None, {}


class JaegerReceiverParser(ReceiverParser):
    """Parses the configuration of Jaeger receivers."""

    def __init__(
        self, logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
    ) -> None:
        self.logger = logger
        self.name = name
        self.config = config

    def ports(self) -> list[ServicePort]:
        ports: list[ServicePort] = []
        for protocol, default_port, transport in _JAEGER_PROTOCOLS:
            if protocol not in self.config:
                continue
            name_with_protocol = f"{self.name}-{protocol}"
            settings = self.config[protocol]
            port = None
            if isinstance(settings, Mapping):
                port = single_port_from_config_endpoint(
                    self.logger, name_with_protocol, settings
                )
            if port is None:
                port = ServicePort(
                    name=port_name(name_with_protocol, default_port),
                    port=default_port,
                )
            port.protocol = transport
            ports.append(port)
        return ports

    def parser_name(self) -> str:
        return _PARSER_NAME_JAEGER


class OTLPReceiverParser(ReceiverParser):
    """Parses the configuration of OTLP receivers."""

    def __init__(
        self, logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
    ) -> None:
        self.logger = logger
        self.name = name
        self.config = config

    def ports(self) -> list[ServicePort]:
        ports: list[ServicePort] = []
        for protocol, default_port in _OTLP_PROTOCOLS:
            if protocol not in self.config:
                continue
            name_with_protocol = f"{self.name}-{protocol}"
            settings = self.config[protocol]
            port = None
            if isinstance(settings, Mapping):
                port = single_port_from_config_endpoint(
                    self.logger, name_with_protocol, settings
                )
            if port is None:
                port = ServicePort(
                    name=port_name(name_with_protocol, default_port),
                    port=default_port,
                    target_port=default_port,
                )
            ports.append(port)
        return ports

    def parser_name(self) -> str:
        return _PARSER_NAME_OTLP


def new_jaeger_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for Jaeger receivers from their ``protocols`` block."""
    logger, protocols = _protocols_of(logger, config)
    return JaegerReceiverParser(logger, name, protocols)


def new_otlp_receiver_parser(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Build a parser for OTLP receivers from their ``protocols`` block."""
    logger, protocols = _protocols_of(logger, config)
    return OTLPReceiverParser(logger, name, protocols)


_registry: dict[str, Builder] = {
    "carbon": new_carbon_receiver_parser,
    "collectd": new_collectd_receiver_parser,
    "fluentforward": new_fluent_forward_receiver_parser,
    "opencensus": new_opencensus_receiver_parser,
    "sapm": new_sapm_receiver_parser,
    "signalfx": new_signalfx_receiver_parser,
    "wavefront": new_wavefront_receiver_parser,
    "zipkin-scribe": new_zipkin_scribe_receiver_parser,
    "zipkin": new_zipkin_receiver_parser,
    "jaeger": new_jaeger_receiver_parser,
    "otlp": new_otlp_receiver_parser,
}


def register(name: str, builder: Builder) -> None:
    """Add or replace the parser builder for a receiver type."""
    _registry[name] = builder


def is_registered(name: str) -> bool:
    """Tell whether a parser builder is registered under the given name."""
    return name in _registry


def builder_for(name: str) -> Builder:
    """Return the builder for a receiver name, or the generic one."""
    return _registry.get(receiver_type(name), new_generic_receiver_parser)


def parser_for(
    logger: logging.Logger | None, name: str, config: Mapping[Any, Any]
) -> ReceiverParser:
    """Return a parser for the given receiver name and configuration."""
    return builder_for(name)(logger, name, config)


__all__ = [
    "Builder",
    "GenericReceiver",
    "JaegerReceiverParser",
    "OTLPReceiverParser",
    "builder_for",
    "is_registered",
    "new_jaeger_receiver_parser",
    "new_otlp_receiver_parser",
    "parser_for",
    "register",
]