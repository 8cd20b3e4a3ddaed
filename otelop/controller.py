"""Reconciliation of OpenTelemetryCollector resources."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from otelop.api import OpenTelemetryCollector
from otelop.config import Config

_log = logging.getLogger("controllers.OpenTelemetryCollector")


class NotFoundError(LookupError):
    """Raised by a client when the requested resource does not exist."""


class _Client(Protocol):
    def get(self, namespace: str, name: str) -> OpenTelemetryCollector: ...


@dataclass
class ReconcileParams:
    """Everything a reconciliation task gets to work with."""

    config: Config | None = None
    client: Any = None
    instance: OpenTelemetryCollector | None = None
    logger: logging.Logger | None = None
    recorder: Any = None


@dataclass
class Task:
    """A reconciliation step; a failing step stops the run if bail_on_error."""

    name: str
    do: Callable[[ReconcileParams], None]
    bail_on_error: bool = False


class Reconciler:
    """Brings an OpenTelemetryCollector's objects to the desired state."""

    def __init__(
        self,
        client: _Client | None = None,
        tasks: Iterable[Task] = (),
        config: Config | None = None,
        logger: logging.Logger | None = None,
        recorder: Any = None,
    ) -> None:
        self.client = client
        self.tasks = list(tasks)
        self.config = config
        self.logger = logger or _log
        self.recorder = recorder

    def run_tasks(self, params: ReconcileParams) -> None:
        """Run every task in order, stopping at a failing bail-on-error task."""
        for task in self.tasks:
            try:
                task.do(params)
            except Exception:
                self.logger.exception("failed to reconcile %s", task.name)
                if task.bail_on_error:
                    raise

    def reconcile(self, namespace: str, name: str) -> None:
        """Reconcile the named instance; a missing instance is skipped."""
        if self.client is None:
            raise RuntimeError("no client configured")
        try:
            instance = self.client.get(namespace, name)
        except NotFoundError:
            return
        except Exception:
            self.logger.exception(
                "unable to fetch OpenTelemetryCollector %s/%s", namespace, name
            )
            raise

        params = ReconcileParams(
            config=self.config,
            client=self.client,
            instance=instance,
            logger=self.logger,
            recorder=self.recorder,
        )
        self.run_tasks(params)