"""Detection of traits of the cluster the operator runs on."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from enum import Enum
from typing import Any, Protocol

_OPENSHIFT_ROUTE_GROUP = "route.openshift.io"


class Platform(str, Enum):
    """The kind of platform the operator is running on."""

    UNKNOWN = "Unknown"
    KUBERNETES = "Kubernetes"
    OPENSHIFT = "OpenShift"


class DiscoveryError(Exception):
    """Raised when the API server's groups cannot be discovered."""


class _Discovery(Protocol):
    def server_groups(self) -> list[str]: ...


class DiscoveryClient:
    """Minimal client for the API server's group discovery endpoints."""

    def __init__(self, host: str, timeout: float = 10.0) -> None:
        self.host = host.rstrip("/")
        self.timeout = timeout

    def _fetch(self, path: str) -> Any | None:
        request = urllib.request.Request(
            self.host + path, headers={"Accept": "application/json"}
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                body = response.read()
        except urllib.error.HTTPError as exc:
            if exc.code in (403, 404):
                return None
            raise DiscoveryError(f"GET {path} failed with status {exc.code}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise DiscoveryError(f"GET {path} failed: {exc}") from exc
        try:
            return json.loads(body) if body else {}
        except ValueError as exc:
            raise DiscoveryError(f"GET {path} returned invalid JSON") from exc

    def server_groups(self) -> list[str]:
        """Return the names of the API groups the server offers."""
        names: list[str] = []

        legacy = self._fetch("/api")
        if isinstance(legacy, dict) and legacy.get("versions"):
            names.append("")

        groups = self._fetch("/apis")
        if isinstance(groups, dict):
            names.extend(
                group.get("name", "")
                for group in groups.get("groups") or []
                if isinstance(group, dict)
            )
        return names


class AutoDetect:
    """Detects traits of the runtime from the cluster's discovery information."""

    def __init__(self, discovery: _Discovery) -> None:
        self.discovery = discovery

    def platform(self) -> Platform:
        """Return the detected platform: Kubernetes or OpenShift.

        Raises DiscoveryError when the API groups cannot be listed.
        """
        groups = self.discovery.server_groups()
        if _OPENSHIFT_ROUTE_GROUP in groups:
            return Platform.OPENSHIFT
        return Platform.KUBERNETES