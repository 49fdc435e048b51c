"""Decide which CSI driver operators should run and track the objects they relate to."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

from .config import CSIOperatorConfig, Infrastructure, PlatformType

logger = logging.getLogger(__name__)

FEATURE_GATE_CONFIG_NAME = "cluster"
ANN_OPENSHIFT_MANAGED = "csi.openshift.io/managed"

AssetFunc = Callable[[str], bytes]


class FeatureGate:
    """The set of known feature gates and which of them are enabled."""

    def __init__(
        self, enabled: Optional[Iterable[str]] = None, disabled: Optional[Iterable[str]] = None
    ) -> None:
        self._enabled = frozenset(enabled or ())
        self._disabled = frozenset(disabled or ())

    def enabled(self, name: str) -> bool:
        """Return whether the feature gate is enabled; unknown gates raise KeyError."""
        if name in self._enabled:
            return True
        if name in self._disabled:
            return False
        raise KeyError(f"feature {name!r} is not known")

    def known_features(self) -> list[str]:
        """Return every known feature gate name, sorted."""
        return sorted(self._enabled | self._disabled)


@dataclass
class CSIDriver:
    """A CSIDriver object found in the cluster."""

    name: str
    annotations: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ObjectReference:
    """Reference to an object related to the operator."""

    group: str = ""
    resource: str = ""
    name: str = ""
    namespace: str = ""


class RelatedObjects:
    """Collects the objects related to the running CSI driver operators."""

    def __init__(self) -> None:
        self._objects: list[ObjectReference] = []

    def add(self, *args: ObjectReference) -> None:
        """Append object references."""
        self._objects.extend(args)

    def clear(self) -> None:
        """Forget all collected references."""
        self._objects.clear()

    def snapshot(self) -> tuple[bool, list[ObjectReference]]:
        """Return whether any references are set, and a copy of them."""
        return bool(self._objects), list(self._objects)


class _NoMatchError(Exception):
    """A REST mapping found no matching resource or kind."""


class NoResourceMatchError(_NoMatchError):
    """No resource matched the partial resource."""

    def __init__(self, partial_resource: str) -> None:
        super().__init__(f"no matches for {partial_resource}")
        self.partial_resource = partial_resource


class NoKindMatchError(_NoMatchError):
    """No kind matched the group kind."""

    def __init__(self, group_kind: str) -> None:
        super().__init__(f"no matches for kind {group_kind!r}")
        self.group_kind = group_kind


class AmbiguousKindError(Exception):
    """A partial kind matched more than one kind."""

    def __init__(self, partial_kind: str, matching_kinds: Optional[Iterable[str]] = None) -> None:
        self.partial_kind = partial_kind
        self.matching_kinds = list(matching_kinds or ())
        super().__init__(f"{partial_kind} matches multiple kinds {self.matching_kinds}")


class AggregateError(Exception):
    """Several errors reported together."""

    def __init__(self, errors: Iterable[Optional[BaseException]]) -> None:
        self.errors: list[BaseException] = [err for err in errors if err is not None]
        if len(self.errors) == 1:
            message = str(self.errors[0])
        else:
            message = "[" + ", ".join(str(err) for err in self.errors) + "]"
        super().__init__(message)


class UnsupportedCSIDriverError(Exception):
    """A CSI driver not provided by the platform is already installed."""

    def __init__(self, csi_driver_name: str) -> None:
        super().__init__(
            f"detected CSI driver {csi_driver_name} that is not provided by OpenShift - "
            "please remove it before enabling the OpenShift one"
        )
        self.csi_driver_name = csi_driver_name


def should_run_controller(
    cfg: CSIOperatorConfig,
    infrastructure: Infrastructure,
    feature_gate: FeatureGate,
    csi_driver: Optional[CSIDriver],
    is_installed: bool,
) -> bool:
    """Return whether the CSI driver operator described by ``cfg`` should run.

    Raises UnsupportedCSIDriverError if a feature-gated driver is enabled while
    a foreign installation of the same driver exists.
    """
    platform_status = infrastructure.status.platform_status
    platform = platform_status.type if platform_status is not None else None
    if cfg.platform != PlatformType.ALL_PLATFORMS and cfg.platform != platform:
        logger.debug("Not starting %s: wrong platform %s", cfg.csi_driver_name, platform)
        return False

    if cfg.status_filter is not None and not cfg.status_filter(infrastructure.status, is_installed):
        logger.debug("Not starting %s: status filter returned false", cfg.csi_driver_name)
        return False

    if not cfg.require_feature_gate:
        logger.debug("Starting %s: it's GA", cfg.csi_driver_name)
        return True

    gate = cfg.require_feature_gate
    if gate not in feature_gate.known_features() or not feature_gate.enabled(gate):
        logger.debug("Not starting %s: feature %s is not enabled", cfg.csi_driver_name, gate)
        return False

    if is_unsupported_csi_driver_running(cfg, csi_driver):
        raise UnsupportedCSIDriverError(cfg.csi_driver_name)

    logger.debug("Starting %s: feature %s is enabled", cfg.csi_driver_name, gate)
    return True


def is_unsupported_csi_driver_running(
    cfg: CSIOperatorConfig, csi_driver: Optional[CSIDriver]
) -> bool:
    """Return True if a CSIDriver exists that is not managed by the platform."""
    if csi_driver is None:
        return False
    return ANN_OPENSHIFT_MANAGED not in csi_driver.annotations


def is_no_match_error(err: Optional[BaseException]) -> bool:
    """Return True if ``err``, or any error aggregated in it, is a no-match error."""
    if isinstance(err, AggregateError):
        return any(isinstance(inner, _NoMatchError) for inner in err.errors)
    return isinstance(err, _NoMatchError)


def namespace_replacer(asset_func: AssetFunc, placeholder: str, namespace: str) -> AssetFunc:
    """Wrap ``asset_func`` so every ``placeholder`` in the asset becomes ``namespace``."""
    old = placeholder.encode()
    new = namespace.encode()

    def read(name: str) -> bytes:
        return asset_func(name).replace(old, new)

    return read