"""Reading a HostedControlPlane and preparing the hosted CSI driver operator Deployment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from .config import CSIOperatorConfig
from .replacer import Replacer, sidecar_replacer

logger = logging.getLogger(__name__)

ENV_HYPERSHIFT_IMAGE = "HYPERSHIFT_IMAGE"
ENV_ARO_HCP_DISK = "ARO_HCP_SECRET_PROVIDER_CLASS_FOR_DISK"
ENV_ARO_HCP_FILE = "ARO_HCP_SECRET_PROVIDER_CLASS_FOR_FILE"

AZURE_DISK_OPERATOR_DEPLOYMENT = "azure-disk-csi-driver-operator"
AZURE_FILE_OPERATOR_DEPLOYMENT = "azure-file-csi-driver-operator"

CONTROLPLANE_NAMESPACE_PLACEHOLDER = "${CONTROLPLANE_NAMESPACE}"
HYPERSHIFT_IMAGE_PLACEHOLDER = "${HYPERSHIFT_IMAGE}"

HOSTED_CONTROL_PLANE_GROUP = "hypershift.openshift.io"
HOSTED_CONTROL_PLANE_VERSION = "v1beta1"
HOSTED_CONTROL_PLANE_RESOURCE = "hostedcontrolplanes"


class HostedControlPlaneError(Exception):
    """The HostedControlPlane is missing, ambiguous or malformed."""


@dataclass
class Toleration:
    """A pod toleration taken from the HostedControlPlane."""

    key: str = ""
    operator: str = ""
    value: str = ""
    effect: str = ""
    toleration_seconds: Optional[int] = None


def select_hosted_control_plane(items: Sequence[Any], namespace: str) -> dict[str, Any]:
    """Return the single HostedControlPlane of ``namespace`` from the listed objects."""
    if not items:
        raise HostedControlPlaneError(f"no HostedControlPlane found in namespace {namespace}")
    if len(items) > 1:
        raise HostedControlPlaneError(
            f"more than one HostedControlPlane found in namespace {namespace}"
        )
    hcp = items[0]
    if not isinstance(hcp, dict):
        raise HostedControlPlaneError(
            f"unknown type of HostedControlPlane found in namespace {namespace}"
        )
    return hcp


def _nested(obj: Mapping[str, Any], *path: str) -> tuple[Any, bool]:
    """Return the value at ``path`` and whether it was found."""
    current: Any = obj
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return None, False
        current = current[key]
    return current, True


def hosted_control_plane_tolerations(hcp: Mapping[str, Any]) -> list[Toleration]:
    """Return the tolerations in ``spec.tolerations``; malformed entries are skipped."""
    raw, found = _nested(hcp, "spec", "tolerations")
    if not found or not isinstance(raw, list):
        return []

    def text(entry: Mapping[str, Any], name: str) -> str:
        value = entry.get(name)
        return value if isinstance(value, str) else ""

    tolerations = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        seconds = entry.get("tolerationSeconds")
        tolerations.append(
            Toleration(
                key=text(entry, "key"),
                operator=text(entry, "operator"),
                value=text(entry, "value"),
                effect=text(entry, "effect"),
                toleration_seconds=(
                    seconds if isinstance(seconds, int) and not isinstance(seconds, bool) else None
                ),
            )
        )
    logger.debug("Using tolerations %s", tolerations)
    return tolerations


def _string_map(hcp: Mapping[str, Any], *path: str) -> Optional[dict[str, str]]:
    value, found = _nested(hcp, *path)
    if not found:
        return None
    dotted = ".".join(path)
    if not isinstance(value, Mapping):
        raise HostedControlPlaneError(
            f"{dotted} accessor error: {value!r} is of type {type(value).__name__}, expected a map"
        )
    result = {}
    for key, item in value.items():
        if not isinstance(item, str):
            raise HostedControlPlaneError(
                f"{dotted} accessor error: contains non-string value {item!r} for key {key!r}"
            )
        result[key] = item
    return result


def hosted_control_plane_node_selector(hcp: Mapping[str, Any]) -> Optional[dict[str, str]]:
    """Return ``spec.nodeSelector``, or None when it is not set."""
    selector = _string_map(hcp, "spec", "nodeSelector")
    if selector is not None:
        logger.debug("Using node selector %s", selector)
    return selector


def hosted_control_plane_labels(hcp: Mapping[str, Any]) -> Optional[dict[str, str]]:
    """Return ``spec.labels``, or None when it is not set."""
    labels = _string_map(hcp, "spec", "labels")
    if labels is not None:
        logger.debug("Using labels %s", labels)
    return labels


def aro_hcp_env_vars(
    deployment_name: str, environ: Optional[Mapping[str, str]] = None
) -> list[dict[str, str]]:
    """Return the extra container env vars an ARO HCP Azure driver operator needs."""
    env = os.environ if environ is None else environ
    env_vars: list[dict[str, str]] = []
    disk = env.get(ENV_ARO_HCP_DISK, "")
    if disk and deployment_name == AZURE_DISK_OPERATOR_DEPLOYMENT:
        env_vars = [{"name": ENV_ARO_HCP_DISK, "value": disk}]
    file_class = env.get(ENV_ARO_HCP_FILE, "")
    if file_class and deployment_name == AZURE_FILE_OPERATOR_DEPLOYMENT:
        env_vars = [{"name": ENV_ARO_HCP_FILE, "value": file_class}]
    return env_vars


def deployment_replacers(
    config: CSIOperatorConfig, namespace: str, environ: Optional[Mapping[str, str]] = None
) -> list[Replacer]:
    """Return the replacers applied, in order, to a hosted operator Deployment asset."""
    env = os.environ if environ is None else environ
    replacers = [sidecar_replacer(env)]
    if config.image_replacer is not None:
        replacers.append(config.image_replacer)
    replacers.append(Replacer(CONTROLPLANE_NAMESPACE_PLACEHOLDER, namespace))
    replacers.append(Replacer(HYPERSHIFT_IMAGE_PLACEHOLDER, env.get(ENV_HYPERSHIFT_IMAGE, "")))
    return replacers