"""Configuration of a CSI driver operator and the cluster facts it is matched against."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .replacer import Replacer

ENV_OPERATOR_IMAGE_VERSION = "OPERATOR_IMAGE_VERSION"

AZURE_STACK_CLOUD = "AzureStackCloud"
AZURE_PUBLIC_CLOUD = "AzurePublicCloud"

EXTERNAL_TOPOLOGY_MODE = "External"
HIGHLY_AVAILABLE_TOPOLOGY_MODE = "HighlyAvailable"

INFRA_CONFIG_NAME = "cluster"


class PlatformType(str, Enum):
    """Cloud platforms a CSI driver operator can be bound to."""

    AWS = "AWS"
    AZURE = "Azure"
    GCP = "GCP"
    OPENSTACK = "OpenStack"
    IBM_CLOUD = "IBMCloud"
    POWERVS = "PowerVS"
    OVIRT = "oVirt"
    VSPHERE = "VSphere"
    # Not a real platform: marks a driver installable on any platform.
    ALL_PLATFORMS = "AllPlatforms"


@dataclass
class AzurePlatformStatus:
    """Azure specific part of the platform status."""

    cloud_name: str = ""


@dataclass
class PlatformStatus:
    """The platform the cluster runs on."""

    type: Optional[PlatformType] = None
    azure: Optional[AzurePlatformStatus] = None


@dataclass
class InfrastructureStatus:
    """Observed state of the cluster infrastructure."""

    platform_status: Optional[PlatformStatus] = None
    control_plane_topology: str = ""


@dataclass
class Infrastructure:
    """The cluster-wide infrastructure resource."""

    name: str = INFRA_CONFIG_NAME
    status: InfrastructureStatus = field(default_factory=InfrastructureStatus)


StatusFilter = Callable[[Optional[InfrastructureStatus], bool], bool]


@dataclass
class CSIOperatorConfig:
    """How to install and run one CSI driver operator.

    ``status_filter`` decides from the infrastructure status whether the
    operator may run; ``None`` means it may. ``require_feature_gate`` names a
    feature gate that must be enabled; empty means the driver is GA.
    """

    csi_driver_name: str = ""
    condition_prefix: str = ""
    platform: Optional[PlatformType] = None
    status_filter: Optional[StatusFilter] = None
    static_assets: list[str] = field(default_factory=list)
    mgmt_static_assets: list[str] = field(default_factory=list)
    cr_asset: str = ""
    service_monitor_asset: str = ""
    deployment_asset: str = ""
    image_replacer: Optional[Replacer] = None
    allow_disabled: bool = False
    extra_controllers: list[Any] = field(default_factory=list)
    require_feature_gate: str = ""