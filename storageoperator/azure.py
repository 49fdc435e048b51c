"""CSI driver operator configurations for Azure Disk and Azure File."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Optional

from .config import (
    AZURE_STACK_CLOUD,
    ENV_OPERATOR_IMAGE_VERSION,
    CSIOperatorConfig,
    InfrastructureStatus,
    PlatformType,
)
from .replacer import Replacer

AZURE_DISK_DRIVER_NAME = "disk.csi.azure.com"
AZURE_FILE_DRIVER_NAME = "file.csi.azure.com"

ENV_AZURE_DISK_DRIVER_OPERATOR_IMAGE = "AZURE_DISK_DRIVER_OPERATOR_IMAGE"
ENV_AZURE_DISK_DRIVER_IMAGE = "AZURE_DISK_DRIVER_IMAGE"
ENV_AZURE_DISK_DRIVER_CONTROL_PLANE_IMAGE = "AZURE_DISK_DRIVER_CONTROL_PLANE_IMAGE"
ENV_AZURE_FILE_DRIVER_OPERATOR_IMAGE = "AZURE_FILE_DRIVER_OPERATOR_IMAGE"
ENV_AZURE_FILE_DRIVER_IMAGE = "AZURE_FILE_DRIVER_IMAGE"
ENV_AZURE_FILE_DRIVER_CONTROL_PLANE_IMAGE = "AZURE_FILE_DRIVER_CONTROL_PLANE_IMAGE"
ENV_CCM_OPERATOR_IMAGE = "CLUSTER_CLOUD_CONTROLLER_MANAGER_OPERATOR_IMAGE"

_DISK_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_AZURE_DISK_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_AZURE_DISK_DRIVER_IMAGE),
    ("${CLUSTER_CLOUD_CONTROLLER_MANAGER_OPERATOR_IMAGE}", ENV_CCM_OPERATOR_IMAGE),
    ("${OPERATOR_IMAGE_VERSION}", ENV_OPERATOR_IMAGE_VERSION),
    ("${DRIVER_CONTROL_PLANE_IMAGE}", ENV_AZURE_DISK_DRIVER_CONTROL_PLANE_IMAGE),
)

_FILE_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_AZURE_FILE_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_AZURE_FILE_DRIVER_IMAGE),
    ("${CLUSTER_CLOUD_CONTROLLER_MANAGER_OPERATOR_IMAGE}", ENV_CCM_OPERATOR_IMAGE),
    ("${OPERATOR_IMAGE_VERSION}", ENV_OPERATOR_IMAGE_VERSION),
    ("${DRIVER_CONTROL_PLANE_IMAGE}", ENV_AZURE_FILE_DRIVER_CONTROL_PLANE_IMAGE),
)


def _image_replacer(
    images: Iterable[tuple[str, str]], environ: Optional[Mapping[str, str]]
) -> Replacer:
    env = os.environ if environ is None else environ
    return Replacer(*(item for placeholder, name in images for item in (placeholder, env.get(name, ""))))


def _assets(driver: str, is_hypershift: bool) -> tuple[list[str], list[str], str, str]:
    """Return static assets, management assets, deployment asset and CR asset."""
    base = f"csidriveroperators/{driver}"
    operator = f"{driver}-csi-driver-operator"
    rbac = "rbac.authorization.k8s.io_v1"
    if not is_hypershift:
        gen = f"{base}/standalone/generated"
        static = [
            f"{gen}/v1_serviceaccount_{operator}.yaml",
            f"{gen}/{rbac}_role_{operator}-role.yaml",
            f"{gen}/{rbac}_clusterrole_{operator}-clusterrole.yaml",
            f"{gen}/{rbac}_clusterrolebinding_{operator}-clusterrolebinding.yaml",
            f"{gen}/{rbac}_rolebinding_{operator}-rolebinding.yaml",
        ]
        return static, [], f"{gen}/apps_v1_deployment_{operator}.yaml", gen
    guest = f"{base}/hypershift/guest/generated"
    mgmt = f"{base}/hypershift/mgmt/generated"
    static = [
        f"{guest}/{rbac}_clusterrole_{operator}-clusterrole.yaml",
        f"{guest}/{rbac}_clusterrolebinding_{operator}-clusterrolebinding.yaml",
        f"{guest}/{rbac}_role_{operator}-role.yaml",
        f"{guest}/{rbac}_rolebinding_{operator}-rolebinding.yaml",
        f"{guest}/v1_serviceaccount_{operator}.yaml",
    ]
    mgmt_static = [
        f"{mgmt}/{rbac}_role_{operator}-role.yaml",
        f"{mgmt}/{rbac}_rolebinding_{operator}-rolebinding.yaml",
        f"{mgmt}/v1_serviceaccount_{operator}.yaml",
    ]
    return static, mgmt_static, f"{mgmt}/apps_v1_deployment_{operator}.yaml", guest


def is_not_azure_stack_cloud(status: Optional[InfrastructureStatus], is_installed: bool) -> bool:
    """Return False on Azure Stack Hub unless the driver is already installed."""
    if status is None:
        return False
    platform_status = status.platform_status
    azure = platform_status.azure if platform_status is not None else None
    cloud_name = azure.cloud_name if azure is not None else ""
    # Azure File is not supported on Azure Stack Hub.
    if cloud_name == AZURE_STACK_CLOUD and not is_installed:
        return False
    return True


def get_azure_disk_csi_operator_config(
    is_hypershift: bool, environ: Optional[Mapping[str, str]] = None
) -> CSIOperatorConfig:
    """Return the Azure Disk operator configuration."""
    static, mgmt_static, deployment, cr_dir = _assets("azure-disk", is_hypershift)
    return CSIOperatorConfig(
        csi_driver_name=AZURE_DISK_DRIVER_NAME,
        condition_prefix="AzureDisk",
        platform=PlatformType.AZURE,
        image_replacer=_image_replacer(_DISK_IMAGES, environ),
        allow_disabled=False,
        static_assets=static,
        mgmt_static_assets=mgmt_static,
        deployment_asset=deployment,
        cr_asset=f"{cr_dir}/operator.openshift.io_v1_clustercsidriver_{AZURE_DISK_DRIVER_NAME}.yaml",
    )


def get_azure_file_csi_operator_config(
    is_hypershift: bool, environ: Optional[Mapping[str, str]] = None
) -> CSIOperatorConfig:
    """Return the Azure File operator configuration."""
    static, mgmt_static, deployment, cr_dir = _assets("azure-file", is_hypershift)
    if not is_hypershift:
        # The standalone file list is ordered differently from the disk one.
        static = [static[0], static[1], static[4], static[2], static[3]]
    return CSIOperatorConfig(
        csi_driver_name=AZURE_FILE_DRIVER_NAME,
        condition_prefix="AzureFile",
        platform=PlatformType.AZURE,
        status_filter=is_not_azure_stack_cloud,
        image_replacer=_image_replacer(_FILE_IMAGES, environ),
        allow_disabled=False,
        static_assets=static,
        mgmt_static_assets=mgmt_static,
        deployment_asset=deployment,
        cr_asset=f"{cr_dir}/operator.openshift.io_v1_clustercsidriver_{AZURE_FILE_DRIVER_NAME}.yaml",
    )