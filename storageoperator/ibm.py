"""CSI driver operator configurations for IBM VPC Block and PowerVS Block."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import Optional

from .config import EXTERNAL_TOPOLOGY_MODE, CSIOperatorConfig, InfrastructureStatus, PlatformType
from .replacer import Replacer

logger = logging.getLogger(__name__)

IBM_VPC_BLOCK_CSI_DRIVER_NAME = "vpc.block.csi.ibm.io"
ENV_IBM_VPC_BLOCK_DRIVER_OPERATOR_IMAGE = "IBM_VPC_BLOCK_DRIVER_OPERATOR_IMAGE"
ENV_IBM_VPC_BLOCK_DRIVER_IMAGE = "IBM_VPC_BLOCK_DRIVER_IMAGE"

POWERVS_BLOCK_CSI_DRIVER_NAME = "powervs.csi.ibm.com"
ENV_POWERVS_BLOCK_CSI_DRIVER_OPERATOR_IMAGE = "POWERVS_BLOCK_CSI_DRIVER_OPERATOR_IMAGE"
ENV_POWERVS_BLOCK_CSI_DRIVER_IMAGE = "POWERVS_BLOCK_CSI_DRIVER_IMAGE"

_VPC_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_IBM_VPC_BLOCK_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_IBM_VPC_BLOCK_DRIVER_IMAGE),
)

_POWERVS_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_POWERVS_BLOCK_CSI_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_POWERVS_BLOCK_CSI_DRIVER_IMAGE),
)


def _image_replacer(
    images: Iterable[tuple[str, str]], environ: Optional[Mapping[str, str]]
) -> Replacer:
    env = os.environ if environ is None else environ
    return Replacer(*(item for placeholder, name in images for item in (placeholder, env.get(name, ""))))


def is_not_external_topology_mode(status: Optional[InfrastructureStatus], is_installed: bool) -> bool:
    """Return False for an external control plane unless the driver is already installed."""
    if status is None:
        return False
    # Managed IBM installations use the external topology and deploy the
    # driver themselves.
    if status.control_plane_topology == EXTERNAL_TOPOLOGY_MODE and not is_installed:
        logger.warning(
            "IBM ROKS infrastructure detected, skipping %s driver", IBM_VPC_BLOCK_CSI_DRIVER_NAME
        )
        return False
    return True


def get_ibm_vpc_block_csi_operator_config(
    environ: Optional[Mapping[str, str]] = None,
) -> CSIOperatorConfig:
    """Return the IBM VPC Block operator configuration."""
    base = "csidriveroperators/ibm-vpc-block"
    return CSIOperatorConfig(
        csi_driver_name=IBM_VPC_BLOCK_CSI_DRIVER_NAME,
        condition_prefix="IBMVPCBlock",
        platform=PlatformType.IBM_CLOUD,
        status_filter=is_not_external_topology_mode,
        static_assets=[
            f"{base}/03_sa.yaml",
            f"{base}/04_role.yaml",
            f"{base}/05_rolebinding.yaml",
            f"{base}/06_clusterrole.yaml",
            f"{base}/07_clusterrolebinding.yaml",
        ],
        cr_asset=f"{base}/09_cr.yaml",
        deployment_asset=f"{base}/08_deployment.yaml",
        image_replacer=_image_replacer(_VPC_IMAGES, environ),
        allow_disabled=False,
    )


def get_powervs_block_csi_operator_config(
    is_hypershift: bool, environ: Optional[Mapping[str, str]] = None
) -> CSIOperatorConfig:
    """Return the PowerVS Block operator configuration."""
    cfg = CSIOperatorConfig(
        csi_driver_name=POWERVS_BLOCK_CSI_DRIVER_NAME,
        condition_prefix="PowerVSBlock",
        platform=PlatformType.POWERVS,
        image_replacer=_image_replacer(_POWERVS_IMAGES, environ),
        allow_disabled=False,
    )
    base = "csidriveroperators/powervs-block"
    if not is_hypershift:
        standalone = f"{base}/standalone"
        cfg.static_assets = [
            f"{standalone}/01_sa.yaml",
            f"{standalone}/02_role.yaml",
            f"{standalone}/03_rolebinding.yaml",
            f"{standalone}/04_clusterrole.yaml",
            f"{standalone}/05_clusterrolebinding.yaml",
        ]
        cfg.cr_asset = f"{standalone}/07_cr.yaml"
        cfg.deployment_asset = f"{standalone}/06_deployment.yaml"
    else:
        guest = f"{base}/hypershift/guest"
        mgmt = f"{base}/hypershift/mgmt"
        cfg.static_assets = [
            f"{guest}/01_sa.yaml",
            f"{guest}/02_role.yaml",
            f"{guest}/03_rolebinding.yaml",
            f"{guest}/04_clusterrole.yaml",
            f"{guest}/05_clusterrolebinding.yaml",
        ]
        cfg.mgmt_static_assets = [
            f"{mgmt}/01_operator_role.yaml",
            f"{mgmt}/01_sa.yaml",
            f"{mgmt}/03_rolebinding.yaml",
        ]
        cfg.deployment_asset = f"{mgmt}/06_deployment.yaml"
        cfg.cr_asset = f"{guest}/07_cr.yaml"
    return cfg