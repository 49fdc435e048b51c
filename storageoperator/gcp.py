"""CSI driver operator configuration for GCP Persistent Disk."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Optional

from .config import ENV_OPERATOR_IMAGE_VERSION, CSIOperatorConfig, PlatformType
from .replacer import Replacer

GCP_PD_CSI_DRIVER_NAME = "pd.csi.storage.gke.io"
ENV_GCP_PD_DRIVER_OPERATOR_IMAGE = "GCP_PD_DRIVER_OPERATOR_IMAGE"
ENV_GCP_PD_DRIVER_IMAGE = "GCP_PD_DRIVER_IMAGE"

_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_GCP_PD_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_GCP_PD_DRIVER_IMAGE),
    ("${OPERATOR_IMAGE_VERSION}", ENV_OPERATOR_IMAGE_VERSION),
)


def get_gcp_pd_csi_operator_config(environ: Optional[Mapping[str, str]] = None) -> CSIOperatorConfig:
    """Return the GCP PD operator configuration."""
    env = os.environ if environ is None else environ
    base = "csidriveroperators/gcp-pd"
    return CSIOperatorConfig(
        csi_driver_name=GCP_PD_CSI_DRIVER_NAME,
        condition_prefix="GCPPD",
        platform=PlatformType.GCP,
        static_assets=[
            f"{base}/02_sa.yaml",
            f"{base}/03_role.yaml",
            f"{base}/04_rolebinding.yaml",
            f"{base}/05_clusterrole.yaml",
            f"{base}/06_clusterrolebinding.yaml",
        ],
        cr_asset=f"{base}/08_cr.yaml",
        deployment_asset=f"{base}/07_deployment.yaml",
        image_replacer=Replacer(
            *(item for placeholder, name in _IMAGES for item in (placeholder, env.get(name, "")))
        ),
        allow_disabled=False,
    )