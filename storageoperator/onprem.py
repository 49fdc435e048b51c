"""CSI driver operator configurations for oVirt and VMware vSphere."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Optional

from .config import CSIOperatorConfig, PlatformType
from .replacer import Replacer

OVIRT_DRIVER_NAME = "csi.ovirt.org"
ENV_OVIRT_DRIVER_OPERATOR_IMAGE = "OVIRT_DRIVER_OPERATOR_IMAGE"
ENV_OVIRT_DRIVER_IMAGE = "OVIRT_DRIVER_IMAGE"

VMWARE_VSPHERE_DRIVER_NAME = "csi.vsphere.vmware.com"
ENV_VMWARE_VSPHERE_DRIVER_OPERATOR_IMAGE = "VMWARE_VSPHERE_DRIVER_OPERATOR_IMAGE"
ENV_VMWARE_VSPHERE_DRIVER_IMAGE = "VMWARE_VSPHERE_DRIVER_IMAGE"
ENV_VMWARE_VSPHERE_SYNCER_IMAGE = "VMWARE_VSPHERE_SYNCER_IMAGE"

_OVIRT_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_OVIRT_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_OVIRT_DRIVER_IMAGE),
)

_VSPHERE_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_VMWARE_VSPHERE_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_VMWARE_VSPHERE_DRIVER_IMAGE),
    ("${VMWARE_VSPHERE_SYNCER_IMAGE}", ENV_VMWARE_VSPHERE_SYNCER_IMAGE),
)


def _image_replacer(
    images: Iterable[tuple[str, str]], environ: Optional[Mapping[str, str]]
) -> Replacer:
    env = os.environ if environ is None else environ
    return Replacer(*(item for placeholder, name in images for item in (placeholder, env.get(name, ""))))


def get_ovirt_csi_operator_config(environ: Optional[Mapping[str, str]] = None) -> CSIOperatorConfig:
    """Return the oVirt operator configuration."""
    base = "csidriveroperators/ovirt"
    return CSIOperatorConfig(
        csi_driver_name=OVIRT_DRIVER_NAME,
        condition_prefix="OVirt",
        platform=PlatformType.OVIRT,
        static_assets=[
            f"{base}/02_sa.yaml",
            f"{base}/03_role.yaml",
            f"{base}/04_rolebinding.yaml",
            f"{base}/05_clusterrole.yaml",
            f"{base}/06_clusterrolebinding.yaml",
        ],
        cr_asset=f"{base}/08_cr.yaml",
        deployment_asset=f"{base}/07_deployment.yaml",
        image_replacer=_image_replacer(_OVIRT_IMAGES, environ),
        allow_disabled=False,
    )


def get_vmware_vsphere_csi_operator_config(
    environ: Optional[Mapping[str, str]] = None,
) -> CSIOperatorConfig:
    """Return the VMware vSphere operator configuration."""
    base = "csidriveroperators/vsphere"
    return CSIOperatorConfig(
        csi_driver_name=VMWARE_VSPHERE_DRIVER_NAME,
        condition_prefix="VSphere",
        platform=PlatformType.VSPHERE,
        static_assets=[
            f"{base}/02_configmap.yaml",
            f"{base}/03_sa.yaml",
            f"{base}/04_role.yaml",
            f"{base}/05_rolebinding.yaml",
            f"{base}/06_clusterrole.yaml",
            f"{base}/07_clusterrolebinding.yaml",
            f"{base}/11_service.yaml",
            f"{base}/13_prometheus_role.yaml",
            f"{base}/14_prometheus_rolebinding.yaml",
            f"{base}/15_prometheusrules.yaml",
        ],
        service_monitor_asset=f"{base}/12_servicemonitor.yaml",
        cr_asset=f"{base}/09_cr.yaml",
        deployment_asset=f"{base}/08_deployment.yaml",
        image_replacer=_image_replacer(_VSPHERE_IMAGES, environ),
        allow_disabled=True,
    )