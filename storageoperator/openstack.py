"""CSI driver operator configurations for OpenStack Cinder and Manila."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .config import CSIOperatorConfig, PlatformType
from .replacer import Replacer

OPENSTACK_CINDER_DRIVER_NAME = "cinder.csi.openstack.org"
OPENSTACK_MANILA_DRIVER_NAME = "manila.csi.openstack.org"

# Name of the config map holding the OpenStack CA certificate; it is synced
# from the cloud config namespace to the CSI operator namespace.
CLOUD_CONFIG_NAME = "cloud-provider-config"

ENV_OPENSTACK_CINDER_DRIVER_OPERATOR_IMAGE = "OPENSTACK_CINDER_DRIVER_OPERATOR_IMAGE"
ENV_OPENSTACK_CINDER_DRIVER_IMAGE = "OPENSTACK_CINDER_DRIVER_IMAGE"
ENV_OPENSTACK_CINDER_DRIVER_CONTROL_PLANE_IMAGE = "OPENSTACK_CINDER_DRIVER_CONTROL_PLANE_IMAGE"

ENV_MANILA_DRIVER_OPERATOR_IMAGE = "MANILA_DRIVER_OPERATOR_IMAGE"
ENV_MANILA_DRIVER_IMAGE = "MANILA_DRIVER_IMAGE"
ENV_NFS_DRIVER_IMAGE = "MANILA_NFS_DRIVER_IMAGE"
ENV_MANILA_DRIVER_CONTROL_PLANE_IMAGE = "MANILA_DRIVER_CONTROL_PLANE_IMAGE"

_CINDER_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_OPENSTACK_CINDER_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_OPENSTACK_CINDER_DRIVER_IMAGE),
    ("${DRIVER_CONTROL_PLANE_IMAGE}", ENV_OPENSTACK_CINDER_DRIVER_CONTROL_PLANE_IMAGE),
)

_MANILA_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_MANILA_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_MANILA_DRIVER_IMAGE),
    ("${NFS_DRIVER_IMAGE}", ENV_NFS_DRIVER_IMAGE),
    ("${DRIVER_CONTROL_PLANE_IMAGE}", ENV_MANILA_DRIVER_CONTROL_PLANE_IMAGE),
)

_RBAC = "rbac.authorization.k8s.io_v1"


def _image_replacer(
    images: Iterable[tuple[str, str]], environ: Optional[Mapping[str, str]]
) -> Replacer:
    env = os.environ if environ is None else environ
    return Replacer(*(item for placeholder, name in images for item in (placeholder, env.get(name, ""))))


def get_openstack_cinder_csi_operator_config(
    is_hypershift: bool, environ: Optional[Mapping[str, str]] = None
) -> CSIOperatorConfig:
    """Return the OpenStack Cinder operator configuration."""
    cfg = CSIOperatorConfig(
        csi_driver_name=OPENSTACK_CINDER_DRIVER_NAME,
        condition_prefix="OpenStackCinder",
        platform=PlatformType.OPENSTACK,
        image_replacer=_image_replacer(_CINDER_IMAGES, environ),
        allow_disabled=False,
    )
    base = "csidriveroperators/openstack-cinder"
    operator = "openstack-cinder-csi-driver-operator"
    cr_name = f"operator.openshift.io_v1_clustercsidriver_{OPENSTACK_CINDER_DRIVER_NAME}.yaml"
    if not is_hypershift:
        gen = f"{base}/standalone/generated"
        cfg.static_assets = [
            f"{gen}/v1_serviceaccount_{operator}.yaml",
            f"{gen}/{_RBAC}_role_{operator}-role.yaml",
            f"{gen}/{_RBAC}_rolebinding_{operator}-rolebinding.yaml",
            f"{gen}/{_RBAC}_clusterrole_{operator}-clusterrole.yaml",
            f"{gen}/{_RBAC}_clusterrolebinding_{operator}-clusterrolebinding.yaml",
        ]
        cfg.cr_asset = f"{gen}/{cr_name}"
        cfg.deployment_asset = f"{gen}/apps_v1_deployment_{operator}.yaml"
    else:
        guest = f"{base}/hypershift/guest/generated"
        mgmt = f"{base}/hypershift/mgmt/generated"
        cfg.static_assets = [
            f"{guest}/{_RBAC}_clusterrole_{operator}-clusterrole.yaml",
            f"{guest}/{_RBAC}_clusterrolebinding_{operator}-clusterrolebinding.yaml",
            f"{guest}/{_RBAC}_role_{operator}-role.yaml",
            f"{guest}/{_RBAC}_rolebinding_{operator}-rolebinding.yaml",
            f"{guest}/v1_serviceaccount_{operator}.yaml",
        ]
        cfg.mgmt_static_assets = [
            f"{mgmt}/{_RBAC}_role_{operator}-role.yaml",
            f"{mgmt}/{_RBAC}_rolebinding_{operator}-rolebinding.yaml",
            f"{mgmt}/v1_serviceaccount_{operator}.yaml",
        ]
        cfg.deployment_asset = f"{mgmt}/apps_v1_deployment_{operator}.yaml"
        cfg.cr_asset = f"{guest}/{cr_name}"
    return cfg


def get_openstack_manila_operator_config(
    is_hypershift: bool,
    environ: Optional[Mapping[str, str]] = None,
    extra_controllers: Optional[Iterable[Any]] = None,
) -> CSIOperatorConfig:
    """Return the OpenStack Manila operator configuration.

    ``extra_controllers`` (such as the CA certificate syncer) run alongside
    the operator in standalone clusters only.
    """
    cfg = CSIOperatorConfig(
        csi_driver_name=OPENSTACK_MANILA_DRIVER_NAME,
        condition_prefix="Manila",
        platform=PlatformType.OPENSTACK,
        image_replacer=_image_replacer(_MANILA_IMAGES, environ),
        allow_disabled=True,
    )
    base = "csidriveroperators/openstack-manila"
    operator = "manila-csi-driver-operator"
    if not is_hypershift:
        cfg.extra_controllers = list(extra_controllers or [])
        gen = f"{base}/standalone/generated"
        ns = "openshift-cluster-csi-drivers"
        cfg.static_assets = [
            f"{gen}/v1_namespace_openshift-manila-csi-driver.yaml",
            f"{gen}/{ns}_v1_serviceaccount_{operator}.yaml",
            f"{gen}/{ns}_{_RBAC}_role_{operator}-role.yaml",
            f"{gen}/{ns}_{_RBAC}_rolebinding_{operator}-rolebinding.yaml",
            f"{gen}/{_RBAC}_clusterrole_{operator}-clusterrole.yaml",
            f"{gen}/{_RBAC}_clusterrolebinding_{operator}-clusterrolebinding.yaml",
        ]
        cfg.cr_asset = (
            f"{gen}/default_operator.openshift.io_v1_clustercsidriver_{OPENSTACK_MANILA_DRIVER_NAME}.yaml"
        )
        cfg.deployment_asset = f"{gen}/{ns}_apps_v1_deployment_{operator}.yaml"
    else:
        guest = f"{base}/hypershift/guest/generated"
        mgmt = f"{base}/hypershift/mgmt/generated"
        cfg.static_assets = [
            f"{guest}/v1_namespace_openshift-manila-csi-driver.yaml",
            f"{guest}/{_RBAC}_clusterrole_{operator}-clusterrole.yaml",
            f"{guest}/{_RBAC}_clusterrolebinding_{operator}-clusterrolebinding.yaml",
        ]
        cfg.mgmt_static_assets = [
            f"{mgmt}/{_RBAC}_rolebinding_{operator}-rolebinding.yaml",
            f"{mgmt}/{_RBAC}_role_{operator}-role.yaml",
            f"{mgmt}/v1_serviceaccount_{operator}.yaml",
        ]
        cfg.cr_asset = (
            f"{guest}/operator.openshift.io_v1_clustercsidriver_{OPENSTACK_MANILA_DRIVER_NAME}.yaml"
        )
        cfg.deployment_asset = f"{mgmt}/apps_v1_deployment_{operator}.yaml"
    return cfg