"""CSI driver operator configuration for AWS EBS."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Optional

from .config import ENV_OPERATOR_IMAGE_VERSION, CSIOperatorConfig, PlatformType
from .replacer import Replacer

AWS_EBS_CSI_DRIVER_NAME = "ebs.csi.aws.com"
ENV_AWS_EBS_DRIVER_OPERATOR_IMAGE = "AWS_EBS_DRIVER_OPERATOR_IMAGE"
ENV_AWS_EBS_DRIVER_IMAGE = "AWS_EBS_DRIVER_IMAGE"
ENV_AWS_EBS_DRIVER_CONTROL_PLANE_IMAGE = "AWS_EBS_DRIVER_CONTROL_PLANE_IMAGE"

_IMAGES = (
    ("${OPERATOR_IMAGE}", ENV_AWS_EBS_DRIVER_OPERATOR_IMAGE),
    ("${DRIVER_IMAGE}", ENV_AWS_EBS_DRIVER_IMAGE),
    ("${DRIVER_CONTROL_PLANE_IMAGE}", ENV_AWS_EBS_DRIVER_CONTROL_PLANE_IMAGE),
    ("${OPERATOR_IMAGE_VERSION}", ENV_OPERATOR_IMAGE_VERSION),
)

_STANDALONE = "csidriveroperators/aws-ebs/standalone"
_GUEST = "csidriveroperators/aws-ebs/hypershift/guest/generated"
_MGMT = "csidriveroperators/aws-ebs/hypershift/mgmt/generated"


def _image_replacer(
    images: Iterable[tuple[str, str]], environ: Optional[Mapping[str, str]]
) -> Replacer:
    env = os.environ if environ is None else environ
    return Replacer(*(item for placeholder, name in images for item in (placeholder, env.get(name, ""))))


def get_aws_ebs_csi_operator_config(
    is_hypershift: bool, environ: Optional[Mapping[str, str]] = None
) -> CSIOperatorConfig:
    """Return the AWS EBS operator configuration for a standalone or hosted cluster."""
    cfg = CSIOperatorConfig(
        csi_driver_name=AWS_EBS_CSI_DRIVER_NAME,
        condition_prefix="AWSEBS",
        platform=PlatformType.AWS,
        image_replacer=_image_replacer(_IMAGES, environ),
        allow_disabled=False,
    )
    if not is_hypershift:
        cfg.static_assets = [
            f"{_STANDALONE}/generated/v1_serviceaccount_aws-ebs-csi-driver-operator.yaml",
            f"{_STANDALONE}/generated/rbac.authorization.k8s.io_v1_role_aws-ebs-csi-driver-operator-role.yaml",
            f"{_STANDALONE}/generated/rbac.authorization.k8s.io_v1_rolebinding_aws-ebs-csi-driver-operator-rolebinding.yaml",
            f"{_STANDALONE}/generated/rbac.authorization.k8s.io_v1_clusterrole_aws-ebs-csi-driver-operator-clusterrole.yaml",
            f"{_STANDALONE}/generated/rbac.authorization.k8s.io_v1_clusterrolebinding_aws-ebs-csi-driver-operator-clusterrolebinding.yaml",
            f"{_STANDALONE}/07_role_aws_config.yaml",
            f"{_STANDALONE}/08_rolebinding_aws_config.yaml",
        ]
        cfg.cr_asset = f"{_STANDALONE}/generated/operator.openshift.io_v1_clustercsidriver_ebs.csi.aws.com.yaml"
        cfg.deployment_asset = f"{_STANDALONE}/generated/apps_v1_deployment_aws-ebs-csi-driver-operator.yaml"
    else:
        cfg.static_assets = [
            f"{_GUEST}/v1_serviceaccount_aws-ebs-csi-driver-operator.yaml",
            f"{_GUEST}/rbac.authorization.k8s.io_v1_role_aws-ebs-csi-driver-operator-role.yaml",
            f"{_GUEST}/rbac.authorization.k8s.io_v1_rolebinding_aws-ebs-csi-driver-operator-rolebinding.yaml",
            f"{_GUEST}/rbac.authorization.k8s.io_v1_clusterrole_aws-ebs-csi-driver-operator-clusterrole.yaml",
            f"{_GUEST}/rbac.authorization.k8s.io_v1_clusterrolebinding_aws-ebs-csi-driver-operator-clusterrolebinding.yaml",
        ]
        cfg.mgmt_static_assets = [
            f"{_MGMT}/rbac.authorization.k8s.io_v1_role_aws-ebs-csi-driver-operator-role.yaml",
            f"{_MGMT}/v1_serviceaccount_aws-ebs-csi-driver-operator.yaml",
            f"{_MGMT}/rbac.authorization.k8s.io_v1_rolebinding_aws-ebs-csi-driver-operator-rolebinding.yaml",
        ]
        cfg.deployment_asset = f"{_MGMT}/apps_v1_deployment_aws-ebs-csi-driver-operator.yaml"
        cfg.cr_asset = f"{_GUEST}/operator.openshift.io_v1_clustercsidriver_ebs.csi.aws.com.yaml"
    return cfg