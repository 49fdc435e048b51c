from storageoperator.config import PlatformType
from storageoperator.openstack import (
    get_openstack_cinder_csi_operator_config,
    get_openstack_manila_operator_config,
)


def test_cinder_standalone_assets():
    cfg = get_openstack_cinder_csi_operator_config(False, environ={})
    assert cfg.csi_driver_name == "cinder.csi.openstack.org"
    assert cfg.condition_prefix == "OpenStackCinder"
    assert cfg.platform is PlatformType.OPENSTACK
    assert cfg.allow_disabled is False
    assert cfg.static_assets[0] == (
        "csidriveroperators/openstack-cinder/standalone/generated/"
        "v1_serviceaccount_openstack-cinder-csi-driver-operator.yaml"
    )
    assert len(cfg.static_assets) == 5
    assert cfg.mgmt_static_assets == []
    assert cfg.cr_asset == (
        "csidriveroperators/openstack-cinder/standalone/generated/"
        "operator.openshift.io_v1_clustercsidriver_cinder.csi.openstack.org.yaml"
    )
    assert cfg.deployment_asset == (
        "csidriveroperators/openstack-cinder/standalone/generated/"
        "apps_v1_deployment_openstack-cinder-csi-driver-operator.yaml"
    )


def test_cinder_hypershift_assets():
    cfg = get_openstack_cinder_csi_operator_config(True, environ={})
    assert len(cfg.static_assets) == 5
    assert len(cfg.mgmt_static_assets) == 3
    assert all("/hypershift/guest/" in a for a in cfg.static_assets)
    assert all("/hypershift/mgmt/" in a for a in cfg.mgmt_static_assets)
    assert cfg.deployment_asset == (
        "csidriveroperators/openstack-cinder/hypershift/mgmt/generated/"
        "apps_v1_deployment_openstack-cinder-csi-driver-operator.yaml"
    )
    assert "/hypershift/guest/" in cfg.cr_asset


def test_cinder_image_replacer_uses_environ():
    env = {
        "OPENSTACK_CINDER_DRIVER_OPERATOR_IMAGE": "op-image",
        "OPENSTACK_CINDER_DRIVER_IMAGE": "drv-image",
    }
    cfg = get_openstack_cinder_csi_operator_config(False, environ=env)
    assert cfg.image_replacer.replace("${OPERATOR_IMAGE} ${DRIVER_IMAGE}") == "op-image drv-image"
    assert cfg.image_replacer.replace("${DRIVER_CONTROL_PLANE_IMAGE}") == ""


def test_manila_standalone_keeps_extra_controllers():
    marker = object()
    cfg = get_openstack_manila_operator_config(False, environ={}, extra_controllers=[marker])
    assert cfg.extra_controllers == [marker]
    assert cfg.csi_driver_name == "manila.csi.openstack.org"
    assert cfg.condition_prefix == "Manila"
    assert cfg.allow_disabled is True
    assert len(cfg.static_assets) == 6
    assert cfg.static_assets[0].endswith("v1_namespace_openshift-manila-csi-driver.yaml")
    assert cfg.cr_asset == (
        "csidriveroperators/openstack-manila/standalone/generated/"
        "default_operator.openshift.io_v1_clustercsidriver_manila.csi.openstack.org.yaml"
    )


def test_manila_hypershift_drops_extra_controllers():
    cfg = get_openstack_manila_operator_config(True, environ={}, extra_controllers=[object()])
    assert cfg.extra_controllers == []
    assert len(cfg.static_assets) == 3
    assert len(cfg.mgmt_static_assets) == 3
    assert cfg.deployment_asset == (
        "csidriveroperators/openstack-manila/hypershift/mgmt/generated/"
        "apps_v1_deployment_manila-csi-driver-operator.yaml"
    )


def test_manila_nfs_image_replaced():
    cfg = get_openstack_manila_operator_config(False, environ={"MANILA_NFS_DRIVER_IMAGE": "nfs-img"})
    assert cfg.image_replacer.replace("image: ${NFS_DRIVER_IMAGE}") == "image: nfs-img"