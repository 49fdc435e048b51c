from storageoperator.config import PlatformType
from storageoperator.gcp import get_gcp_pd_csi_operator_config


def test_gcp_pd_config():
    cfg = get_gcp_pd_csi_operator_config(environ={})
    assert cfg.csi_driver_name == "pd.csi.storage.gke.io"
    assert cfg.condition_prefix == "GCPPD"
    assert cfg.platform is PlatformType.GCP
    assert cfg.static_assets == [
        "csidriveroperators/gcp-pd/02_sa.yaml",
        "csidriveroperators/gcp-pd/03_role.yaml",
        "csidriveroperators/gcp-pd/04_rolebinding.yaml",
        "csidriveroperators/gcp-pd/05_clusterrole.yaml",
        "csidriveroperators/gcp-pd/06_clusterrolebinding.yaml",
    ]
    assert cfg.cr_asset == "csidriveroperators/gcp-pd/08_cr.yaml"
    assert cfg.deployment_asset == "csidriveroperators/gcp-pd/07_deployment.yaml"
    assert cfg.allow_disabled is False
    assert cfg.mgmt_static_assets == []


def test_gcp_pd_images():
    env = {
        "GCP_PD_DRIVER_OPERATOR_IMAGE": "gcp-op",
        "GCP_PD_DRIVER_IMAGE": "gcp-drv",
        "OPERATOR_IMAGE_VERSION": "4.99",
    }
    cfg = get_gcp_pd_csi_operator_config(environ=env)
    text = "${OPERATOR_IMAGE} ${DRIVER_IMAGE} ${OPERATOR_IMAGE_VERSION}"
    assert cfg.image_replacer.replace(text) == "gcp-op gcp-drv 4.99"


def test_gcp_pd_missing_env_becomes_empty():
    cfg = get_gcp_pd_csi_operator_config(environ={})
    assert cfg.image_replacer.replace("img=${DRIVER_IMAGE}") == "img="