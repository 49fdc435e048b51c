from storageoperator.config import (
    CSIOperatorConfig,
    Infrastructure,
    InfrastructureStatus,
    PlatformStatus,
    PlatformType,
)


def test_default_config_has_no_assets_or_filter():
    cfg = CSIOperatorConfig()
    assert cfg.static_assets == []
    assert cfg.mgmt_static_assets == []
    assert cfg.status_filter is None
    assert cfg.allow_disabled is False
    assert cfg.require_feature_gate == ""


def test_default_lists_are_not_shared():
    first = CSIOperatorConfig()
    second = CSIOperatorConfig()
    first.static_assets.append("a.yaml")
    first.extra_controllers.append(object())
    assert second.static_assets == []
    assert second.extra_controllers == []


def test_platform_type_parses_all_platforms():
    assert PlatformType("AllPlatforms") is PlatformType.ALL_PLATFORMS


def test_platform_type_round_trip():
    for platform in PlatformType:
        assert PlatformType(platform.value) is platform


def test_infrastructure_defaults():
    infra = Infrastructure()
    assert infra.name == "cluster"
    assert infra.status.platform_status is None


def test_infrastructure_holds_platform_status():
    status = InfrastructureStatus(platform_status=PlatformStatus(type=PlatformType.GCP))
    infra = Infrastructure(status=status)
    assert infra.status.platform_status.type is PlatformType.GCP
    assert infra.status.platform_status.azure is None