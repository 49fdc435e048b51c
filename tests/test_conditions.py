import pytest

from storageoperator.conditions import (
    ConditionStatus,
    CSIDriverOperatorCR,
    OperatorCondition,
    has_condition,
    has_disabled_condition,
    union_condition,
)

CR_YAML = b"""
apiVersion: operator.openshift.io/v1
kind: ClusterCSIDriver
metadata:
  name: ebs.csi.aws.com
spec:
  managementState: Unmanaged
"""


def test_controller_name():
    cr = CSIDriverOperatorCR(name="AWSEBS")
    assert cr.controller_name() == "AWSEBSCSIDriverOperator"


def test_condition_name_prefix_and_suffix():
    cr = CSIDriverOperatorCR(name="Manila")
    name = cr.condition_name("Available")
    assert name.startswith("Manila")
    assert name.endswith("Available")
    assert "CSIDriverOperatorCR" in name


def test_union_no_data():
    result = union_condition("Available", ConditionStatus.TRUE, [])
    assert result.status == ConditionStatus.UNKNOWN
    assert result.reason == "NoData"
    assert result.type == "Available"


def test_union_all_as_expected():
    conditions = [
        OperatorCondition(type="FooAvailable", status=ConditionStatus.TRUE),
        OperatorCondition(type="BarAvailable", status=ConditionStatus.TRUE),
        OperatorCondition(type="BarDegraded", status=ConditionStatus.TRUE),
    ]
    result = union_condition("Available", ConditionStatus.TRUE, conditions)
    assert result.status == ConditionStatus.TRUE
    assert result.reason == "AsExpected"


def test_union_bad_condition():
    conditions = [
        OperatorCondition(type="FooDegraded", status=ConditionStatus.TRUE, reason="Broken", message="bad"),
        OperatorCondition(type="BarDegraded", status=ConditionStatus.FALSE),
    ]
    result = union_condition("Degraded", ConditionStatus.FALSE, conditions)
    assert result.status == ConditionStatus.TRUE
    assert result.reason == "Foo_Broken"
    assert result.message == "FooDegraded: bad"


def test_union_unknown_only_bad_is_unknown():
    conditions = [OperatorCondition(type="FooProgressing", status=ConditionStatus.UNKNOWN)]
    result = union_condition("Progressing", ConditionStatus.FALSE, conditions)
    assert result.status == ConditionStatus.UNKNOWN


def test_has_condition_and_disabled():
    conditions = [
        OperatorCondition(type="FooUpgradeable", status=ConditionStatus.TRUE),
        OperatorCondition(type="DriverDisabled", status=ConditionStatus.TRUE, message="no service"),
    ]
    assert has_condition(conditions, "Upgradeable")
    assert not has_condition(conditions, "Degraded")
    assert has_disabled_condition(conditions) == (True, "no service")
    assert has_disabled_condition(conditions[:1]) == (False, "")


def test_compute_conditions_waiting_for_operator():
    cr = CSIDriverOperatorCR(name="AWSEBS")
    available, progressing, degraded, upgradeable = cr.compute_conditions([])
    assert available.type == cr.condition_name("Available")
    assert available.status == ConditionStatus.FALSE
    assert available.reason == "WaitForOperator"
    assert progressing.status == ConditionStatus.TRUE
    assert progressing.reason == "WaitForOperator"
    assert degraded.status == ConditionStatus.FALSE
    assert degraded.type == cr.condition_name("Degraded")
    assert upgradeable.status == ConditionStatus.TRUE
    assert upgradeable.type == cr.condition_name("Upgradeable")


def test_compute_conditions_disabled_allowed():
    cr = CSIDriverOperatorCR(name="Manila", allow_disabled=True)
    conditions = [OperatorCondition(type="ManilaDisabled", status=ConditionStatus.TRUE, message="no shares")]
    available, progressing, _, _ = cr.compute_conditions(conditions)
    assert available.status == ConditionStatus.TRUE
    assert available.reason == "DriverDisabled"
    assert "no shares" in available.message
    assert progressing.status == ConditionStatus.FALSE


def test_compute_conditions_disabled_not_allowed():
    cr = CSIDriverOperatorCR(name="AWSEBS", allow_disabled=False)
    conditions = [OperatorCondition(type="AWSEBSDisabled", status=ConditionStatus.TRUE)]
    available, progressing, _, _ = cr.compute_conditions(conditions)
    assert available.reason == "WaitForOperator"
    assert progressing.status == ConditionStatus.TRUE


def test_compute_conditions_copies_from_cr():
    cr = CSIDriverOperatorCR(name="GCPPD")
    conditions = [
        OperatorCondition(type="DriverAvailable", status=ConditionStatus.TRUE),
        OperatorCondition(type="DriverProgressing", status=ConditionStatus.FALSE),
        OperatorCondition(type="DriverDegraded", status=ConditionStatus.TRUE, reason="Oops"),
        OperatorCondition(type="DriverUpgradeable", status=ConditionStatus.FALSE, reason="Old"),
    ]
    available, progressing, degraded, upgradeable = cr.compute_conditions(conditions)
    assert available.status == ConditionStatus.TRUE
    assert progressing.status == ConditionStatus.FALSE
    assert degraded.status == ConditionStatus.TRUE
    assert upgradeable.status == ConditionStatus.FALSE
    assert upgradeable.type == cr.condition_name("Upgradeable")


@pytest.mark.parametrize("level,expected", [("", "Normal"), ("Debug", "Debug")])
def test_requested_cluster_csi_driver(level, expected):
    cr = CSIDriverOperatorCR(name="AWSEBS", cr_asset="cr.yaml")
    obj = cr.requested_cluster_csi_driver(level, lambda name: CR_YAML)
    assert obj["metadata"]["name"] == "ebs.csi.aws.com"
    assert obj["spec"]["logLevel"] == expected
    assert obj["spec"]["operatorLogLevel"] == expected
    assert obj["spec"]["managementState"] == "Managed"


def test_requested_cluster_csi_driver_wrong_kind():
    cr = CSIDriverOperatorCR(name="AWSEBS", cr_asset="cr.yaml")
    with pytest.raises(ValueError):
        cr.requested_cluster_csi_driver("", lambda name: b"kind: Deployment\n")