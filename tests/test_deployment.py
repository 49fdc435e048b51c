import pytest

from storageoperator.conditions import ConditionStatus
from storageoperator.deployment import (
    Deployment,
    DeploymentCondition,
    DeploymentHealthError,
    DeploymentStatus,
    check_deployment_health,
    deployment_controller_name,
    get_deployment_condition,
    is_progressing,
    progressing_condition,
)


def _healthy(replicas=2):
    return Deployment(
        name="aws-ebs-csi-driver-operator",
        namespace="openshift-cluster-csi-drivers",
        generation=3,
        replicas=replicas,
        status=DeploymentStatus(
            observed_generation=3,
            replicas=replicas,
            updated_replicas=replicas,
            available_replicas=replicas,
        ),
    )


def test_deployment_controller_name():
    assert deployment_controller_name("GCPPD") == "GCPPDCSIDriverOperatorDeployment"


def test_is_progressing_healthy():
    assert is_progressing(_healthy()) == (False, "")


def test_is_progressing_generation_mismatch():
    d = _healthy()
    d.generation = 4
    assert is_progressing(d) == (True, "Waiting for Deployment to act on changes")


def test_is_progressing_unavailable_replicas():
    d = _healthy()
    d.status.unavailable_replicas = 1
    assert is_progressing(d) == (True, "Waiting for Deployment to deploy pods")


def test_is_progressing_updated_replicas():
    d = _healthy()
    d.status.updated_replicas = 1
    assert is_progressing(d) == (True, "Waiting for Deployment to update pods")


def test_is_progressing_available_replicas():
    d = _healthy()
    d.status.available_replicas = 0
    assert is_progressing(d) == (True, "Waiting for Deployment to deploy pods")


def test_is_progressing_without_replicas_expects_zero():
    d = _healthy()
    d.replicas = None
    d.status.updated_replicas = 0
    d.status.available_replicas = 0
    assert is_progressing(d) == (False, "")


def test_progressing_condition():
    d = _healthy()
    d.generation = 5
    cnd = progressing_condition("AWSEBS", d)
    assert cnd.type == "AWSEBSProgressing"
    assert cnd.status == ConditionStatus.TRUE
    assert cnd.reason == "Deploying"
    assert cnd.message == "Waiting for Deployment to act on changes"
    done = progressing_condition("AWSEBS", _healthy())
    assert done.status == ConditionStatus.FALSE
    assert done.reason == ""


def test_get_deployment_condition():
    wanted = DeploymentCondition(type="Available", status="True")
    status = DeploymentStatus(conditions=[DeploymentCondition(type="Progressing", status="True"), wanted])
    assert get_deployment_condition("Available", status) is wanted
    assert get_deployment_condition("ReplicaFailure", status) is None


def test_check_health_ok():
    d = _healthy()
    d.status.conditions = [
        DeploymentCondition(type="Available", status="True"),
        DeploymentCondition(type="Progressing", status="True"),
    ]
    assert check_deployment_health(d) is None


def test_check_health_deadline_exceeded():
    d = _healthy()
    d.status.conditions = [
        DeploymentCondition(type="Progressing", status="False", reason="ProgressDeadlineExceeded", message="slow"),
    ]
    with pytest.raises(DeploymentHealthError, match="Progressing=False: ProgressDeadlineExceeded: slow"):
        check_deployment_health(d)


def test_check_health_replica_failure():
    d = _healthy()
    d.status.unavailable_replicas = 2
    d.status.conditions = [DeploymentCondition(type="ReplicaFailure", status="True")]
    with pytest.raises(DeploymentHealthError, match="has some pods failing"):
        check_deployment_health(d)


def test_check_health_not_available_not_progressing():
    d = _healthy()
    d.status.conditions = [
        DeploymentCondition(type="Available", status="False"),
        DeploymentCondition(type="Progressing", status="False", reason="Stalled"),
    ]
    with pytest.raises(DeploymentHealthError, match="not available and not progressing"):
        check_deployment_health(d)