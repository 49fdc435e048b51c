"""Deployment health checks for CSI driver operator Deployments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .conditions import TYPE_PROGRESSING, ConditionStatus, OperatorCondition

DEPLOYMENT_CONTROLLER_NAME = "CSIDriverOperatorDeployment"

DEPLOYMENT_AVAILABLE = "Available"
DEPLOYMENT_PROGRESSING = "Progressing"
DEPLOYMENT_REPLICA_FAILURE = "ReplicaFailure"


class DeploymentHealthError(Exception):
    """A Deployment is in a state that should degrade the operator."""


@dataclass
class DeploymentCondition:
    """A condition of a Deployment's status."""

    type: str
    status: str
    reason: str = ""
    message: str = ""


@dataclass
class DeploymentStatus:
    """Observed state of a Deployment."""

    observed_generation: int = 0
    replicas: int = 0
    updated_replicas: int = 0
    available_replicas: int = 0
    unavailable_replicas: int = 0
    conditions: list[DeploymentCondition] = field(default_factory=list)


@dataclass
class Deployment:
    """The parts of a Deployment the operator reasons about."""

    name: str
    namespace: str = ""
    generation: int = 0
    replicas: Optional[int] = None
    status: DeploymentStatus = field(default_factory=DeploymentStatus)


def deployment_controller_name(condition_prefix: str) -> str:
    """Name of the deployment controller of one CSI driver operator."""
    return condition_prefix + DEPLOYMENT_CONTROLLER_NAME


def get_deployment_condition(
    cond_type: str, status: DeploymentStatus
) -> Optional[DeploymentCondition]:
    """Return the first condition of the given type, or None."""
    return next((cnd for cnd in status.conditions if cnd.type == cond_type), None)


def is_progressing(deployment: Deployment) -> tuple[bool, str]:
    """Return whether the Deployment is still rolling out, and why."""
    expected = deployment.replicas or 0
    status = deployment.status
    if deployment.generation != status.observed_generation:
        return True, "Waiting for Deployment to act on changes"
    if status.unavailable_replicas > 0:
        return True, "Waiting for Deployment to deploy pods"
    if status.updated_replicas < expected:
        return True, "Waiting for Deployment to update pods"
    if status.available_replicas < expected:
        return True, "Waiting for Deployment to deploy pods"
    return False, ""


def progressing_condition(name: str, deployment: Deployment) -> OperatorCondition:
    """Build the ``<name>Progressing`` operator condition for the Deployment."""
    condition = OperatorCondition(type=name + TYPE_PROGRESSING, status=ConditionStatus.FALSE)
    progressing, message = is_progressing(deployment)
    if progressing:
        condition.status = ConditionStatus.TRUE
        condition.message = message
        condition.reason = "Deploying"
    return condition


def check_deployment_health(deployment: Deployment) -> None:
    """Raise DeploymentHealthError if the Deployment is stuck or failing."""
    status = deployment.status
    name = f"{deployment.namespace}/{deployment.name}"

    progressing = get_deployment_condition(DEPLOYMENT_PROGRESSING, status)
    if (
        progressing is not None
        and progressing.status == ConditionStatus.FALSE.value
        and progressing.reason == "ProgressDeadlineExceeded"
    ):
        raise DeploymentHealthError(
            f"deployment {name} is {progressing.type}={progressing.status}: "
            f"{progressing.reason}: {progressing.message}"
        )

    replica_failure = get_deployment_condition(DEPLOYMENT_REPLICA_FAILURE, status)
    if replica_failure is not None and replica_failure.status == ConditionStatus.TRUE.value:
        raise DeploymentHealthError(
            f"deployment {name} has some pods failing; "
            f"unavailable replicas={status.unavailable_replicas}"
        )

    available = get_deployment_condition(DEPLOYMENT_AVAILABLE, status)
    if (
        available is not None
        and available.status == ConditionStatus.FALSE.value
        and progressing is not None
        and progressing.status == ConditionStatus.FALSE.value
    ):
        raise DeploymentHealthError(
            f"deployment {name} is not available and not progressing; "
            f"updated replicas={status.updated_replicas} of {status.replicas}, "
            f"available replicas={status.available_replicas} of {status.replicas}"
        )