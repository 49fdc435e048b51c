"""Operator conditions and the merging of a ClusterCSIDriver's conditions into CSO's own."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

import yaml

CSI_DRIVER_CONTROLLER_NAME = "CSIDriverOperator"
CSI_DRIVER_CONTROLLER_CONDITION_PREFIX = "CSIDriverOperatorCR"

TYPE_AVAILABLE = "Available"
TYPE_PROGRESSING = "Progressing"
TYPE_DEGRADED = "Degraded"
TYPE_UPGRADEABLE = "Upgradeable"

LOG_LEVEL_NORMAL = "Normal"
MANAGEMENT_STATE_MANAGED = "Managed"
CLUSTER_CSI_DRIVER_KIND = "ClusterCSIDriver"


class ConditionStatus(str, Enum):
    """Status of a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)


@dataclass
class OperatorCondition:
    """A single condition of an operator status."""

    type: str = ""
    status: ConditionStatus = ConditionStatus.UNKNOWN
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[datetime] = None


def _unique(lines: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(lines))


def _union_message(conditions: Sequence[OperatorCondition]) -> str:
    return "\n".join(
        f"{cnd.type}: {line}"
        for cnd in conditions
        if cnd.message
        for line in _unique(cnd.message.split("\n"))
    )


def _union_reason(condition_type: str, conditions: Sequence[OperatorCondition]) -> str:
    reasons = []
    for cnd in conditions:
        prefix = cnd.type[: len(cnd.type) - len(condition_type)]
        reasons.append(f"{prefix}_{cnd.reason}" if cnd.reason else prefix)
    return "::".join(sorted(reasons))


def _latest_transition(conditions: Sequence[OperatorCondition]) -> Optional[datetime]:
    times = [cnd.last_transition_time for cnd in conditions if cnd.last_transition_time is not None]
    return max(times, default=None)


def union_condition(
    condition_type: str,
    default_status: ConditionStatus,
    conditions: Iterable[OperatorCondition],
) -> OperatorCondition:
    """Merge all conditions whose type ends with ``condition_type`` into one.

    With no matching condition the result is Unknown with reason ``NoData``.
    If every match has ``default_status`` the result has it too; otherwise the
    result carries the opposite status (or Unknown) and the merged messages
    and reasons of the deviating conditions.
    """
    default_status = ConditionStatus(default_status)
    opposite = ConditionStatus.FALSE if default_status == ConditionStatus.TRUE else ConditionStatus.TRUE

    interesting = [cnd for cnd in conditions if cnd.type.endswith(condition_type)]
    if not interesting:
        return OperatorCondition(type=condition_type, status=ConditionStatus.UNKNOWN, reason="NoData")

    bad = [cnd for cnd in interesting if cnd.status != default_status]
    if not bad:
        return OperatorCondition(
            type=condition_type,
            status=default_status,
            reason="AsExpected",
            message=_union_message(interesting),
            last_transition_time=_latest_transition(interesting),
        )

    bad_status = opposite if any(cnd.status == opposite for cnd in bad) else ConditionStatus.UNKNOWN
    return OperatorCondition(
        type=condition_type,
        status=bad_status,
        reason=_union_reason(condition_type, bad),
        message=_union_message(bad),
        last_transition_time=_latest_transition(bad),
    )


def has_condition(conditions: Iterable[OperatorCondition], condition_type: str) -> bool:
    """Return True if any condition's type ends with ``condition_type``."""
    return any(cnd.type.endswith(condition_type) for cnd in conditions)


def has_disabled_condition(conditions: Iterable[OperatorCondition]) -> tuple[bool, str]:
    """Return whether a ``*Disabled`` condition exists, and its message."""
    for cnd in conditions:
        if cnd.type.endswith("Disabled"):
            return True, cnd.message
    return False, ""


@dataclass
class CSIDriverOperatorCR:
    """Installs a CSI driver operator's ClusterCSIDriver and mirrors its conditions.

    Produced conditions are prefixed with ``<name>CSIDriverOperatorCR``.
    """

    name: str
    csi_driver_name: str = ""
    cr_asset: str = ""
    allow_disabled: bool = False

    def controller_name(self) -> str:
        """Name of the controller."""
        return self.name + CSI_DRIVER_CONTROLLER_NAME

    def condition_name(self, cnd_type: str) -> str:
        """Name of a condition type produced by this controller."""
        return self.name + CSI_DRIVER_CONTROLLER_CONDITION_PREFIX + cnd_type

    def compute_conditions(
        self, conditions: Sequence[OperatorCondition]
    ) -> list[OperatorCondition]:
        """Derive the Available, Progressing, Degraded and Upgradeable conditions from the CR's."""
        disabled, disabled_msg = has_disabled_condition(conditions)
        driver_disabled = disabled and self.allow_disabled
        waiting_msg = f"Waiting for {self.name} operator to report status"

        if driver_disabled:
            available = OperatorCondition(
                status=ConditionStatus.TRUE,
                reason="DriverDisabled",
                message=f"CSI driver for {self.name} is disabled: {disabled_msg}",
            )
        else:
            available = union_condition(TYPE_AVAILABLE, ConditionStatus.TRUE, conditions)
            if available.status == ConditionStatus.UNKNOWN:
                available.status = ConditionStatus.FALSE
                available.reason = "WaitForOperator"
                available.message = waiting_msg
        available.type = self.condition_name(TYPE_AVAILABLE)

        progressing = union_condition(TYPE_PROGRESSING, ConditionStatus.FALSE, conditions)
        progressing.type = self.condition_name(TYPE_PROGRESSING)
        if progressing.status == ConditionStatus.UNKNOWN:
            if driver_disabled:
                progressing.status = ConditionStatus.FALSE
            else:
                progressing.status = ConditionStatus.TRUE
                progressing.reason = "WaitForOperator"
                progressing.message = waiting_msg

        degraded = union_condition(TYPE_DEGRADED, ConditionStatus.FALSE, conditions)
        degraded.type = self.condition_name(TYPE_DEGRADED)
        if degraded.status == ConditionStatus.UNKNOWN:
            degraded.status = ConditionStatus.FALSE

        upgradeable_type = self.condition_name(TYPE_UPGRADEABLE)
        if has_condition(conditions, TYPE_UPGRADEABLE):
            upgradeable = union_condition(TYPE_UPGRADEABLE, ConditionStatus.TRUE, conditions)
            upgradeable.type = upgradeable_type
        else:
            upgradeable = OperatorCondition(type=upgradeable_type, status=ConditionStatus.TRUE)

        return [available, progressing, degraded, upgradeable]

    def requested_cluster_csi_driver(
        self, log_level: str, read_asset: Callable[[str], bytes]
    ) -> dict[str, Any]:
        """Load the ClusterCSIDriver asset and set its log levels and management state."""
        level = log_level or LOG_LEVEL_NORMAL
        obj = yaml.safe_load(read_asset(self.cr_asset))
        if not isinstance(obj, dict) or obj.get("kind") != CLUSTER_CSI_DRIVER_KIND:
            raise ValueError(f"asset {self.cr_asset!r} is not a {CLUSTER_CSI_DRIVER_KIND}")
        spec = obj.get("spec")
        if not isinstance(spec, dict):
            spec = {}
            obj["spec"] = spec
        spec["logLevel"] = level
        spec["operatorLogLevel"] = level
        spec["managementState"] = MANAGEMENT_STATE_MANAGED
        return obj