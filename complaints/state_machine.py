"""
Complaint lifecycle

    open -> in_progress -> resolved -> closed
    open | in_progress -> escalated -> in_progress

Only administrators may move a complaint into `resolved` or `escalated`.
"""
from datetime import datetime
from typing import Dict, Optional

from shared_utils.exceptions import InvalidTransition, TransitionNotPermitted

COMPLAINT_STATUSES = ("open", "in_progress", "resolved", "escalated", "closed")
INITIAL_STATUS = "open"

COMPLAINT_TRANSITIONS = {
    "open": frozenset({"in_progress", "escalated"}),
    "in_progress": frozenset({"resolved", "escalated"}),
    "escalated": frozenset({"in_progress"}),
    "resolved": frozenset({"closed"}),
    "closed": frozenset(),
}

PRIVILEGED_TARGETS = {"resolved": {"admin"}, "escalated": {"admin"}}


def can_transition(current: str, target: str) -> bool:
    return target in COMPLAINT_TRANSITIONS.get(current, frozenset())


def validate_transition(current: str, target: str, role: str) -> None:
    if not can_transition(current, target):
        raise InvalidTransition("complaint", current, target)
    allowed_roles = PRIVILEGED_TARGETS.get(target)
    if allowed_roles is not None and role not in allowed_roles:
        raise TransitionNotPermitted("complaint", target, role)


def apply_transition(complaint, target: str, role: str, now: Optional[datetime] = None) -> Dict[str, object]:
    """Validate and apply a status change to a Complaint row; returns the changes"""
    validate_transition(complaint.status, target, role)
    now = now or datetime.utcnow()

    changes: Dict[str, object] = {"status": target}
    if target == "resolved":
        changes["resolved_at"] = now
    elif target == "escalated":
        changes["escalation_level"] = (complaint.escalation_level or 0) + 1

    for field, value in changes.items():
        setattr(complaint, field, value)
    return changes
