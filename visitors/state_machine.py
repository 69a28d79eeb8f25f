"""
Visitor gate-pass lifecycle

    pending -> approved -> inside -> exited
    pending -> blocked

`exited` and `blocked` are terminal. Self-transitions and skipped states are
illegal. `check_in_time` is stamped when a visitor is approved; `inside` is
the guard's "physically on premises" marker and carries no timestamp.
"""
from datetime import datetime
from typing import Dict, Optional

from shared_utils.exceptions import InvalidTransition

VISITOR_STATUSES = ("pending", "approved", "inside", "exited", "blocked")
INITIAL_STATUS = "pending"

VISITOR_TRANSITIONS = {
    "pending": frozenset({"approved", "blocked"}),
    "approved": frozenset({"inside"}),
    "inside": frozenset({"exited"}),
    "exited": frozenset(),
    "blocked": frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in VISITOR_TRANSITIONS.get(current, frozenset())


def validate_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidTransition("visitor", current, target)


def transition_changes(
    current: str,
    target: str,
    actor_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Dict[str, object]:
    """
    Validate the edge and return the column values it sets.

    Raises:
        InvalidTransition: when current -> target is not a legal edge
    """
    validate_transition(current, target)
    now = now or datetime.utcnow()

    changes: Dict[str, object] = {"status": target}
    if current == "pending":
        changes["approved_by"] = actor_id
    if target == "approved":
        changes["check_in_time"] = now
    elif target == "exited":
        changes["check_out_time"] = now
    return changes


def apply_transition(visitor, target: str, actor_id: Optional[int] = None, now: Optional[datetime] = None) -> Dict[str, object]:
    """Apply a validated transition to a Visitor row in place; returns the changes"""
    changes = transition_changes(visitor.status, target, actor_id=actor_id, now=now)
    for field, value in changes.items():
        setattr(visitor, field, value)
    return changes
