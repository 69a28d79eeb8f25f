"""
Tests for the visitor and complaint lifecycles.
"""
from datetime import datetime
from itertools import product
from types import SimpleNamespace

import pytest

from complaints import state_machine as complaint_sm
from shared_utils.exceptions import InvalidTransition, TransitionNotPermitted
from visitors import state_machine as visitor_sm

LEGAL_VISITOR_EDGES = {
    ("pending", "approved"),
    ("pending", "blocked"),
    ("approved", "inside"),
    ("inside", "exited"),
}

LEGAL_COMPLAINT_EDGES = {
    ("open", "in_progress"),
    ("open", "escalated"),
    ("in_progress", "resolved"),
    ("in_progress", "escalated"),
    ("escalated", "in_progress"),
    ("resolved", "closed"),
}


@pytest.mark.unit
class TestVisitorStateMachine:
    @pytest.mark.parametrize("current,target", sorted(product(visitor_sm.VISITOR_STATUSES, repeat=2)))
    def test_only_listed_edges_are_legal(self, current, target):
        assert visitor_sm.can_transition(current, target) == ((current, target) in LEGAL_VISITOR_EDGES)

    @pytest.mark.parametrize("terminal", ["exited", "blocked"])
    def test_terminal_states_have_no_exits(self, terminal):
        for target in visitor_sm.VISITOR_STATUSES:
            with pytest.raises(InvalidTransition):
                visitor_sm.validate_transition(terminal, target)

    def test_approval_stamps_check_in_and_approver(self):
        now = datetime(2024, 5, 1, 10, 30)
        visitor = SimpleNamespace(status="pending", approved_by=None, check_in_time=None, check_out_time=None)

        changes = visitor_sm.apply_transition(visitor, "approved", actor_id=7, now=now)

        assert visitor.status == "approved"
        assert visitor.approved_by == 7
        assert visitor.check_in_time == now
        assert visitor.check_out_time is None
        assert changes == {"status": "approved", "approved_by": 7, "check_in_time": now}

    def test_block_records_actor_without_check_in(self):
        visitor = SimpleNamespace(status="pending", approved_by=None, check_in_time=None, check_out_time=None)
        visitor_sm.apply_transition(visitor, "blocked", actor_id=3)
        assert visitor.status == "blocked"
        assert visitor.approved_by == 3
        assert visitor.check_in_time is None

    def test_exit_stamps_check_out(self):
        now = datetime(2024, 5, 1, 18, 0)
        visitor = SimpleNamespace(status="inside", approved_by=7, check_in_time=datetime(2024, 5, 1, 10, 30), check_out_time=None)
        visitor_sm.apply_transition(visitor, "exited", actor_id=9, now=now)
        assert visitor.check_out_time == now
        assert visitor.approved_by == 7

    def test_illegal_edge_leaves_row_untouched(self):
        visitor = SimpleNamespace(status="pending", approved_by=None, check_in_time=None, check_out_time=None)
        with pytest.raises(InvalidTransition) as exc:
            visitor_sm.apply_transition(visitor, "exited", actor_id=1)
        assert visitor.status == "pending"
        assert "pending -> exited" in str(exc.value)


@pytest.mark.unit
class TestComplaintStateMachine:
    @pytest.mark.parametrize("current,target", sorted(product(complaint_sm.COMPLAINT_STATUSES, repeat=2)))
    def test_only_listed_edges_are_legal(self, current, target):
        assert complaint_sm.can_transition(current, target) == ((current, target) in LEGAL_COMPLAINT_EDGES)

    @pytest.mark.parametrize("target,current", [("resolved", "in_progress"), ("escalated", "open")])
    def test_privileged_targets_need_admin(self, target, current):
        for role in ("resident", "guard", "auditor"):
            with pytest.raises(TransitionNotPermitted):
                complaint_sm.validate_transition(current, target, role)
        complaint_sm.validate_transition(current, target, "admin")

    def test_illegal_edge_checked_before_role(self):
        with pytest.raises(InvalidTransition):
            complaint_sm.validate_transition("closed", "resolved", "resident")

    def test_resolve_stamps_resolved_at(self):
        now = datetime(2024, 6, 2, 12, 0)
        complaint = SimpleNamespace(status="in_progress", resolved_at=None, escalation_level=0)
        complaint_sm.apply_transition(complaint, "resolved", role="admin", now=now)
        assert complaint.status == "resolved"
        assert complaint.resolved_at == now

    def test_escalation_increments_level(self):
        complaint = SimpleNamespace(status="open", resolved_at=None, escalation_level=0)
        complaint_sm.apply_transition(complaint, "escalated", role="admin")
        complaint_sm.apply_transition(complaint, "in_progress", role="admin")
        complaint_sm.apply_transition(complaint, "escalated", role="admin")
        assert complaint.escalation_level == 2
