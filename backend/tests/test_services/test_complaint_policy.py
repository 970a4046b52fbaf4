"""
Tests for complaint visibility and lifecycle rules.
"""

from datetime import datetime
from decimal import Decimal

import pytest

import repositories.db_models as db_models
from models.exceptions import (
    AcceptanceAlreadyDecidedException,
    DepartmentNotAcceptedException,
    InsufficientPermissionsException,
    InvalidTransitionException,
    ValidationException,
)
from services import complaint_policy

NOW = datetime(2026, 2, 1, 9, 30)

Acceptance = db_models.AcceptanceDecision
Status = db_models.ComplaintStatus
Cost = db_models.CostStatus


class TestVisibility:
    def test_citizen_sees_own_complaints_only(
        self, make_complaint, citizen, other_citizen, public_works
    ):
        complaint = make_complaint(citizen, public_works)

        assert complaint_policy.can_read(citizen, complaint)
        assert not complaint_policy.can_read(other_citizen, complaint)

    def test_staff_see_their_department(
        self, make_complaint, citizen, officer, department_head, env_officer, public_works
    ):
        complaint = make_complaint(citizen, public_works)

        assert complaint_policy.can_read(officer, complaint)
        assert complaint_policy.can_read(department_head, complaint)
        assert not complaint_policy.can_read(env_officer, complaint)

    def test_staff_without_department_see_nothing(
        self, make_complaint, user_factory, citizen
    ):
        loose = user_factory(
            "loose@example.com", "No Dept", role=db_models.UserRole.OFFICER
        )
        complaint = make_complaint(citizen, None)

        assert not complaint_policy.can_read(loose, complaint)

    def test_admin_sees_unrouted_complaints(self, make_complaint, citizen, admin_user):
        complaint = make_complaint(citizen, None)
        assert complaint_policy.can_read(admin_user, complaint)
        assert complaint_policy.can_manage(admin_user, complaint)

    def test_citizen_cannot_manage_own_complaint(
        self, make_complaint, citizen, public_works
    ):
        complaint = make_complaint(citizen, public_works)
        assert not complaint_policy.can_manage(citizen, complaint)


class TestRouting:
    def test_admin_reroute_resets_acceptance(
        self, accepted_complaint, admin_user, officer, environment_dept
    ):
        accepted_complaint.assigned_to = officer.id

        updates = complaint_policy.plan_update(
            admin_user, accepted_complaint, {"department_id": environment_dept.id}, NOW
        )

        assert updates == {
            "department_id": environment_dept.id,
            "acceptance": Acceptance.UNDECIDED,
            "accepted_at": None,
            "assigned_to": None,
        }

    def test_same_department_is_a_no_op(self, accepted_complaint, admin_user):
        updates = complaint_policy.plan_update(
            admin_user,
            accepted_complaint,
            {"department_id": accepted_complaint.department_id},
            NOW,
        )
        assert updates == {}

    def test_staff_cannot_reroute(self, accepted_complaint, officer, environment_dept):
        with pytest.raises(InsufficientPermissionsException, match="reroute"):
            complaint_policy.plan_update(
                officer, accepted_complaint, {"department_id": environment_dept.id}, NOW
            )

    def test_other_department_cannot_touch(self, accepted_complaint, env_officer):
        with pytest.raises(InsufficientPermissionsException):
            complaint_policy.plan_update(
                env_officer, accepted_complaint, {"priority": "high"}, NOW
            )


class TestAcceptance:
    def test_officer_accepts(self, make_complaint, citizen, officer, public_works):
        complaint = make_complaint(citizen, public_works)

        updates = complaint_policy.plan_update(
            officer, complaint, {"accepted_by_department": True}, NOW
        )
        assert updates == {"acceptance": Acceptance.ACCEPTED, "accepted_at": NOW}

    def test_head_rejects(self, make_complaint, citizen, department_head, public_works):
        complaint = make_complaint(citizen, public_works)

        updates = complaint_policy.plan_update(
            department_head, complaint, {"accepted_by_department": False}, NOW
        )
        assert updates["acceptance"] == Acceptance.REJECTED

    def test_decision_is_final(self, accepted_complaint, officer):
        with pytest.raises(AcceptanceAlreadyDecidedException):
            complaint_policy.plan_update(
                officer, accepted_complaint, {"accepted_by_department": False}, NOW
            )

    def test_admin_cannot_accept_for_department(
        self, make_complaint, citizen, admin_user, public_works
    ):
        complaint = make_complaint(citizen, public_works)
        with pytest.raises(InsufficientPermissionsException):
            complaint_policy.plan_update(
                admin_user, complaint, {"accepted_by_department": True}, NOW
            )

    def test_null_decision_is_rejected(
        self, make_complaint, citizen, officer, public_works
    ):
        complaint = make_complaint(citizen, public_works)
        with pytest.raises(ValidationException, match="cannot be null"):
            complaint_policy.plan_update(
                officer, complaint, {"accepted_by_department": None}, NOW
            )


class TestAssignment:
    def test_assign_department_officer(self, accepted_complaint, department_head, officer):
        updates = complaint_policy.plan_update(
            department_head,
            accepted_complaint,
            {"assigned_to": officer.id},
            NOW,
            assignee=officer,
        )
        assert updates == {"assigned_to": officer.id}

    def test_unassign(self, accepted_complaint, officer):
        updates = complaint_policy.plan_update(
            officer, accepted_complaint, {"assigned_to": None}, NOW
        )
        assert updates == {"assigned_to": None}

    def test_assignee_from_other_department(
        self, accepted_complaint, officer, env_officer
    ):
        with pytest.raises(ValidationException, match="Assignee"):
            complaint_policy.plan_update(
                officer,
                accepted_complaint,
                {"assigned_to": env_officer.id},
                NOW,
                assignee=env_officer,
            )

    def test_citizen_cannot_be_assigned(self, accepted_complaint, admin_user, citizen):
        with pytest.raises(ValidationException):
            complaint_policy.plan_update(
                admin_user,
                accepted_complaint,
                {"assigned_to": citizen.id},
                NOW,
                assignee=citizen,
            )

    def test_missing_assignee(self, accepted_complaint, admin_user):
        with pytest.raises(ValidationException):
            complaint_policy.plan_update(
                admin_user, accepted_complaint, {"assigned_to": 9999}, NOW
            )

    def test_reroute_and_assign_checks_new_department(
        self, accepted_complaint, admin_user, env_officer, environment_dept
    ):
        updates = complaint_policy.plan_update(
            admin_user,
            accepted_complaint,
            {"department_id": environment_dept.id, "assigned_to": env_officer.id},
            NOW,
            assignee=env_officer,
        )
        assert updates["department_id"] == environment_dept.id
        assert updates["assigned_to"] == env_officer.id


class TestStatus:
    def test_resolving_stamps_times(self, accepted_complaint, officer):
        updates = complaint_policy.plan_update(
            officer, accepted_complaint, {"status": Status.RESOLVED}, NOW
        )
        assert updates == {
            "status": Status.RESOLVED,
            "resolved_at": NOW,
            "completed_at": NOW,
        }

    def test_other_status_has_no_stamp(self, accepted_complaint, officer):
        updates = complaint_policy.plan_update(
            officer, accepted_complaint, {"status": Status.IN_PROGRESS}, NOW
        )
        assert updates == {"status": Status.IN_PROGRESS}

    def test_priority_cannot_be_null(self, accepted_complaint, officer):
        with pytest.raises(ValidationException):
            complaint_policy.plan_update(
                officer, accepted_complaint, {"priority": None}, NOW
            )


class TestCostEstimate:
    def test_submit(self, accepted_complaint, officer):
        updates = complaint_policy.plan_update(
            officer,
            accepted_complaint,
            {
                "cost_estimated_amount": Decimal("12500.00"),
                "cost_materials": "Asphalt, gravel",
                "cost_status": Cost.SUBMITTED,
            },
            NOW,
        )
        assert updates["cost_status"] == Cost.SUBMITTED
        assert updates["cost_submitted_at"] == NOW
        assert updates["cost_estimated_amount"] == Decimal("12500.00")

    def test_submit_requires_amount(self, accepted_complaint, officer):
        with pytest.raises(ValidationException, match="estimated amount"):
            complaint_policy.plan_update(
                officer, accepted_complaint, {"cost_status": Cost.SUBMITTED}, NOW
            )

    def test_submit_requires_acceptance(
        self, make_complaint, citizen, officer, public_works
    ):
        complaint = make_complaint(citizen, public_works)
        with pytest.raises(DepartmentNotAcceptedException):
            complaint_policy.plan_update(
                officer, complaint, {"cost_estimated_amount": Decimal("10")}, NOW
            )

    def test_cannot_edit_submitted_estimate(self, accepted_complaint, officer):
        accepted_complaint.cost_status = Cost.SUBMITTED
        with pytest.raises(InvalidTransitionException, match="already submitted"):
            complaint_policy.plan_update(
                officer, accepted_complaint, {"cost_labor": "Two crews"}, NOW
            )

    def test_resubmit_after_rejection(self, accepted_complaint, officer):
        accepted_complaint.cost_status = Cost.REJECTED
        accepted_complaint.cost_estimated_amount = Decimal("900")

        updates = complaint_policy.plan_update(
            officer, accepted_complaint, {"cost_status": Cost.SUBMITTED}, NOW
        )
        assert updates["cost_status"] == Cost.SUBMITTED

    def test_admin_cannot_submit(self, accepted_complaint, admin_user):
        with pytest.raises(InsufficientPermissionsException):
            complaint_policy.plan_update(
                admin_user,
                accepted_complaint,
                {"cost_estimated_amount": Decimal("10")},
                NOW,
            )

    @pytest.mark.parametrize("decision", [Cost.APPROVED, Cost.REJECTED])
    def test_admin_decides(self, accepted_complaint, admin_user, decision):
        accepted_complaint.cost_status = Cost.SUBMITTED

        updates = complaint_policy.plan_update(
            admin_user, accepted_complaint, {"cost_status": decision}, NOW
        )
        assert updates == {"cost_status": decision, "cost_approved_by": admin_user.id}

    def test_officer_cannot_approve(self, accepted_complaint, officer):
        accepted_complaint.cost_status = Cost.SUBMITTED
        with pytest.raises(InsufficientPermissionsException):
            complaint_policy.plan_update(
                officer, accepted_complaint, {"cost_status": Cost.APPROVED}, NOW
            )

    def test_cannot_approve_unsubmitted(self, accepted_complaint, admin_user):
        with pytest.raises(InvalidTransitionException):
            complaint_policy.plan_update(
                admin_user, accepted_complaint, {"cost_status": Cost.APPROVED}, NOW
            )

    def test_cannot_reset_to_pending(self, accepted_complaint, admin_user):
        with pytest.raises(ValidationException):
            complaint_policy.plan_update(
                admin_user, accepted_complaint, {"cost_status": Cost.PENDING}, NOW
            )


class TestCompletion:
    def test_record_completion(self, accepted_complaint, officer):
        updates = complaint_policy.plan_update(
            officer,
            accepted_complaint,
            {"completion_remarks": "Pothole filled and compacted"},
            NOW,
        )
        assert updates == {
            "completion_remarks": "Pothole filled and compacted",
            "completed_at": NOW,
        }

    def test_requires_acceptance(self, make_complaint, citizen, officer, public_works):
        complaint = make_complaint(citizen, public_works)
        with pytest.raises(DepartmentNotAcceptedException):
            complaint_policy.plan_update(
                officer, complaint, {"completion_remarks": "done"}, NOW
            )

    def test_not_after_resolution(self, accepted_complaint, officer):
        accepted_complaint.status = Status.RESOLVED
        with pytest.raises(InvalidTransitionException, match="already resolved"):
            complaint_policy.plan_update(
                officer, accepted_complaint, {"completion_remarks": "again"}, NOW
            )

    def test_failed_rule_returns_nothing_partial(self, accepted_complaint, officer):
        """A later rule failing leaves earlier changes unapplied."""
        accepted_complaint.status = Status.RESOLVED
        with pytest.raises(InvalidTransitionException):
            complaint_policy.plan_update(
                officer,
                accepted_complaint,
                {"priority": "urgent", "completion_remarks": "again"},
                NOW,
            )
        assert accepted_complaint.priority == db_models.PriorityLevel.MEDIUM
