"""
Complaint access and lifecycle policy.

Pure functions over loaded models: no database access. `scope_for` decides
which complaints a user may see; `plan_update` turns a PATCH request into
the exact field changes to apply, or raises before anything is changed.

Who may do what:

- Admins see everything, reroute complaints and decide cost estimates.
- Officers and department heads see and work complaints routed to their own
  department: accept or reject them, assign, change status and priority,
  submit cost estimates and record completion.
- Citizens see the complaints they filed and cannot change them.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

import repositories.db_models as db_models
from models.exceptions import (
    AcceptanceAlreadyDecidedException,
    DepartmentNotAcceptedException,
    InsufficientPermissionsException,
    InvalidTransitionException,
    ValidationException,
)
from repositories.complaint_repository import ComplaintScope

AcceptanceDecision = db_models.AcceptanceDecision
ComplaintStatus = db_models.ComplaintStatus
CostStatus = db_models.CostStatus

COST_DETAIL_FIELDS = ("cost_estimated_amount", "cost_materials", "cost_labor")

# Statuses after which completion can no longer be recorded
CLOSED_OUT_STATUSES = frozenset({ComplaintStatus.RESOLVED, ComplaintStatus.REJECTED})

# Cost states from which an estimate may be (re)submitted
SUBMITTABLE_COST_STATUSES = frozenset({CostStatus.PENDING, CostStatus.REJECTED})


def scope_for(user: db_models.User) -> ComplaintScope:
    """Map a user's role and department to the complaints they may see."""
    if user.role == db_models.UserRole.ADMIN:
        return ComplaintScope.everything()
    if user.role in db_models.STAFF_ROLES:
        if user.department_id is None:
            return ComplaintScope.nothing()
        return ComplaintScope.routed_to(user.department_id)
    return ComplaintScope.reported_by(user.id)


def can_read(user: db_models.User, complaint: db_models.Complaint) -> bool:
    return scope_for(user).matches(complaint)


def is_department_staff(
    user: db_models.User, complaint: db_models.Complaint
) -> bool:
    """Officer or head of the department the complaint is routed to."""
    return (
        user.role in db_models.STAFF_ROLES
        and user.department_id is not None
        and user.department_id == complaint.department_id
    )


def can_manage(user: db_models.User, complaint: db_models.Complaint) -> bool:
    """Admins, and staff of the complaint's department, may work a complaint."""
    return user.role == db_models.UserRole.ADMIN or is_department_staff(
        user, complaint
    )


def _require(changes: Mapping[str, Any], field: str) -> Any:
    value = changes[field]
    if value is None:
        raise ValidationException(f"{field} cannot be null")
    return value


def plan_update(
    actor: db_models.User,
    complaint: db_models.Complaint,
    changes: Mapping[str, Any],
    now: datetime,
    assignee: Optional[db_models.User] = None,
) -> Dict[str, Any]:
    """
    Validate a lifecycle update and compute the resulting field changes.

    Every rule is checked before the returned mapping is built, so a rejected
    request leaves the complaint untouched.

    Args:
        actor: The user making the request
        complaint: The complaint as currently stored
        changes: Fields present in the request body
        now: Timestamp stamped by this update
        assignee: The user named by `assigned_to`, already loaded

    Returns:
        Mapping of complaint attribute name to new value

    Raises:
        InsufficientPermissionsException: Actor may not make this change
        ValidationException: A value is malformed or inconsistent
        InvalidTransitionException: A lifecycle precondition does not hold
    """
    if not can_manage(actor, complaint):
        raise InsufficientPermissionsException(
            "You are not allowed to update this complaint"
        )

    is_admin = actor.role == db_models.UserRole.ADMIN
    is_staff = is_department_staff(actor, complaint)
    updates: Dict[str, Any] = {}

    department_id = complaint.department_id
    acceptance = complaint.acceptance

    # Routing
    if "department_id" in changes:
        if not is_admin:
            raise InsufficientPermissionsException(
                "Only administrators can reroute complaints"
            )
        new_department_id = changes["department_id"]
        if new_department_id != complaint.department_id:
            department_id = new_department_id
            acceptance = AcceptanceDecision.UNDECIDED
            updates.update(
                department_id=new_department_id,
                acceptance=AcceptanceDecision.UNDECIDED,
                accepted_at=None,
                assigned_to=None,
            )

    # Department acceptance
    if "accepted_by_department" in changes:
        accepted = _require(changes, "accepted_by_department")
        if not is_staff:
            raise InsufficientPermissionsException(
                "Only staff of the assigned department can accept or reject a complaint"
            )
        if acceptance != AcceptanceDecision.UNDECIDED:
            raise AcceptanceAlreadyDecidedException()
        acceptance = (
            AcceptanceDecision.ACCEPTED if accepted else AcceptanceDecision.REJECTED
        )
        updates.update(acceptance=acceptance, accepted_at=now)

    if "priority" in changes:
        updates["priority"] = _require(changes, "priority")

    if "assigned_to" in changes:
        assignee_id = changes["assigned_to"]
        if assignee_id is not None:
            if (
                assignee is None
                or assignee.id != assignee_id
                or assignee.role not in db_models.STAFF_ROLES
                or department_id is None
                or assignee.department_id != department_id
            ):
                raise ValidationException(
                    "Assignee must be an officer or department head of the "
                    "complaint's department"
                )
        updates["assigned_to"] = assignee_id

    if "status" in changes:
        status = _require(changes, "status")
        updates["status"] = status
        if status == ComplaintStatus.RESOLVED:
            updates.update(resolved_at=now, completed_at=now)

    # Cost estimate
    cost_status = changes.get("cost_status") if "cost_status" in changes else None
    if "cost_status" in changes:
        _require(changes, "cost_status")
        if cost_status == CostStatus.PENDING:
            raise ValidationException("cost_status cannot be set back to pending")

    detail_fields = [field for field in COST_DETAIL_FIELDS if field in changes]
    if detail_fields or cost_status == CostStatus.SUBMITTED:
        if not is_staff:
            raise InsufficientPermissionsException(
                "Only staff of the assigned department can submit cost estimates"
            )
        if acceptance != AcceptanceDecision.ACCEPTED:
            raise DepartmentNotAcceptedException("submit a cost estimate")
        if complaint.cost_status not in SUBMITTABLE_COST_STATUSES:
            raise InvalidTransitionException(
                f"Cost estimate is already {complaint.cost_status.value}"
            )
        for field in detail_fields:
            updates[field] = changes[field]
        if cost_status == CostStatus.SUBMITTED:
            amount = changes.get(
                "cost_estimated_amount", complaint.cost_estimated_amount
            )
            if amount is None:
                raise ValidationException(
                    "An estimated amount is required to submit a cost estimate"
                )
            updates.update(cost_status=CostStatus.SUBMITTED, cost_submitted_at=now)

    if cost_status in (CostStatus.APPROVED, CostStatus.REJECTED):
        if not is_admin:
            raise InsufficientPermissionsException(
                "Only administrators can approve or reject cost estimates"
            )
        if complaint.cost_status != CostStatus.SUBMITTED:
            raise InvalidTransitionException(
                "Only a submitted cost estimate can be approved or rejected"
            )
        updates.update(cost_status=cost_status, cost_approved_by=actor.id)

    # Completion
    if "completion_remarks" in changes:
        if not is_staff:
            raise InsufficientPermissionsException(
                "Only staff of the assigned department can record completion"
            )
        if acceptance != AcceptanceDecision.ACCEPTED:
            raise DepartmentNotAcceptedException("mark the complaint complete")
        if complaint.status in CLOSED_OUT_STATUSES:
            raise InvalidTransitionException(
                f"Complaint is already {complaint.status.value}"
            )
        updates.update(completion_remarks=changes["completion_remarks"], completed_at=now)

    return updates
