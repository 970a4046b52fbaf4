"""
Unit tests for DepartmentService.
"""

import pytest

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    DepartmentAlreadyExistsException,
    DepartmentNotFoundException,
)
from services.department_service import DepartmentService


class TestCreateDepartment:
    def test_code_is_normalized(self, db_session):
        department = DepartmentService.create_department(
            db_session,
            schemas.DepartmentCreate(name=" Health ", code="hlth", description="Clinics"),
        )
        assert department.name == "Health"
        assert department.code == "HLTH"

    @pytest.mark.parametrize(
        "name,code", [("Public Works", "NEW"), ("Something New", "pwd")]
    )
    def test_name_or_code_taken(self, db_session, public_works, name, code):
        with pytest.raises(DepartmentAlreadyExistsException):
            DepartmentService.create_department(
                db_session, schemas.DepartmentCreate(name=name, code=code)
            )

    @pytest.mark.parametrize("name,code", [("   ", "NEW"), ("Health", "  ")])
    def test_blank_after_stripping(self, name, code):
        with pytest.raises(ValueError):
            schemas.DepartmentCreate(name=name, code=code)

    def test_update_blank_name(self):
        with pytest.raises(ValueError):
            schemas.DepartmentUpdate(name="  ")


class TestUpdateDepartment:
    def test_partial_update(self, db_session, public_works):
        department = DepartmentService.update_department(
            db_session, public_works.id, schemas.DepartmentUpdate(description=None)
        )
        assert department.description is None
        assert department.code == "PWD"

    def test_keeping_own_name_is_allowed(self, db_session, public_works):
        department = DepartmentService.update_department(
            db_session,
            public_works.id,
            schemas.DepartmentUpdate(name="Public Works", code="pwd"),
        )
        assert department.name == "Public Works"

    def test_conflict_with_other(self, db_session, public_works, environment_dept):
        with pytest.raises(DepartmentAlreadyExistsException):
            DepartmentService.update_department(
                db_session, environment_dept.id, schemas.DepartmentUpdate(code="PWD")
            )

    def test_missing(self, db_session):
        with pytest.raises(DepartmentNotFoundException):
            DepartmentService.update_department(
                db_session, 404, schemas.DepartmentUpdate(name="X")
            )


class TestDeleteDepartment:
    def test_detaches_complaints_and_staff(
        self, db_session, public_works, officer, accepted_complaint
    ):
        DepartmentService.delete_department(db_session, public_works.id)

        db_session.expire_all()
        assert db_session.get(db_models.Department, public_works.id) is None
        assert db_session.get(db_models.User, officer.id).department_id is None
        assert (
            db_session.get(db_models.Complaint, accepted_complaint.id).department_id
            is None
        )

    def test_missing(self, db_session):
        with pytest.raises(DepartmentNotFoundException):
            DepartmentService.delete_department(db_session, 404)
