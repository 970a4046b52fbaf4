"""
Complaint Service

Filing, reading, lifecycle updates, attachments and deletion of complaints.
Authorization decisions come from `services.complaint_policy`; this module
sequences them with persistence so each operation commits exactly once.
"""

from typing import List, Optional, Sequence

from fastapi import UploadFile
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.time_utils import utc_now
from models.exceptions import (
    ComplaintNotFoundException,
    InsufficientPermissionsException,
    ValidationException,
)
from repositories.complaint_repository import ComplaintRepository
from repositories.department_repository import DepartmentRepository
from repositories.location_repository import (
    AreaRepository,
    WardRepository,
    ZoneRepository,
)
from repositories.user_repository import UserRepository
from services import complaint_policy
from services.upload_service import UploadService


def format_complaint_number(year: int, seq: int) -> str:
    """Human-readable complaint number, e.g. CMP-2024-00042."""
    return f"CMP-{year:04d}-{seq:05d}"


def _name(entity: object | None, attribute: str = "name") -> Optional[str]:
    return getattr(entity, attribute) if entity is not None else None


class ComplaintService:
    """Service for the complaint aggregate."""

    @staticmethod
    def to_schema(complaint: db_models.Complaint) -> schemas.Complaint:
        """Flatten a loaded complaint and its references into the API shape."""
        data = {
            column.key: getattr(complaint, column.key)
            for column in db_models.Complaint.__table__.columns
            if column.key != "acceptance"
        }
        data.update(
            department_name=_name(complaint.department),
            zone_name=_name(complaint.zone),
            ward_name=_name(complaint.ward),
            area_name=_name(complaint.area),
            reporter_name=_name(complaint.reporter, "full_name"),
            assignee_name=_name(complaint.assignee, "full_name"),
            accepted_by_department=complaint.accepted_by_department,
            images=[
                schemas.ComplaintImage.model_validate(image)
                for image in complaint.images
            ],
        )
        return schemas.Complaint.model_validate(data)

    @staticmethod
    def get_complaint_or_404(db: Session, complaint_id: int) -> db_models.Complaint:
        complaint = ComplaintRepository(db).get_with_details(complaint_id)
        if complaint is None:
            raise ComplaintNotFoundException(complaint_id)
        return complaint

    @staticmethod
    def get_readable_complaint(
        db: Session, user: db_models.User, complaint_id: int
    ) -> db_models.Complaint:
        """
        Load a complaint the user is allowed to read.

        Raises:
            ComplaintNotFoundException: If it does not exist
            InsufficientPermissionsException: If it is outside the user's scope
        """
        complaint = ComplaintService.get_complaint_or_404(db, complaint_id)
        if not complaint_policy.can_read(user, complaint):
            raise InsufficientPermissionsException(
                "You are not allowed to view this complaint"
            )
        return complaint

    @staticmethod
    def list_complaints(
        db: Session,
        user: db_models.User,
        sort: schemas.ComplaintSortOrder = schemas.ComplaintSortOrder.DATE,
        status: Optional[db_models.ComplaintStatus] = None,
        category: Optional[str] = None,
    ) -> List[schemas.Complaint]:
        """
        List the complaints visible to a user.

        Args:
            db: Database session
            user: Requesting user
            sort: Sort order
            status: Optional status filter
            category: Optional category filter

        Returns:
            Complaints in API shape
        """
        complaints = ComplaintRepository(db).list_complaints(
            complaint_policy.scope_for(user), sort=sort, status=status, category=category
        )
        return [ComplaintService.to_schema(c) for c in complaints]

    @staticmethod
    def get_complaint(
        db: Session, user: db_models.User, complaint_id: int
    ) -> schemas.Complaint:
        complaint = ComplaintService.get_readable_complaint(db, user, complaint_id)
        return ComplaintService.to_schema(complaint)

    @staticmethod
    def _validate_references(db: Session, data: schemas.ComplaintCreate) -> None:
        """
        Check that referenced taxonomy rows exist and nest consistently.

        Raises:
            ValidationException: On an unknown id or a ward/area outside its parent
        """
        if data.department_id is not None and not DepartmentRepository(db).exists(
            data.department_id
        ):
            raise ValidationException(f"Department {data.department_id} does not exist")

        if data.zone_id is not None and not ZoneRepository(db).exists(data.zone_id):
            raise ValidationException(f"Zone {data.zone_id} does not exist")

        ward = None
        if data.ward_id is not None:
            ward = WardRepository(db).get_by_id(data.ward_id)
            if ward is None:
                raise ValidationException(f"Ward {data.ward_id} does not exist")
            if data.zone_id is not None and ward.zone_id != data.zone_id:
                raise ValidationException(
                    f"Ward {data.ward_id} does not belong to zone {data.zone_id}"
                )

        if data.area_id is not None:
            area = AreaRepository(db).get_by_id(data.area_id)
            if area is None:
                raise ValidationException(f"Area {data.area_id} does not exist")
            if ward is not None and area.ward_id != ward.id:
                raise ValidationException(
                    f"Area {data.area_id} does not belong to ward {data.ward_id}"
                )

    @staticmethod
    def _captions_for(
        count: int, captions: Optional[Sequence[str]]
    ) -> List[Optional[str]]:
        captions = list(captions or [])
        if len(captions) > count:
            raise ValidationException("More captions than images were provided")
        captions.extend([""] * (count - len(captions)))
        return [caption.strip() or None for caption in captions]

    @staticmethod
    def create_complaint(
        db: Session,
        user: db_models.User,
        data: schemas.ComplaintCreate,
        files: Optional[Sequence[UploadFile]] = None,
        captions: Optional[Sequence[str]] = None,
    ) -> schemas.Complaint:
        """
        File a new complaint, optionally with photos.

        Numbering, the complaint row and its image rows commit together. Images
        are validated before anything is written and removed again if the
        database write fails.

        Args:
            db: Database session
            user: Reporter
            data: Complaint fields
            files: Uploaded images (stored with phase "general")
            captions: Optional captions, aligned with `files`

        Returns:
            The created complaint

        Raises:
            ValidationException: Bad references, too many or invalid images
        """
        ComplaintService._validate_references(db, data)

        uploads = UploadService.present_files(files)
        images = UploadService.validate_images(uploads)
        image_captions = ComplaintService._captions_for(len(images), captions)

        urls = UploadService.store_all(images)
        repo = ComplaintRepository(db)
        now = utc_now()
        try:
            seq = repo.next_sequence()
            complaint = db_models.Complaint(
                complaint_number=format_complaint_number(now.year, seq),
                user_id=user.id,
                title=data.title,
                description=data.description,
                category=data.category,
                address=data.address or None,
                department_id=data.department_id,
                zone_id=data.zone_id,
                ward_id=data.ward_id,
                area_id=data.area_id,
                latitude=data.latitude,
                longitude=data.longitude,
                status=db_models.ComplaintStatus.PENDING,
                priority=db_models.PriorityLevel.MEDIUM,
                created_at=now,
                updated_at=now,
            )
            complaint.images = [
                db_models.ComplaintImage(
                    url=url, caption=caption, phase=db_models.ImagePhase.GENERAL
                )
                for url, caption in zip(urls, image_captions)
            ]
            repo.add(complaint)
            repo.commit()
        except SQLAlchemyError:
            repo.rollback()
            UploadService.discard(urls)
            raise

        logger.info(
            f"Complaint {complaint.complaint_number} filed by user {user.id} "
            f"with {len(urls)} image(s)"
        )
        return ComplaintService.to_schema(
            ComplaintService.get_complaint_or_404(db, complaint.id)
        )

    @staticmethod
    def update_complaint(
        db: Session,
        user: db_models.User,
        complaint_id: int,
        update: schemas.ComplaintUpdate,
    ) -> schemas.Complaint:
        """
        Apply lifecycle changes to a complaint.

        Args:
            db: Database session
            user: Acting user
            complaint_id: Complaint ID
            update: Fields present in the request

        Returns:
            The updated complaint

        Raises:
            ComplaintNotFoundException: If the complaint does not exist
            InsufficientPermissionsException: If the user may not make a change
            ValidationException: On a bad value or reference
            InvalidTransitionException: If a lifecycle precondition fails
        """
        repo = ComplaintRepository(db)
        complaint = ComplaintService.get_complaint_or_404(db, complaint_id)
        changes = update.model_dump(exclude_unset=True)

        new_department_id = changes.get("department_id")
        if new_department_id is not None and not DepartmentRepository(db).exists(
            new_department_id
        ):
            raise ValidationException(f"Department {new_department_id} does not exist")

        assignee = None
        if changes.get("assigned_to") is not None:
            assignee = UserRepository(db).get_by_id(changes["assigned_to"])

        planned = complaint_policy.plan_update(
            user, complaint, changes, utc_now(), assignee=assignee
        )
        if not planned:
            return ComplaintService.to_schema(complaint)

        for field, value in planned.items():
            setattr(complaint, field, value)
        repo.commit()

        logger.info(
            f"Complaint {complaint.complaint_number} updated by user {user.id}: "
            f"{', '.join(sorted(planned))}"
        )
        return ComplaintService.to_schema(
            ComplaintService.get_complaint_or_404(db, complaint_id)
        )

    @staticmethod
    def add_images(
        db: Session,
        user: db_models.User,
        complaint_id: int,
        files: Optional[Sequence[UploadFile]],
        phase: str,
        captions: Optional[Sequence[str]] = None,
    ) -> schemas.Complaint:
        """
        Attach work photos to an existing complaint.

        Args:
            db: Database session
            user: Admin or staff of the complaint's department
            complaint_id: Complaint ID
            files: Uploaded images
            phase: "before", "after" or "general"
            captions: Optional captions, aligned with `files`

        Returns:
            The complaint with all of its images

        Raises:
            ValidationException: Bad phase, no files, or invalid images
        """
        try:
            image_phase = db_models.ImagePhase(phase)
        except ValueError:
            raise ValidationException("type must be before, after, or general")

        complaint = ComplaintService.get_complaint_or_404(db, complaint_id)
        if not complaint_policy.can_manage(user, complaint):
            raise InsufficientPermissionsException(
                "You are not allowed to add images to this complaint"
            )

        uploads = UploadService.present_files(files)
        if not uploads:
            raise ValidationException("No images uploaded")
        images = UploadService.validate_images(uploads)
        image_captions = ComplaintService._captions_for(len(images), captions)

        urls = UploadService.store_all(images)
        repo = ComplaintRepository(db)
        try:
            for url, caption in zip(urls, image_captions):
                complaint.images.append(
                    db_models.ComplaintImage(url=url, caption=caption, phase=image_phase)
                )
            repo.commit()
        except SQLAlchemyError:
            repo.rollback()
            UploadService.discard(urls)
            raise

        logger.info(
            f"{len(urls)} {image_phase.value} image(s) added to complaint "
            f"{complaint.complaint_number} by user {user.id}"
        )
        return ComplaintService.to_schema(
            ComplaintService.get_complaint_or_404(db, complaint_id)
        )

    @staticmethod
    def delete_complaint(db: Session, user: db_models.User, complaint_id: int) -> None:
        """
        Delete a complaint with its images and comments in one transaction.

        Stored image files are removed after the commit succeeds.

        Raises:
            ComplaintNotFoundException: If the complaint does not exist
            InsufficientPermissionsException: If the user is not an admin
        """
        if user.role != db_models.UserRole.ADMIN:
            raise InsufficientPermissionsException(
                "Only administrators can delete complaints"
            )

        repo = ComplaintRepository(db)
        complaint = ComplaintService.get_complaint_or_404(db, complaint_id)
        urls = [image.url for image in complaint.images]
        number = complaint.complaint_number

        repo.delete(complaint)
        UploadService.discard(urls)
        logger.info(f"Complaint {number} deleted by admin {user.id}")

    @staticmethod
    def list_officers(
        db: Session, department_id: Optional[int] = None
    ) -> List[db_models.User]:
        """Staff members available for assignment, optionally per department."""
        return UserRepository(db).get_staff(department_id)
