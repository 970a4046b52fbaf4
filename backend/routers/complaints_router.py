"""Complaint router endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import ValidationException
from repositories.database import get_db
from services import AnalyticsService, CommentService, ComplaintService

router = APIRouter(prefix="/complaints", tags=["complaints"])


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


@router.get("", response_model=List[schemas.Complaint])
def list_complaints(
    sort: schemas.ComplaintSortOrder = Query(schemas.ComplaintSortOrder.DATE),
    status_filter: Optional[db_models.ComplaintStatus] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> List[schemas.Complaint]:
    """
    List complaints visible to the caller.

    Citizens see their own complaints, department staff see complaints routed
    to their department, admins see everything.
    """
    return ComplaintService.list_complaints(
        db, current_user, sort=sort, status=status_filter, category=category
    )


@router.get("/stats", response_model=schemas.ComplaintStats)
def get_stats(
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ComplaintStats:
    """Complaint counts per status, within the caller's visibility."""
    return AnalyticsService.get_status_counts(db, current_user)


@router.get("/monthly", response_model=List[schemas.MonthlyCount])
def get_monthly(
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> List[schemas.MonthlyCount]:
    """Complaints created in each of the last six calendar months."""
    return AnalyticsService.get_monthly_counts(db, current_user)


@router.get("/meta/officers", response_model=List[schemas.OfficerOption])
def list_officers(
    department_id: Optional[int] = Query(None),
    current_user: db_models.User = Depends(auth.get_staff_or_admin_user),
    db: Session = Depends(get_db),
) -> List[db_models.User]:
    """Officers and department heads available for assignment."""
    return ComplaintService.list_officers(db, department_id)


@router.post(
    "", response_model=schemas.Complaint, status_code=status.HTTP_201_CREATED
)
def create_complaint(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    address: Optional[str] = Form(None),
    department_id: Optional[int] = Form(None),
    zone_id: Optional[int] = Form(None),
    ward_id: Optional[int] = Form(None),
    area_id: Optional[int] = Form(None),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    images: List[UploadFile] = File(default=[]),
    captions: List[str] = Form(default=[]),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.Complaint:
    """
    File a complaint (multipart form), optionally with up to ten photos.

    `captions` repeats once per image, in the same order.
    """
    try:
        data = schemas.ComplaintCreate(
            title=title,
            description=description,
            category=category,
            address=address,
            department_id=department_id,
            zone_id=zone_id,
            ward_id=ward_id,
            area_id=area_id,
            latitude=latitude,
            longitude=longitude,
        )
    except ValidationError as e:
        raise ValidationException(_first_error(e))

    return ComplaintService.create_complaint(
        db, current_user, data, files=images, captions=captions
    )


@router.get("/{complaint_id}", response_model=schemas.Complaint)
def get_complaint(
    complaint_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.Complaint:
    """Get a single complaint with its images."""
    return ComplaintService.get_complaint(db, current_user, complaint_id)


@router.patch("/{complaint_id}", response_model=schemas.Complaint)
def update_complaint(
    complaint_id: int,
    update: schemas.ComplaintUpdate,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.Complaint:
    """
    Apply lifecycle changes.

    Only the fields present in the body are considered. Several transitions
    can be combined, e.g. `{"accepted_by_department": true, "status": "in_progress"}`.
    """
    return ComplaintService.update_complaint(db, current_user, complaint_id, update)


@router.delete("/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_complaint(
    complaint_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> None:
    """Delete a complaint with its images and comments (admin only)."""
    ComplaintService.delete_complaint(db, current_user, complaint_id)


@router.post("/{complaint_id}/images", response_model=schemas.Complaint)
def upload_images(
    complaint_id: int,
    images: List[UploadFile] = File(default=[]),
    image_type: str = Form("general", alias="type"),
    captions: List[str] = Form(default=[]),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.Complaint:
    """Attach before/after/general work photos (admin or department staff)."""
    return ComplaintService.add_images(
        db, current_user, complaint_id, images, image_type, captions=captions
    )


@router.get("/{complaint_id}/comments", response_model=List[schemas.Comment])
def list_comments(
    complaint_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> List[schemas.Comment]:
    """Get the complaint's comment thread, oldest first."""
    return CommentService.list_comments(db, current_user, complaint_id)


@router.post(
    "/{complaint_id}/comments",
    response_model=schemas.Comment,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    complaint_id: int,
    comment: schemas.CommentCreate,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.Comment:
    """Add a comment to the complaint's thread."""
    return CommentService.add_comment(db, current_user, complaint_id, comment)
