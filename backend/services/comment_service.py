"""
Comment Service

Flat, append-only discussion threads on complaints. Anyone who can read a
complaint can read and add to its thread.
"""

from typing import List

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from repositories.complaint_repository import ComplaintCommentRepository
from services.complaint_service import ComplaintService


class CommentService:
    @staticmethod
    def to_schema(comment: db_models.ComplaintComment) -> schemas.Comment:
        return schemas.Comment(
            id=comment.id,
            complaint_id=comment.complaint_id,
            user_id=comment.user_id,
            author_name=comment.author.full_name if comment.author else None,
            content=comment.content,
            is_internal=comment.is_internal,
            created_at=comment.created_at,
        )

    @staticmethod
    def list_comments(
        db: Session, user: db_models.User, complaint_id: int
    ) -> List[schemas.Comment]:
        """
        Get a complaint's thread, oldest first.

        Raises:
            ComplaintNotFoundException: If the complaint does not exist
            InsufficientPermissionsException: If the user cannot read it
        """
        ComplaintService.get_readable_complaint(db, user, complaint_id)
        comments = ComplaintCommentRepository(db).get_for_complaint(complaint_id)
        return [CommentService.to_schema(c) for c in comments]

    @staticmethod
    def add_comment(
        db: Session,
        user: db_models.User,
        complaint_id: int,
        comment: schemas.CommentCreate,
    ) -> schemas.Comment:
        """
        Append a comment to a complaint's thread.

        Args:
            db: Database session
            user: Author
            complaint_id: Complaint ID
            comment: Comment content (blank content is rejected by the schema)

        Returns:
            The stored comment with the author's name

        Raises:
            ComplaintNotFoundException: If the complaint does not exist
            InsufficientPermissionsException: If the user cannot read it
        """
        ComplaintService.get_readable_complaint(db, user, complaint_id)

        repo = ComplaintCommentRepository(db)
        db_comment = db_models.ComplaintComment(
            complaint_id=complaint_id,
            user_id=user.id,
            content=comment.content,
            is_internal=False,
        )
        db_comment = repo.create(db_comment)

        logger.info(f"Comment {db_comment.id} added to complaint {complaint_id}")
        return CommentService.to_schema(db_comment)
