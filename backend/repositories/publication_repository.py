"""
Repositories for public documents and municipal projects.
"""

from typing import List

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class DocumentRepository(BaseRepository[db_models.Document]):
    def __init__(self, db: Session):
        super().__init__(db_models.Document, db)

    def get_newest_first(self) -> List[db_models.Document]:
        return (
            self.db.query(db_models.Document)
            .order_by(db_models.Document.created_at.desc(), db_models.Document.id.desc())
            .all()
        )


class ProjectRepository(BaseRepository[db_models.Project]):
    def __init__(self, db: Session):
        super().__init__(db_models.Project, db)

    def get_newest_first(self) -> List[db_models.Project]:
        """Projects newest first, with department and ward loaded."""
        return (
            self.db.query(db_models.Project)
            .options(
                joinedload(db_models.Project.department),
                joinedload(db_models.Project.ward),
            )
            .order_by(db_models.Project.created_at.desc(), db_models.Project.id.desc())
            .all()
        )
