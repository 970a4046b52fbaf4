"""
Publication Service

Read-only listings of public documents and municipal projects.
"""

from typing import List

from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from repositories.publication_repository import DocumentRepository, ProjectRepository


class PublicationService:
    @staticmethod
    def list_documents(db: Session) -> List[db_models.Document]:
        return DocumentRepository(db).get_newest_first()

    @staticmethod
    def list_projects(db: Session) -> List[schemas.Project]:
        """Projects newest first, with department and ward names resolved."""
        projects = []
        for project in ProjectRepository(db).get_newest_first():
            item = schemas.Project.model_validate(project)
            item.department_name = project.department.name if project.department else None
            item.ward_name = project.ward.name if project.ward else None
            projects.append(item)
        return projects
