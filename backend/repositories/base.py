"""
Base repository class providing common database operations.
"""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Common persistence operations shared by every repository.

    Repositories never commit implicitly except in `create`, `update` and
    `delete`; services that need several writes in one transaction use
    `add`/`flush` and finish with a single `commit`.
    """

    def __init__(self, model: type[T], db: Session):
        self.model = model
        self.db = db

    def get_by_id(self, id: int) -> T | None:
        """Return the entity with the given primary key, or None."""
        return self.db.query(self.model).filter(self.model.id == id).first()

    def exists(self, id: int) -> bool:
        """Check whether an entity with this primary key exists."""
        return self.get_by_id(id) is not None

    def add(self, entity: T) -> None:
        """Stage an entity in the session without committing."""
        self.db.add(entity)

    def create(self, entity: T) -> T:
        """Insert an entity and commit."""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: T) -> T:
        """Commit pending changes on an entity and reload it."""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        """Delete an entity and commit."""
        self.db.delete(entity)
        self.db.commit()

    def commit(self) -> None:
        self.db.commit()

    def flush(self) -> None:
        self.db.flush()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, entity: T) -> None:
        self.db.refresh(entity)
