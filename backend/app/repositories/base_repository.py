# backend/app/repositories/base_repository.py
"""
Base Repository Pattern for the tutoring marketplace.

Provides the foundation for all repository classes with:
- Common CRUD operations
- Type safety with generics
- Pagination over predicate-filtered queries

Repositories never commit. Transactions are owned by the service layer,
so a repository error leaves rollback to the caller's ``transaction()``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from math import ceil
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the numbers needed to render pagination."""

    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return ceil(self.total / self.limit)


class IRepository(ABC, Generic[T]):
    """
    Abstract repository interface defining core data access methods.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key, or None."""

    @abstractmethod
    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Raises:
            RepositoryException: If creation fails
        """

    @abstractmethod
    def update(self, id: str, **kwargs: Any) -> Optional[T]:
        """Update an existing entity; None when it does not exist."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete an entity; False when it does not exist."""


class BaseRepository(IRepository[T]):
    """
    Concrete base repository implementation with common data access patterns.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str) -> Optional[T]:
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting {self.model.__name__} by id {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}: {str(e)}")

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit. Constraint violations surface as
        RepositoryException with ``constraint_violation=True``.
        """
        entity = self.model(**kwargs)
        self.db.add(entity)
        self._flush(f"create {self.model.__name__}")
        return entity

    def bulk_create(self, rows: Sequence[Dict[str, Any]]) -> List[T]:
        """Insert many rows in a single flush."""
        entities = [self.model(**data) for data in rows]
        self.db.add_all(entities)
        self._flush(f"bulk create {len(entities)} {self.model.__name__}")
        return entities

    def update(self, id: str, **kwargs: Any) -> Optional[T]:
        entity = self.get_by_id(id)
        if not entity:
            return None
        for key, value in kwargs.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        self._flush(f"update {self.model.__name__} {id}")
        return entity

    def delete(self, id: str) -> bool:
        entity = self.get_by_id(id)
        if not entity:
            return False
        self.db.delete(entity)
        self._flush(f"delete {self.model.__name__} {id}")
        return True

    def exists(self, **kwargs: Any) -> bool:
        try:
            return self.db.query(self.model).filter_by(**kwargs).first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking existence: {str(e)}")
            raise RepositoryException(f"Failed to check existence: {str(e)}")

    def count(self, **kwargs: Any) -> int:
        try:
            return self.db.query(self.model).filter_by(**kwargs).count()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting records: {str(e)}")
            raise RepositoryException(f"Failed to count records: {str(e)}")

    def find_by(self, **kwargs: Any) -> List[T]:
        """Find entities by exact-match criteria."""
        try:
            return self.db.query(self.model).filter_by(**kwargs).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding by criteria: {str(e)}")
            raise RepositoryException(f"Failed to find records: {str(e)}")

    def find_one_by(self, **kwargs: Any) -> Optional[T]:
        try:
            return self.db.query(self.model).filter_by(**kwargs).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding one by criteria: {str(e)}")
            raise RepositoryException(f"Failed to find record: {str(e)}")

    def paginate(self, query: Query, *, page: int, limit: int) -> Page[T]:
        """Run ``query`` for one page; ``total`` counts the unpaged query."""
        try:
            total = query.order_by(None).count()
            items = query.offset((page - 1) * limit).limit(limit).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error paginating {self.model.__name__}: {str(e)}")
            raise RepositoryException(f"Failed to list {self.model.__name__}: {str(e)}")
        return Page(items=items, total=total, page=page, limit=limit)

    def _flush(self, what: str) -> None:
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.logger.warning(f"Integrity error during {what}: {exc.orig}")
            raise RepositoryException(
                f"Integrity constraint violated: {exc.orig}", constraint_violation=True
            ) from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error during {what}: {str(e)}")
            raise RepositoryException(f"Failed to {what}: {str(e)}") from e
