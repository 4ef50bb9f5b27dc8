"""
Base Repository class providing common database operations.

Repositories work on a session owned by the caller's unit of work; they
flush but never commit, so everything a service does inside one
``session_scope()`` commits or rolls back together.
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional, Type, TypeVar, Generic
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from core.db import Base
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Base)


class BaseRepository(Generic[T]):
    """Base repository class with common CRUD operations."""

    def __init__(self, model: Type[T], session: Session):
        self.model = model
        self.session = session

    def get_by_id(self, id: Any) -> Optional[T]:
        """Get entity by ID."""
        return self.execute_query(lambda s: s.get(self.model, id))

    def get_all(self, limit: Optional[int] = None) -> List[T]:
        """Get all entities with optional limit."""
        def query_func(session: Session) -> List[T]:
            query = session.query(self.model)
            if limit:
                query = query.limit(limit)
            return query.all()

        return self.execute_query(query_func)

    def add(self, entity: T) -> T:
        """Stage a new entity and flush so generated values are populated."""
        def query_func(session: Session) -> T:
            session.add(entity)
            session.flush()
            return entity

        return self.execute_query(query_func)

    def create(self, **kwargs) -> T:
        """Create new entity."""
        return self.add(self.model(**kwargs))

    def update(self, entity: T, **kwargs) -> T:
        """Set attributes on an entity and flush."""
        def query_func(session: Session) -> T:
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            session.flush()
            return entity

        return self.execute_query(query_func)

    def delete(self, entity: T) -> None:
        """Delete entity."""
        def query_func(session: Session) -> None:
            session.delete(entity)
            session.flush()

        self.execute_query(query_func)

    def count(self) -> int:
        """Count total entities."""
        return self.execute_query(lambda s: s.query(self.model).count())

    def execute_query(self, query_func: Callable[..., Any], *args, **kwargs) -> Any:
        """Run `query_func(session, ...)`; database errors are logged and re-raised."""
        try:
            return query_func(self.session, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"Error executing {self.model.__name__} query: {e}")
            raise
