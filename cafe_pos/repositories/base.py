"""
Repository base class.

Each repository wraps one model and a Session. Reads go through a
`_base_query()` with a stable ordering, narrowed by the repository's own
filters dataclass; writes flush immediately so ids and constraint errors
surface inside the caller's unit of work.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from shared.config.constants import Limits

ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Paging shared by every repository; subclasses add their own fields."""

    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = 0

    def __post_init__(self):
        # Clamp instead of rejecting: paging values come from CLI flags and settings
        self.limit = max(1, min(self.limit, Limits.MAX_PAGE_SIZE))
        self.offset = max(self.offset, 0)


class BaseRepository(ABC, Generic[ModelT]):
    """Data access for one model."""

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]: ...

    @abstractmethod
    def _base_query(self) -> Select:
        """SELECT of the model with its default ordering."""

    @abstractmethod
    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Narrow query by the repository-specific fields of filters."""

    # =========================================================================
    # Reads
    # =========================================================================

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        """One page of rows matching filters, in default order."""
        if filters is None:
            filters = RepositoryFilters()
        query = (
            self._apply_filters(self._base_query(), filters)
            .offset(filters.offset)
            .limit(filters.limit)
        )
        return self._db.scalars(query).all()

    def find_by_id(self, entity_id: Any, fresh: bool = False) -> ModelT | None:
        """
        Row by primary key, or None.

        fresh=True reloads the row's columns from the database even when the
        session already holds it.
        """
        return self._db.get(self.model, entity_id, populate_existing=fresh)

    # =========================================================================
    # Writes
    # =========================================================================

    def save(self, entity: ModelT) -> ModelT:
        """Add entity to the session and flush, so its id is assigned."""
        self._db.add(entity)
        self._db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self._db.delete(entity)
        self._db.flush()
