"""
Mapping store strategies using Strategy Pattern.

The service only talks to MappingStore, so the backend can be swapped:
- SQLAlchemyMappingStore: relational database (SQLite, PostgreSQL, ...)
- InMemoryMappingStore: development/testing
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shortlink_app.exceptions import DuplicateShortCodeError, NotFoundError, StorageError
from shortlink_app.models.url import URLMapping


UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Tell a unique-constraint violation apart from other integrity errors
    (NOT NULL, CHECK, foreign key).

    PostgreSQL drivers expose SQLSTATE 23505; SQLite and MySQL only say so
    in the message.
    """
    orig = error.orig
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE

    message = str(orig).lower()
    return "unique constraint" in message or "duplicate entry" in message


class MappingStore(ABC):
    """
    Abstract base class for short_code -> long_url storage.

    Contract:
    - short_code is unique; a second insert of the same code raises
      DuplicateShortCodeError
    - forward lookup of a missing code raises NotFoundError
    - reverse lookup of an unmapped URL returns None (not an error)
    - update/delete of a missing code raise NotFoundError
    - any other backend failure raises StorageError
    """

    @abstractmethod
    def save_mapping(self, short_code: str, long_url: str) -> int:
        """
        Persist a new mapping.

        Returns:
            The id of the new row
        """
        pass

    @abstractmethod
    def find_by_short_code(self, short_code: str) -> str:
        """Return the long URL for ``short_code``"""
        pass

    @abstractmethod
    def find_by_long_url(self, long_url: str) -> Optional[str]:
        """Return a short code already mapped to ``long_url``, if any"""
        pass

    @abstractmethod
    def update_long_url(self, short_code: str, new_long_url: str) -> None:
        """Point an existing short code at a new URL"""
        pass

    @abstractmethod
    def delete_mapping(self, short_code: str) -> None:
        """Remove the mapping for ``short_code``"""
        pass


class SQLAlchemyMappingStore(MappingStore):
    """
    Relational implementation on top of a SQLAlchemy session.

    One instance per request (wraps the request's session). The unique
    constraint on urls.short_code is what guarantees uniqueness under
    concurrent inserts.
    """

    def __init__(self, db: Session):
        self.db = db

    def save_mapping(self, short_code: str, long_url: str) -> int:
        mapping = URLMapping(short_code=short_code, long_url=long_url)
        try:
            self.db.add(mapping)
            self.db.flush()  # Flush to get ID and hit the unique constraint
            row_id = mapping.id
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                raise DuplicateShortCodeError(f"Short code '{short_code}' already exists", cause=e)
            logger.error(f"Integrity error saving mapping {short_code}: {e}")
            raise StorageError("Failed to save mapping", cause=e)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save mapping {short_code}: {e}")
            raise StorageError("Failed to save mapping", cause=e)

        return row_id

    def find_by_short_code(self, short_code: str) -> str:
        try:
            mapping = self.db.query(URLMapping).filter(
                URLMapping.short_code == short_code
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up short code {short_code}: {e}")
            raise StorageError("Failed to look up short code", cause=e)

        if not mapping:
            raise NotFoundError(f"Short code '{short_code}' not found")
        return mapping.long_url

    def find_by_long_url(self, long_url: str) -> Optional[str]:
        try:
            mapping = self.db.query(URLMapping).filter(
                URLMapping.long_url == long_url
            ).order_by(URLMapping.id).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up long URL {long_url}: {e}")
            raise StorageError("Failed to look up long URL", cause=e)

        return mapping.short_code if mapping else None

    def update_long_url(self, short_code: str, new_long_url: str) -> None:
        try:
            rows = self.db.query(URLMapping).filter(
                URLMapping.short_code == short_code
            ).update({URLMapping.long_url: new_long_url}, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update short code {short_code}: {e}")
            raise StorageError("Failed to update mapping", cause=e)

        if rows == 0:
            raise NotFoundError(f"Short code '{short_code}' not found")

    def delete_mapping(self, short_code: str) -> None:
        try:
            rows = self.db.query(URLMapping).filter(
                URLMapping.short_code == short_code
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete short code {short_code}: {e}")
            raise StorageError("Failed to delete mapping", cause=e)

        if rows == 0:
            raise NotFoundError(f"Short code '{short_code}' not found")


@dataclass
class _Row:
    id: int
    long_url: str
    created_at: datetime


class InMemoryMappingStore(MappingStore):
    """
    In-memory implementation using a Python dict.

    Pros:
    - No database needed
    - Good for development and testing

    Cons:
    - Not shared between processes
    - Lost on restart

    Operations hold a lock so that the uniqueness check and the insert are
    one step, like a database unique constraint.
    """

    def __init__(self):
        self._rows: Dict[str, _Row] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def save_mapping(self, short_code: str, long_url: str) -> int:
        with self._lock:
            if short_code in self._rows:
                raise DuplicateShortCodeError(f"Short code '{short_code}' already exists")
            row_id = self._next_id
            self._next_id += 1
            self._rows[short_code] = _Row(row_id, long_url, datetime.now(timezone.utc))
            return row_id

    def find_by_short_code(self, short_code: str) -> str:
        with self._lock:
            row = self._rows.get(short_code)
        if row is None:
            raise NotFoundError(f"Short code '{short_code}' not found")
        return row.long_url

    def find_by_long_url(self, long_url: str) -> Optional[str]:
        with self._lock:
            matches = [
                (row.id, code) for code, row in self._rows.items()
                if row.long_url == long_url
            ]
        # Oldest mapping wins, as with ORDER BY id in SQL
        return min(matches)[1] if matches else None

    def update_long_url(self, short_code: str, new_long_url: str) -> None:
        with self._lock:
            row = self._rows.get(short_code)
            if row is None:
                raise NotFoundError(f"Short code '{short_code}' not found")
            row.long_url = new_long_url

    def delete_mapping(self, short_code: str) -> None:
        with self._lock:
            if self._rows.pop(short_code, None) is None:
                raise NotFoundError(f"Short code '{short_code}' not found")

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
