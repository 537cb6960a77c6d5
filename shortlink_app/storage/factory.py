"""
Factory for creating mapping store instances.
"""

from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from .strategies import InMemoryMappingStore, MappingStore, SQLAlchemyMappingStore


class MappingStoreBackend(Enum):
    """Available mapping store backends"""
    SQL = "sql"
    MEMORY = "memory"


class MappingStoreFactory:
    """
    Simple factory for creating mapping stores.

    The SQL store wraps a per-request session, so a new one is built for
    every request. The memory store holds the data itself; build it once
    at startup and reuse it.
    """

    @classmethod
    def create(cls, backend: MappingStoreBackend, db: Optional[Session] = None) -> MappingStore:
        """
        Create a mapping store.

        Args:
            backend: Type of store backend (from enum)
            db: Database session, required for the SQL backend

        Raises:
            ValueError: If backend is unknown or a session is missing
        """
        if backend == MappingStoreBackend.SQL:
            if db is None:
                raise ValueError("SQL mapping store requires a database session")
            return SQLAlchemyMappingStore(db)

        elif backend == MappingStoreBackend.MEMORY:
            return InMemoryMappingStore()

        else:
            raise ValueError(f"Unknown store backend: {backend}")
