"""
Mapping store module.

Implements the Strategy Pattern for pluggable short_code -> long_url storage.
"""

from .strategies import MappingStore, SQLAlchemyMappingStore, InMemoryMappingStore
from .factory import MappingStoreFactory, MappingStoreBackend

__all__ = [
    "MappingStore",
    "SQLAlchemyMappingStore",
    "InMemoryMappingStore",
    "MappingStoreFactory",
    "MappingStoreBackend",
]
