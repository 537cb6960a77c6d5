"""
Database models for the URL shortener.
"""

from .url import URLMapping

__all__ = ["URLMapping"]
