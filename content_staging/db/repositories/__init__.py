"""
Repository classes for database access.

This module provides specialized repositories for different entity types:
- PostRepository: Data access for Post entities
"""

from .base import BaseRepository
from .post import PostRepository

__all__ = ["BaseRepository", "PostRepository"]
