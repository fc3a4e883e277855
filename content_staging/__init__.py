"""
Data access for staged WordPress-style content.
"""

from .models import Post

__all__ = ["Post"]
