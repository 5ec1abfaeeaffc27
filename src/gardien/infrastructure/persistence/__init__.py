"""
User directory implementations.
"""

from gardien.infrastructure.persistence.in_memory_user_directory import (
    InMemoryUserDirectory,
)
from gardien.infrastructure.persistence.redis_user_directory import (
    RedisUserDirectory,
)

__all__ = ["InMemoryUserDirectory", "RedisUserDirectory"]
