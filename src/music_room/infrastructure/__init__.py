"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (aiosqlite database and SQLite repositories)
"""

from music_room.infrastructure.persistence.database import Database

__all__ = [
    "Database",
]
