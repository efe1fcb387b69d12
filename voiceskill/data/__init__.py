"""
User data persistence.
"""
from pathlib import Path
from typing import Optional, Union

from voiceskill.config import settings
from voiceskill.data.base_repository import BaseRepository
from voiceskill.data.file_repository import FileUserRepository
from voiceskill.data.memory_repository import InMemoryUserRepository
from voiceskill.data.models import User, UserMetadata


def create_repository(
    persistence: Optional[str] = None,
    db_path: Optional[Union[str, Path]] = None,
) -> BaseRepository[User]:
    """Build the user repository selected by the database settings."""
    persistence = persistence or settings.database.persistence
    if persistence == "memory":
        return InMemoryUserRepository()
    return FileUserRepository(db_path or settings.database.db_path)


__all__ = [
    "BaseRepository",
    "FileUserRepository",
    "InMemoryUserRepository",
    "User",
    "UserMetadata",
    "create_repository",
]
