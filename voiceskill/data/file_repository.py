"""
JSON file backed user repository.

All users are kept in a single JSON document (``{"users": {id: user}}``)
that is loaded on connect and rewritten on every change.
"""
import asyncio
import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from voiceskill.config.logging_config import get_logger
from voiceskill.data.base_repository import BaseRepository
from voiceskill.data.memory_repository import _matches
from voiceskill.data.models import User
from voiceskill.utils.error_handling import RepositoryError

logger = get_logger(__name__)


class FileUserRepository(BaseRepository[User]):
    """Repository persisting users to a JSON file."""

    def __init__(self, db_path: Union[str, Path]):
        super().__init__({"db_path": str(db_path)})
        self.db_path = Path(db_path)
        self._users: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def connect(self) -> bool:
        """Load the JSON document, creating an empty one if it does not exist.

        Raises:
            RepositoryError: If the file exists but is not a valid document
        """
        try:
            self._users = self._read()
        except (OSError, ValueError) as e:
            error_info = self.handle_db_error(e, "connect")
            raise RepositoryError(
                f"Cannot open user database {self.db_path}", cause=e, context=error_info
            ) from e

        self._is_connected = True
        logger.info(f"Connected to file repository at {self.db_path}")
        return True

    async def disconnect(self) -> None:
        self._is_connected = False
        logger.info("Disconnected from file repository")

    async def get_by_id(self, id: str) -> Optional[User]:
        self._check_connection()
        data = self._users.get(id)
        return User.from_dict(copy.deepcopy(data)) if data is not None else None

    async def get_all(self, filter_params: Optional[Dict[str, Any]] = None) -> List[User]:
        self._check_connection()
        users = [User.from_dict(copy.deepcopy(data)) for data in self._users.values()]
        return [user for user in users if _matches(user, filter_params)]

    async def create(self, entity: User) -> User:
        self._check_connection()
        async with self._lock:
            users = dict(self._users)
            users[entity.id] = copy.deepcopy(entity.to_dict())
            self._flush(users, "create")
        return entity

    async def update(self, id: str, entity: User) -> Optional[User]:
        self._check_connection()
        async with self._lock:
            if id not in self._users:
                logger.warning(f"User with ID {id} not found")
                return None
            users = dict(self._users)
            users[id] = copy.deepcopy(entity.to_dict())
            self._flush(users, "update")
        return entity

    async def delete(self, id: str) -> bool:
        self._check_connection()
        async with self._lock:
            if id not in self._users:
                logger.warning(f"User with ID {id} not found")
                return False
            users = dict(self._users)
            del users[id]
            self._flush(users, "delete")
        return True

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self.db_path.exists():
            return {}
        text = self.db_path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        document = json.loads(text)
        if not isinstance(document, dict) or not isinstance(document.get("users", {}), dict):
            raise ValueError("expected an object with a 'users' mapping")
        return document.get("users", {})

    def _flush(self, users: Dict[str, Dict[str, Any]], operation: str) -> None:
        """Write the whole document atomically, then adopt ``users`` as the current state.

        Raises:
            RepositoryError: If the document cannot be serialized or written;
                the in-memory state is left unchanged
        """
        try:
            text = json.dumps({"users": users}, indent=2)
        except (TypeError, ValueError) as e:
            error_info = self.handle_db_error(e, operation)
            raise RepositoryError(
                f"User data is not JSON serializable: {e}", cause=e, context=error_info
            ) from e

        tmp_path = self.db_path.with_suffix(self.db_path.suffix + ".tmp")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, self.db_path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            error_info = self.handle_db_error(e, operation)
            raise RepositoryError(
                f"Cannot write user database {self.db_path}", cause=e, context=error_info
            ) from e

        self._users = users
