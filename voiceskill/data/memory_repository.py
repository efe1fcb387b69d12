"""
In-memory user repository.
"""
import copy
from typing import Any, Dict, List, Optional

from voiceskill.config.logging_config import get_logger
from voiceskill.data.base_repository import BaseRepository
from voiceskill.data.models import User

logger = get_logger(__name__)


class InMemoryUserRepository(BaseRepository[User]):
    """In-memory repository implementation.

    Users live only as long as the process. Entities are copied on the
    way in and out so callers never share state with the store.
    """

    def __init__(self, connection_config: Optional[Dict[str, Any]] = None):
        """Initialize the repository with an empty store.

        Args:
            connection_config: Not used for in-memory repository
        """
        super().__init__(connection_config)
        self._store: Dict[str, User] = {}

    async def connect(self) -> bool:
        self._is_connected = True
        logger.info("Connected to in-memory repository")
        return True

    async def disconnect(self) -> None:
        self._is_connected = False
        logger.info("Disconnected from in-memory repository")

    async def get_by_id(self, id: str) -> Optional[User]:
        self._check_connection()
        user = self._store.get(id)
        return copy.deepcopy(user) if user is not None else None

    async def get_all(self, filter_params: Optional[Dict[str, Any]] = None) -> List[User]:
        self._check_connection()
        return [copy.deepcopy(user) for user in self._store.values() if _matches(user, filter_params)]

    async def create(self, entity: User) -> User:
        self._check_connection()
        self._store[entity.id] = copy.deepcopy(entity)
        return entity

    async def update(self, id: str, entity: User) -> Optional[User]:
        self._check_connection()

        if id not in self._store:
            logger.warning(f"User with ID {id} not found")
            return None

        self._store[id] = copy.deepcopy(entity)
        return entity

    async def delete(self, id: str) -> bool:
        self._check_connection()

        if id not in self._store:
            logger.warning(f"User with ID {id} not found")
            return False

        del self._store[id]
        return True


def _matches(entity: Any, filter_params: Optional[Dict[str, Any]]) -> bool:
    """Check an entity's attributes against simple equality filters."""
    if not filter_params:
        return True
    for key, value in filter_params.items():
        if not hasattr(entity, key) or getattr(entity, key) != value:
            return False
    return True
