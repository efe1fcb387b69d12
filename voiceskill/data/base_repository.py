"""
Base repository interface for user data storage.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from voiceskill.config.logging_config import get_logger
from voiceskill.utils.error_handling import RepositoryError

T = TypeVar('T')
logger = get_logger(__name__)


class BaseRepository(Generic[T], ABC):
    """Base class for all repository implementations.

    This abstract class defines the interface that all repository
    implementations should follow. It provides common storage
    operations with appropriate error handling.

    Generic type T represents the entity model being managed.
    """

    def __init__(self, connection_config: Optional[Dict[str, Any]] = None):
        """Initialize the repository with connection configuration.

        Args:
            connection_config: Storage connection parameters
        """
        self.connection_config = connection_config or {}
        self._is_connected = False

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    @abstractmethod
    async def connect(self) -> bool:
        """Establish connection to the storage.

        Returns:
            bool: True if connection successful
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Disconnect from the storage."""
        pass

    @abstractmethod
    async def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its ID.

        Args:
            id: Entity identifier

        Returns:
            Optional[T]: Entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self, filter_params: Optional[Dict[str, Any]] = None) -> List[T]:
        """Retrieve all entities matching the filter.

        Args:
            filter_params: Filter criteria

        Returns:
            List[T]: List of matching entities
        """
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create a new entity, replacing any entity with the same ID.

        Args:
            entity: Entity to create

        Returns:
            T: Created entity
        """
        pass

    @abstractmethod
    async def update(self, id: str, entity: T) -> Optional[T]:
        """Update an existing entity.

        Args:
            id: Entity identifier
            entity: Updated entity data

        Returns:
            Optional[T]: Updated entity, None if not found
        """
        pass

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Delete an entity by its ID.

        Args:
            id: Entity identifier

        Returns:
            bool: True if deleted, False if not found
        """
        pass

    async def save(self, entity: T) -> T:
        """Create or update an entity depending on whether it exists."""
        entity_id = getattr(entity, "id")
        if await self.get_by_id(entity_id) is None:
            return await self.create(entity)
        await self.update(entity_id, entity)
        return entity

    def _check_connection(self) -> None:
        """Check if the repository is connected.

        Raises:
            RepositoryError: If not connected
        """
        if not self._is_connected:
            raise RepositoryError(f"{self.__class__.__name__} is not connected")

    def handle_db_error(self, error: Exception, operation: str) -> Dict[str, Any]:
        """Handle storage errors in a consistent way.

        Args:
            error: The exception that occurred
            operation: Name of the storage operation that failed

        Returns:
            Dict[str, Any]: Error information
        """
        error_info = {
            "repository": self.__class__.__name__,
            "operation": operation,
            "error_type": type(error).__name__,
            "error_message": str(error)
        }

        logger.error(f"Database error: {error_info}")
        return error_info
