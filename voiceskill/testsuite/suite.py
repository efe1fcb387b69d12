"""
Sending mock requests through a skill and managing test user data.

By default requests go to the Hello World app, backed by a JSON user
database that ``set_db_path`` can move (tests point it at a temporary
directory).
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from voiceskill.application import App
from voiceskill.config import settings
from voiceskill.config.logging_config import get_logger
from voiceskill.data.base_repository import BaseRepository
from voiceskill.data.file_repository import FileUserRepository
from voiceskill.data.models import User
from voiceskill.platforms import detect_platform
from voiceskill.skill import create_app
from voiceskill.testsuite.request_builder import TestRequest
from voiceskill.testsuite.response import TestResponse

logger = get_logger(__name__)

_db_path: Path = Path(settings.database.db_path)
_repository: Optional[BaseRepository[User]] = None
_app: Optional[App] = None


def set_db_path(path: Union[str, Path]) -> None:
    """Point the test database at ``path``; the default app is rebuilt on next use."""
    global _db_path, _repository, _app
    _db_path = Path(path)
    _repository = None
    _app = None
    logger.debug(f"Test database set to {_db_path}")


def get_db_path() -> Path:
    return _db_path


def get_repository() -> BaseRepository[User]:
    """Repository shared by the default app and the user data helpers."""
    global _repository
    if _repository is None:
        _repository = FileUserRepository(_db_path)
    return _repository


def get_app() -> App:
    """The default app requests are sent to."""
    global _app
    if _app is None:
        _app = create_app(repository=get_repository())
    return _app


def set_app(app: Optional[App]) -> None:
    """Replace the default app, or reset it with None."""
    global _app
    _app = app


async def send(request: Union[TestRequest, Dict[str, Any]], app: Optional[App] = None) -> TestResponse:
    """
    Send a mock request through a skill.

    Args:
        request: Request built by a request builder, or a raw request body
        app: App to send to, defaults to ``get_app()``

    Returns:
        TestResponse: The response, ready for ``is_ask`` / ``is_tell`` checks
    """
    app = app or get_app()
    if isinstance(request, TestRequest):
        body = request.to_dict()
        platform_type = request.type()
    else:
        body = request
        platform_type = detect_platform(request).type()

    response = await app.handle(body)
    return TestResponse(platform_type, response)


async def _connected_repository() -> BaseRepository[User]:
    repository = get_repository()
    if not repository.is_connected:
        await repository.connect()
    return repository


async def add_user_data(user_id: str, key: str, value: Any) -> User:
    """Store ``value`` under ``key`` in a user's data, creating the user if needed."""
    repository = await _connected_repository()
    user = await repository.get_by_id(user_id) or User(id=user_id)
    user.data[key] = value
    return await repository.save(user)


async def get_user_data(user_id: str, key: Optional[str] = None) -> Any:
    """Return one value of a user's data, or all of it when ``key`` is None."""
    repository = await _connected_repository()
    user = await repository.get_by_id(user_id)
    if user is None:
        return None
    if key is None:
        return dict(user.data)
    return user.data.get(key)


async def remove_user(user_id: str) -> bool:
    """Delete a user. Returns False if the user did not exist."""
    repository = await _connected_repository()
    return await repository.delete(user_id)


async def remove_user_data(user_id: str, key: Optional[str] = None) -> bool:
    """
    Remove one key of a user's data, or all data when ``key`` is None.

    Returns:
        bool: False if the user or key did not exist
    """
    repository = await _connected_repository()
    user = await repository.get_by_id(user_id)
    if user is None:
        return False
    if key is None:
        user.data = {}
    elif key in user.data:
        del user.data[key]
    else:
        return False
    await repository.update(user_id, user)
    return True
