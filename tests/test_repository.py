# tests/test_repository.py
from datetime import datetime

import pytest

from voiceskill.data import create_repository
from voiceskill.data.file_repository import FileUserRepository
from voiceskill.data.memory_repository import InMemoryUserRepository
from voiceskill.data.models import User
from voiceskill.utils.error_handling import RepositoryError


@pytest.fixture(params=["memory", "file"])
def repository(request, tmp_path):
    """Each repository implementation, not yet connected"""
    if request.param == "memory":
        return InMemoryUserRepository()
    return FileUserRepository(tmp_path / "users.json")


@pytest.mark.asyncio
async def test_requires_connection(repository):
    with pytest.raises(RepositoryError):
        await repository.get_by_id("user-1")


@pytest.mark.asyncio
async def test_crud(repository):
    await repository.connect()
    user = User(id="user-1", data={"name": "John"})

    await repository.create(user)
    fetched = await repository.get_by_id("user-1")
    assert fetched.data == {"name": "John"}

    fetched.data["name"] = "Jane"
    assert await repository.update("user-1", fetched) is fetched
    assert (await repository.get_by_id("user-1")).data == {"name": "Jane"}

    assert await repository.update("missing", fetched) is None
    assert await repository.delete("user-1") is True
    assert await repository.delete("user-1") is False
    assert await repository.get_by_id("user-1") is None

    await repository.disconnect()
    assert not repository.is_connected


@pytest.mark.asyncio
async def test_returned_users_are_copies(repository):
    await repository.connect()
    original = User(id="user-1", data={"prefs": {"volume": 1}})
    await repository.create(original)

    original.data["name"] = "Mutated"
    original.data["prefs"]["volume"] = 5
    user = await repository.get_by_id("user-1")
    user.data["changed"] = True
    user.data["prefs"]["volume"] = 99

    assert (await repository.get_by_id("user-1")).data == {"prefs": {"volume": 1}}


@pytest.mark.asyncio
async def test_get_all_with_filter(repository):
    await repository.connect()
    await repository.save(User(id="a"))
    await repository.save(User(id="b"))

    assert {user.id for user in await repository.get_all()} == {"a", "b"}
    assert [user.id for user in await repository.get_all({"id": "b"})] == ["b"]


@pytest.mark.asyncio
async def test_file_repository_persists_between_connections(tmp_path):
    db_path = tmp_path / "nested" / "db.json"
    first = FileUserRepository(db_path)
    await first.connect()
    user = User(id="user-1", data={"name": "John"})
    user.touch(new_session=True)
    await first.save(user)
    await first.disconnect()

    second = FileUserRepository(db_path)
    await second.connect()
    loaded = await second.get_by_id("user-1")

    assert loaded.data == {"name": "John"}
    assert loaded.metadata.sessions_count == 1
    assert loaded.metadata.last_used_at == user.metadata.last_used_at


@pytest.mark.asyncio
async def test_file_repository_rejects_corrupt_document(tmp_path):
    db_path = tmp_path / "db.json"
    db_path.write_text("{not json")

    with pytest.raises(RepositoryError, match="Cannot open user database"):
        await FileUserRepository(db_path).connect()


@pytest.mark.asyncio
async def test_file_repository_accepts_empty_file(tmp_path):
    db_path = tmp_path / "db.json"
    db_path.write_text("")
    repository = FileUserRepository(db_path)

    assert await repository.connect() is True
    assert await repository.get_all() == []


@pytest.mark.asyncio
async def test_file_repository_rejects_unserializable_data(tmp_path):
    db_path = tmp_path / "db.json"
    repository = FileUserRepository(db_path)
    await repository.connect()

    with pytest.raises(RepositoryError, match="not JSON serializable"):
        await repository.create(User(id="bad", data={"when": datetime(2024, 1, 1)}))

    await repository.create(User(id="good", data={"x": 1}))

    assert [user.id for user in await repository.get_all()] == ["good"]
    assert not db_path.with_suffix(".json.tmp").exists()

    reloaded = FileUserRepository(db_path)
    await reloaded.connect()
    assert (await reloaded.get_by_id("good")).data == {"x": 1}
    assert await reloaded.get_by_id("bad") is None


@pytest.mark.asyncio
async def test_failed_update_keeps_previous_data(tmp_path):
    repository = FileUserRepository(tmp_path / "db.json")
    await repository.connect()
    await repository.create(User(id="user-1", data={"name": "John"}))

    with pytest.raises(RepositoryError):
        await repository.update("user-1", User(id="user-1", data={"name": {1, 2}}))

    assert (await repository.get_by_id("user-1")).data == {"name": "John"}


def test_create_repository(tmp_path):
    assert isinstance(create_repository("memory"), InMemoryUserRepository)

    repository = create_repository("file", tmp_path / "db.json")
    assert isinstance(repository, FileUserRepository)
    assert repository.db_path == tmp_path / "db.json"


def test_user_round_trip():
    user = User(id="user-1", data={"name": "John"})
    user.touch(new_session=True)

    assert User.from_dict(user.to_dict()) == user
