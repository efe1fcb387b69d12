import pytest

from voiceskill.data.memory_repository import InMemoryUserRepository
from voiceskill.events.event_interface import EventEmitter
from voiceskill.testsuite import get_platform_request_builder, set_db_path

PLATFORMS = ["AlexaSkill", "GoogleActionDialogFlow"]


@pytest.fixture(autouse=True)
def test_db(tmp_path):
    """Keep every test's user data in its own temporary database"""
    db_path = tmp_path / "db" / "db.json"
    set_db_path(db_path)
    yield db_path
    set_db_path(db_path)


@pytest.fixture(params=PLATFORMS)
def rb(request):
    """Request builder, once per supported platform"""
    return get_platform_request_builder(request.param)[0]


@pytest.fixture
def memory_repository():
    return InMemoryUserRepository()


@pytest.fixture
def emitter():
    return EventEmitter()
