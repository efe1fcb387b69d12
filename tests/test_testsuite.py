# tests/test_testsuite.py
import json

import pytest

from voiceskill.data.file_repository import FileUserRepository
from voiceskill.testsuite import (
    AlexaRequestBuilder,
    TestResponse,
    add_user_data,
    get_app,
    get_db_path,
    get_user_data,
    remove_user,
    remove_user_data,
    send,
    set_app,
)


def test_db_path_points_at_temporary_directory(test_db):
    assert get_db_path() == test_db


def test_get_app_is_cached_until_reset():
    app = get_app()
    assert get_app() is app

    set_app(None)
    assert get_app() is not app


def test_response_predicates_reject_wrong_kind():
    res = TestResponse("AlexaSkill", {
        "version": "1.0",
        "response": {
            "outputSpeech": {"type": "SSML", "ssml": "<speak>Hi</speak>"},
            "reprompt": {"outputSpeech": {"type": "SSML", "ssml": "<speak>Hello?</speak>"}},
            "shouldEndSession": False,
        },
        "sessionAttributes": {},
    })

    assert res.is_ask("Hi", "Hello?") is True
    assert res.is_ask("Hi", "Something else") is False
    assert res.is_ask(["Hey", "Hi"]) is True
    assert res.is_tell("Hi") is False
    assert "ask" in repr(res)


@pytest.mark.asyncio
async def test_send_accepts_raw_request_body(rb):
    res = await send(rb.launch().to_dict())

    assert res.type() == rb.type()
    assert res.is_ask("Hello World! What's your name?")


@pytest.mark.asyncio
async def test_send_persists_name_to_database(rb, test_db):
    await send(rb.intent("MyNameIsIntent", {"name": "John"}))

    assert await get_user_data(rb.default_user_id, "name") == "John"

    document = json.loads(test_db.read_text())
    assert document["users"][rb.default_user_id]["data"] == {"name": "John"}


@pytest.mark.asyncio
async def test_add_and_get_user_data():
    user_id = "user-1"

    await add_user_data(user_id, "color", "blue")
    await add_user_data(user_id, "size", 9)

    assert await get_user_data(user_id, "color") == "blue"
    assert await get_user_data(user_id) == {"color": "blue", "size": 9}
    assert await get_user_data("nobody") is None


@pytest.mark.asyncio
async def test_user_data_values_are_not_shared():
    prefs = {"a": 1}
    await add_user_data("user-2", "prefs", prefs)
    prefs["a"] = 2

    fetched = await get_user_data("user-2", "prefs")
    fetched["a"] = 99

    assert await get_user_data("user-2", "prefs") == {"a": 1}


@pytest.mark.asyncio
async def test_user_data_is_visible_to_handlers():
    seen = {}

    def remember(conversation):
        seen["color"] = conversation.user.data.get("color")
        conversation.tell("ok")

    app = get_app().set_handler({"ColorIntent": remember})
    builder = AlexaRequestBuilder(user_id="user-2")
    await add_user_data("user-2", "color", "green")

    await send(builder.intent("ColorIntent"), app=app)

    assert seen == {"color": "green"}


@pytest.mark.asyncio
async def test_remove_user_data():
    await add_user_data("user-3", "a", 1)
    await add_user_data("user-3", "b", 2)

    assert await remove_user_data("user-3", "a") is True
    assert await get_user_data("user-3") == {"b": 2}
    assert await remove_user_data("user-3", "missing") is False

    assert await remove_user_data("user-3") is True
    assert await get_user_data("user-3") == {}
    assert await remove_user_data("nobody") is False


@pytest.mark.asyncio
async def test_remove_user():
    await add_user_data("user-4", "a", 1)

    assert await remove_user("user-4") is True
    assert await get_user_data("user-4") is None
    assert await remove_user("user-4") is False


@pytest.mark.asyncio
async def test_user_data_survives_reconnect(rb):
    await send(rb.intent("MyNameIsIntent", {"name": "Ada"}))

    repository = FileUserRepository(get_db_path())
    await repository.connect()
    user = await repository.get_by_id(rb.default_user_id)

    assert user.data["name"] == "Ada"
