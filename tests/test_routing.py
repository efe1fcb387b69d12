# tests/test_routing.py
import pytest

from voiceskill.testsuite import send

WELCOME = "Hello World! What's your name?"
REPROMPT = "Please tell me your name."


@pytest.mark.asyncio
async def test_launch_intent(rb):
    """Launch goes into LAUNCH and on to HelloWorldIntent"""
    res = await send(rb.launch())

    assert res.is_ask(WELCOME, REPROMPT) is True


@pytest.mark.asyncio
async def test_hello_world_intent(rb):
    """HelloWorldIntent asks for the user's name"""
    res = await send(rb.intent("HelloWorldIntent"))

    assert res.is_ask(WELCOME, REPROMPT) is True


@pytest.mark.asyncio
async def test_my_name_is_conversation_flow(rb):
    """Simulate the whole conversation and greet the user with the correct name"""
    res = await send(rb.launch())
    assert res.is_ask(WELCOME, REPROMPT) is True

    res = await send(rb.intent("MyNameIsIntent", {"name": "John"}))
    assert res.is_tell("Hey John, nice to meet you!") is True


@pytest.mark.asyncio
async def test_my_name_is_deep_invocation(rb):
    """Deep invocation goes directly into MyNameIsIntent"""
    res = await send(rb.intent().set_intent_name("MyNameIsIntent").add_input("name", "John"))

    assert res.is_tell("Hey John, nice to meet you!") is True


@pytest.mark.asyncio
async def test_help_intent(rb):
    """HelpIntent does not raise and asks for the name again"""
    res = await send(rb.intent("HelpIntent"))

    assert res.is_ask(REPROMPT, REPROMPT) is True


@pytest.mark.asyncio
async def test_unhandled(rb):
    """An unknown intent does not raise and goes to Unhandled"""
    res = await send(rb.intent("ShouldNotExistIntent"))

    assert res.is_ask("Sorry, I didn't get that. What's your name?", REPROMPT) is True


@pytest.mark.asyncio
async def test_my_name_is_without_name_asks_again(rb):
    res = await send(rb.intent("MyNameIsIntent"))

    assert res.is_ask(REPROMPT) is True
    assert res.is_tell() is False


@pytest.mark.asyncio
async def test_session_ended_closes_without_speech(rb):
    res = await send(rb.session_ended())

    assert res.is_tell() is True
    assert not res.get_speech()
