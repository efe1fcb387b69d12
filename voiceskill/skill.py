"""
Hello World skill.

Greets the user, asks for their name and says hello back by name.
"""
from typing import Optional

from voiceskill.application import LAUNCH, UNHANDLED, App
from voiceskill.config.logging_config import get_logger
from voiceskill.config.settings import SkillSettings
from voiceskill.data.base_repository import BaseRepository
from voiceskill.data.models import User
from voiceskill.domain.conversation.context import Conversation
from voiceskill.events.event_interface import EventEmitter

logger = get_logger(__name__)

WELCOME_SPEECH = "Hello World! What's your name?"
NAME_REPROMPT = "Please tell me your name."
GREETING_SPEECH = "Hey {name}, nice to meet you!"
UNHANDLED_SPEECH = "Sorry, I didn't get that. What's your name?"


def launch(conversation: Conversation) -> None:
    conversation.to_intent("HelloWorldIntent")


def hello_world(conversation: Conversation) -> None:
    conversation.ask(WELCOME_SPEECH, NAME_REPROMPT)


def my_name_is(conversation: Conversation, name: Optional[str] = None) -> None:
    """Greet the user by the name slot and remember it."""
    if not name:
        # Slot was not filled, ask again
        conversation.ask(NAME_REPROMPT, NAME_REPROMPT)
        return
    conversation.user.data["name"] = name
    conversation.tell(GREETING_SPEECH.format(name=name))


def help_intent(conversation: Conversation) -> None:
    conversation.ask(NAME_REPROMPT, NAME_REPROMPT)


def unhandled(conversation: Conversation, *inputs) -> None:
    logger.info(f"Unhandled intent '{conversation.get_intent_name()}'")
    conversation.ask(UNHANDLED_SPEECH, NAME_REPROMPT)


HANDLERS = {
    LAUNCH: launch,
    "HelloWorldIntent": hello_world,
    "MyNameIsIntent": my_name_is,
    "HelpIntent": help_intent,
    UNHANDLED: unhandled,
}


def create_app(
    repository: Optional[BaseRepository[User]] = None,
    config: Optional[SkillSettings] = None,
    emitter: Optional[EventEmitter] = None,
) -> App:
    """Build the Hello World app with its handler table."""
    return App(HANDLERS, config=config, repository=repository, emitter=emitter)
