"""
Skill runtime.

``App`` turns a raw platform request into a platform response: it parses
the request, loads the user, routes it through the handler table,
persists the user and renders the answer.
"""

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Optional, Tuple

from voiceskill.config import settings
from voiceskill.config.logging_config import get_logger
from voiceskill.config.settings import SkillSettings
from voiceskill.data import create_repository
from voiceskill.data.base_repository import BaseRepository
from voiceskill.data.models import User
from voiceskill.domain.conversation.context import Conversation
from voiceskill.domain.conversation.state import RequestType
from voiceskill.events.event_interface import (
    ErrorEvent,
    Event,
    EventEmitter,
    EventType,
    event_bus,
)
from voiceskill.platforms import detect_platform
from voiceskill.utils.error_handling import (
    AppError,
    ErrorSeverity,
    HandlerNotFoundError,
    RequestError,
)

logger = get_logger(__name__)

LAUNCH = "LAUNCH"
END = "END"
UNHANDLED = "Unhandled"

Handler = Callable[..., Any]


class App:
    """
    Handler table based voice skill.

    Handlers are registered with ``set_handler`` as a mapping of intent
    names (or ``LAUNCH``, ``END``, ``Unhandled``) to callables. A value
    that is itself a mapping defines a state with its own handlers.
    """

    def __init__(
        self,
        handlers: Optional[Dict[str, Any]] = None,
        config: Optional[SkillSettings] = None,
        repository: Optional[BaseRepository[User]] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        """
        Initialize the app.

        Args:
            handlers: Initial handler table
            config: Runtime settings, defaults to ``settings.skill``
            repository: User storage, defaults to the configured repository
            emitter: Event emitter, defaults to the global event bus
        """
        self.config = config or settings.skill
        self.repository = repository if repository is not None else create_repository()
        self.emitter = emitter or event_bus
        self.handlers: Dict[str, Any] = {}
        self._connect_lock = asyncio.Lock()

        if handlers:
            self.set_handler(handlers)

    def set_handler(self, handlers: Dict[str, Any]) -> 'App':
        """
        Add handlers to the table, merging state tables with existing ones.

        Raises:
            TypeError: If a value is neither callable nor a mapping of callables
        """
        for name, value in handlers.items():
            if isinstance(value, dict):
                for intent_name, handler in value.items():
                    if not callable(handler):
                        raise TypeError(f"Handler '{name}.{intent_name}' is not callable")
                self.handlers.setdefault(name, {})
                if not isinstance(self.handlers[name], dict):
                    raise TypeError(f"'{name}' is already registered as an intent handler")
                self.handlers[name].update(value)
            elif callable(value):
                self.handlers[name] = value
            else:
                raise TypeError(f"Handler '{name}' is not callable")
        return self

    def map_intent(self, intent_name: str) -> str:
        """Translate a platform intent name through the intent map."""
        return self.config.intent_map.get(intent_name, intent_name)

    def resolve_handler(self, intent_name: str, state: Optional[str] = None) -> Tuple[Optional[Handler], str]:
        """
        Find the handler for an intent.

        Lookup order is the state's handler, the state's ``Unhandled``, the
        global handler and finally the global ``Unhandled``. ``END`` never
        falls back to ``Unhandled``.

        Returns:
            The handler (None only for an unhandled ``END``) and the name it was found under

        Raises:
            HandlerNotFoundError: If nothing matches
        """
        if state:
            table = self.handlers.get(state)
            if isinstance(table, dict):
                if intent_name in table:
                    return table[intent_name], f"{state}.{intent_name}"
                if intent_name != END and UNHANDLED in table:
                    return table[UNHANDLED], f"{state}.{UNHANDLED}"
            else:
                logger.warning(f"Unknown state '{state}', using global handlers")

        handler = self.handlers.get(intent_name)
        if callable(handler):
            return handler, intent_name

        if intent_name == END:
            return None, END

        handler = self.handlers.get(UNHANDLED)
        if callable(handler):
            return handler, UNHANDLED

        raise HandlerNotFoundError(intent_name, state)

    async def connect(self) -> None:
        """Connect the user repository if it is not connected yet."""
        async with self._connect_lock:
            if not self.repository.is_connected:
                await self.repository.connect()

    async def close(self) -> None:
        """Disconnect the user repository."""
        if self.repository.is_connected:
            await self.repository.disconnect()

    async def handle(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle one raw platform request.

        Args:
            raw: Request body as sent by the platform

        Returns:
            Dict[str, Any]: Response body in the same platform's format

        Raises:
            RequestError: If no platform recognises the request
            HandlerNotFoundError: If no handler matches
            AppError: For routing failures such as too many redirects
        """
        try:
            platform = detect_platform(raw)
            try:
                request = platform.parse(raw)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise RequestError(
                    f"Malformed {platform.type()} request: {e}", cause=e
                ) from e
            logger.info(
                f"{platform.type()} {request.request_type.value} request"
                f"{' ' + request.intent_name if request.intent_name else ''}"
            )
            self.emitter.emit(Event(EventType.REQUEST_RECEIVED, {
                "platform": platform.type(),
                "request_type": request.request_type.value,
                "intent": request.intent_name,
                "user_id": request.user_id,
            }))

            await self.connect()
            user = await self._load_user(request.user_id)
            user.touch(new_session=request.is_new_session)

            conversation = Conversation(request, user)
            await self._route(conversation)

            if self.config.save_user_data and request.user_id:
                await self.repository.save(user)
                self.emitter.emit(Event(EventType.USER_SAVED, {"user_id": user.id}))

            rendered = platform.render(conversation.response, request)
            self.emitter.emit(Event(EventType.RESPONSE_SENT, {
                "platform": platform.type(),
                "speech": conversation.response.speech,
                "reprompt": conversation.response.reprompt,
                "should_end_session": conversation.response.should_end_session,
            }))
            return rendered

        except AppError as e:
            logger.error(str(e))
            self.emitter.emit(ErrorEvent(EventType.ERROR, error=e.to_dict()))
            raise

    async def _load_user(self, user_id: str) -> User:
        if not user_id:
            logger.warning("Request carries no user id, user data will not be stored")
            return User(id="")
        user = await self.repository.get_by_id(user_id)
        if user is None:
            logger.debug(f"New user {user_id}")
            user = User(id=user_id)
        return user

    async def _route(self, conversation: Conversation) -> None:
        request = conversation.request
        if request.request_type == RequestType.LAUNCH:
            intent_name = LAUNCH
        elif request.request_type == RequestType.END:
            intent_name = END
        elif request.request_type == RequestType.INTENT:
            intent_name = self.map_intent(request.intent_name)
        else:
            intent_name = UNHANDLED

        state = conversation.get_state()
        inputs = list(request.inputs.values())
        redirects = 0

        while True:
            handler, resolved = self.resolve_handler(intent_name, state)
            self.emitter.emit(Event(EventType.INTENT_ROUTED, {
                "intent": intent_name,
                "handler": resolved,
                "state": state,
            }))
            if handler is None:
                logger.debug("No END handler registered, closing session")
                break

            logger.debug(f"Routing '{intent_name}' to handler '{resolved}'")
            result = handler(conversation, *_accepted_inputs(handler, inputs))
            if inspect.isawaitable(result):
                await result

            redirect = conversation.take_redirect()
            if redirect is None:
                break

            redirects += 1
            if redirects > self.config.max_redirects:
                raise AppError(
                    f"Too many intent redirects (limit {self.config.max_redirects})",
                    severity=ErrorSeverity.ERROR,
                    context={"last_intent": redirect[0]},
                )
            intent_name, state = redirect


def _accepted_inputs(handler: Handler, inputs: List[Any]) -> List[Any]:
    """Drop inputs beyond the positional parameters a handler declares."""
    try:
        parameters = list(inspect.signature(handler).parameters.values())
    except (TypeError, ValueError):
        return inputs
    if any(p.kind == p.VAR_POSITIONAL for p in parameters):
        return inputs
    positional = [p for p in parameters if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
    # The first positional parameter receives the conversation
    return inputs[:max(len(positional) - 1, 0)]
