"""
The object intent handlers receive.

A ``Conversation`` wraps one inbound request, the user it belongs to and
the response being built. Handlers answer with ``ask`` or ``tell`` and
can hand over to another intent with ``to_intent``.
"""

from typing import Any, Dict, Optional, Tuple

from voiceskill.config.logging_config import get_logger
from voiceskill.data.models import User
from voiceskill.domain.conversation.state import (
    STATE_KEY,
    RequestType,
    SkillRequest,
    SkillResponse,
)

logger = get_logger(__name__)


class Conversation:
    """Handler context for a single request."""

    def __init__(self, request: SkillRequest, user: User):
        self.request = request
        self.user = user
        self.session_attributes: Dict[str, Any] = dict(request.session_attributes)
        self.response = SkillResponse(session_attributes=self.session_attributes)
        self._redirect: Optional[Tuple[str, Optional[str]]] = None
        self._responded = False

    # Request accessors

    def get_platform_type(self) -> str:
        return self.request.platform

    def get_intent_name(self) -> Optional[str]:
        return self.request.intent_name

    def get_input(self, name: str, default: Any = None) -> Any:
        return self.request.inputs.get(name, default)

    def get_inputs(self) -> Dict[str, Any]:
        return dict(self.request.inputs)

    def is_new_session(self) -> bool:
        return self.request.is_new_session

    def is_launch_request(self) -> bool:
        return self.request.request_type == RequestType.LAUNCH

    def get_state(self) -> Optional[str]:
        return self.session_attributes.get(STATE_KEY)

    def get_session_attribute(self, name: str, default: Any = None) -> Any:
        return self.session_attributes.get(name, default)

    def set_session_attribute(self, name: str, value: Any) -> 'Conversation':
        self.session_attributes[name] = value
        return self

    # Responses

    def ask(self, speech: str, reprompt: Optional[str] = None) -> 'Conversation':
        """Speak and keep the session open. The reprompt defaults to the speech."""
        self._respond(speech, reprompt if reprompt is not None else speech, False)
        return self

    def tell(self, speech: str) -> 'Conversation':
        """Speak and end the session."""
        self._respond(speech, None, True)
        return self

    def _respond(self, speech: str, reprompt: Optional[str], end_session: bool) -> None:
        if self._responded:
            logger.warning("Response already set for this request, overwriting it")
        self.response.speech = speech
        self.response.reprompt = reprompt
        self.response.should_end_session = end_session
        self._responded = True

    @property
    def responded(self) -> bool:
        return self._responded

    # Routing

    def to_intent(self, intent_name: str) -> 'Conversation':
        """Continue with another intent handler once the current one returns."""
        self._redirect = (intent_name, self.get_state())
        return self

    def to_state_intent(self, state: Optional[str], intent_name: str) -> 'Conversation':
        """Switch to ``state`` and continue with its handler for ``intent_name``."""
        self.follow_up_state(state)
        self._redirect = (intent_name, state)
        return self

    def to_global_intent(self, intent_name: str) -> 'Conversation':
        """Continue with a handler outside of any state."""
        return self.to_state_intent(None, intent_name)

    def follow_up_state(self, state: Optional[str]) -> 'Conversation':
        """Route the next request of this session inside ``state``."""
        if state is None:
            self.session_attributes.pop(STATE_KEY, None)
        else:
            self.session_attributes[STATE_KEY] = state
        return self

    def remove_state(self) -> 'Conversation':
        return self.follow_up_state(None)

    def take_redirect(self) -> Optional[Tuple[str, Optional[str]]]:
        """Return and clear the pending redirect, if any."""
        redirect, self._redirect = self._redirect, None
        return redirect
