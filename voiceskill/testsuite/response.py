"""
Response matcher returned by ``send``.
"""
from typing import Any, Dict, Iterable, Optional, Union

from voiceskill.domain.conversation.state import STATE_KEY, SkillResponse
from voiceskill.platforms import get_platform

Speech = Union[str, Iterable[str]]


def _matches(actual: Optional[str], expected: Optional[Speech]) -> bool:
    """Compare speech, accepting any of several variants when a list is given."""
    if expected is None:
        return True
    if isinstance(expected, str):
        return actual == expected
    return actual in list(expected)


class TestResponse:
    """A rendered platform response with predicates for assertions."""

    __test__ = False

    def __init__(self, platform_type: str, body: Dict[str, Any]):
        self.platform_type = platform_type
        self.body = body
        self.response: SkillResponse = get_platform(platform_type).parse_response(body)

    def type(self) -> str:
        return self.platform_type

    def is_ask(self, speech: Optional[Speech] = None, reprompt: Optional[Speech] = None) -> bool:
        """Check for an open-session response, optionally matching its speech and reprompt."""
        if not self.response.is_ask:
            return False
        return _matches(self.response.speech, speech) and _matches(self.response.reprompt, reprompt)

    def is_tell(self, speech: Optional[Speech] = None) -> bool:
        """Check for a session-ending response, optionally matching its speech."""
        if not self.response.is_tell:
            return False
        return _matches(self.response.speech, speech)

    def get_speech(self) -> Optional[str]:
        return self.response.speech

    def get_reprompt(self) -> Optional[str]:
        return self.response.reprompt

    def get_session_attributes(self) -> Dict[str, Any]:
        return dict(self.response.session_attributes)

    def get_session_attribute(self, name: str, default: Any = None) -> Any:
        return self.response.session_attributes.get(name, default)

    def has_state(self, state: str) -> bool:
        return self.response.session_attributes.get(STATE_KEY) == state

    def to_dict(self) -> Dict[str, Any]:
        return self.body

    def __repr__(self) -> str:
        kind = "ask" if self.response.is_ask else "tell"
        return f"TestResponse({self.platform_type}, {kind}, speech={self.response.speech!r})"
