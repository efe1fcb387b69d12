"""
Platform independent request and response models.

Platforms parse their raw JSON into a ``SkillRequest`` and render a
``SkillResponse`` back into their own format, so handlers never see
platform specific payloads.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

# Session attribute holding the current state name
STATE_KEY = "_STATE_"

_SPEAK_RE = re.compile(r"^\s*<speak>(.*)</speak>\s*$", re.DOTALL)


class RequestType(Enum):
    """Kinds of inbound requests."""

    LAUNCH = "LAUNCH"
    INTENT = "INTENT"
    END = "END"
    UNKNOWN = "UNKNOWN"


@dataclass
class SkillRequest:
    """A request received from a voice platform."""

    platform: str
    request_type: RequestType
    intent_name: Optional[str] = None
    inputs: Dict[str, Any] = field(default_factory=dict)
    user_id: str = ""
    session_id: str = ""
    is_new_session: bool = False
    session_attributes: Dict[str, Any] = field(default_factory=dict)
    locale: Optional[str] = None
    timestamp: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def state(self) -> Optional[str]:
        """The state the session is in, if any."""
        return self.session_attributes.get(STATE_KEY)


@dataclass
class SkillResponse:
    """What the skill answers, before platform rendering."""

    speech: Optional[str] = None
    reprompt: Optional[str] = None
    should_end_session: bool = True
    session_attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_ask(self) -> bool:
        """The conversation stays open waiting for the user."""
        return not self.should_end_session and self.reprompt is not None

    @property
    def is_tell(self) -> bool:
        """The conversation ends with this response."""
        return self.should_end_session


def to_ssml(text: str) -> str:
    """Wrap text in a ``<speak>`` element unless it already is one."""
    if _SPEAK_RE.match(text):
        return text.strip()
    return f"<speak>{text}</speak>"


def strip_ssml(ssml: Optional[str]) -> Optional[str]:
    """Remove the outer ``<speak>`` element, leaving inner markup alone."""
    if ssml is None:
        return None
    match = _SPEAK_RE.match(ssml)
    return match.group(1) if match else ssml
