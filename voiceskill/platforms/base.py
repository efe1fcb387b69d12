"""
Base class for voice platforms.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from voiceskill.domain.conversation.state import SkillRequest, SkillResponse
from voiceskill.utils.error_handling import RequestError


class Platform(ABC):
    """Translates between one platform's JSON and the skill's models."""

    #: Platform identifier used by request builders and the registry
    TYPE: str = ""

    def type(self) -> str:
        return self.TYPE

    @abstractmethod
    def is_request(self, raw: Dict[str, Any]) -> bool:
        """Check whether a raw request body was sent by this platform."""
        pass

    @abstractmethod
    def parse(self, raw: Dict[str, Any]) -> SkillRequest:
        """Parse a raw request body.

        Raises:
            RequestError: If required fields are missing
        """
        pass

    @abstractmethod
    def render(self, response: SkillResponse, request: SkillRequest) -> Dict[str, Any]:
        """Render a response into the platform's response body."""
        pass

    @abstractmethod
    def parse_response(self, raw: Dict[str, Any]) -> SkillResponse:
        """Read a rendered response body back into a ``SkillResponse``."""
        pass


def json_object(value: Any, field: str) -> Dict[str, Any]:
    """Return ``value`` as a JSON object, treating a missing value as empty.

    Raises:
        RequestError: If the value is present but not an object
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise RequestError(f"'{field}' must be an object, got {type(value).__name__}")
    return value


def json_list(value: Any, field: str) -> List[Any]:
    """Return ``value`` as a JSON array, treating a missing value as empty.

    Raises:
        RequestError: If the value is present but not an array
    """
    if value is None:
        return []
    if not isinstance(value, list):
        raise RequestError(f"'{field}' must be an array, got {type(value).__name__}")
    return value
