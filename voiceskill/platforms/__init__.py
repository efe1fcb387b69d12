"""
Supported voice platforms and lookup helpers.
"""
from typing import Any, Dict, List

from voiceskill.platforms.alexa import AlexaSkill
from voiceskill.platforms.base import Platform
from voiceskill.platforms.google_action import GoogleActionDialogFlow
from voiceskill.utils.error_handling import PlatformNotSupportedError, RequestError

PLATFORMS: Dict[str, Platform] = {
    platform.TYPE: platform for platform in (AlexaSkill(), GoogleActionDialogFlow())
}


def get_platform(name: str) -> Platform:
    """Look up a platform by its type name.

    Raises:
        PlatformNotSupportedError: If no platform has that name
    """
    try:
        return PLATFORMS[name]
    except KeyError:
        raise PlatformNotSupportedError(
            f"Platform '{name}' is not supported",
            context={"supported": sorted(PLATFORMS)},
        ) from None


def platform_names() -> List[str]:
    return list(PLATFORMS)


def detect_platform(raw: Dict[str, Any]) -> Platform:
    """Find the platform that sent a raw request body.

    Raises:
        RequestError: If no platform recognises the body
    """
    for platform in PLATFORMS.values():
        if platform.is_request(raw):
            return platform
    raise RequestError("Request was not sent by a supported platform")


__all__ = [
    "AlexaSkill",
    "GoogleActionDialogFlow",
    "Platform",
    "PLATFORMS",
    "detect_platform",
    "get_platform",
    "platform_names",
]
