from voiceskill.domain.conversation.context import Conversation
from voiceskill.domain.conversation.state import (
    STATE_KEY,
    RequestType,
    SkillRequest,
    SkillResponse,
)

__all__ = ["Conversation", "RequestType", "SkillRequest", "SkillResponse", "STATE_KEY"]
