"""
Amazon Alexa (Alexa Skills Kit) request and response mapping.
"""
from typing import Any, Dict, Optional

from voiceskill.config.logging_config import get_logger
from voiceskill.domain.conversation.state import (
    RequestType,
    SkillRequest,
    SkillResponse,
    strip_ssml,
    to_ssml,
)
from voiceskill.platforms.base import Platform, json_object
from voiceskill.utils.error_handling import RequestError

logger = get_logger(__name__)

_REQUEST_TYPES = {
    "LaunchRequest": RequestType.LAUNCH,
    "IntentRequest": RequestType.INTENT,
    "SessionEndedRequest": RequestType.END,
}


class AlexaSkill(Platform):
    """Alexa Skills Kit JSON interface."""

    TYPE = "AlexaSkill"

    def is_request(self, raw: Dict[str, Any]) -> bool:
        return (
            isinstance(raw, dict)
            and isinstance(raw.get("request"), dict)
            and "version" in raw
        )

    def parse(self, raw: Dict[str, Any]) -> SkillRequest:
        body = raw.get("request") if isinstance(raw, dict) else None
        if not isinstance(body, dict) or "type" not in body:
            raise RequestError("Alexa request has no 'request.type'")

        request_type = _REQUEST_TYPES.get(body["type"], RequestType.UNKNOWN)
        if request_type == RequestType.UNKNOWN:
            logger.warning(f"Unknown Alexa request type: {body['type']}")

        intent_name = None
        inputs: Dict[str, Any] = {}
        if request_type == RequestType.INTENT:
            intent = json_object(body.get("intent"), "request.intent")
            intent_name = intent.get("name")
            if not intent_name:
                raise RequestError("Alexa IntentRequest has no intent name")
            for slot_name, slot in json_object(intent.get("slots"), "request.intent.slots").items():
                inputs[slot_name] = slot.get("value") if isinstance(slot, dict) else slot

        session = json_object(raw.get("session"), "session")
        return SkillRequest(
            platform=self.TYPE,
            request_type=request_type,
            intent_name=intent_name,
            inputs=inputs,
            user_id=self._user_id(raw) or "",
            session_id=session.get("sessionId", ""),
            is_new_session=bool(session.get("new", False)),
            session_attributes=dict(json_object(session.get("attributes"), "session.attributes")),
            locale=body.get("locale"),
            timestamp=body.get("timestamp"),
            raw=raw,
        )

    def render(self, response: SkillResponse, request: SkillRequest) -> Dict[str, Any]:
        body: Dict[str, Any] = {"shouldEndSession": response.should_end_session}
        if response.speech is not None:
            body["outputSpeech"] = _output_speech(response.speech)
        if response.reprompt is not None and not response.should_end_session:
            body["reprompt"] = {"outputSpeech": _output_speech(response.reprompt)}

        return {
            "version": "1.0",
            "response": body,
            "sessionAttributes": dict(response.session_attributes),
        }

    def parse_response(self, raw: Dict[str, Any]) -> SkillResponse:
        body = raw.get("response") or {}
        reprompt = (body.get("reprompt") or {}).get("outputSpeech")
        return SkillResponse(
            speech=_speech_text(body.get("outputSpeech")),
            reprompt=_speech_text(reprompt),
            should_end_session=bool(body.get("shouldEndSession", True)),
            session_attributes=dict(raw.get("sessionAttributes") or {}),
        )

    @staticmethod
    def _user_id(raw: Dict[str, Any]) -> Optional[str]:
        session = json_object(raw.get("session"), "session")
        session_user = json_object(session.get("user"), "session.user")
        if session_user.get("userId"):
            return session_user["userId"]
        context = json_object(raw.get("context"), "context")
        system = json_object(context.get("System"), "context.System")
        return json_object(system.get("user"), "context.System.user").get("userId")


def _output_speech(text: str) -> Dict[str, str]:
    return {"type": "SSML", "ssml": to_ssml(text)}


def _speech_text(output_speech: Optional[Dict[str, Any]]) -> Optional[str]:
    if not output_speech:
        return None
    if output_speech.get("type") == "PlainText":
        return output_speech.get("text")
    return strip_ssml(output_speech.get("ssml"))
