"""
Google Assistant through Dialogflow (v1 webhook format).

Session attributes travel in an output context named ``session`` that
Dialogflow echoes back on the next request of the conversation.
"""
from typing import Any, Dict, List, Optional

from voiceskill.config.logging_config import get_logger
from voiceskill.domain.conversation.state import (
    RequestType,
    SkillRequest,
    SkillResponse,
    strip_ssml,
    to_ssml,
)
from voiceskill.platforms.base import Platform, json_list, json_object
from voiceskill.utils.error_handling import RequestError

logger = get_logger(__name__)

SESSION_CONTEXT = "session"
SESSION_CONTEXT_LIFESPAN = 10000

WELCOME_INTENT = "Default Welcome Intent"
MAIN_INTENT = "actions.intent.MAIN"
CANCEL_INTENT = "actions.intent.CANCEL"


class GoogleActionDialogFlow(Platform):
    """Dialogflow webhook JSON interface for Google Actions."""

    TYPE = "GoogleActionDialogFlow"

    def is_request(self, raw: Dict[str, Any]) -> bool:
        if not isinstance(raw, dict):
            return False
        original = raw.get("originalRequest")
        return (
            isinstance(raw.get("result"), dict)
            and isinstance(original, dict)
            and original.get("source") == "google"
        )

    def parse(self, raw: Dict[str, Any]) -> SkillRequest:
        result = raw.get("result") if isinstance(raw, dict) else None
        if not isinstance(result, dict):
            raise RequestError("Dialogflow request has no 'result'")

        intent_name = json_object(result.get("metadata"), "result.metadata").get("intentName")
        original = json_object(raw.get("originalRequest"), "originalRequest")
        data = json_object(original.get("data"), "originalRequest.data")
        google_intent = self._google_intent(data)

        if intent_name == WELCOME_INTENT or google_intent == MAIN_INTENT:
            request_type = RequestType.LAUNCH
            intent_name = None
        elif google_intent == CANCEL_INTENT:
            request_type = RequestType.END
            intent_name = None
        elif intent_name:
            request_type = RequestType.INTENT
        else:
            raise RequestError("Dialogflow request has no intent name")

        inputs = {
            name: value
            for name, value in json_object(result.get("parameters"), "result.parameters").items()
            if not name.endswith(".original")
        }

        user = json_object(data.get("user"), "originalRequest.data.user")
        conversation = json_object(data.get("conversation"), "originalRequest.data.conversation")
        return SkillRequest(
            platform=self.TYPE,
            request_type=request_type,
            intent_name=intent_name,
            inputs=inputs if request_type == RequestType.INTENT else {},
            user_id=user.get("userId", ""),
            session_id=raw.get("sessionId", ""),
            is_new_session=conversation.get("type") == "NEW",
            session_attributes=self._session_attributes(json_list(result.get("contexts"), "result.contexts")),
            locale=user.get("locale") or raw.get("lang"),
            timestamp=raw.get("timestamp"),
            raw=raw,
        )

    def render(self, response: SkillResponse, request: SkillRequest) -> Dict[str, Any]:
        speech = response.speech or ""
        google: Dict[str, Any] = {
            "expectUserResponse": not response.should_end_session,
            "richResponse": {
                "items": [{"simpleResponse": {"ssml": to_ssml(speech)}}],
            },
        }
        if response.reprompt is not None and not response.should_end_session:
            google["noInputPrompts"] = [{"ssml": to_ssml(response.reprompt)}]

        rendered: Dict[str, Any] = {
            "speech": strip_ssml(speech),
            "displayText": strip_ssml(speech),
            "data": {"google": google},
            "contextOut": [],
        }
        if response.session_attributes and not response.should_end_session:
            rendered["contextOut"].append({
                "name": SESSION_CONTEXT,
                "lifespan": SESSION_CONTEXT_LIFESPAN,
                "parameters": dict(response.session_attributes),
            })
        return rendered

    def parse_response(self, raw: Dict[str, Any]) -> SkillResponse:
        google = (raw.get("data") or {}).get("google") or {}
        items = (google.get("richResponse") or {}).get("items") or []
        speech = None
        for item in items:
            simple = item.get("simpleResponse")
            if simple:
                speech = strip_ssml(simple.get("ssml") or simple.get("textToSpeech"))
                break
        if speech is None:
            speech = raw.get("speech")

        prompts = google.get("noInputPrompts") or []
        reprompt = strip_ssml(prompts[0].get("ssml")) if prompts else None

        return SkillResponse(
            speech=speech,
            reprompt=reprompt,
            should_end_session=not google.get("expectUserResponse", False),
            session_attributes=self._session_attributes(raw.get("contextOut") or []),
        )

    @staticmethod
    def _google_intent(data: Dict[str, Any]) -> Optional[str]:
        inputs = json_list(data.get("inputs"), "originalRequest.data.inputs")
        if inputs and isinstance(inputs[0], dict):
            return inputs[0].get("intent")
        return None

    @staticmethod
    def _session_attributes(contexts: List[Dict[str, Any]]) -> Dict[str, Any]:
        for context in contexts:
            if isinstance(context, dict) and context.get("name") == SESSION_CONTEXT:
                parameters = json_object(context.get("parameters"), "contexts.parameters")
                return {
                    name: value
                    for name, value in parameters.items()
                    if not name.endswith(".original")
                }
        return {}
