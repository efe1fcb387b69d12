"""
Request builders producing mock platform requests.

Each builder creates requests shaped exactly like the ones its platform
sends, so they go through the same parsing as production traffic.
"""

import copy
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from voiceskill.config import settings
from voiceskill.domain.conversation.state import STATE_KEY
from voiceskill.platforms import get_platform, platform_names
from voiceskill.platforms.google_action import (
    CANCEL_INTENT,
    MAIN_INTENT,
    SESSION_CONTEXT,
    SESSION_CONTEXT_LIFESPAN,
    WELCOME_INTENT,
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class TestRequest(ABC):
    """A mutable mock request. Setters return the request for chaining."""

    __test__ = False

    platform_type: str = ""

    def __init__(self, body: Dict[str, Any]):
        self.body = body

    def type(self) -> str:
        return self.platform_type

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.body)

    @abstractmethod
    def set_intent_name(self, name: str) -> 'TestRequest':
        pass

    @abstractmethod
    def get_intent_name(self) -> Optional[str]:
        pass

    @abstractmethod
    def add_input(self, name: str, value: Any) -> 'TestRequest':
        pass

    @abstractmethod
    def get_inputs(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def set_user_id(self, user_id: str) -> 'TestRequest':
        pass

    @abstractmethod
    def get_user_id(self) -> str:
        pass

    @abstractmethod
    def set_session_attributes(self, attributes: Dict[str, Any]) -> 'TestRequest':
        pass

    @abstractmethod
    def get_session_attributes(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def set_new_session(self, is_new: bool) -> 'TestRequest':
        pass

    @abstractmethod
    def set_locale(self, locale: str) -> 'TestRequest':
        pass

    def add_inputs(self, inputs: Optional[Dict[str, Any]]) -> 'TestRequest':
        for name, value in (inputs or {}).items():
            self.add_input(name, value)
        return self

    def set_session_attribute(self, name: str, value: Any) -> 'TestRequest':
        attributes = self.get_session_attributes()
        attributes[name] = value
        return self.set_session_attributes(attributes)

    def set_state(self, state: str) -> 'TestRequest':
        return self.set_session_attribute(STATE_KEY, state)


class AlexaRequest(TestRequest):
    """Alexa Skills Kit request body."""

    platform_type = "AlexaSkill"

    def set_intent_name(self, name: str) -> 'AlexaRequest':
        request = self.body["request"]
        request["type"] = "IntentRequest"
        request.setdefault("intent", {"name": "", "confirmationStatus": "NONE", "slots": {}})
        request["intent"]["name"] = name
        return self

    def get_intent_name(self) -> Optional[str]:
        return (self.body["request"].get("intent") or {}).get("name")

    def add_input(self, name: str, value: Any) -> 'AlexaRequest':
        intent = self.body["request"].setdefault(
            "intent", {"name": "", "confirmationStatus": "NONE", "slots": {}}
        )
        intent.setdefault("slots", {})[name] = {"name": name, "value": value}
        return self

    def get_inputs(self) -> Dict[str, Any]:
        slots = (self.body["request"].get("intent") or {}).get("slots") or {}
        return {name: slot.get("value") for name, slot in slots.items()}

    def set_user_id(self, user_id: str) -> 'AlexaRequest':
        self.body["session"]["user"]["userId"] = user_id
        self.body["context"]["System"]["user"]["userId"] = user_id
        return self

    def get_user_id(self) -> str:
        return self.body["session"]["user"]["userId"]

    def set_session_attributes(self, attributes: Dict[str, Any]) -> 'AlexaRequest':
        self.body["session"]["attributes"] = dict(attributes)
        return self

    def get_session_attributes(self) -> Dict[str, Any]:
        return dict(self.body["session"].get("attributes") or {})

    def set_new_session(self, is_new: bool) -> 'AlexaRequest':
        self.body["session"]["new"] = is_new
        return self

    def set_locale(self, locale: str) -> 'AlexaRequest':
        self.body["request"]["locale"] = locale
        return self


class GoogleActionDialogFlowRequest(TestRequest):
    """Dialogflow v1 webhook request body for Google Actions."""

    platform_type = "GoogleActionDialogFlow"

    def set_intent_name(self, name: str) -> 'GoogleActionDialogFlowRequest':
        self.body["result"]["metadata"]["intentName"] = name
        inputs = self.body["originalRequest"]["data"]["inputs"]
        if inputs and inputs[0].get("intent") == MAIN_INTENT and name != WELCOME_INTENT:
            inputs[0]["intent"] = "actions.intent.TEXT"
        return self

    def get_intent_name(self) -> Optional[str]:
        return self.body["result"]["metadata"].get("intentName")

    def add_input(self, name: str, value: Any) -> 'GoogleActionDialogFlowRequest':
        self.body["result"]["parameters"][name] = value
        return self

    def get_inputs(self) -> Dict[str, Any]:
        return dict(self.body["result"]["parameters"])

    def set_user_id(self, user_id: str) -> 'GoogleActionDialogFlowRequest':
        self.body["originalRequest"]["data"]["user"]["userId"] = user_id
        return self

    def get_user_id(self) -> str:
        return self.body["originalRequest"]["data"]["user"]["userId"]

    def set_session_attributes(self, attributes: Dict[str, Any]) -> 'GoogleActionDialogFlowRequest':
        contexts = [c for c in self.body["result"]["contexts"] if c.get("name") != SESSION_CONTEXT]
        contexts.append({
            "name": SESSION_CONTEXT,
            "parameters": dict(attributes),
            "lifespan": SESSION_CONTEXT_LIFESPAN,
        })
        self.body["result"]["contexts"] = contexts
        return self

    def get_session_attributes(self) -> Dict[str, Any]:
        for context in self.body["result"]["contexts"]:
            if context.get("name") == SESSION_CONTEXT:
                return dict(context.get("parameters") or {})
        return {}

    def set_new_session(self, is_new: bool) -> 'GoogleActionDialogFlowRequest':
        self.body["originalRequest"]["data"]["conversation"]["type"] = "NEW" if is_new else "ACTIVE"
        return self

    def set_locale(self, locale: str) -> 'GoogleActionDialogFlowRequest':
        self.body["originalRequest"]["data"]["user"]["locale"] = locale
        self.body["lang"] = locale.lower()
        return self


class RequestBuilder(ABC):
    """Creates mock requests for one platform."""

    platform_type: str = ""
    default_user_id: str = ""

    def __init__(self, locale: Optional[str] = None, user_id: Optional[str] = None):
        self.locale = locale or settings.skill.locale
        self.user_id = user_id or self.default_user_id

    def type(self) -> str:
        return self.platform_type

    @abstractmethod
    def launch(self) -> TestRequest:
        pass

    @abstractmethod
    def intent(self, name: Optional[str] = None, inputs: Optional[Dict[str, Any]] = None) -> TestRequest:
        pass

    @abstractmethod
    def session_ended(self) -> TestRequest:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.platform_type})"


class AlexaRequestBuilder(RequestBuilder):
    platform_type = "AlexaSkill"
    default_user_id = "amzn1.ask.account.TEST-USER"
    application_id = "amzn1.ask.skill.TEST-SKILL"

    def _body(self, request: Dict[str, Any], new_session: bool) -> Dict[str, Any]:
        session_id = f"amzn1.echo-api.session.{uuid.uuid4()}"
        request = dict(request, requestId=f"amzn1.echo-api.request.{uuid.uuid4()}",
                       timestamp=_timestamp(), locale=self.locale)
        return {
            "version": "1.0",
            "session": {
                "new": new_session,
                "sessionId": session_id,
                "application": {"applicationId": self.application_id},
                "attributes": {},
                "user": {"userId": self.user_id},
            },
            "context": {
                "System": {
                    "application": {"applicationId": self.application_id},
                    "user": {"userId": self.user_id},
                    "device": {"supportedInterfaces": {}},
                },
            },
            "request": request,
        }

    def launch(self) -> AlexaRequest:
        return AlexaRequest(self._body({"type": "LaunchRequest"}, new_session=True))

    def intent(self, name: Optional[str] = None, inputs: Optional[Dict[str, Any]] = None) -> AlexaRequest:
        request = AlexaRequest(self._body({
            "type": "IntentRequest",
            "intent": {"name": "", "confirmationStatus": "NONE", "slots": {}},
        }, new_session=False))
        if name:
            request.set_intent_name(name)
        request.add_inputs(inputs)
        return request

    def session_ended(self) -> AlexaRequest:
        return AlexaRequest(self._body({
            "type": "SessionEndedRequest",
            "reason": "USER_INITIATED",
        }, new_session=False))


class GoogleActionDialogFlowRequestBuilder(RequestBuilder):
    platform_type = "GoogleActionDialogFlow"
    default_user_id = "google-test-user"

    def _body(self, intent_name: str, google_intent: str, query: str, new_session: bool) -> Dict[str, Any]:
        conversation_id = str(int(uuid.uuid4().int % 10 ** 13))
        return {
            "originalRequest": {
                "source": "google",
                "version": "2",
                "data": {
                    "isInSandbox": True,
                    "surface": {"capabilities": [{"name": "actions.capability.AUDIO_OUTPUT"}]},
                    "inputs": [{
                        "rawInputs": [{"query": query, "inputType": "VOICE"}],
                        "intent": google_intent,
                        "arguments": [],
                    }],
                    "user": {"locale": self.locale, "userId": self.user_id},
                    "device": {},
                    "conversation": {
                        "conversationId": conversation_id,
                        "type": "NEW" if new_session else "ACTIVE",
                    },
                },
            },
            "id": str(uuid.uuid4()),
            "timestamp": _timestamp(),
            "lang": self.locale.lower(),
            "result": {
                "source": "agent",
                "resolvedQuery": query,
                "speech": "",
                "action": "",
                "actionIncomplete": False,
                "parameters": {},
                "contexts": [],
                "metadata": {
                    "intentId": str(uuid.uuid4()),
                    "webhookUsed": "true",
                    "webhookForSlotFillingUsed": "false",
                    "intentName": intent_name,
                },
                "fulfillment": {"speech": "", "messages": []},
                "score": 1,
            },
            "status": {"code": 200, "errorType": "success"},
            "sessionId": f"{conversation_id}",
        }

    def launch(self) -> GoogleActionDialogFlowRequest:
        return GoogleActionDialogFlowRequest(
            self._body(WELCOME_INTENT, MAIN_INTENT, "GOOGLE_ASSISTANT_WELCOME", new_session=True)
        )

    def intent(self, name: Optional[str] = None,
               inputs: Optional[Dict[str, Any]] = None) -> GoogleActionDialogFlowRequest:
        request = GoogleActionDialogFlowRequest(
            self._body(name or "", "actions.intent.TEXT", name or "", new_session=False)
        )
        request.add_inputs(inputs)
        return request

    def session_ended(self) -> GoogleActionDialogFlowRequest:
        return GoogleActionDialogFlowRequest(
            self._body("", CANCEL_INTENT, "cancel", new_session=False)
        )


BUILDERS = {
    builder.platform_type: builder
    for builder in (AlexaRequestBuilder, GoogleActionDialogFlowRequestBuilder)
}


def get_platform_request_builder(*platform_types: str, **kwargs) -> List[RequestBuilder]:
    """
    Create request builders for the given platforms.

    Args:
        platform_types: Platform type names; all supported platforms when empty
        kwargs: Passed to every builder (``locale``, ``user_id``)

    Returns:
        List[RequestBuilder]: One builder per platform, in the order given

    Raises:
        PlatformNotSupportedError: For an unknown platform name
    """
    names = platform_types or tuple(platform_names())
    builders = []
    for name in names:
        get_platform(name)  # raises for unknown platforms
        builders.append(BUILDERS[name](**kwargs))
    return builders
