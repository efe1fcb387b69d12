# tests/test_platforms.py
import pytest

from voiceskill.domain.conversation.state import (
    RequestType,
    SkillResponse,
    strip_ssml,
    to_ssml,
)
from voiceskill.platforms import (
    AlexaSkill,
    GoogleActionDialogFlow,
    detect_platform,
    get_platform,
)
from voiceskill.testsuite import (
    AlexaRequestBuilder,
    GoogleActionDialogFlowRequestBuilder,
    get_platform_request_builder,
)
from voiceskill.utils.error_handling import PlatformNotSupportedError, RequestError


def test_ssml_helpers():
    assert to_ssml("Hello") == "<speak>Hello</speak>"
    assert to_ssml("<speak>Hello</speak>") == "<speak>Hello</speak>"
    assert strip_ssml("<speak>Hi <break time='1s'/> there</speak>") == "Hi <break time='1s'/> there"
    assert strip_ssml("plain") == "plain"
    assert strip_ssml(None) is None


def test_get_platform():
    assert isinstance(get_platform("AlexaSkill"), AlexaSkill)
    assert isinstance(get_platform("GoogleActionDialogFlow"), GoogleActionDialogFlow)

    with pytest.raises(PlatformNotSupportedError):
        get_platform("Cortana")


def test_detect_platform(rb):
    assert detect_platform(rb.launch().to_dict()).type() == rb.type()

    with pytest.raises(RequestError):
        detect_platform({"unexpected": True})


def test_get_platform_request_builder_defaults_to_all_platforms():
    builders = get_platform_request_builder()

    assert [builder.type() for builder in builders] == ["AlexaSkill", "GoogleActionDialogFlow"]

    with pytest.raises(PlatformNotSupportedError):
        get_platform_request_builder("AlexaSkill", "Cortana")


def test_parse_launch(rb):
    request = get_platform(rb.type()).parse(rb.launch().to_dict())

    assert request.request_type == RequestType.LAUNCH
    assert request.intent_name is None
    assert request.is_new_session is True
    assert request.user_id == rb.default_user_id
    assert request.locale == "en-US"


def test_parse_intent_with_inputs(rb):
    raw = rb.intent("MyNameIsIntent", {"name": "John"}).set_session_attribute("visits", 3).to_dict()

    request = get_platform(rb.type()).parse(raw)

    assert request.request_type == RequestType.INTENT
    assert request.intent_name == "MyNameIsIntent"
    assert request.inputs == {"name": "John"}
    assert request.session_attributes == {"visits": 3}
    assert request.is_new_session is False


def test_parse_session_ended(rb):
    request = get_platform(rb.type()).parse(rb.session_ended().to_dict())

    assert request.request_type == RequestType.END


def test_parse_intent_without_name_is_rejected(rb):
    with pytest.raises(RequestError):
        get_platform(rb.type()).parse(rb.intent().to_dict())


def test_set_user_id_and_locale(rb):
    raw = rb.launch().set_user_id("user-42").set_locale("de-DE").to_dict()

    request = get_platform(rb.type()).parse(raw)

    assert request.user_id == "user-42"
    assert request.locale == "de-DE"


def test_ask_render_round_trip(rb):
    platform = get_platform(rb.type())
    request = platform.parse(rb.launch().to_dict())
    response = SkillResponse(
        speech="What's your name?",
        reprompt="Your name, please.",
        should_end_session=False,
        session_attributes={"step": 1},
    )

    parsed = platform.parse_response(platform.render(response, request))

    assert parsed == response
    assert parsed.is_ask


def test_alexa_render_shape():
    platform = AlexaSkill()
    request = platform.parse(AlexaRequestBuilder().launch().to_dict())

    body = platform.render(SkillResponse(speech="Bye", should_end_session=True), request)

    assert body["version"] == "1.0"
    assert body["response"]["outputSpeech"] == {"type": "SSML", "ssml": "<speak>Bye</speak>"}
    assert body["response"]["shouldEndSession"] is True
    assert "reprompt" not in body["response"]


def test_alexa_plain_text_output_speech():
    response = AlexaSkill().parse_response({
        "version": "1.0",
        "response": {"outputSpeech": {"type": "PlainText", "text": "Hi"}, "shouldEndSession": True},
    })

    assert response.speech == "Hi"
    assert response.is_tell


def test_alexa_user_id_falls_back_to_context():
    raw = AlexaRequestBuilder().launch().to_dict()
    del raw["session"]
    raw["context"]["System"]["user"]["userId"] = "from-context"

    request = AlexaSkill().parse(raw)

    assert request.user_id == "from-context"
    assert request.session_attributes == {}


def test_google_render_shape():
    platform = GoogleActionDialogFlow()
    request = platform.parse(GoogleActionDialogFlowRequestBuilder().launch().to_dict())

    body = platform.render(SkillResponse(
        speech="Hello", reprompt="Still there?", should_end_session=False,
        session_attributes={"step": 1},
    ), request)

    google = body["data"]["google"]
    assert body["speech"] == "Hello"
    assert google["expectUserResponse"] is True
    assert google["richResponse"]["items"][0]["simpleResponse"]["ssml"] == "<speak>Hello</speak>"
    assert google["noInputPrompts"] == [{"ssml": "<speak>Still there?</speak>"}]
    assert body["contextOut"][0]["name"] == "session"
    assert body["contextOut"][0]["parameters"] == {"step": 1}


def test_google_tell_drops_session_context():
    platform = GoogleActionDialogFlow()
    request = platform.parse(GoogleActionDialogFlowRequestBuilder().launch().to_dict())

    body = platform.render(SkillResponse(speech="Bye", session_attributes={"step": 1}), request)

    assert body["data"]["google"]["expectUserResponse"] is False
    assert "noInputPrompts" not in body["data"]["google"]
    assert body["contextOut"] == []


def test_google_ignores_original_parameters():
    raw = GoogleActionDialogFlowRequestBuilder().intent("MyNameIsIntent", {"name": "John"}).to_dict()
    raw["result"]["parameters"]["name.original"] = "john"

    request = GoogleActionDialogFlow().parse(raw)

    assert request.inputs == {"name": "John"}


@pytest.mark.parametrize("mutate", [
    lambda raw: raw["request"]["intent"].update(slots=["name"]),
    lambda raw: raw.update(session="oops"),
    lambda raw: raw["session"].update(attributes=[1, 2]),
    lambda raw: (raw["session"].pop("user"), raw["context"].update(System="oops")),
])
def test_alexa_rejects_malformed_objects(mutate):
    raw = AlexaRequestBuilder().intent("MyNameIsIntent", {"name": "John"}).to_dict()
    mutate(raw)

    with pytest.raises(RequestError, match="must be an"):
        AlexaSkill().parse(raw)


@pytest.mark.parametrize("mutate", [
    lambda raw: raw["result"].update(parameters=["name"]),
    lambda raw: raw["result"].update(contexts={"name": "session"}),
    lambda raw: raw["originalRequest"].update(data="oops"),
    lambda raw: raw["originalRequest"]["data"].update(inputs="oops"),
])
def test_google_rejects_malformed_objects(mutate):
    raw = GoogleActionDialogFlowRequestBuilder().intent("MyNameIsIntent", {"name": "John"}).to_dict()
    mutate(raw)

    with pytest.raises(RequestError, match="must be an"):
        GoogleActionDialogFlow().parse(raw)


def test_detect_platform_rejects_non_objects():
    with pytest.raises(RequestError):
        detect_platform(["not", "a", "request"])
