"""
Test suite for conversational skills.

Build platform requests, send them through a skill and assert on the
response::

    for rb in get_platform_request_builder("AlexaSkill", "GoogleActionDialogFlow"):
        res = await send(rb.launch())
        assert res.is_ask("Hello World! What's your name?", "Please tell me your name.")
"""

from voiceskill.testsuite.request_builder import (
    AlexaRequest,
    AlexaRequestBuilder,
    GoogleActionDialogFlowRequest,
    GoogleActionDialogFlowRequestBuilder,
    RequestBuilder,
    TestRequest,
    get_platform_request_builder,
)
from voiceskill.testsuite.response import TestResponse
from voiceskill.testsuite.suite import (
    add_user_data,
    get_app,
    get_db_path,
    get_repository,
    get_user_data,
    remove_user,
    remove_user_data,
    send,
    set_app,
    set_db_path,
)

__all__ = [
    "AlexaRequest",
    "AlexaRequestBuilder",
    "GoogleActionDialogFlowRequest",
    "GoogleActionDialogFlowRequestBuilder",
    "RequestBuilder",
    "TestRequest",
    "TestResponse",
    "add_user_data",
    "get_app",
    "get_db_path",
    "get_platform_request_builder",
    "get_repository",
    "get_user_data",
    "remove_user",
    "remove_user_data",
    "send",
    "set_app",
    "set_db_path",
]
