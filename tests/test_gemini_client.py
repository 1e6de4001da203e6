from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from matchposter.clients.base import BackgroundPrompt, UpstreamError, find_retry_delay
from matchposter.clients.gemini import GeminiClient, extract_image
from matchposter.errors import MissingCredential
from matchposter.models import RenderStyle


class FakeModels:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def fake_client(outcome):
    return SimpleNamespace(models=FakeModels(outcome))


def image_response(data=b"\x89PNG...", mime_type="image/png", finish_reason="STOP"):
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)
    candidate = SimpleNamespace(finish_reason=finish_reason, content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(prompt_feedback=None, candidates=[candidate])


def text_response(text, finish_reason="STOP"):
    part = SimpleNamespace(inline_data=None, text=text)
    candidate = SimpleNamespace(finish_reason=finish_reason, content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(prompt_feedback=None, candidates=[candidate])


PROMPT = BackgroundPrompt(template_id="stadium-night-empty", text="a stadium", style=RenderStyle.STADIUM)


def test_missing_key_is_fatal():
    with pytest.raises(MissingCredential):
        GeminiClient(api_key=None)


def test_dispatch_returns_inline_image():
    client = fake_client(image_response(b"abc", "image/jpeg"))
    gemini = GeminiClient(api_key=None, model="gemini-2.5-flash-image", client=client)

    image = gemini.dispatch(PROMPT)

    assert image.data == b"abc"
    assert image.mime_type == "image/jpeg"
    call = client.models.calls[0]
    assert call["model"] == "gemini-2.5-flash-image"
    assert call["contents"] == "a stadium"
    assert call["config"].image_config.aspect_ratio == "9:16"


def test_quota_error_is_rate_limited_with_retry_hint():
    error = genai_errors.ClientError(429, {
        "error": {
            "code": 429,
            "message": "You exceeded your current quota.",
            "status": "RESOURCE_EXHAUSTED",
            "details": [
                {"@type": "type.googleapis.com/google.rpc.RetryInfo", "retryDelay": "3s"},
            ],
        }
    })
    gemini = GeminiClient(api_key=None, client=fake_client(error))

    with pytest.raises(UpstreamError) as exc:
        gemini.dispatch(PROMPT)

    assert exc.value.rate_limited
    assert not exc.value.safety_blocked
    assert exc.value.retry_after == 3.0


def test_safety_error_is_classified():
    error = genai_errors.ClientError(400, {
        "error": {"code": 400, "message": "Request blocked by SAFETY settings", "status": "INVALID_ARGUMENT"}
    })
    gemini = GeminiClient(api_key=None, client=fake_client(error))

    with pytest.raises(UpstreamError) as exc:
        gemini.dispatch(PROMPT)

    assert exc.value.safety_blocked
    assert not exc.value.rate_limited


def test_safety_finish_reason_without_image():
    candidate = SimpleNamespace(finish_reason="IMAGE_SAFETY", content=None)
    response = SimpleNamespace(prompt_feedback=None, candidates=[candidate])

    with pytest.raises(UpstreamError) as exc:
        extract_image(response)

    assert exc.value.safety_blocked


def test_blocked_prompt_feedback():
    response = SimpleNamespace(prompt_feedback=SimpleNamespace(block_reason="PROHIBITED_CONTENT"), candidates=[])

    with pytest.raises(UpstreamError) as exc:
        extract_image(response)

    assert exc.value.safety_blocked


def test_text_refusal_is_a_plain_failure():
    with pytest.raises(UpstreamError, match="refused") as exc:
        extract_image(text_response("I can't create that image."))

    assert not exc.value.rate_limited
    assert not exc.value.safety_blocked


def test_empty_response():
    with pytest.raises(UpstreamError, match="no image data"):
        extract_image(SimpleNamespace(prompt_feedback=None, candidates=[]))


@pytest.mark.parametrize(
    "details, message, expected",
    [
        ({"error": {"details": [{"retryDelay": "12s"}]}}, None, 12.0),
        ([{"retry_delay": 4}], None, 4.0),
        (None, "Quota exceeded. Please retry in 7.5s.", 7.5),
        (None, "quota exceeded", None),
    ],
)
def test_find_retry_delay(details, message, expected):
    assert find_retry_delay(details, message) == expected
