"""
Testy klienta modelu językowego (requests.post zastąpiony).
"""

import json

import pytest
import requests

from voyage.models.exceptions import PlanGenerationFailure, MissingApiKey
from voyage.services import plan_service
from voyage.services.plan_service import PlanService, build_prompt
from conftest import PLAN_JSON, FakeResponse, make_route


def completion(content, finish_reason="stop"):
    return {"choices": [{"message": {"role": "assistant", "content": content},
                         "finish_reason": finish_reason}]}


@pytest.fixture
def posted(monkeypatch):
    """Zbiera zapytania; odpowiedź ustawiana przez posted.response"""
    class Recorder:
        response = FakeResponse(200, completion(json.dumps(PLAN_JSON)))
        calls = []

        def post(self, url, json=None, headers=None, timeout=None):
            self.calls.append({"url": url, "json": json, "headers": headers})
            if isinstance(self.response, Exception):
                raise self.response
            return self.response

    recorder = Recorder()
    recorder.calls = []
    monkeypatch.setattr(plan_service.requests, "post", recorder.post)
    return recorder


def test_missing_key_rejected():
    with pytest.raises(MissingApiKey):
        PlanService(api_key="")


def test_base_url_default_and_trailing_slash():
    assert PlanService(api_key="k", base_url=None).completions_url.startswith("https://")
    service = PlanService(api_key="k", base_url="https://llm.test/v1/")
    assert service.completions_url == "https://llm.test/v1/chat/completions"


def test_generate_plan_request_and_result(posted):
    service = PlanService(api_key="secret", base_url="https://llm.test/v1", model="test-model")

    plan = service.generate_plan(make_route(), "Food lover, low budget")

    call = posted.calls[0]
    assert call["url"] == "https://llm.test/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["json"]["model"] == "test-model"
    prompt = call["json"]["messages"][0]["content"]
    assert "Plan a journey from Beijing to Shanghai." in prompt
    assert "Food lover, low budget" in prompt
    assert "Previous Conversation" not in prompt
    assert plan.budget_estimate == "¥800-1500 per person"
    assert len(plan.itinerary) == 2


def test_generate_plan_fenced_content(posted):
    posted.response = FakeResponse(200, completion("```json\n" + json.dumps(PLAN_JSON) + "\n```"))

    plan = PlanService(api_key="k").generate_plan(make_route(), "anything")

    assert plan.risks == PLAN_JSON["risks"]


def test_generate_plan_includes_history(posted):
    history = ["assistant: Here is your plan", "user: Add a day in Suzhou"]

    PlanService(api_key="k").generate_plan(make_route(), "Add a day in Suzhou", history)

    prompt = posted.calls[0]["json"]["messages"][0]["content"]
    assert "Previous Conversation:\nassistant: Here is your plan\nuser: Add a day in Suzhou" in prompt


def test_generate_plan_http_error(posted):
    posted.response = FakeResponse(401, {"error": {"message": "invalid api key"}})

    with pytest.raises(PlanGenerationFailure) as excinfo:
        PlanService(api_key="k").generate_plan(make_route(), "x")

    assert "401" in str(excinfo.value)


def test_generate_plan_network_error(posted):
    posted.response = requests.exceptions.Timeout("read timeout")

    with pytest.raises(PlanGenerationFailure):
        PlanService(api_key="k").generate_plan(make_route(), "x")


@pytest.mark.parametrize("payload", [
    {"choices": []},
    {"unexpected": True},
    completion(""),
    completion(None),
    completion("Sorry, I can only answer in prose."),
])
def test_generate_plan_unusable_response(posted, payload):
    posted.response = FakeResponse(200, payload)

    with pytest.raises(PlanGenerationFailure):
        PlanService(api_key="k").generate_plan(make_route(), "x")


def test_generate_plan_partial_json_gets_defaults(posted):
    posted.response = FakeResponse(200, completion('{"replyMarkdown": "Short plan"}'))

    plan = PlanService(api_key="k").generate_plan(make_route(), "x")

    assert plan.reply_markdown == "Short plan"
    assert plan.risks == ["Check weather conditions", "Book accommodations in advance"]


def test_validate_key(posted):
    assert PlanService(api_key="k").validate_key() is True
    assert posted.calls[0]["json"]["max_tokens"] == 5

    posted.response = FakeResponse(401, {"error": "unauthorized"})
    assert PlanService(api_key="k").validate_key() is False

    posted.response = requests.exceptions.ConnectionError("refused")
    assert PlanService(api_key="k").validate_key() is False


def test_build_prompt_route_details():
    prompt = build_prompt(make_route(distance_km=1387, duration_min=1041), "General tourism, medium budget")

    assert "- Distance: 1387 km" in prompt
    assert "- Duration: 17 hours (1041 minutes)" in prompt
    assert "- Route: route from Beijing to Shanghai" in prompt
    assert '"replyMarkdown"' in prompt


def test_generate_plan_content_parts_rejected(posted):
    parts = [{"type": "text", "text": json.dumps(PLAN_JSON)}]
    posted.response = FakeResponse(200, completion(parts))

    with pytest.raises(PlanGenerationFailure) as excinfo:
        PlanService(api_key="k").generate_plan(make_route(), "x")

    assert "list" in str(excinfo.value)
