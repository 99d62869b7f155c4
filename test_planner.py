"""
Testy koordynatora planowania (TripPlanner) z fałszywymi usługami.
"""

import pytest

from user_session_data import UserSessionData
from voyage.models.exceptions import (
    MissingApiKey,
    PlanGenerationFailure,
    StaleRequest,
    UnresolvedLocation,
)
from voyage.models.state import PlanningStarted
from voyage.services import plan_service
from voyage.services.plan_service import PlanService
from voyage.services.planner import TripPlanner
from conftest import FakePlanService, FakeResponse, FakeRouteResolver, make_plan, make_route

NOW = 1000.0


def make_planner(history_store, outcomes=None, resolver=None, **service_kwargs):
    service = FakePlanService(outcomes, **service_kwargs)
    planner = TripPlanner(
        resolver or FakeRouteResolver(route=make_route()),
        history_store,
        plan_service_factory=service.factory,
        clock=lambda: NOW,
        preferences="General tourism, medium budget",
        error_display_seconds=5,
    )
    return planner, service


@pytest.fixture
def session():
    return UserSessionData(session_id="session-0001", api_key="llm-key")


def test_start_planning_success(history_store, session):
    planner, service = make_planner(history_store, [make_plan(reply="Your trip")])

    state = planner.start_planning(session, " Beijing ", "Shanghai")

    assert state.route == make_route()
    assert state.plan.reply_markdown == "Your trip"
    assert [m.content for m in state.messages] == ["Your trip"]
    assert state.is_loading is False
    assert service.calls[0][1] == "General tourism, medium budget"
    assert service.calls[0][2] == []

    records = history_store.list(session.session_id)
    assert len(records) == 1
    assert records[0].ai_response["replyMarkdown"] == "Your trip"


def test_start_planning_requires_both_places(history_store, session):
    planner, _ = make_planner(history_store)

    with pytest.raises(ValueError):
        planner.start_planning(session, "Beijing", "  ")

    assert session.snapshot().generation == 0


def test_start_planning_without_key(history_store):
    planner, _ = make_planner(history_store)
    session = UserSessionData(session_id="session-0002")

    with pytest.raises(MissingApiKey):
        planner.start_planning(session, "Beijing", "Shanghai")

    assert session.snapshot().is_loading is False


def test_unresolved_location_sets_error(history_store, session):
    resolver = FakeRouteResolver(error=UnresolvedLocation("destination", "Xyzzyqq123"))
    planner, service = make_planner(history_store, resolver=resolver)

    with pytest.raises(UnresolvedLocation):
        planner.start_planning(session, "Beijing", "Xyzzyqq123")

    state = session.snapshot()
    assert state.is_loading is False
    assert "Xyzzyqq123" in state.visible_error(NOW)
    assert state.visible_error(NOW + 5) is None
    assert service.calls == []
    assert history_store.list(session.session_id) == []


def test_plan_failure_keeps_route(history_store, session):
    planner, _ = make_planner(history_store, [PlanGenerationFailure("LLM request failed: 500")])

    with pytest.raises(PlanGenerationFailure):
        planner.start_planning(session, "Beijing", "Shanghai")

    state = session.snapshot()
    assert state.route == make_route()
    assert state.plan is None
    assert state.visible_error(NOW) == "LLM request failed: 500"


def test_superseded_planning_is_discarded(history_store, session):
    def start_newer_planning():
        if len(service.calls) == 1:
            session.dispatch(PlanningStarted("Chengdu", "Xi'an"))

    planner, service = make_planner(history_store, [make_plan(reply="old")],
                                    on_generate=start_newer_planning)

    with pytest.raises(StaleRequest):
        planner.start_planning(session, "Beijing", "Shanghai")

    state = session.snapshot()
    assert state.origin == "Chengdu"
    assert state.plan is None
    assert state.is_loading is True
    assert history_store.list(session.session_id) == []


def test_send_message_refines_plan(history_store, session):
    planner, service = make_planner(history_store, [make_plan(reply="First"), make_plan(reply="Second")])
    planner.start_planning(session, "Beijing", "Shanghai")

    state = planner.send_message(session, "Add a day in Suzhou")

    route, preferences, history = service.calls[1]
    assert route == make_route()
    assert preferences == "Add a day in Suzhou"
    assert history == ["assistant: First"]
    assert [m.role for m in state.messages] == ["assistant", "user", "assistant"]
    assert state.plan.reply_markdown == "Second"
    # Doprecyzowanie nie tworzy nowego wpisu historii
    assert len(history_store.list(session.session_id)) == 1


def test_failed_refinement_keeps_previous_plan(history_store, session):
    planner, _ = make_planner(history_store, [make_plan(reply="First"), PlanGenerationFailure("timeout")])
    planner.start_planning(session, "Beijing", "Shanghai")

    with pytest.raises(PlanGenerationFailure):
        planner.send_message(session, "Make it cheaper")

    state = session.snapshot()
    assert state.plan.reply_markdown == "First"
    assert [m.content for m in state.messages] == ["First", "Make it cheaper"]
    assert state.visible_error(NOW) == "timeout"


def test_send_message_requires_route(history_store, session):
    planner, _ = make_planner(history_store)

    with pytest.raises(ValueError):
        planner.send_message(session, "Hello")


def test_send_message_rejects_empty_text(history_store, session):
    planner, _ = make_planner(history_store, [make_plan()])
    planner.start_planning(session, "Beijing", "Shanghai")

    with pytest.raises(ValueError):
        planner.send_message(session, "   ")


def test_configure_valid_key(history_store):
    planner, service = make_planner(history_store)
    session = UserSessionData(session_id="session-0003")

    assert planner.configure(session, "new-key", "https://llm.test/v1") is True
    assert session.api_key == "new-key"
    assert session.base_url == "https://llm.test/v1"
    assert service.api_key == "new-key"


def test_configure_rejected_key(history_store):
    planner, _ = make_planner(history_store, key_valid=False)
    session = UserSessionData(session_id="session-0004")

    assert planner.configure(session, "bad-key") is False
    assert session.api_key is None


def test_load_history(history_store, session):
    planner, _ = make_planner(history_store, [make_plan(reply="Saved plan")])
    planner.start_planning(session, "Beijing", "Shanghai")
    record = planner.list_history(session)[0]
    generation = session.snapshot().generation

    state = planner.load_history(session, record.id)

    assert state.origin == "Beijing"
    assert state.plan.reply_markdown == "Saved plan"
    assert state.route.polyline == (make_route().polyline[0], make_route().polyline[-1])
    assert state.route.distance_km == 0
    assert state.messages[0].id == f"history-{record.id}"
    assert state.generation == generation + 1


def test_load_missing_history(history_store, session):
    planner, _ = make_planner(history_store)

    assert planner.load_history(session, "missing") is None


def test_clear_error(history_store, session):
    planner, _ = make_planner(history_store, [PlanGenerationFailure("boom")])
    with pytest.raises(PlanGenerationFailure):
        planner.start_planning(session, "Beijing", "Shanghai")

    state = planner.clear_error(session)

    assert state.visible_error(NOW) is None


def test_unexpected_plan_error_clears_loading(history_store, session):
    planner, _ = make_planner(history_store, [AttributeError("'list' object has no attribute 'strip'")])

    with pytest.raises(AttributeError):
        planner.start_planning(session, "Beijing", "Shanghai")

    state = session.snapshot()
    assert state.is_loading is False
    assert state.route == make_route()
    assert state.visible_error(NOW) == "Nieoczekiwany błąd planowania"


def test_unexpected_refinement_error_keeps_plan(history_store, session):
    planner, _ = make_planner(history_store, [make_plan(reply="First"), KeyError("choices")])
    planner.start_planning(session, "Beijing", "Shanghai")

    with pytest.raises(KeyError):
        planner.send_message(session, "Make it cheaper")

    state = session.snapshot()
    assert state.is_loading is False
    assert state.plan.reply_markdown == "First"
    assert state.visible_error(NOW) == "Nieoczekiwany błąd planowania"


def test_list_content_from_api_reported_as_failure(history_store, session, monkeypatch):
    payload = {"choices": [{"message": {"content": [{"type": "text", "text": "{}"}]}}]}
    monkeypatch.setattr(plan_service.requests, "post", lambda *a, **k: FakeResponse(200, payload))
    planner = TripPlanner(FakeRouteResolver(route=make_route()), history_store,
                          plan_service_factory=PlanService, clock=lambda: NOW)

    with pytest.raises(PlanGenerationFailure):
        planner.start_planning(session, "Beijing", "Shanghai")

    state = session.snapshot()
    assert state.is_loading is False
    assert state.visible_error(NOW) is not None


def test_non_string_places_rejected(history_store, session):
    planner, _ = make_planner(history_store)

    with pytest.raises(ValueError):
        planner.start_planning(session, 123, "Shanghai")
    with pytest.raises(ValueError):
        planner.send_message(session, ["Hello"])
