"""
Wspólne obiekty pomocnicze testów: fałszywe usługi zewnętrzne.

Testy nie wykonują zapytań sieciowych - Nominatim, OpenRouteService
i API modelu są zastępowane obiektami z tego modułu.
"""

import json
from types import SimpleNamespace

import pytest
from diskcache import Cache

from voyage.models.plan import AIPlanResponse, PlanItem
from voyage.models.route import GeocodeResult, RouteData
from voyage.services.history_store import HistoryStore

BEIJING = (39.9042, 116.4074)
SHANGHAI = (31.2304, 121.4737)

PLAN_JSON = {
    "replyMarkdown": "## Beijing → Shanghai\nEnjoy the trip!",
    "budgetEstimate": "¥800-1500 per person",
    "risks": ["Traffic near Nanjing", "Summer heat"],
    "transportTips": ["Leave before 7am", "Use ETC lanes"],
    "itinerary": [
        {"day": 1, "title": "Beijing → Jinan", "activities": ["Daming Lake"]},
        {"day": 2, "title": "Jinan → Shanghai", "activities": ["The Bund"]},
    ],
}


class FakeResponse:
    """Odpowiedź HTTP w kształcie requests.Response"""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload or {})

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeGeolocator:
    """Geolokator zgodny z geopy: słownik nazwa -> (lat, lon, adres)"""

    def __init__(self, places=None, error=None):
        self.places = places or {}
        self.error = error
        self.queries = []

    def geocode(self, query, exactly_one=True):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        place = self.places.get(query)
        if place is None:
            return None
        lat, lon, address = place
        return SimpleNamespace(latitude=lat, longitude=lon, address=address)


class FakeGeocoder:
    """Geokoder zwracający gotowe GeocodeResult"""

    def __init__(self, results=None):
        self.results = results or {}

    def geocode(self, place_name):
        return self.results.get(place_name)


class FakeRoutingClient:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def get_route(self, coord_from, coord_to):
        self.calls.append((coord_from, coord_to))
        if self.error is not None:
            raise self.error
        return self.result


class FakeRouteResolver:
    def __init__(self, route=None, error=None):
        self.route = route
        self.error = error
        self.calls = []

    def resolve_route(self, origin_text, destination_text):
        self.calls.append((origin_text, destination_text))
        if self.error is not None:
            raise self.error
        return self.route


class FakePlanService:
    """
    Zastępuje PlanService. Kolejne wywołania generate_plan zwracają
    (lub rzucają) kolejne elementy `outcomes`.
    """

    def __init__(self, outcomes=None, key_valid=True, on_generate=None):
        self.outcomes = list(outcomes or [])
        self.key_valid = key_valid
        self.on_generate = on_generate
        self.calls = []

    def factory(self, api_key=None, base_url=None):
        self.api_key = api_key
        self.base_url = base_url
        return self

    def validate_key(self):
        return self.key_valid

    def generate_plan(self, route, preferences, history=None):
        self.calls.append((route, preferences, list(history or [])))
        if self.on_generate is not None:
            self.on_generate()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_geo(coordinate, name):
    return GeocodeResult(coordinate=coordinate, display_name=name, address=f"{name}, China")


def make_route(**overrides):
    values = dict(
        origin="Beijing",
        destination="Shanghai",
        distance_km=1213,
        duration_min=745,
        polyline=(BEIJING, (35.0, 118.0), SHANGHAI),
        summary="route from Beijing to Shanghai",
    )
    values.update(overrides)
    return RouteData(**values)


def make_plan(reply="Plan ready", budget="¥1000"):
    return AIPlanResponse(
        reply_markdown=reply,
        budget_estimate=budget,
        risks=["Traffic"],
        transport_tips=["Leave early"],
        itinerary=[PlanItem(day=1, title="Drive", activities=["Go"])],
    )


@pytest.fixture
def history_store(tmp_path):
    cache = Cache(str(tmp_path / "history"))
    yield HistoryStore(cache=cache, limit=10)
    cache.close()


@pytest.fixture
def route():
    return make_route()


@pytest.fixture
def plan():
    return make_plan()
