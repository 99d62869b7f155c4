"""
Moduł modeli danych aplikacji.

Zawiera dataclasses i klasy reprezentujące struktury danych
używane w całej aplikacji.
"""

from voyage.models.route import Coordinate, GeocodeResult, RouteData, placeholder_route
from voyage.models.plan import AIPlanResponse, PlanItem, PlanValidation
from voyage.models.history import ChatMessage, HistoryRecord
from voyage.models.state import PlannerState, reduce
from voyage.models.exceptions import (
    GeocodingFailure,
    UnresolvedLocation,
    RoutingFailure,
    PlanGenerationFailure,
    MissingApiKey,
    StaleRequest,
)

__all__ = [
    'Coordinate',
    'GeocodeResult',
    'RouteData',
    'placeholder_route',
    'AIPlanResponse',
    'PlanItem',
    'PlanValidation',
    'ChatMessage',
    'HistoryRecord',
    'PlannerState',
    'reduce',
    'GeocodingFailure',
    'UnresolvedLocation',
    'RoutingFailure',
    'PlanGenerationFailure',
    'MissingApiKey',
    'StaleRequest',
]
