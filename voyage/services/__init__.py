"""
Moduł usług aplikacji.

Zawiera klientów usług zewnętrznych (geokodowanie, routing, model językowy),
historię planów oraz koordynator planowania.
"""

from voyage.services.geocoding import Geocoder
from voyage.services.routing import OpenRouteServiceClient, RouteResolver, estimate_route
from voyage.services.plan_service import PlanService, build_prompt
from voyage.services.plan_parser import parse_plan_content, validate_plan
from voyage.services.history_store import HistoryStore
from voyage.services.planner import TripPlanner

__all__ = [
    'Geocoder',
    'OpenRouteServiceClient',
    'RouteResolver',
    'estimate_route',
    'PlanService',
    'build_prompt',
    'parse_plan_content',
    'validate_plan',
    'HistoryStore',
    'TripPlanner',
]
