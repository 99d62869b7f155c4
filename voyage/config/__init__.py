"""
Moduł konfiguracji aplikacji.

Zawiera stałe i ustawienia używane w całej aplikacji.
"""

from voyage.config.settings import (
    LLM_API_KEY,
    LLM_BASE_URL,
    LLM_MODEL,
    ORS_API_KEY,
    ORS_BASE_URL,
    ROUTING_PROFILE,
    EARTH_RADIUS_KM,
    ROAD_FACTOR,
    FALLBACK_SPEED_KMH,
    FALLBACK_STEPS,
    DEFAULT_PREFERENCES,
    HISTORY_LIMIT,
)

__all__ = [
    # LLM
    'LLM_API_KEY',
    'LLM_BASE_URL',
    'LLM_MODEL',
    # Routing
    'ORS_API_KEY',
    'ORS_BASE_URL',
    'ROUTING_PROFILE',
    # Trasa szacowana
    'EARTH_RADIUS_KM',
    'ROAD_FACTOR',
    'FALLBACK_SPEED_KMH',
    'FALLBACK_STEPS',
    # Planowanie
    'DEFAULT_PREFERENCES',
    'HISTORY_LIMIT',
]
