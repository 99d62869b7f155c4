"""
Moduł funkcji pomocniczych.

Zawiera funkcje narzędziowe używane w całej aplikacji.
"""

from voyage.utils.formatting import (
    format_coordinates,
    format_duration,
    round_half_up,
)

from voyage.utils.geo import (
    haversine,
    interpolate_line,
    create_google_maps_link,
)

__all__ = [
    'format_coordinates',
    'format_duration',
    'round_half_up',
    'haversine',
    'interpolate_line',
    'create_google_maps_link',
]
