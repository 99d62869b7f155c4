"""
Moduł tras Flask.

Zawiera definicje endpointów HTTP podzielone na logiczne grupy:
- main: strona planera (/), /health
- planning: API planera (/api/*)
- admin: trasy administracyjne (/admin/*)

Funkcje register_*_routes() przyjmują zależności jako parametry.
"""

from voyage.routes.main import register_main_routes
from voyage.routes.planning import register_planning_routes
from voyage.routes.admin import register_admin_routes

__all__ = [
    'register_main_routes',
    'register_planning_routes',
    'register_admin_routes',
]
