"""
Główne trasy aplikacji.

Zawiera endpointy:
- / (strona planera z mapą)
- /health (sprawdzenie działania aplikacji)
"""

from flask import render_template, jsonify
import logging

import voyage

logger = logging.getLogger(__name__)


def register_main_routes(app, get_user_session):
    """
    Rejestruje główne trasy w aplikacji Flask.

    Args:
        app: Instancja Flask
        get_user_session: Funkcja pobierająca sesję użytkownika
    """

    @app.route("/")
    def index():
        """Strona planera. Bez klucza API pokazywany jest formularz konfiguracji."""
        user_data = get_user_session()
        return render_template("index.html", has_api_key=bool(user_data.api_key))

    @app.route("/health")
    def health():
        return jsonify({'status': 'ok', 'version': voyage.__version__})
