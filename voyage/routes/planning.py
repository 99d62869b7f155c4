"""
Trasy API planera.

Zawiera endpointy:
- /api/config (konfiguracja i usunięcie klucza API)
- /api/plan (nowe planowanie)
- /api/chat (doprecyzowanie planu)
- /api/state (aktualny stan sesji)
- /api/error (zamknięcie komunikatu błędu)
- /api/history, /api/history/<id>/load (historia planów)
"""

from flask import request, jsonify
import logging
import time

from voyage.models.exceptions import (
    GeocodingFailure,
    UnresolvedLocation,
    PlanGenerationFailure,
    MissingApiKey,
    StaleRequest,
)

logger = logging.getLogger(__name__)

# Wyjątek -> status HTTP
ERROR_STATUS = (
    (ValueError, 400),
    (MissingApiKey, 401),
    (UnresolvedLocation, 404),
    (StaleRequest, 409),
    (GeocodingFailure, 502),
    (PlanGenerationFailure, 502),
)


def error_response(error):
    """Zamienia wyjątek planera na odpowiedź JSON z odpowiednim statusem"""
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            payload = {'error': str(error)}
            if isinstance(error, UnresolvedLocation):
                payload['side'] = error.side
            return jsonify(payload), status
    raise error


def json_body():
    """Treść JSON żądania; brak treści lub inny typ niż obiekt -> pusty słownik"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def text_field(data, key):
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ''


def register_planning_routes(app, planner, session_manager, get_user_session):
    """
    Rejestruje trasy API planera w aplikacji Flask.

    Args:
        app: Instancja Flask
        planner: TripPlanner
        session_manager: Manager sesji użytkowników
        get_user_session: Funkcja pobierająca sesję użytkownika
    """

    def state_payload(state):
        return state.to_dict(time.time())

    @app.route("/api/config", methods=["POST"])
    def save_config():
        """Zapisuje klucz API po sprawdzeniu go zapytaniem testowym."""
        user_data = get_user_session()
        data = json_body()
        api_key = text_field(data, 'apiKey')
        base_url = text_field(data, 'baseURL') or None

        if not api_key:
            return jsonify({'error': 'Podaj klucz API'}), 400

        try:
            accepted = planner.configure(user_data, api_key, base_url)
        except MissingApiKey as e:
            return error_response(e)

        if not accepted:
            return jsonify({'error': 'Klucz API został odrzucony'}), 400
        return jsonify({'configured': True})

    @app.route("/api/config", methods=["DELETE"])
    def logout():
        """Usuwa klucz API i czyści stan planowania sesji."""
        user_data = get_user_session()
        session_manager.reset_session(user_data.session_id)
        return jsonify({'configured': False})

    @app.route("/api/plan", methods=["POST"])
    def plan_trip():
        user_data = get_user_session()
        data = json_body()
        try:
            state = planner.start_planning(user_data, data.get('origin', ''), data.get('destination', ''))
        except (ValueError, MissingApiKey, UnresolvedLocation, GeocodingFailure,
                PlanGenerationFailure, StaleRequest) as e:
            return error_response(e)
        return jsonify(state_payload(state))

    @app.route("/api/chat", methods=["POST"])
    def chat():
        user_data = get_user_session()
        data = json_body()
        try:
            state = planner.send_message(user_data, data.get('message', ''))
        except (ValueError, MissingApiKey, PlanGenerationFailure, StaleRequest) as e:
            return error_response(e)
        return jsonify(state_payload(state))

    @app.route("/api/state")
    def get_state():
        user_data = get_user_session()
        payload = state_payload(user_data.snapshot())
        payload['hasApiKey'] = bool(user_data.api_key)
        return jsonify(payload)

    @app.route("/api/error", methods=["DELETE"])
    def clear_error():
        user_data = get_user_session()
        return jsonify(state_payload(planner.clear_error(user_data)))

    @app.route("/api/history")
    def history():
        user_data = get_user_session()
        records = planner.list_history(user_data)
        return jsonify({'history': [record.to_dict() for record in records]})

    @app.route("/api/history/<record_id>/load", methods=["POST"])
    def load_history(record_id):
        user_data = get_user_session()
        state = planner.load_history(user_data, record_id)
        if state is None:
            return jsonify({'error': 'Nie znaleziono wpisu historii'}), 404
        return jsonify(state_payload(state))
