"""
Aplikacja Flask planera podróży VoyageAI.

Uruchomienie:
    python app.py
"""

import atexit
import logging
import secrets
from datetime import timedelta

from flask import Flask, session

from session_manager import SessionManager, SessionCleanupScheduler
from user_session_data import UserSessionData
from voyage.config.settings import (
    LLM_API_KEY,
    SESSION_MAX_AGE_HOURS,
    LOG_LEVEL,
    LOG_FILE,
    FLASK_SECRET_KEY,
    FLASK_DEBUG,
    FLASK_HOST,
    FLASK_PORT,
)
from voyage.routes import register_main_routes, register_planning_routes, register_admin_routes
from voyage.services import Geocoder, RouteResolver, HistoryStore, TripPlanner

logger = logging.getLogger(__name__)


# ============================================================================
# KONFIGURACJA LOGOWANIA
# ============================================================================

class FilterStatePolling(logging.Filter):
    """Pomija logi werkzeug dla odpytywania /api/state"""

    def filter(self, record):
        return "/api/state" not in record.getMessage()


def configure_logging(level=LOG_LEVEL, log_file=LOG_FILE):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
    # Wyłączenie debugowych logów urllib3
    logging.getLogger('urllib3').setLevel(logging.ERROR)
    logging.getLogger('werkzeug').addFilter(FilterStatePolling())


# ============================================================================
# APLIKACJA
# ============================================================================

def create_app(planner=None, session_manager=None, start_scheduler=True, secret_key=FLASK_SECRET_KEY):
    """
    Tworzy aplikację Flask.

    Args:
        planner: TripPlanner (domyślnie z Nominatim, OpenRouteService i diskcache)
        session_manager: SessionManager (domyślnie nowy)
        start_scheduler: Czy uruchomić okresowe czyszczenie sesji
        secret_key: Klucz sesji Flask (None = losowy)

    Returns:
        Instancja Flask
    """
    app = Flask(__name__)

    # Konfiguracja sesji Flask dla wielu użytkowników
    app.config['SECRET_KEY'] = secret_key or secrets.token_hex(32)
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(hours=SESSION_MAX_AGE_HOURS)
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    if session_manager is None:
        session_manager = SessionManager(max_age_hours=SESSION_MAX_AGE_HOURS, default_api_key=LLM_API_KEY)
    if planner is None:
        planner = TripPlanner(RouteResolver(Geocoder()), HistoryStore())

    cleanup_scheduler = SessionCleanupScheduler(session_manager, interval_hours=1)
    if start_scheduler:
        cleanup_scheduler.start()
        # Zatrzymaj scheduler przy zamykaniu aplikacji
        atexit.register(cleanup_scheduler.stop)

    def get_or_create_session_id() -> str:
        """
        Pobiera lub tworzy unikalny identyfikator sesji dla użytkownika.
        Używa Flask session do przechowania session_id.
        """
        if 'session_id' not in session:
            session['session_id'] = session_manager.generate_session_id()
            session.permanent = True  # Sesja przetrwa zamknięcie przeglądarki
            logger.info(f"Utworzono nową sesję użytkownika: {session['session_id'][:8]}...")
        return session['session_id']

    def get_user_session() -> UserSessionData:
        return session_manager.get_session(get_or_create_session_id())

    register_main_routes(app, get_user_session)
    register_planning_routes(app, planner, session_manager, get_user_session)
    register_admin_routes(app, session_manager, cleanup_scheduler)

    logger.info("Aplikacja VoyageAI zainicjalizowana")
    return app


if __name__ == '__main__':
    configure_logging()
    app = create_app()
    app.run(debug=FLASK_DEBUG, host=FLASK_HOST, port=FLASK_PORT)
