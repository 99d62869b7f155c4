"""
Trasy administracyjne.

Zawiera endpointy:
- /admin/sessions (monitoring sesji)
- /admin/cleanup_sessions (czyszczenie sesji)
"""

from flask import jsonify
import logging
import time

logger = logging.getLogger(__name__)


def register_admin_routes(app, session_manager, cleanup_scheduler):
    """
    Rejestruje trasy administracyjne w aplikacji Flask.

    Args:
        app: Instancja Flask
        session_manager: Manager sesji użytkowników
        cleanup_scheduler: Scheduler czyszczenia sesji
    """

    @app.route("/admin/sessions")
    def admin_sessions():
        """
        Endpoint administracyjny do monitorowania aktywnych sesji.
        Pokazuje statystyki i listę wszystkich aktywnych sesji użytkowników.
        """
        try:
            return jsonify({
                'statistics': session_manager.get_session_statistics(),
                'active_sessions': session_manager.get_all_sessions_info(),
                'timestamp': time.time()
            })
        except Exception as e:
            logger.error(f"Błąd w /admin/sessions: {e}", exc_info=True)
            return jsonify({'error': str(e)}), 500

    @app.route("/admin/cleanup_sessions")
    def admin_cleanup_sessions():
        """
        Endpoint administracyjny do wymuszenia natychmiastowego czyszczenia sesji.
        """
        try:
            deleted_count = cleanup_scheduler.cleanup_now()
            return jsonify({
                'deleted_sessions': deleted_count,
                'statistics': session_manager.get_session_statistics(),
                'timestamp': time.time()
            })
        except Exception as e:
            logger.error(f"Błąd w /admin/cleanup_sessions: {e}", exc_info=True)
            return jsonify({'error': str(e)}), 500
