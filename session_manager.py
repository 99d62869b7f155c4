"""
Moduł zarządzania sesjami użytkowników.

Odpowiada za:
- Tworzenie i usuwanie sesji planera
- Thread-safe dostęp do sesji (żądania Flask obsługiwane są w wątkach)
- Okresowe czyszczenie wygasłych sesji (APScheduler)

Historia planów nie jest częścią sesji - przechowuje ją HistoryStore,
więc przetrwa wygaśnięcie sesji w pamięci.
"""

import secrets
import threading
import logging
from typing import Dict, Optional, List

from apscheduler.schedulers.background import BackgroundScheduler

from user_session_data import UserSessionData
from voyage.config.settings import SESSION_MAX_AGE_HOURS
from voyage.models.state import SessionReset


logger = logging.getLogger(__name__)


class SessionManager:
    """
    Zarządza sesjami użytkowników w aplikacji.

    Attributes:
        _sessions: Słownik przechowujący wszystkie aktywne sesje
        _lock: Lock do synchronizacji dostępu do słownika sesji
        _max_age_hours: Maksymalny czas bezczynności sesji w godzinach
    """

    def __init__(self, max_age_hours: int = SESSION_MAX_AGE_HOURS, default_api_key: Optional[str] = None):
        """
        Args:
            max_age_hours: Maksymalny czas bezczynności sesji w godzinach
            default_api_key: Klucz API przypisywany nowym sesjom (z konfiguracji)
        """
        self._sessions: Dict[str, UserSessionData] = {}
        self._lock = threading.RLock()
        self._max_age_hours = max_age_hours
        self._default_api_key = default_api_key or None
        logger.info(f"SessionManager zainicjalizowany (max_age={max_age_hours}h)")

    def generate_session_id(self) -> str:
        """
        Generuje unikalny, bezpieczny identyfikator sesji.

        Returns:
            32-bajtowy token URL-safe
        """
        return secrets.token_urlsafe(32)

    def get_session(self, session_id: str, create_if_missing: bool = True) -> Optional[UserSessionData]:
        """
        Pobiera sesję użytkownika po ID.

        Args:
            session_id: Identyfikator sesji
            create_if_missing: Czy utworzyć nową sesję jeśli nie istnieje

        Returns:
            Obiekt UserSessionData lub None jeśli nie znaleziono i create_if_missing=False
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                if not create_if_missing:
                    logger.warning(f"Sesja {session_id[:8]}... nie znaleziona")
                    return None
                session = UserSessionData(session_id=session_id, api_key=self._default_api_key)
                self._sessions[session_id] = session
                logger.info(f"Utworzono nową sesję: {session_id[:8]}... (total: {len(self._sessions)})")
                return session

            session.update_activity()
            return session

    def delete_session(self, session_id: str) -> bool:
        """
        Usuwa sesję użytkownika.

        Returns:
            True jeśli sesja została usunięta, False jeśli nie istniała
        """
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                logger.warning(f"Próba usunięcia nieistniejącej sesji: {session_id[:8]}...")
                return False
            logger.info(f"Usunięto sesję: {session_id[:8]}... (pozostało: {len(self._sessions)})")
            return True

    def reset_session(self, session_id: str) -> bool:
        """
        Wylogowuje użytkownika: usuwa klucz API i czyści stan planowania.

        Returns:
            True jeśli operacja się powiodła, False jeśli sesja nie istnieje
        """
        session = self.get_session(session_id, create_if_missing=False)
        if session is None:
            return False

        session.configure(None)
        session.dispatch(SessionReset())
        logger.info(f"Zresetowano sesję: {session_id[:8]}...")
        return True

    def cleanup_expired_sessions(self) -> int:
        """
        Usuwa sesje bezczynne dłużej niż max_age_hours.

        Returns:
            Liczba usuniętych sesji
        """
        max_age_minutes = self._max_age_hours * 60

        with self._lock:
            expired_sessions = [
                session_id for session_id, session in self._sessions.items()
                if session.get_inactivity_minutes() > max_age_minutes
            ]

        # Usuwamy poza lockiem, aby nie blokować innych operacji
        deleted_count = sum(1 for session_id in expired_sessions if self.delete_session(session_id))

        if deleted_count > 0:
            logger.info(f"Wyczyszczono {deleted_count} wygasłych sesji")

        return deleted_count

    def get_active_sessions_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get_all_sessions_info(self) -> List[Dict]:
        """
        Zwraca informacje o wszystkich aktywnych sesjach.

        Returns:
            Lista słowników z informacjami o sesjach
        """
        with self._lock:
            sessions = list(self._sessions.values())
        return [session.to_dict() for session in sessions]

    def get_session_statistics(self) -> Dict:
        """
        Zwraca statystyki dotyczące sesji.

        Returns:
            Słownik ze statystykami
        """
        with self._lock:
            states = [session.snapshot() for session in self._sessions.values()]
            configured = sum(1 for session in self._sessions.values() if session.api_key)

        total_sessions = len(states)
        planning = sum(1 for state in states if state.is_loading)
        with_plan = sum(1 for state in states if state.plan is not None)

        return {
            'total_sessions': total_sessions,
            'configured': configured,
            'planning': planning,
            'with_plan': with_plan,
            'idle': total_sessions - planning - with_plan,
            'max_age_hours': self._max_age_hours,
        }


class SessionCleanupScheduler:
    """
    Harmonogram czyszczenia wygasłych sesji.

    Uruchamia okresowe zadanie czyszczące stare sesje w tle.
    """

    def __init__(self, session_manager: SessionManager, interval_hours: int = 1):
        """
        Args:
            session_manager: Instancja SessionManager do czyszczenia
            interval_hours: Interwał czyszczenia w godzinach
        """
        self.session_manager = session_manager
        self.interval_hours = interval_hours
        self.scheduler = None
        logger.info(f"SessionCleanupScheduler zainicjalizowany (interval={interval_hours}h)")

    def _cleanup_job(self):
        """Zadanie czyszczące uruchamiane przez scheduler."""
        try:
            deleted_count = self.session_manager.cleanup_expired_sessions()
            stats = self.session_manager.get_session_statistics()
            logger.info(
                f"Czyszczenie zakończone: usunięto {deleted_count} sesji, "
                f"aktywnych: {stats['total_sessions']}"
            )
        except Exception as e:
            logger.error(f"Błąd podczas czyszczenia sesji: {e}", exc_info=True)

    def start(self):
        """Uruchamia scheduler czyszczenia."""
        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            func=self._cleanup_job,
            trigger="interval",
            hours=self.interval_hours,
            id='session_cleanup',
            name='Session Cleanup Job',
            replace_existing=True
        )
        self.scheduler.start()
        logger.info("Scheduler czyszczenia sesji uruchomiony")

    def stop(self):
        """Zatrzymuje scheduler czyszczenia."""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler czyszczenia sesji zatrzymany")

    def cleanup_now(self) -> int:
        """
        Wymusza natychmiastowe czyszczenie sesji.

        Returns:
            Liczba usuniętych sesji
        """
        return self.session_manager.cleanup_expired_sessions()
