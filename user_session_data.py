"""
Moduł definiujący strukturę danych dla sesji użytkownika.

Ten moduł zawiera dataclass reprezentującą sesję pojedynczego użytkownika
planera podróży: konfigurację klucza API oraz stan planowania.
Stan zmieniany jest wyłącznie przez dispatch() pod blokadą sesji.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import threading
import time

from voyage.models.state import PlannerState, reduce


@dataclass
class UserSessionData:
    """
    Reprezentuje dane sesji pojedynczego użytkownika.

    Attributes:
        session_id: Unikalny identyfikator sesji
        api_key: Klucz API modelu językowego podany przez użytkownika
        base_url: Adres bazowy API modelu (None = domyślny z ustawień)
        state: Aktualny stan planowania
        created_at: Timestamp utworzenia sesji
        last_activity: Timestamp ostatniej aktywności
    """

    session_id: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    state: PlannerState = field(default_factory=PlannerState)
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def dispatch(self, event) -> PlannerState:
        """
        Stosuje zdarzenie do stanu sesji.

        Returns:
            Stan po zmianie
        """
        with self._lock:
            self.state = reduce(self.state, event)
            self.last_activity = time.time()
            return self.state

    def snapshot(self) -> PlannerState:
        """Zwraca aktualny stan (niemutowalny)"""
        with self._lock:
            return self.state

    def configure(self, api_key: Optional[str], base_url: Optional[str] = None) -> None:
        """Ustawia lub usuwa konfigurację API modelu"""
        with self._lock:
            self.api_key = api_key
            self.base_url = base_url
            self.update_activity()

    def update_activity(self) -> None:
        """Aktualizuje timestamp ostatniej aktywności."""
        self.last_activity = time.time()

    def get_age_minutes(self) -> int:
        """
        Zwraca wiek sesji w minutach.

        Returns:
            Liczba minut od utworzenia sesji
        """
        return int((time.time() - self.created_at) / 60)

    def get_inactivity_minutes(self) -> int:
        """
        Zwraca czas bezczynności w minutach.

        Returns:
            Liczba minut od ostatniej aktywności
        """
        return int((time.time() - self.last_activity) / 60)

    def to_dict(self) -> Dict[str, Any]:
        """
        Konwertuje dane sesji do słownika (do serializacji JSON).

        Returns:
            Słownik z danymi sesji
        """
        state = self.snapshot()
        return {
            'session_id': self.session_id[:8],  # Tylko pierwsze 8 znaków dla bezpieczeństwa
            'has_api_key': bool(self.api_key),
            'origin': state.origin,
            'destination': state.destination,
            'has_route': state.route is not None,
            'has_plan': state.plan is not None,
            'messages': len(state.messages),
            'is_loading': state.is_loading,
            'generation': state.generation,
            'age_minutes': self.get_age_minutes(),
            'inactivity_minutes': self.get_inactivity_minutes(),
        }
