"""
Koordynator planowania podróży dla sesji użytkownika.

Łączy RouteResolver, PlanService i HistoryStore. Stan sesji zmienia
wyłącznie przez zdarzenia (voyage.models.state). Wywołania sieciowe
odbywają się poza blokadą sesji.
"""

import logging
import time
from typing import List, Optional

from voyage.config.settings import DEFAULT_PREFERENCES, ERROR_DISPLAY_SECONDS
from voyage.models.exceptions import (
    GeocodingFailure,
    UnresolvedLocation,
    PlanGenerationFailure,
    MissingApiKey,
    StaleRequest,
)
from voyage.models.history import ChatMessage, HistoryRecord
from voyage.models.route import placeholder_route
from voyage.models.state import (
    PlannerState,
    PlanningStarted,
    RouteResolved,
    PlanReady,
    MessageSent,
    ReplyReceived,
    RequestFailed,
    HistoryLoaded,
    ErrorCleared,
    is_current,
)
from voyage.services.plan_parser import validate_plan
from voyage.services.plan_service import PlanService

logger = logging.getLogger(__name__)


def _clean_text(value) -> str:
    """Tekst z formularza bez białych znaków; wartości inne niż str traktowane jak puste"""
    return value.strip() if isinstance(value, str) else ''


class TripPlanner:
    """
    Operacje planera wywoływane przez warstwę HTTP.

    Attributes:
        route_resolver: RouteResolver
        history_store: HistoryStore
        plan_service_factory: Funkcja (api_key, base_url) -> PlanService
        clock: Źródło czasu [s od epoki]
    """

    def __init__(self, route_resolver, history_store, plan_service_factory=PlanService,
                 clock=time.time, preferences: str = DEFAULT_PREFERENCES,
                 error_display_seconds: int = ERROR_DISPLAY_SECONDS):
        self.route_resolver = route_resolver
        self.history_store = history_store
        self.plan_service_factory = plan_service_factory
        self.clock = clock
        self.preferences = preferences
        self.error_display_seconds = error_display_seconds

    def _plan_service(self, session):
        if not session.api_key:
            raise MissingApiKey()
        return self.plan_service_factory(api_key=session.api_key, base_url=session.base_url)

    def _fail(self, session, generation: int, error: Exception) -> None:
        """Zapisuje przejściowy komunikat błędu; rzuca StaleRequest gdy żądanie jest nieaktualne"""
        expires_at = self.clock() + self.error_display_seconds
        state = session.dispatch(RequestFailed(generation, str(error), expires_at))
        if not is_current(state, generation):
            raise StaleRequest(generation, state.generation) from error

    def configure(self, session, api_key: str, base_url: Optional[str] = None) -> bool:
        """
        Sprawdza i zapisuje klucz API modelu w sesji.

        Returns:
            True jeśli klucz został przyjęty
        """
        service = self.plan_service_factory(api_key=api_key, base_url=base_url)
        if not service.validate_key():
            logger.warning(f"[{session.session_id[:8]}] Odrzucono klucz API")
            return False
        session.configure(api_key, base_url)
        logger.info(f"[{session.session_id[:8]}] Zapisano konfigurację API")
        return True

    def start_planning(self, session, origin: str, destination: str) -> PlannerState:
        """
        Pełny cykl planowania: trasa → plan → historia.

        Nowe planowanie unieważnia wyniki wcześniejszych żądań tej sesji.

        Raises:
            ValueError: pusty start lub cel
            MissingApiKey: brak klucza API
            UnresolvedLocation, GeocodingFailure: problem z lokalizacją
            PlanGenerationFailure: błąd modelu
            StaleRequest: w trakcie rozpoczęto nowsze planowanie
        """
        origin, destination = _clean_text(origin), _clean_text(destination)
        if not origin or not destination:
            raise ValueError("Podaj punkt startowy i cel podróży")

        plan_service = self._plan_service(session)
        generation = session.dispatch(PlanningStarted(origin, destination)).generation
        logger.info(f"[{session.session_id[:8]}] Planowanie #{generation}: {origin} → {destination}")

        try:
            route = self.route_resolver.resolve_route(origin, destination)
            session.dispatch(RouteResolved(generation, route))
            plan = plan_service.generate_plan(route, self.preferences)
        except (UnresolvedLocation, GeocodingFailure, PlanGenerationFailure) as e:
            logger.error(f"[{session.session_id[:8]}] Planowanie #{generation} nieudane: {e}")
            self._fail(session, generation, e)
            raise
        except Exception as e:
            logger.error(f"[{session.session_id[:8]}] Planowanie #{generation} - nieoczekiwany błąd: {e}", exc_info=True)
            self._fail(session, generation, PlanGenerationFailure("Nieoczekiwany błąd planowania", e))
            raise

        message = ChatMessage.create('assistant', plan.reply_markdown)
        state = session.dispatch(PlanReady(generation, plan, message))
        if not is_current(state, generation):
            logger.info(f"[{session.session_id[:8]}] Odrzucono nieaktualny wynik planowania #{generation}")
            raise StaleRequest(generation, state.generation)

        self.history_store.add(session.session_id, HistoryRecord.create(route, plan))
        return state

    def send_message(self, session, text: str) -> PlannerState:
        """
        Doprecyzowanie planu wiadomością użytkownika.

        Raises:
            ValueError: pusta wiadomość lub brak trasy
            MissingApiKey: brak klucza API
            PlanGenerationFailure: błąd modelu (poprzedni plan pozostaje)
            StaleRequest: w trakcie rozpoczęto nowsze planowanie
        """
        text = _clean_text(text)
        if not text:
            raise ValueError("Wiadomość nie może być pusta")

        state = session.snapshot()
        if state.route is None:
            raise ValueError("Najpierw zaplanuj trasę")

        plan_service = self._plan_service(session)
        generation = state.generation
        transcript = state.transcript()
        session.dispatch(MessageSent(generation, ChatMessage.create('user', text)))

        try:
            plan = plan_service.generate_plan(state.route, text, transcript)
        except PlanGenerationFailure as e:
            logger.error(f"[{session.session_id[:8]}] Odpowiedź na wiadomość nieudana: {e}")
            self._fail(session, generation, e)
            raise
        except Exception as e:
            logger.error(f"[{session.session_id[:8]}] Odpowiedź na wiadomość - nieoczekiwany błąd: {e}", exc_info=True)
            self._fail(session, generation, PlanGenerationFailure("Nieoczekiwany błąd planowania", e))
            raise

        message = ChatMessage.create('assistant', plan.reply_markdown)
        new_state = session.dispatch(ReplyReceived(generation, plan, message))
        if not is_current(new_state, generation):
            raise StaleRequest(generation, new_state.generation)
        return new_state

    def list_history(self, session) -> List[HistoryRecord]:
        return self.history_store.list(session.session_id)

    def load_history(self, session, record_id: str) -> Optional[PlannerState]:
        """
        Przywraca plan z historii (trasa jako linia prosta start → cel).

        Returns:
            Nowy stan lub None gdy wpis nie istnieje
        """
        record = self.history_store.get(session.session_id, record_id)
        if record is None:
            return None

        plan = validate_plan(record.ai_response).plan
        route = placeholder_route(record.origin, record.destination, record.route_summary,
                                  record.start, record.end)
        message = ChatMessage(
            id=f"history-{record.id}",
            role='assistant',
            content=plan.reply_markdown,
            timestamp=record.timestamp,
        )
        return session.dispatch(HistoryLoaded(record.origin, record.destination, route, plan, message))

    def clear_error(self, session) -> PlannerState:
        return session.dispatch(ErrorCleared())
