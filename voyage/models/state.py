"""
Stan aplikacji planowania i jego przejścia.

Stan jest niemutowalny. Każda zmiana to czysta funkcja
reduce(state, event) -> state, bez wywołań sieciowych i bez zegara
(czas przychodzi w polach zdarzeń).

Licznik `generation` rośnie przy każdym nowym planowaniu. Zdarzenia
kończące żądanie niosą generację, w której żądanie rozpoczęto - jeśli
różni się od bieżącej, wynik jest odrzucany, a stan pozostaje bez zmian.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Dict, Any, Union

from voyage.models.history import ChatMessage
from voyage.models.plan import AIPlanResponse
from voyage.models.route import RouteData


@dataclass(frozen=True)
class PlannerState:
    """
    Stan planowania pojedynczego użytkownika.

    Attributes:
        origin: Tekst punktu startowego
        destination: Tekst celu
        route: Wyznaczona trasa lub None
        plan: Aktualny plan lub None
        messages: Historia rozmowy
        is_loading: Czy trwa żądanie
        error_message: Komunikat ostatniego błędu
        error_expires_at: Kiedy komunikat przestaje być wyświetlany [s od epoki]
        generation: Licznik żądań planowania
    """
    origin: str = ''
    destination: str = ''
    route: Optional[RouteData] = None
    plan: Optional[AIPlanResponse] = None
    messages: Tuple[ChatMessage, ...] = ()
    is_loading: bool = False
    error_message: Optional[str] = None
    error_expires_at: float = 0.0
    generation: int = 0

    def visible_error(self, now: float) -> Optional[str]:
        """Zwraca komunikat błędu tylko jeśli jeszcze nie wygasł"""
        if self.error_message and now < self.error_expires_at:
            return self.error_message
        return None

    def transcript(self):
        """Linie rozmowy w formacie 'rola: treść'"""
        return [message.as_transcript_line() for message in self.messages]

    def to_dict(self, now: float) -> Dict[str, Any]:
        """Konwertuje stan do słownika (do serializacji JSON)"""
        return {
            'origin': self.origin,
            'destination': self.destination,
            'route': self.route.to_dict() if self.route else None,
            'plan': self.plan.to_dict() if self.plan else None,
            'messages': [message.to_dict() for message in self.messages],
            'isLoading': self.is_loading,
            'error': self.visible_error(now),
            'generation': self.generation,
        }


# ============================================================================
# ZDARZENIA
# ============================================================================

@dataclass(frozen=True)
class PlanningStarted:
    origin: str
    destination: str


@dataclass(frozen=True)
class RouteResolved:
    generation: int
    route: RouteData


@dataclass(frozen=True)
class PlanReady:
    generation: int
    plan: AIPlanResponse
    message: ChatMessage


@dataclass(frozen=True)
class MessageSent:
    generation: int
    message: ChatMessage


@dataclass(frozen=True)
class ReplyReceived:
    generation: int
    plan: AIPlanResponse
    message: ChatMessage


@dataclass(frozen=True)
class RequestFailed:
    generation: int
    message: str
    expires_at: float


@dataclass(frozen=True)
class HistoryLoaded:
    origin: str
    destination: str
    route: RouteData
    plan: AIPlanResponse
    message: ChatMessage


@dataclass(frozen=True)
class ErrorCleared:
    pass


@dataclass(frozen=True)
class SessionReset:
    pass


Event = Union[
    PlanningStarted, RouteResolved, PlanReady, MessageSent, ReplyReceived,
    RequestFailed, HistoryLoaded, ErrorCleared, SessionReset,
]


# ============================================================================
# PRZEJŚCIA STANU
# ============================================================================

def is_current(state: PlannerState, generation: int) -> bool:
    """Czy wynik żądania z danej generacji może jeszcze zmienić stan"""
    return state.generation == generation


def reduce(state: PlannerState, event: Event) -> PlannerState:
    """
    Zwraca nowy stan po zastosowaniu zdarzenia.

    Args:
        state: Stan bieżący
        event: Zdarzenie

    Returns:
        Nowy stan (lub ten sam obiekt, gdy zdarzenie jest nieaktualne)
    """
    if isinstance(event, PlanningStarted):
        return replace(
            state,
            origin=event.origin,
            destination=event.destination,
            route=None,
            plan=None,
            messages=(),
            is_loading=True,
            error_message=None,
            error_expires_at=0.0,
            generation=state.generation + 1,
        )

    if isinstance(event, RouteResolved):
        if not is_current(state, event.generation):
            return state
        return replace(state, route=event.route)

    if isinstance(event, PlanReady):
        if not is_current(state, event.generation):
            return state
        return replace(state, plan=event.plan, messages=(event.message,), is_loading=False)

    if isinstance(event, MessageSent):
        if not is_current(state, event.generation):
            return state
        return replace(state, messages=state.messages + (event.message,), is_loading=True)

    if isinstance(event, ReplyReceived):
        if not is_current(state, event.generation):
            return state
        return replace(
            state,
            plan=event.plan,
            messages=state.messages + (event.message,),
            is_loading=False,
        )

    if isinstance(event, RequestFailed):
        if not is_current(state, event.generation):
            return state
        # Trasa, plan i rozmowa zostają bez zmian
        return replace(
            state,
            is_loading=False,
            error_message=event.message,
            error_expires_at=event.expires_at,
        )

    if isinstance(event, HistoryLoaded):
        return replace(
            state,
            origin=event.origin,
            destination=event.destination,
            route=event.route,
            plan=event.plan,
            messages=(event.message,),
            is_loading=False,
            error_message=None,
            error_expires_at=0.0,
            generation=state.generation + 1,
        )

    if isinstance(event, ErrorCleared):
        return replace(state, error_message=None, error_expires_at=0.0)

    if isinstance(event, SessionReset):
        return PlannerState(generation=state.generation + 1)

    raise TypeError(f"Nieznane zdarzenie: {event!r}")
