"""
Modele wiadomości czatu i wpisów historii planowania.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Dict, Any

from voyage.models.plan import AIPlanResponse
from voyage.models.route import Coordinate, RouteData


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ChatMessage:
    """
    Pojedyncza wiadomość rozmowy.

    Attributes:
        id: Identyfikator wiadomości
        role: 'user' lub 'assistant'
        content: Treść (Markdown)
        timestamp: Czas utworzenia [ms od epoki]
    """
    id: str
    role: str
    content: str
    timestamp: int

    def __post_init__(self):
        if self.role not in ('user', 'assistant'):
            raise ValueError(f"Nieprawidłowa rola wiadomości: '{self.role}'")

    @classmethod
    def create(cls, role: str, content: str) -> 'ChatMessage':
        return cls(id=uuid.uuid4().hex, role=role, content=content, timestamp=_now_ms())

    def as_transcript_line(self) -> str:
        """Linia transkryptu przekazywana do modelu: 'rola: treść'"""
        return f"{self.role}: {self.content}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'role': self.role,
            'content': self.content,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class HistoryRecord:
    """
    Wpis historii - jeden zakończony cykl planowania.

    Attributes:
        id: Identyfikator wpisu
        origin: Etykieta startu
        destination: Etykieta celu
        timestamp: Czas utworzenia [ms od epoki]
        route_summary: Opis trasy
        start: Pierwszy punkt trasy
        end: Ostatni punkt trasy
        ai_response: Wygenerowany plan (słownik w formacie camelCase)
    """
    id: str
    origin: str
    destination: str
    timestamp: int
    route_summary: str
    start: Coordinate
    end: Coordinate
    ai_response: Dict[str, Any]

    @classmethod
    def create(cls, route: RouteData, plan: AIPlanResponse) -> 'HistoryRecord':
        return cls(
            id=uuid.uuid4().hex,
            origin=route.origin,
            destination=route.destination,
            timestamp=_now_ms(),
            route_summary=route.summary,
            start=route.polyline[0],
            end=route.polyline[-1],
            ai_response=plan.to_dict(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Konwertuje wpis do słownika (JSON, zapis w cache)"""
        return {
            'id': self.id,
            'origin': self.origin,
            'destination': self.destination,
            'timestamp': self.timestamp,
            'routeSummary': self.route_summary,
            'start': list(self.start),
            'end': list(self.end),
            'aiResponse': self.ai_response,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HistoryRecord':
        """Odtwarza wpis ze słownika zapisanego przez to_dict()"""
        return cls(
            id=data['id'],
            origin=data['origin'],
            destination=data['destination'],
            timestamp=int(data['timestamp']),
            route_summary=data.get('routeSummary', ''),
            start=tuple(data['start']),
            end=tuple(data['end']),
            ai_response=data.get('aiResponse') or {},
        )
