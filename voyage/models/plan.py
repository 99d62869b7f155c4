"""
Modele danych planu podróży.

Plan jest zawsze kompletny - brakujące pola odpowiedzi modelu
są uzupełniane wartościami domyślnymi podczas walidacji.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any

# === WARTOŚCI DOMYŚLNE PÓL PLANU ===
DEFAULT_REPLY_MARKDOWN = "Travel plan generated successfully!"
DEFAULT_BUDGET_ESTIMATE = "Budget varies by season"
DEFAULT_RISKS = ["Check weather conditions", "Book accommodations in advance"]
DEFAULT_TRANSPORT_TIPS = ["Arrive early", "Keep essentials handy"]


@dataclass(frozen=True)
class PlanItem:
    """
    Jeden dzień planu.

    Attributes:
        day: Numer dnia (od 1)
        title: Tytuł dnia
        activities: Lista aktywności
    """
    day: int
    title: str
    activities: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'day': self.day, 'title': self.title, 'activities': list(self.activities)}


@dataclass(frozen=True)
class AIPlanResponse:
    """
    Ustrukturyzowany plan podróży.

    Attributes:
        reply_markdown: Podsumowanie podróży w Markdown (treść wiadomości czatu)
        budget_estimate: Szacowany budżet
        risks: Lista ryzyk
        transport_tips: Wskazówki dotyczące transportu
        itinerary: Plan dzień po dniu
    """
    reply_markdown: str
    budget_estimate: str
    risks: List[str]
    transport_tips: List[str]
    itinerary: List[PlanItem]

    def to_dict(self) -> Dict[str, Any]:
        """Konwertuje plan do słownika w formacie odpowiedzi modelu (camelCase)"""
        return {
            'replyMarkdown': self.reply_markdown,
            'budgetEstimate': self.budget_estimate,
            'risks': list(self.risks),
            'transportTips': list(self.transport_tips),
            'itinerary': [item.to_dict() for item in self.itinerary],
        }


@dataclass(frozen=True)
class PlanValidation:
    """
    Wynik walidacji odpowiedzi modelu.

    Attributes:
        plan: Kompletny plan
        defaulted_fields: Nazwy pól uzupełnionych wartościami domyślnymi
    """
    plan: AIPlanResponse
    defaulted_fields: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Czy odpowiedź modelu zawierała wszystkie pola"""
        return not self.defaulted_fields
