"""
Parsowanie i walidacja odpowiedzi modelu językowego.

Model zwraca tekst, który powinien zawierać obiekt JSON planu,
czasem opakowany w blok kodu Markdown. Walidacja zawsze daje kompletny
AIPlanResponse - brakujące pola są uzupełniane wartościami domyślnymi.
"""

import json
import logging
import re
from typing import Any, Dict, List

from voyage.models.exceptions import PlanGenerationFailure
from voyage.models.plan import (
    AIPlanResponse,
    PlanItem,
    PlanValidation,
    DEFAULT_REPLY_MARKDOWN,
    DEFAULT_BUDGET_ESTIMATE,
    DEFAULT_RISKS,
    DEFAULT_TRANSPORT_TIPS,
)

logger = logging.getLogger(__name__)

CODE_FENCE_OPEN = re.compile(r'```json\n?')
CODE_FENCE_CLOSE = re.compile(r'```\n?')
JSON_OBJECT = re.compile(r'\{[\s\S]*\}')


def strip_code_fences(content: str) -> str:
    """Usuwa znaczniki bloku kodu (```json i ```) z odpowiedzi modelu"""
    return CODE_FENCE_CLOSE.sub('', CODE_FENCE_OPEN.sub('', content)).strip()


def parse_plan_content(content: str) -> Dict[str, Any]:
    """
    Wyciąga obiekt JSON z odpowiedzi modelu.

    Kolejność prób:
    1. JSON po usunięciu bloków kodu
    2. Pierwszy fragment {...} z oryginalnego tekstu

    Raises:
        PlanGenerationFailure: gdy żadna próba nie dała obiektu JSON
    """
    if not isinstance(content, str) or not content.strip():
        raise PlanGenerationFailure("Model nie zwrócił treści")

    try:
        parsed = json.loads(strip_code_fences(content))
    except ValueError as parse_error:
        logger.warning(f"Parsowanie JSON nie powiodło się, próbuję wyciągnąć obiekt: {parse_error}")
        match = JSON_OBJECT.search(content)
        if not match:
            raise PlanGenerationFailure("Nie można sparsować odpowiedzi modelu", parse_error)
        try:
            parsed = json.loads(match.group(0))
        except ValueError as e:
            raise PlanGenerationFailure("Nie można sparsować odpowiedzi modelu", e) from e

    if not isinstance(parsed, dict):
        raise PlanGenerationFailure(
            f"Odpowiedź modelu nie jest obiektem JSON (typ: {type(parsed).__name__})"
        )
    return parsed


def _text_or_none(value):
    if isinstance(value, str) and value.strip():
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _string_list_or_none(value):
    if not isinstance(value, list):
        return None
    items = [str(item) for item in value if isinstance(item, (str, int, float)) and str(item).strip()]
    return items or None


def _parse_itinerary(value) -> List[PlanItem]:
    items = []
    for index, raw in enumerate(value, start=1):
        if not isinstance(raw, dict):
            continue
        try:
            day = int(raw.get('day', index))
        except (TypeError, ValueError, OverflowError):
            day = index
        title = _text_or_none(raw.get('title')) or f"Day {day}"
        activities = _string_list_or_none(raw.get('activities')) or []
        items.append(PlanItem(day=day, title=title, activities=activities))
    return items


def validate_plan(raw: Dict[str, Any]) -> PlanValidation:
    """
    Sprawdza kształt planu i uzupełnia brakujące pola.

    Args:
        raw: Słownik sparsowany z odpowiedzi modelu

    Returns:
        PlanValidation z kompletnym planem i listą pól domyślnych
    """
    defaulted = []

    reply_markdown = _text_or_none(raw.get('replyMarkdown'))
    if reply_markdown is None:
        reply_markdown = DEFAULT_REPLY_MARKDOWN
        defaulted.append('replyMarkdown')

    budget_estimate = _text_or_none(raw.get('budgetEstimate'))
    if budget_estimate is None:
        budget_estimate = DEFAULT_BUDGET_ESTIMATE
        defaulted.append('budgetEstimate')

    risks = _string_list_or_none(raw.get('risks'))
    if risks is None:
        risks = list(DEFAULT_RISKS)
        defaulted.append('risks')

    transport_tips = _string_list_or_none(raw.get('transportTips'))
    if transport_tips is None:
        transport_tips = list(DEFAULT_TRANSPORT_TIPS)
        defaulted.append('transportTips')

    raw_itinerary = raw.get('itinerary')
    if isinstance(raw_itinerary, list):
        itinerary = _parse_itinerary(raw_itinerary)
    else:
        itinerary = []
        defaulted.append('itinerary')

    plan = AIPlanResponse(
        reply_markdown=reply_markdown,
        budget_estimate=budget_estimate,
        risks=risks,
        transport_tips=transport_tips,
        itinerary=itinerary,
    )
    if defaulted:
        logger.info(f"Uzupełniono domyślne pola planu: {', '.join(defaulted)}")
    return PlanValidation(plan=plan, defaulted_fields=defaulted)
