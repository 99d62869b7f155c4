"""
Klient modelu językowego generującego plany podróży.

Wysyła zapytania do API zgodnego z /chat/completions i zamienia
odpowiedź na kompletny AIPlanResponse. Bez ponawiania prób.
"""

import logging
import time
from typing import List, Optional

import requests

from voyage.config.settings import (
    LLM_API_KEY,
    LLM_BASE_URL,
    LLM_MODEL,
    LLM_TEMPERATURE,
    LLM_MAX_TOKENS,
    LLM_TIMEOUT,
)
from voyage.models.exceptions import PlanGenerationFailure, MissingApiKey
from voyage.models.plan import AIPlanResponse
from voyage.models.route import RouteData
from voyage.services.plan_parser import parse_plan_content, validate_plan

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional travel planning assistant. "
    "Generate detailed, practical travel plans in JSON format."
)

PLAN_FORMAT = """{
  "replyMarkdown": "A friendly markdown summary of the journey with key highlights",
  "budgetEstimate": "Estimated budget range (e.g., ¥800-1500 per person)",
  "risks": ["Risk 1", "Risk 2", "Risk 3"],
  "transportTips": ["Tip 1", "Tip 2", "Tip 3"],
  "itinerary": [
    {
      "day": 1,
      "title": "Day title",
      "activities": ["Activity 1", "Activity 2"]
    }
  ]
}"""


def build_prompt(route: RouteData, preferences: str, history: Optional[List[str]] = None) -> str:
    """
    Buduje treść zapytania do modelu.

    Args:
        route: Wyznaczona trasa
        preferences: Preferencje użytkownika (lub jego wiadomość w czacie)
        history: Wcześniejsze linie rozmowy 'rola: treść'

    Returns:
        Tekst zapytania (prompt systemowy + prompt użytkownika)
    """
    history_block = ''
    if history:
        history_block = "Previous Conversation:\n" + "\n".join(history)

    user_prompt = f"""
Plan a journey from {route.origin} to {route.destination}.

Route Details:
- Distance: {route.distance_km} km
- Duration: {route.duration_hours} hours ({route.duration_min} minutes)
- Route: {route.summary}

User Preferences: {preferences}

{history_block}

Provide a comprehensive travel plan in the following JSON format:
{PLAN_FORMAT}

Make the plan practical, detailed, and tailored to the route and preferences."""

    return SYSTEM_PROMPT + "\n\n" + user_prompt


class PlanService:
    """
    Klient API /chat/completions.

    Attributes:
        api_key: Klucz API (Bearer)
        base_url: Adres bazowy API
        model: Identyfikator modelu
    """

    def __init__(self, api_key: Optional[str] = LLM_API_KEY, base_url: Optional[str] = LLM_BASE_URL,
                 model: str = LLM_MODEL, temperature: float = LLM_TEMPERATURE,
                 max_tokens: int = LLM_MAX_TOKENS, timeout: int = LLM_TIMEOUT):
        if not api_key:
            raise MissingApiKey()
        self.api_key = api_key
        self.base_url = (base_url or LLM_BASE_URL).rstrip('/')
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self):
        return {
            'Content-Type': 'application/json',
            'Authorization': f"Bearer {self.api_key}",
        }

    def validate_key(self) -> bool:
        """
        Sprawdza klucz krótkim zapytaniem testowym.

        Returns:
            True jeśli API odpowiedziało 2xx
        """
        logger.info(f"Walidacja klucza API (base_url={self.base_url}, klucz: {self.api_key[:8]}...)")
        try:
            response = requests.post(
                self.completions_url,
                json={
                    'model': self.model,
                    'messages': [{'role': 'user', 'content': 'Hi'}],
                    'max_tokens': 5,
                },
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Walidacja klucza nie powiodła się: {e}")
            return False

        if not response.ok:
            logger.error(f"Walidacja klucza nie powiodła się: {response.status_code} {response.text[:200]}")
            return False

        logger.info("Klucz API poprawny")
        return True

    def generate_plan(self, route: RouteData, preferences: str,
                      history: Optional[List[str]] = None) -> AIPlanResponse:
        """
        Generuje plan podróży dla trasy.

        Można wywoływać wielokrotnie z rosnącą historią rozmowy.

        Args:
            route: Wyznaczona trasa
            preferences: Preferencje lub wiadomość użytkownika
            history: Wcześniejsze linie rozmowy 'rola: treść'

        Returns:
            Kompletny AIPlanResponse

        Raises:
            PlanGenerationFailure: błąd sieci, status != 2xx lub nieczytelna odpowiedź
        """
        prompt = build_prompt(route, preferences, history or [])
        body = {
            'model': self.model,
            'messages': [{'role': 'user', 'content': prompt}],
            'temperature': self.temperature,
            'max_tokens': self.max_tokens,
        }

        start_time = time.time()
        try:
            response = requests.post(self.completions_url, json=body, headers=self._headers(),
                                     timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Błąd połączenia z API modelu: {e}")
            raise PlanGenerationFailure("Błąd połączenia z API modelu", e) from e

        logger.info(f"API modelu: status {response.status_code} w {time.time() - start_time:.2f}s")

        if not response.ok:
            raise PlanGenerationFailure(
                f"Zapytanie do API modelu nie powiodło się: {response.status_code} - {response.text[:200]}"
            )

        try:
            data = response.json()
            choice = data['choices'][0]
            content = (choice.get('message') or {}).get('content')
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise PlanGenerationFailure("Nieprawidłowa odpowiedź API modelu", e) from e

        logger.info(
            f"Odpowiedź modelu: {len(content or '')} znaków, "
            f"finish_reason={choice.get('finish_reason')}"
        )

        if not content:
            raise PlanGenerationFailure("Model nie zwrócił odpowiedzi")
        if not isinstance(content, str):
            raise PlanGenerationFailure(
                f"Nieobsługiwany format treści odpowiedzi modelu: {type(content).__name__}"
            )

        validation = validate_plan(parse_plan_content(content))
        return validation.plan
