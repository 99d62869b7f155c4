"""
Wyjątki aplikacji.

Zawiera niestandardowe klasy wyjątków używane w całej aplikacji.
"""


class GeocodingFailure(Exception):
    """
    Wyjątek sygnalizujący błąd usługi geokodowania.

    Rzucany przy błędzie sieci lub nieprawidłowej odpowiedzi usługi.
    Brak wyników NIE jest tym błędem - geokoder zwraca wtedy None.

    Attributes:
        place_name: Nazwa miejsca, którego dotyczyło zapytanie
        cause: Pierwotny wyjątek
    """

    def __init__(self, place_name, cause=None):
        self.place_name = place_name
        self.cause = cause
        super().__init__(f"Błąd usługi geokodowania dla '{place_name}': {cause}")


class UnresolvedLocation(Exception):
    """
    Wyjątek sygnalizujący, że nie znaleziono jednej z lokalizacji.

    Attributes:
        side: 'origin' albo 'destination'
        place_name: Tekst wpisany przez użytkownika
    """

    SIDE_LABELS = {
        'origin': 'punkt startowy',
        'destination': 'cel podróży',
    }

    def __init__(self, side, place_name):
        self.side = side
        self.place_name = place_name
        label = self.SIDE_LABELS.get(side, side)
        super().__init__(f"Nie można znaleźć miejsca ({label}): {place_name}")


class RoutingFailure(Exception):
    """
    Wyjątek sygnalizujący błąd usługi routingu.

    Nigdy nie opuszcza RouteResolver - zawsze kończy się trasą szacowaną.
    """

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class PlanGenerationFailure(Exception):
    """
    Wyjątek sygnalizujący błąd generowania planu przez model językowy.

    Rzucany przy błędzie sieci, odpowiedzi innej niż 2xx lub
    odpowiedzi, której nie da się sparsować jako JSON.
    """

    def __init__(self, message, cause=None):
        self.cause = cause
        super().__init__(message)


class MissingApiKey(Exception):
    """Wyjątek sygnalizujący brak skonfigurowanego klucza API modelu."""

    def __init__(self):
        super().__init__("Brak klucza API - skonfiguruj go w ustawieniach")


class StaleRequest(Exception):
    """
    Wyjątek sygnalizujący, że wynik żądania został odrzucony,
    bo w międzyczasie rozpoczęto nowsze planowanie.

    Attributes:
        generation: Generacja, w której rozpoczęto żądanie
        current_generation: Aktualna generacja stanu
    """

    def __init__(self, generation, current_generation):
        self.generation = generation
        self.current_generation = current_generation
        super().__init__("Żądanie zostało zastąpione nowszym planowaniem")
