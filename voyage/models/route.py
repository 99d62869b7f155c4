"""
Modele danych dla geokodowania i tras.

Zawiera dataclasses reprezentujące wynik geokodowania oraz
wynik wyznaczania trasy przekazywany do interfejsu i do modelu językowego.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any

from voyage.utils.formatting import format_duration, round_half_up

# Wewnętrzny typ współrzędnych: (lat, lon)
Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class GeocodeResult:
    """
    Wynik geokodowania pojedynczego miejsca.

    Attributes:
        coordinate: Współrzędne (lat, lon)
        display_name: Krótka etykieta - pierwszy segment pełnego adresu
        address: Pełny adres zwrócony przez usługę
    """
    coordinate: Coordinate
    display_name: str
    address: str = ''

    @classmethod
    def from_address(cls, lat: float, lon: float, address: Optional[str]) -> 'GeocodeResult':
        """Tworzy wynik, wyznaczając etykietę z pełnego adresu"""
        address = address or ''
        display_name = address.split(',')[0].strip()
        return cls(coordinate=(float(lat), float(lon)), display_name=display_name, address=address)

    def label_or(self, fallback: str) -> str:
        """Zwraca etykietę lub tekst zastępczy gdy etykieta jest pusta"""
        return self.display_name or fallback


@dataclass(frozen=True)
class RouteData:
    """
    Wynik wyznaczania trasy - ten sam kształt dla trasy z API i trasy szacowanej.

    Attributes:
        origin: Etykieta punktu startowego
        destination: Etykieta celu
        distance_km: Dystans [km] (zaokrąglony)
        duration_min: Czas przejazdu [min] (zaokrąglony)
        polyline: Lista punktów (lat, lon), od startu do celu
        summary: Opis trasy, rozróżnia trasę rzeczywistą od szacowanej
        estimated: Czy trasa pochodzi z obliczeń zastępczych
    """
    origin: str
    destination: str
    distance_km: int
    duration_min: int
    polyline: Tuple[Coordinate, ...]
    summary: str
    estimated: bool = False
    map_link: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        """Walidacja i normalizacja danych"""
        points = tuple((float(lat), float(lon)) for lat, lon in self.polyline)
        object.__setattr__(self, 'polyline', points)

        if len(points) < 2:
            raise ValueError(f"Trasa musi mieć co najmniej 2 punkty (jest {len(points)})")
        if self.distance_km < 0:
            raise ValueError(f"Dystans nie może być ujemny: {self.distance_km}")
        if self.duration_min < 0:
            raise ValueError(f"Czas przejazdu nie może być ujemny: {self.duration_min}")

    @property
    def duration_hours(self) -> int:
        """Czas przejazdu zaokrąglony do pełnych godzin"""
        return round_half_up(self.duration_min / 60)

    def to_dict(self) -> Dict[str, Any]:
        """
        Konwertuje trasę do słownika (do serializacji JSON dla przeglądarki).

        Returns:
            Słownik z kluczami w konwencji camelCase
        """
        return {
            'origin': self.origin,
            'destination': self.destination,
            'distanceKm': self.distance_km,
            'durationMin': self.duration_min,
            'polyline': [list(point) for point in self.polyline],
            'summary': self.summary,
            'estimated': self.estimated,
            'mapLink': self.map_link,
        }

    def __str__(self) -> str:
        """String representation dla logowania"""
        kind = "szacowana" if self.estimated else "API"
        return (
            f"Route[{kind}]: {self.origin} → {self.destination}, "
            f"{self.distance_km} km, {format_duration(self.duration_min)}, {len(self.polyline)} pkt"
        )



def placeholder_route(origin: str, destination: str, summary: str,
                      start: Coordinate, end: Coordinate) -> RouteData:
    """
    Tworzy uproszczoną trasę do widoku historii (bez ponownego wyznaczania).

    Args:
        origin: Etykieta startu
        destination: Etykieta celu
        summary: Zapisany opis trasy
        start: Zapisany pierwszy punkt trasy
        end: Zapisany ostatni punkt trasy

    Returns:
        RouteData z zerowym dystansem i czasem oraz linią prostą start → cel
    """
    return RouteData(
        origin=origin,
        destination=destination,
        distance_km=0,
        duration_min=0,
        polyline=(tuple(start), tuple(end)),
        summary=summary,
    )
