"""
Funkcje geograficzne i obliczenia odległości.

Zawiera funkcje do obliczeń geodezyjnych, interpolacji linii prostej
oraz budowania linków do map zewnętrznych.
"""

import logging
import math
from typing import List, Tuple, Optional, Sequence

from voyage.config.settings import EARTH_RADIUS_KM
from voyage.utils.formatting import format_coordinates

logger = logging.getLogger(__name__)


def haversine(coord1: Tuple[float, float], coord2: Tuple[float, float]) -> Optional[float]:
    """
    Oblicza odległość między dwoma punktami na Ziemi używając wzoru Haversine.

    Wzór Haversine uwzględnia krzywiznę Ziemi. Wynik jest symetryczny:
    haversine(a, b) == haversine(b, a).

    Args:
        coord1: Tuple (latitude, longitude) pierwszego punktu
        coord2: Tuple (latitude, longitude) drugiego punktu

    Returns:
        Odległość w kilometrach lub None jeśli któraś współrzędna jest None

    Example:
        >>> round(haversine((39.9042, 116.4074), (31.2304, 121.4737)))  # Pekin -> Szanghaj
        1067
    """
    if None in coord1 or None in coord2:
        return None

    # Konwersja na radiany
    lat1, lon1 = math.radians(coord1[0]), math.radians(coord1[1])
    lat2, lon2 = math.radians(coord2[0]), math.radians(coord2[1])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Zaokrąglenia mogą dać a minimalnie > 1 dla punktów antypodycznych
    a = min(1.0, a)

    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(a))


def interpolate_line(start: Tuple[float, float], end: Tuple[float, float],
                     steps: int) -> List[Tuple[float, float]]:
    """
    Generuje punkty linii prostej między startem a celem.

    Args:
        start: Punkt początkowy (lat, lon)
        end: Punkt końcowy (lat, lon)
        steps: Liczba równych odcinków (wynik ma steps + 1 punktów)

    Returns:
        Lista punktów (lat, lon); pierwszy to start, ostatni to cel
    """
    if steps < 1:
        raise ValueError(f"Liczba odcinków musi być dodatnia: {steps}")

    points = []
    for i in range(steps + 1):
        ratio = i / steps
        points.append((
            start[0] + (end[0] - start[0]) * ratio,
            start[1] + (end[1] - start[1]) * ratio,
        ))
    return points


def is_valid_coordinates(lat: float, lon: float) -> bool:
    """
    Sprawdza czy współrzędne są prawidłowe.

    Args:
        lat: Szerokość geograficzna
        lon: Długość geograficzna

    Returns:
        True jeśli współrzędne są w prawidłowym zakresie
    """
    if lat is None or lon is None:
        return False

    return -90 <= lat <= 90 and -180 <= lon <= 180


def sample_route_points(points: Sequence[Tuple[float, float]], num_points: int = 15):
    """
    Wybiera reprezentatywne punkty z trasy (równe odstępy, z punktem końcowym)
    """
    points = list(points)
    if not points or len(points) <= num_points:
        return points

    step = len(points) // (num_points - 1)  # -1 bo chcemy zachować punkt końcowy
    sampled_points = points[::step][:num_points - 1]
    sampled_points.append(points[-1])

    return sampled_points


def create_google_maps_link(coord_from: Tuple[float, float], coord_to: Tuple[float, float],
                            polyline: Optional[Sequence[Tuple[float, float]]] = None) -> str:
    """
    Tworzy link do Google Maps z trasą używając punktów pośrednich.

    Args:
        coord_from: Punkt startowy (lat, lon)
        coord_to: Punkt docelowy (lat, lon)
        polyline: Punkty trasy; gdy brak - link punkt-punkt

    Returns:
        URL trasy w Google Maps
    """
    simple_link = (
        f"https://www.google.com/maps/dir/"
        f"{format_coordinates(*coord_from)}/{format_coordinates(*coord_to)}"
    )
    if not polyline:
        return simple_link

    sampled_points = sample_route_points(polyline, 15)
    if len(sampled_points) <= 2:
        return simple_link

    waypoints = "/".join(format_coordinates(lat, lon) for lat, lon in sampled_points[1:-1])
    logger.debug(f"Link do mapy z {len(sampled_points) - 2} punktami pośrednimi")
    return (
        f"https://www.google.com/maps/dir/"
        f"{format_coordinates(*coord_from)}/{waypoints}/{format_coordinates(*coord_to)}"
    )
