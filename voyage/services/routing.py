"""
Wyznaczanie trasy: geokodowanie → routing z API → trasa szacowana.

RouteResolver zawsze zwraca RouteData, gdy obie lokalizacje zostały
znalezione. Błąd usługi routingu nigdy nie przerywa żądania - kończy
się trasą szacowaną (linia prosta, haversine × współczynnik drogowy).
"""

import concurrent.futures
import logging
import time
from typing import List, Tuple, Dict, Any, Optional

import polyline as pl
import requests

from voyage.config.settings import (
    ORS_API_KEY,
    ORS_BASE_URL,
    ROUTING_PROFILE,
    ROUTING_TIMEOUT,
    ROAD_FACTOR,
    FALLBACK_SPEED_KMH,
    FALLBACK_STEPS,
)
from voyage.models.exceptions import RoutingFailure, UnresolvedLocation
from voyage.models.route import Coordinate, GeocodeResult, RouteData
from voyage.utils.formatting import round_half_up
from voyage.utils.geo import haversine, interpolate_line, create_google_maps_link

logger = logging.getLogger(__name__)

LIVE_SUMMARY = "route from {origin} to {destination}"
ESTIMATED_SUMMARY = "route from {origin} to {destination} (estimated route)"


class OpenRouteServiceClient:
    """
    Klient API OpenRouteService (/directions).

    Odpowiada wyłącznie za komunikację HTTP:
    - konwersja (lat, lon) → (lon, lat) dla API
    - parsowanie odpowiedzi do postaci wewnętrznej (lat, lon)

    Każdy problem (brak klucza, status != 2xx, błąd sieci, zły JSON)
    kończy się wyjątkiem RoutingFailure. Bez ponawiania prób.
    """

    def __init__(self, api_key: str = ORS_API_KEY, base_url: str = ORS_BASE_URL,
                 profile: str = ROUTING_PROFILE, timeout: int = ROUTING_TIMEOUT):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.profile = profile
        self.timeout = timeout

    @staticmethod
    def format_coordinates(coords: List[Coordinate]) -> List[List[float]]:
        """Konwertuje listę (lat, lon) do formatu API [[lon, lat], ...]"""
        return [[lon, lat] for lat, lon in coords]

    def get_route(self, coord_from: Coordinate, coord_to: Coordinate) -> Dict[str, Any]:
        """
        Pobiera trasę przejazdu między dwoma punktami.

        Returns:
            {
                "polyline": [(lat, lon), ...],
                "distance": float,  # w metrach
                "duration": float,  # w sekundach
            }

        Raises:
            RoutingFailure: przy dowolnym błędzie
        """
        if not self.api_key:
            raise RoutingFailure("Brak klucza API OpenRouteService")

        url = f"{self.base_url}/directions/{self.profile}/geojson"
        headers = {
            'Authorization': self.api_key,
            'Content-Type': 'application/json',
            'Accept': 'application/json, application/geo+json',
        }
        body = {'coordinates': self.format_coordinates([coord_from, coord_to])}

        start_time = time.time()
        try:
            response = requests.post(url, json=body, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RoutingFailure(f"Błąd połączenia z API routingu: {e}") from e

        logger.info(f"API routingu: status {response.status_code} w {time.time() - start_time:.2f}s")

        if not response.ok:
            raise RoutingFailure(
                f"API routingu zwróciło {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RoutingFailure(f"Odpowiedź API routingu nie jest JSON: {e}") from e

        return self.parse_directions(data)

    @staticmethod
    def parse_directions(data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Parsuje odpowiedź /directions.

        Obsługuje format GeoJSON (features[0]) oraz format JSON
        (routes[0] z geometrią w postaci encoded polyline).
        """
        try:
            if data.get('features'):
                feature = data['features'][0]
                points = [(float(lat), float(lon)) for lon, lat, *_ in feature['geometry']['coordinates']]
                segment = feature['properties']['segments'][0]
                distance, duration = segment['distance'], segment['duration']
            elif data.get('routes'):
                route = data['routes'][0]
                geometry = route['geometry']
                if isinstance(geometry, str):
                    points = [(float(lat), float(lon)) for lat, lon in pl.decode(geometry)]
                else:
                    points = [(float(lat), float(lon)) for lon, lat, *_ in geometry['coordinates']]
                distance, duration = route['summary']['distance'], route['summary']['duration']
            else:
                raise RoutingFailure(f"Brak trasy w odpowiedzi API: {str(data)[:200]}")

            distance, duration = float(distance), float(duration)
        except RoutingFailure:
            raise
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise RoutingFailure(f"Nieprawidłowa odpowiedź API routingu: {e!r}") from e

        if len(points) < 2:
            raise RoutingFailure(f"Geometria trasy ma za mało punktów: {len(points)}")
        if distance < 0 or duration < 0:
            raise RoutingFailure(f"Ujemny dystans lub czas: {distance}, {duration}")

        return {'polyline': points, 'distance': distance, 'duration': duration}


def estimate_route(origin: GeocodeResult, destination: GeocodeResult,
                   origin_text: str, destination_text: str) -> RouteData:
    """
    Trasa szacowana, gdy API routingu jest niedostępne.

    - dystans: haversine × ROAD_FACTOR
    - czas: dystans skorygowany / FALLBACK_SPEED_KMH
    - geometria: linia prosta z FALLBACK_STEPS + 1 punktów
    """
    straight_km = haversine(origin.coordinate, destination.coordinate)
    road_km = straight_km * ROAD_FACTOR
    duration_min = road_km / FALLBACK_SPEED_KMH * 60

    points = interpolate_line(origin.coordinate, destination.coordinate, FALLBACK_STEPS)

    return RouteData(
        origin=origin.label_or(origin_text),
        destination=destination.label_or(destination_text),
        distance_km=round_half_up(road_km),
        duration_min=round_half_up(duration_min),
        polyline=tuple(points),
        summary=ESTIMATED_SUMMARY.format(origin=origin_text, destination=destination_text),
        estimated=True,
        map_link=create_google_maps_link(origin.coordinate, destination.coordinate),
    )


class RouteResolver:
    """
    Koordynuje wyznaczanie trasy dla pary nazw miejsc.

    Kolejność: geokodowanie (równolegle) → API routingu → trasa szacowana.
    """

    def __init__(self, geocoder, routing_client: Optional[OpenRouteServiceClient] = None):
        """
        Args:
            geocoder: Obiekt z metodą geocode(place_name) -> GeocodeResult | None
            routing_client: Klient routingu (domyślnie OpenRouteServiceClient)
        """
        self.geocoder = geocoder
        self.routing_client = routing_client or OpenRouteServiceClient()

    def geocode_pair(self, origin_text: str, destination_text: str) -> Tuple[GeocodeResult, GeocodeResult]:
        """
        Geokoduje obie lokalizacje równolegle i czeka na oba wyniki.

        Raises:
            UnresolvedLocation: gdy któraś lokalizacja nie została znaleziona
                (najpierw sprawdzany jest start, potem cel)
            GeocodingFailure: błąd usługi geokodowania
        """
        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            origin_future = executor.submit(self.geocoder.geocode, origin_text)
            destination_future = executor.submit(self.geocoder.geocode, destination_text)
            concurrent.futures.wait([origin_future, destination_future])

        origin_geo = origin_future.result()
        if origin_geo is None:
            raise UnresolvedLocation('origin', origin_text)

        destination_geo = destination_future.result()
        if destination_geo is None:
            raise UnresolvedLocation('destination', destination_text)

        return origin_geo, destination_geo

    def resolve_route(self, origin_text: str, destination_text: str) -> RouteData:
        """
        Wyznacza trasę między dwoma miejscami podanymi tekstem.

        Args:
            origin_text: Punkt startowy (np. "Beijing")
            destination_text: Cel (np. "Shanghai")

        Returns:
            RouteData - z API routingu lub szacowana

        Raises:
            UnresolvedLocation: nie znaleziono startu lub celu
            GeocodingFailure: błąd usługi geokodowania
        """
        origin_geo, destination_geo = self.geocode_pair(origin_text, destination_text)

        try:
            result = self.routing_client.get_route(origin_geo.coordinate, destination_geo.coordinate)
        except RoutingFailure as e:
            logger.warning(f"Routing API niedostępne, używam trasy szacowanej: {e}")
        else:
            route = RouteData(
                origin=origin_geo.label_or(origin_text),
                destination=destination_geo.label_or(destination_text),
                distance_km=round_half_up(result['distance'] / 1000),
                duration_min=round_half_up(result['duration'] / 60),
                polyline=tuple(result['polyline']),
                summary=LIVE_SUMMARY.format(origin=origin_text, destination=destination_text),
                map_link=create_google_maps_link(
                    origin_geo.coordinate, destination_geo.coordinate, result['polyline']
                ),
            )
            logger.info(f"Wyznaczono trasę: {route}")
            return route

        route = estimate_route(origin_geo, destination_geo, origin_text, destination_text)
        logger.info(f"Wyznaczono trasę: {route}")
        return route
