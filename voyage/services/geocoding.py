"""
Geokodowanie nazw miejsc przez Nominatim (OpenStreetMap).

Jedno zapytanie na wywołanie, bez cache i bez limitowania zapytań.
"""

import logging
from typing import Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from voyage.config.settings import NOMINATIM_USER_AGENT, GEOCODER_TIMEOUT
from voyage.models.exceptions import GeocodingFailure
from voyage.models.route import GeocodeResult
from voyage.utils.geo import is_valid_coordinates

logger = logging.getLogger(__name__)


class Geocoder:
    """
    Zamienia tekst miejsca na współrzędne i krótką etykietę.

    Brak dopasowania -> None. Błąd usługi -> GeocodingFailure.
    """

    def __init__(self, geolocator=None, user_agent: str = NOMINATIM_USER_AGENT,
                 timeout: int = GEOCODER_TIMEOUT):
        """
        Args:
            geolocator: Obiekt z metodą geocode() zgodny z geopy (domyślnie Nominatim)
            user_agent: Identyfikator aplikacji wymagany przez Nominatim
            timeout: Timeout zapytania [s]
        """
        self.geolocator = geolocator or Nominatim(user_agent=user_agent, timeout=timeout)

    def geocode(self, place_name: str) -> Optional[GeocodeResult]:
        """
        Geokoduje nazwę miejsca.

        Args:
            place_name: Dowolny tekst (np. "Beijing")

        Returns:
            GeocodeResult albo None gdy usługa nie zna miejsca

        Raises:
            ValueError: Pusty tekst
            GeocodingFailure: Błąd sieci lub nieprawidłowa odpowiedź usługi
        """
        if not place_name or not place_name.strip():
            raise ValueError("Nazwa miejsca nie może być pusta")

        query = place_name.strip()
        logger.info(f"Nominatim - zapytanie: '{query}'")

        try:
            location = self.geolocator.geocode(query, exactly_one=True)
        except GeopyError as e:
            logger.error(f"Błąd Nominatim przy zapytaniu '{query}': {e}")
            raise GeocodingFailure(query, e) from e

        if location is None:
            logger.info(f"Nominatim - brak wyników dla '{query}'")
            return None

        try:
            lat, lon = float(location.latitude), float(location.longitude)
        except (TypeError, ValueError, AttributeError) as e:
            raise GeocodingFailure(query, e) from e

        if not is_valid_coordinates(lat, lon):
            raise GeocodingFailure(query, f"nieprawidłowe współrzędne ({lat}, {lon})")

        result = GeocodeResult.from_address(lat, lon, getattr(location, 'address', ''))
        logger.info(f"Nominatim - znaleziono wynik: {result.display_name} ({lat:.4f}, {lon:.4f})")
        return result
