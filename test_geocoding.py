"""
Testy geokodowania (Nominatim zastąpiony fałszywym geolokatorem).
"""

import pytest
from geopy.exc import GeocoderServiceError, GeocoderTimedOut

from voyage.models.exceptions import GeocodingFailure
from voyage.services.geocoding import Geocoder
from conftest import FakeGeolocator


def make_geocoder(**kwargs):
    return Geocoder(geolocator=FakeGeolocator(**kwargs))


def test_geocode_returns_short_label_and_coordinates():
    geocoder = make_geocoder(places={
        "Beijing": (39.9057, 116.3913, "Beijing, Dongcheng District, China"),
    })

    result = geocoder.geocode("Beijing")

    assert result.coordinate == (39.9057, 116.3913)
    assert result.display_name == "Beijing"
    assert result.address == "Beijing, Dongcheng District, China"


def test_geocode_strips_query():
    geolocator = FakeGeolocator(places={"Shanghai": (31.23, 121.47, "Shanghai, China")})
    Geocoder(geolocator=geolocator).geocode("  Shanghai  ")

    assert geolocator.queries == ["Shanghai"]


def test_geocode_not_found_returns_none():
    assert make_geocoder().geocode("Xyzzyqq123") is None


def test_geocode_service_error_raises_failure():
    geocoder = make_geocoder(error=GeocoderServiceError("HTTP 503"))

    with pytest.raises(GeocodingFailure) as excinfo:
        geocoder.geocode("Beijing")

    assert excinfo.value.place_name == "Beijing"


def test_geocode_timeout_raises_failure():
    geocoder = make_geocoder(error=GeocoderTimedOut("timed out"))

    with pytest.raises(GeocodingFailure):
        geocoder.geocode("Beijing")


def test_geocode_invalid_coordinates_raise_failure():
    geocoder = make_geocoder(places={"Nowhere": (123.0, 500.0, "Nowhere")})

    with pytest.raises(GeocodingFailure):
        geocoder.geocode("Nowhere")


def test_geocode_empty_name_rejected():
    with pytest.raises(ValueError):
        make_geocoder().geocode("   ")


def test_label_falls_back_to_input_text():
    geocoder = make_geocoder(places={"somewhere": (10.0, 10.0, "")})

    result = geocoder.geocode("somewhere")

    assert result.display_name == ""
    assert result.label_or("somewhere") == "somewhere"
