"""
Funkcje formatowania i konwersji danych.

Zawiera funkcje pomocnicze do formatowania współrzędnych, czasu
i zaokrąglania wartości zwracanych przez usługi zewnętrzne.
"""

import math


def format_coordinates(lat, lon, precision=6):
    """
    Formatuje współrzędne geograficzne jako string "lat,lon".

    Args:
        lat: Szerokość geograficzna
        lon: Długość geograficzna
        precision: Liczba miejsc po przecinku

    Returns:
        String w formacie "lat,lon"
    """
    return f"{round(float(lat), precision)},{round(float(lon), precision)}"


def format_duration(minutes):
    """
    Formatuje czas przejazdu, np. 135 -> "2 h 15 min".

    Args:
        minutes: Czas w minutach

    Returns:
        Czytelny string
    """
    minutes = int(minutes)
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest} min"
    if rest == 0:
        return f"{hours} h"
    return f"{hours} h {rest} min"


def round_half_up(value):
    """
    Zaokrągla do liczby całkowitej, połówki w górę (2.5 -> 3, nie 2 jak round()).
    """
    return int(math.floor(float(value) + 0.5))
