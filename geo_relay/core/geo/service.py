# geo_relay/core/geo/service.py
"""
Чистые функции для работы с координатами.
"""

from __future__ import annotations

import math

from geo_relay.common.constants import EARTH_RADIUS_KM


def haversine_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """
    Вычисляет расстояние между двумя точками (в км) по формуле Haversine.

    Координаты в градусах. Результат не округляется.
    Для нечисловых (NaN/inf) координат возвращается NaN.
    """
    # math.sin(inf) бросает ValueError
    if not (is_finite_coordinate(lat1, lon1) and is_finite_coordinate(lat2, lon2)):
        return math.nan

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(dlon / 2) ** 2)

    # Погрешность float может дать a чуть больше 1 для антиподов
    a = min(a, 1.0)

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return radius_km * c


def is_finite_coordinate(lat: float, lon: float) -> bool:
    """Обе координаты конечны (не NaN и не бесконечность)."""
    return math.isfinite(lat) and math.isfinite(lon)


def is_valid_coordinate(lat: float, lon: float) -> bool:
    """Координаты конечны и лежат в допустимых диапазонах широты и долготы."""
    return is_finite_coordinate(lat, lon) and -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0
