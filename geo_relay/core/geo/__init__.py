"""
Геоматематика: расстояние по большому кругу.
"""

from geo_relay.core.geo.service import (
    haversine_km,
    is_finite_coordinate,
    is_valid_coordinate,
)

__all__ = ["haversine_km", "is_finite_coordinate", "is_valid_coordinate"]
