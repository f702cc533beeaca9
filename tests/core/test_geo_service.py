# tests/core/test_geo_service.py
"""
Тесты для геоматематики (geo_relay/core/geo/service.py).
"""

from __future__ import annotations

import math

import pytest

from geo_relay.core.geo.service import (
    haversine_km,
    is_finite_coordinate,
    is_valid_coordinate,
)


class TestHaversine:
    """Тесты для haversine_km."""

    def test_new_york_los_angeles(self, cities) -> None:
        """Расстояние Нью-Йорк — Лос-Анджелес ≈ 3935.75 км."""
        distance = haversine_km(*cities["new_york"], *cities["los_angeles"])
        assert distance == pytest.approx(3935.75, abs=1.0)

    def test_symmetry(self, cities) -> None:
        """distance(A, B) == distance(B, A)."""
        a, b = cities["new_york"], cities["chicago"]
        assert haversine_km(*a, *b) == haversine_km(*b, *a)

    def test_self_distance_is_zero(self, cities) -> None:
        """Расстояние от точки до неё самой — ноль."""
        assert haversine_km(*cities["chicago"], *cities["chicago"]) == 0.0

    def test_full_precision_not_rounded(self, cities) -> None:
        """Результат не округляется."""
        distance = haversine_km(*cities["new_york"], *cities["los_angeles"])
        assert distance != round(distance, 2)

    def test_antipodes_half_circumference(self) -> None:
        """Антиподы дают половину длины окружности."""
        distance = haversine_km(0.0, 0.0, 0.0, 180.0)
        assert distance == pytest.approx(math.pi * 6371.0, rel=1e-9)

    def test_custom_radius(self) -> None:
        """Радиус сферы масштабирует результат."""
        assert haversine_km(0.0, 0.0, 0.0, 90.0, radius_km=1.0) == pytest.approx(math.pi / 2)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_returns_nan(self, bad: float) -> None:
        """NaN/inf на входе дают NaN, а не исключение."""
        assert math.isnan(haversine_km(bad, 0.0, 10.0, 10.0))
        assert math.isnan(haversine_km(10.0, 10.0, 0.0, bad))


class TestCoordinateChecks:
    """Тесты для проверок координат."""

    def test_finite(self) -> None:
        assert is_finite_coordinate(95.0, 200.0)
        assert not is_finite_coordinate(math.nan, 0.0)
        assert not is_finite_coordinate(0.0, math.inf)

    @pytest.mark.parametrize(
        ("lat", "lon", "expected"),
        [
            (0.0, 0.0, True),
            (90.0, 180.0, True),
            (-90.0, -180.0, True),
            (90.5, 0.0, False),
            (0.0, -180.1, False),
            (math.nan, 0.0, False),
        ],
    )
    def test_valid_range(self, lat: float, lon: float, expected: bool) -> None:
        """Диапазоны |lat| ≤ 90, |lon| ≤ 180."""
        assert is_valid_coordinate(lat, lon) is expected
