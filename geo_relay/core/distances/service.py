# geo_relay/core/distances/service.py
"""
Расчёт попарных расстояний по снимку реестра.

Полный пересчёт O(n²) на каждое изменение. Рассчитан на десятки
клиентов; для тысяч нужен инкрементальный пересчёт строк/столбцов
изменившегося клиента или пространственный индекс.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterable

from geo_relay.common.constants import DISTANCE_PRECISION, EARTH_RADIUS_KM
from geo_relay.core.geo.service import haversine_km
from geo_relay.core.registry.service import ClientRecord


@dataclass(frozen=True)
class DistancePair:
    """Неупорядоченная пара клиентов и расстояние между ними."""
    user1: str
    user2: str
    distance_km: float | None  # None если координаты не конечны

    def involves(self, client_id: str) -> bool:
        """Участвует ли клиент в паре."""
        return client_id in (self.user1, self.user2)


@dataclass(frozen=True)
class AggregateSnapshot:
    """Агрегированное состояние реестра."""
    total_users: int
    pairs: tuple[DistancePair, ...] = field(default_factory=tuple)

    @property
    def has_connections(self) -> bool:
        """Есть ли хотя бы один клиент с позицией."""
        return self.total_users > 0


def compute_all(
    snapshot: Iterable[ClientRecord],
    precision: int = DISTANCE_PRECISION,
    radius_km: float = EARTH_RADIUS_KM,
) -> AggregateSnapshot:
    """
    Рассчитать все n·(n−1)/2 пар для снимка реестра.

    Чистая функция: одинаковый снимок даёт одинаковый результат.
    Пары перечисляются в порядке снимка, i < j. Расчёт в полной точности,
    округление только в результате.
    """
    records = tuple(snapshot)
    pairs: list[DistancePair] = []

    for first, second in combinations(records, 2):
        distance = haversine_km(
            first.latitude, first.longitude,
            second.latitude, second.longitude,
            radius_km=radius_km,
        )
        pairs.append(DistancePair(
            user1=first.id,
            user2=second.id,
            distance_km=round(distance, precision) if math.isfinite(distance) else None,
        ))

    return AggregateSnapshot(total_users=len(records), pairs=tuple(pairs))


class DistanceAggregator:
    """Агрегатор с параметрами расчёта из настроек."""

    def __init__(
        self,
        precision: int = DISTANCE_PRECISION,
        radius_km: float = EARTH_RADIUS_KM,
    ) -> None:
        self._precision = precision
        self._radius_km = radius_km

    @classmethod
    def from_settings(cls) -> "DistanceAggregator":
        """Создаёт агрегатор по секции relay настроек."""
        from geo_relay.config import settings

        return cls(
            precision=settings.relay.DISTANCE_PRECISION,
            radius_km=settings.relay.EARTH_RADIUS_KM,
        )

    def compute_all(self, snapshot: Iterable[ClientRecord]) -> AggregateSnapshot:
        """Рассчитать агрегат для снимка."""
        return compute_all(snapshot, precision=self._precision, radius_km=self._radius_km)
