# geo_relay/shared/models/events.py
"""
Модели событий WebSocket протокола.

Каждое сообщение в обе стороны — конверт {"event": ..., "data": ...}.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from geo_relay.core.distances.service import AggregateSnapshot
from geo_relay.shared.models.common import utc_timestamp


class RelayMessage(BaseModel):
    """Конверт сообщения."""

    event: str
    data: Any = None


class PeerDisconnectedEvent(BaseModel):
    """Клиент отключился."""

    id: str


class DistancePairDTO(BaseModel):
    """Пара клиентов в событии aggregate-update."""

    user1: str
    user2: str
    distance_km: float | None = Field(default=None, alias="distanceKm")

    class Config:
        populate_by_name = True


class AggregateUpdateEvent(BaseModel):
    """Пересчитанный агрегат после любого изменения реестра."""

    total_users: int = Field(alias="totalUsers")
    has_connections: bool = Field(alias="hasConnections")
    pairs: list[DistancePairDTO] = Field(default_factory=list)
    timestamp: str = Field(default_factory=utc_timestamp)

    class Config:
        populate_by_name = True

    @classmethod
    def from_snapshot(cls, aggregate: AggregateSnapshot) -> "AggregateUpdateEvent":
        """Создаёт событие из агрегата."""
        return cls(
            total_users=aggregate.total_users,
            has_connections=aggregate.has_connections,
            pairs=[
                DistancePairDTO(user1=p.user1, user2=p.user2, distance_km=p.distance_km)
                for p in aggregate.pairs
            ],
        )


class WelcomeEvent(BaseModel):
    """Приветствие новому соединению."""

    id: str
    total_users: int = Field(alias="totalUsers")
    has_connections: bool = Field(alias="hasConnections")
    timestamp: str = Field(default_factory=utc_timestamp)

    class Config:
        populate_by_name = True
