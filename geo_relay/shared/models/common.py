# geo_relay/shared/models/common.py
"""
Общие модели REST ответов.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def utc_timestamp() -> str:
    """Текущее время UTC в ISO 8601 с суффиксом Z."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class DistanceItem(BaseModel):
    """Расстояние между двумя клиентами для GET /api/user-distances."""

    user1: str
    user2: str
    distance: float | None = None


class DistancesResponse(BaseModel):
    """Текущие попарные расстояния."""

    distances: list[DistanceItem] = Field(default_factory=list)
    total_users: int = Field(default=0, alias="totalUsers")
    has_connections: bool = Field(default=False, alias="hasConnections")
    timestamp: str = Field(default_factory=utc_timestamp)

    class Config:
        populate_by_name = True


class HealthStatus(BaseModel):
    """Статус здоровья relay."""

    status: str = "ok"
    service: str = "geo_relay"
    version: str | None = None
    timestamp: str = Field(default_factory=utc_timestamp)
    connections: int = 0
    active_users: list[str] = Field(default_factory=list, alias="activeUsers")

    class Config:
        populate_by_name = True


class ErrorPayload(BaseModel):
    """Сообщение об ошибке для конкретного клиента."""

    message: str
    details: str | None = None
