"""
Pydantic модели для WebSocket событий и REST ответов.
"""

from geo_relay.shared.models.common import (
    DistanceItem,
    DistancesResponse,
    ErrorPayload,
    HealthStatus,
    utc_timestamp,
)
from geo_relay.shared.models.location_dto import (
    InvalidLocationPayload,
    LocationUpdateDTO,
    PeerLocationDTO,
)
from geo_relay.shared.models.events import (
    AggregateUpdateEvent,
    DistancePairDTO,
    PeerDisconnectedEvent,
    RelayMessage,
    WelcomeEvent,
)

__all__ = [
    "DistanceItem",
    "DistancesResponse",
    "ErrorPayload",
    "HealthStatus",
    "utc_timestamp",
    "InvalidLocationPayload",
    "LocationUpdateDTO",
    "PeerLocationDTO",
    "AggregateUpdateEvent",
    "DistancePairDTO",
    "PeerDisconnectedEvent",
    "RelayMessage",
    "WelcomeEvent",
]
