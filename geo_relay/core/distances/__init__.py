"""
Агрегатор попарных расстояний между клиентами.
"""

from geo_relay.core.distances.service import (
    AggregateSnapshot,
    DistanceAggregator,
    DistancePair,
    compute_all,
)

__all__ = ["AggregateSnapshot", "DistanceAggregator", "DistancePair", "compute_all"]
