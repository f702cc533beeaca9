"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class RelayEvent(str, Enum):
    """Имена событий WebSocket протокола."""
    # Входящие (клиент -> relay)
    SEND_LOCATION = "send-location"
    PING = "ping"

    # Исходящие (relay -> клиент)
    PEER_LOCATION = "peer-location"
    PEER_DISCONNECTED = "peer-disconnected"
    AGGREGATE_UPDATE = "aggregate-update"
    WELCOME = "welcome"
    PONG = "pong"
    ERROR = "error"


# Средний радиус Земли в км
EARTH_RADIUS_KM: float = 6371.0

# Точность округления расстояний для клиентов
DISTANCE_PRECISION: int = 2
