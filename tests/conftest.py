# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

# Переменные окружения до импорта модулей проекта
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from geo_relay.core.distances.service import DistanceAggregator
from geo_relay.core.registry.service import ClientRegistry
from geo_relay.services.realtime_ws.connection_manager import ConnectionManager
from geo_relay.services.realtime_ws.lifecycle import LifecycleManager


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок config.json для тестов."""
    return {
        "_comment_system": "тест",
        "PROJECT_NAME": "geo_relay_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
        "REALTIME_WS_HOST": "127.0.0.1",
        "REALTIME_WS_PORT": 3100,
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "LOG_MAX_BYTES": 1024,
        "EARTH_RADIUS_KM": 6371.0,
        "DISTANCE_PRECISION": 3,
        "STRICT_COORDINATE_RANGE": True,
        "CORS_ORIGINS": ["http://localhost:5173"],
        "WS_PING_INTERVAL": 5.0,
        "WS_PING_TIMEOUT": 10.0,
    }


# =============================================================================
# КООРДИНАТЫ
# =============================================================================

NEW_YORK = (40.7128, -74.0060)
LOS_ANGELES = (34.0522, -118.2437)
CHICAGO = (41.8781, -87.6298)


@pytest.fixture
def cities() -> dict[str, tuple[float, float]]:
    """Координаты тестовых городов."""
    return {
        "new_york": NEW_YORK,
        "los_angeles": LOS_ANGELES,
        "chicago": CHICAGO,
    }


# =============================================================================
# ФИКСТУРЫ ЯДРА
# =============================================================================

@pytest.fixture
def registry() -> ClientRegistry:
    """Пустой реестр клиентов."""
    return ClientRegistry()


@pytest.fixture
def gateway() -> ConnectionManager:
    """Пустой менеджер соединений."""
    return ConnectionManager()


@pytest.fixture
def lifecycle(registry: ClientRegistry, gateway: ConnectionManager) -> LifecycleManager:
    """Менеджер жизненного цикла поверх пустых реестра и шлюза."""
    return LifecycleManager(registry, gateway, DistanceAggregator())


def make_websocket(fail: bool = False) -> AsyncMock:
    """Мок WebSocket, запоминающий отправленные сообщения."""
    websocket = AsyncMock()
    if fail:
        websocket.send_json = AsyncMock(side_effect=RuntimeError("connection closed"))
    else:
        websocket.send_json = AsyncMock(return_value=None)
    return websocket


def sent_events(websocket: AsyncMock) -> list[tuple[str, Any]]:
    """Список (event, data) из вызовов send_json."""
    return [
        (call.args[0]["event"], call.args[0]["data"])
        for call in websocket.send_json.call_args_list
    ]


@pytest.fixture
def ws_factory():
    """Фабрика мок-соединений."""
    return make_websocket


@pytest.fixture
def events_of():
    """Извлекает (event, data) из отправленных через мок сообщений."""
    return sent_events
