# geo_relay/services/realtime_ws/app.py
"""
FastAPI приложение relay геолокации.

WebSocket endpoints:
- /ws — обмен координатами (send-location, ping)

REST endpoints:
- GET /api/user-distances (и /distances) — попарные расстояния
- GET /health — проверка здоровья
- GET /stats — статистика соединений
- GET /test — отладочное эхо заголовков
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from geo_relay.common.constants import RelayEvent
from geo_relay.common.logger import log_error, log_info, log_warning, setup_logging
from geo_relay.config import settings
from geo_relay.services.realtime_ws.connection_manager import manager
from geo_relay.services.realtime_ws.lifecycle import create_lifecycle
from geo_relay.shared.models.common import (
    DistancesResponse,
    ErrorPayload,
    HealthStatus,
    utc_timestamp,
)
from geo_relay.shared.models.events import RelayMessage
from geo_relay.shared.models.location_dto import InvalidLocationPayload, LocationUpdateDTO


# === MODELS ===

class StatsResponse(BaseModel):
    """Статистика соединений."""
    active_connections: int
    active_users: int
    total_connections_ever: int
    total_messages_sent: int
    total_messages_dropped: int


# === CORE ===

lifecycle = create_lifecycle(manager)


# === LIFESPAN ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()
    await log_info(
        f"Relay запущен на порту {settings.deployment.REALTIME_WS_PORT}",
        extra={"environment": settings.system.ENVIRONMENT},
    )

    yield

    await manager.close_all()
    lifecycle.registry.clear()
    await log_info("Relay остановлен")


# === APP ===

app = FastAPI(
    title="Geo Relay",
    description="WebSocket relay для обмена геолокацией и расчёта расстояний между клиентами.",
    version=settings.system.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.relay.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


# === HEALTH CHECK ===

@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """Проверка здоровья сервиса."""
    return lifecycle.get_health(version=settings.system.VERSION)


# === DISTANCES ===

@app.get("/api/user-distances", response_model=DistancesResponse, tags=["Distances"])
@app.get("/distances", response_model=DistancesResponse, tags=["Distances"], include_in_schema=False)
async def get_user_distances() -> Any:
    """
    Текущие попарные расстояния между клиентами.

    Пустой реестр — это `distances: []`, а не ошибка. При внутреннем сбое
    возвращается 500 с той же структурой, без трейсбека.
    """
    try:
        return lifecycle.get_distances()
    except Exception as e:
        await log_error(f"Ошибка расчёта расстояний: {e}", exc_info=True)
        fallback = DistancesResponse().model_dump(by_alias=True)
        fallback["error"] = "Internal server error"
        return JSONResponse(status_code=500, content=fallback)


# === STATS ===

@app.get("/stats", response_model=StatsResponse, tags=["Stats"])
async def get_stats() -> StatsResponse:
    """Получить статистику соединений."""
    stats = manager.get_stats()
    return StatsResponse(active_users=lifecycle.registry.size(), **stats)


@app.get("/test", tags=["Debug"])
async def debug_echo(request: Request) -> dict[str, Any]:
    """Отладочный endpoint: возвращает заголовки запроса."""
    return {
        "message": "Backend is working!",
        "headers": dict(request.headers),
        "timestamp": utc_timestamp(),
    }


# === WEBSOCKET ===

@app.websocket("/ws")
async def websocket_relay(websocket: WebSocket) -> None:
    """
    WebSocket клиента relay.

    Входящие сообщения:
    - {"event": "send-location", "data": {"latitude": 40.71, "longitude": -74.0}}
    - {"event": "ping"}

    Ошибки разбора сообщений отправляются только этому клиенту
    событием error, соединение остаётся открытым.
    """
    await websocket.accept()

    connection_id = uuid4().hex
    origin = websocket.headers.get("origin", "unknown origin")
    await log_info(f"Подключение {connection_id} от {origin}")

    await manager.connect(websocket, connection_id)

    try:
        await lifecycle.on_connect(connection_id)

        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))

            raw = message.get("text")
            if raw is None:
                await _reject(connection_id, "Ожидается текстовое JSON сообщение")
                continue

            try:
                await _handle_client_message(connection_id, raw)
            except Exception as e:
                # Сбой обработки одного сообщения не рвёт соединение
                await log_error(
                    f"Ошибка обработки сообщения {connection_id}: {e}",
                    extra={"connection_id": connection_id},
                    exc_info=True,
                )

    except WebSocketDisconnect:
        pass
    except Exception as e:
        await log_error(
            f"Ошибка соединения {connection_id}: {e}",
            extra={"connection_id": connection_id},
            exc_info=True,
        )
    finally:
        await manager.disconnect(connection_id)
        await lifecycle.on_disconnect(connection_id)


async def _handle_client_message(connection_id: str, raw: str) -> None:
    """Обработать одно сообщение клиента; ошибки изолированы этим клиентом."""
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        await _reject(connection_id, "Сообщение должно быть JSON")
        return

    try:
        envelope = RelayMessage.model_validate(message)
    except ValidationError:
        await _reject(connection_id, "Ожидается объект {event, data}")
        return

    event = envelope.event

    if event == RelayEvent.SEND_LOCATION.value:
        try:
            location = LocationUpdateDTO.parse(
                envelope.data,
                strict_range=settings.relay.STRICT_COORDINATE_RANGE,
            )
        except InvalidLocationPayload as e:
            await _reject(connection_id, str(e), details=e.details)
            return

        await lifecycle.on_location_update(connection_id, location.latitude, location.longitude)

    elif event == RelayEvent.PING.value:
        await manager.unicast(connection_id, RelayEvent.PONG.value)

    else:
        await _reject(connection_id, f"Неизвестное событие: {event}")


async def _reject(connection_id: str, reason: str, details: str | None = None) -> None:
    """Сообщить клиенту об ошибке и залогировать её."""
    await log_warning(
        f"Отклонено сообщение от {connection_id}: {reason}",
        extra={"connection_id": connection_id, "details": details},
    )
    await manager.unicast(
        connection_id,
        RelayEvent.ERROR.value,
        ErrorPayload(message=reason, details=details).model_dump(exclude_none=True),
    )


# === STARTUP ===

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.deployment.REALTIME_WS_HOST,
        port=settings.deployment.REALTIME_WS_PORT,
    )
