# geo_relay/services/realtime_ws/connection_manager.py
"""
Менеджер WebSocket соединений.
Доставка событий одному клиенту (unicast) и всем клиентам (broadcast).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from fastapi import WebSocket

from geo_relay.common.logger import log_debug


@dataclass
class ConnectionInfo:
    """Информация о соединении."""
    websocket: WebSocket
    connection_id: str
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionManager:
    """
    Менеджер живых WebSocket соединений.

    Доставка по принципу at-most-once, fire-and-forget: подтверждений нет,
    ошибки отправки не поднимаются наружу, а сломанное соединение
    убирается из таблицы. Следующее обновление всё равно заменит
    потерянное.
    """

    def __init__(self) -> None:
        # connection_id -> ConnectionInfo
        self._connections: dict[str, ConnectionInfo] = {}

        # Для статистики
        self._total_connections: int = 0
        self._total_messages_sent: int = 0
        self._total_dropped: int = 0

    @property
    def active_connections(self) -> int:
        """Количество активных соединений."""
        return len(self._connections)

    def is_connected(self, connection_id: str) -> bool:
        """Живо ли соединение."""
        return connection_id in self._connections

    def connection_ids(self) -> list[str]:
        """Идентификаторы живых соединений."""
        return list(self._connections)

    async def connect(self, websocket: WebSocket, connection_id: str) -> None:
        """
        Зарегистрировать уже принятое соединение.

        Идентификатор выдаётся транспортом и не переиспользуется.
        """
        self._connections[connection_id] = ConnectionInfo(
            websocket=websocket,
            connection_id=connection_id,
        )
        self._total_connections += 1

    async def disconnect(self, connection_id: str) -> bool:
        """
        Убрать соединение из таблицы.

        Returns:
            True если соединение было зарегистрировано
        """
        return self._connections.pop(connection_id, None) is not None

    async def unicast(self, connection_id: str, event: str, payload: Any = None) -> bool:
        """
        Отправить событие одному соединению.

        Если соединение уже закрыто — сообщение молча отбрасывается.

        Returns:
            True если сообщение отправлено
        """
        conn = self._connections.get(connection_id)
        if conn is None:
            self._total_dropped += 1
            return False

        return await self._send(conn, {"event": event, "data": payload})

    async def broadcast(self, event: str, payload: Any = None) -> int:
        """
        Отправить событие всем живым соединениям.

        Returns:
            Количество успешно отправленных сообщений
        """
        message = {"event": event, "data": payload}
        sent_count = 0

        # Копия: пока идёт await, другие соединения могут подключаться/отключаться
        for conn in list(self._connections.values()):
            if await self._send(conn, message):
                sent_count += 1

        return sent_count

    async def _send(self, conn: ConnectionInfo, message: dict[str, Any]) -> bool:
        """Отправить сообщение; при ошибке убрать соединение из таблицы."""
        try:
            await conn.websocket.send_json(message)
        except Exception as e:
            # Соединение разорвано во время записи
            self._total_dropped += 1
            await self.disconnect(conn.connection_id)
            await log_debug(
                f"Доставка {message.get('event')} для {conn.connection_id} не удалась: {e!r}",
                extra={"connection_id": conn.connection_id},
            )
            return False

        self._total_messages_sent += 1
        return True

    def get_stats(self) -> dict[str, Any]:
        """Получить статистику."""
        return {
            "active_connections": len(self._connections),
            "total_connections_ever": self._total_connections,
            "total_messages_sent": self._total_messages_sent,
            "total_messages_dropped": self._total_dropped,
        }

    async def close_all(self) -> None:
        """Закрыть все соединения (при остановке сервиса)."""
        for conn in list(self._connections.values()):
            try:
                await conn.websocket.close()
            except Exception:
                # Соединение уже закрыто клиентом
                pass
        self._connections.clear()


# Глобальный экземпляр
manager = ConnectionManager()
