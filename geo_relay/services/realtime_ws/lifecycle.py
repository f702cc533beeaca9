# geo_relay/services/realtime_ws/lifecycle.py
"""
Жизненный цикл соединения: connect -> location update(s) -> disconnect.

Состояния соединения:
    Connected(no-location) -> Connected(has-location) -> Disconnected

Disconnected терминально: переподключившийся клиент получает новый id.
"""

from __future__ import annotations

from typing import Any

from geo_relay.common.constants import RelayEvent
from geo_relay.common.logger import log_debug, log_error, log_info
from geo_relay.core.distances.service import AggregateSnapshot, DistanceAggregator
from geo_relay.core.registry.service import ClientRegistry
from geo_relay.services.realtime_ws.connection_manager import ConnectionManager
from geo_relay.shared.models.common import DistanceItem, DistancesResponse, HealthStatus
from geo_relay.shared.models.events import (
    AggregateUpdateEvent,
    PeerDisconnectedEvent,
    WelcomeEvent,
)
from geo_relay.shared.models.location_dto import PeerLocationDTO


class LifecycleManager:
    """
    Владелец реестра клиентов.

    Обрабатывает три перехода (connect, location update, disconnect),
    запускает пересчёт агрегата и рассылку через ConnectionManager.
    Ошибка обработки одного клиента логируется и не затрагивает
    остальных.
    """

    def __init__(
        self,
        registry: ClientRegistry,
        gateway: ConnectionManager,
        aggregator: DistanceAggregator | None = None,
    ) -> None:
        self._registry = registry
        self._gateway = gateway
        self._aggregator = aggregator or DistanceAggregator()

    @property
    def registry(self) -> ClientRegistry:
        return self._registry

    @property
    def gateway(self) -> ConnectionManager:
        return self._gateway

    # === ПЕРЕХОДЫ ===

    async def on_connect(self, connection_id: str) -> None:
        """
        Новое соединение.

        Отправляет новичку позиции всех уже известных клиентов (кроме
        него самого), затем одно приветствие с текущим числом клиентов.
        """
        snapshot = self._registry.snapshot()

        for record in snapshot:
            if record.id == connection_id:
                continue
            await self._gateway.unicast(
                connection_id,
                RelayEvent.PEER_LOCATION.value,
                PeerLocationDTO.model_validate(record).model_dump(),
            )

        welcome = WelcomeEvent(
            id=connection_id,
            total_users=len(snapshot),
            has_connections=len(snapshot) > 0,
        )
        await self._gateway.unicast(
            connection_id,
            RelayEvent.WELCOME.value,
            welcome.model_dump(by_alias=True),
        )

        await log_info(
            f"Клиент подключён: {connection_id} (соединений: {self._gateway.active_connections})",
            extra={"connection_id": connection_id},
        )

    async def on_location_update(self, connection_id: str, latitude: float, longitude: float) -> None:
        """
        Клиент прислал координаты.

        Запись создаётся или перезаписывается. Позиция рассылается всем,
        включая отправителя, затем рассылается пересчитанный агрегат.

        Если id уже был удалён (гонка с disconnect), запись создаётся
        заново как новая сессия.
        """
        try:
            record = self._registry.upsert(connection_id, latitude, longitude)
        except (TypeError, ValueError) as e:
            await log_error(
                f"Некорректные координаты от {connection_id}: {e}",
                extra={"connection_id": connection_id},
            )
            return

        await log_debug(
            f"Позиция {connection_id}: ({record.latitude}, {record.longitude})",
            extra={"connection_id": connection_id},
        )

        await self._gateway.broadcast(
            RelayEvent.PEER_LOCATION.value,
            PeerLocationDTO.model_validate(record).model_dump(),
        )
        await self._broadcast_aggregate()

    async def on_disconnect(self, connection_id: str) -> None:
        """
        Соединение закрыто.

        Удаление записи без координат — не ошибка. Оставшиеся клиенты
        получают peer-disconnected и новый агрегат.
        """
        removed = self._registry.remove(connection_id)

        await self._gateway.broadcast(
            RelayEvent.PEER_DISCONNECTED.value,
            PeerDisconnectedEvent(id=connection_id).model_dump(),
        )
        await self._broadcast_aggregate()

        await log_info(
            f"Клиент отключён: {connection_id} "
            f"(была позиция: {removed}, соединений: {self._gateway.active_connections})",
            extra={"connection_id": connection_id},
        )

    # === ЧТЕНИЕ ===

    def aggregate(self) -> AggregateSnapshot:
        """Агрегат по текущему снимку реестра."""
        return self._aggregator.compute_all(self._registry.snapshot())

    def get_distances(self) -> DistancesResponse:
        """Данные для GET /api/user-distances."""
        aggregate = self.aggregate()
        return DistancesResponse(
            distances=[
                DistanceItem(user1=p.user1, user2=p.user2, distance=p.distance_km)
                for p in aggregate.pairs
            ],
            total_users=aggregate.total_users,
            has_connections=aggregate.has_connections,
        )

    def get_health(self, version: str | None = None) -> HealthStatus:
        """Данные для GET /health."""
        return HealthStatus(
            status="ok",
            version=version,
            connections=self._gateway.active_connections,
            active_users=self._registry.ids(),
        )

    # === ВНУТРЕННЕЕ ===

    async def _broadcast_aggregate(self) -> None:
        """Пересчитать агрегат по свежему снимку и разослать всем."""
        event = AggregateUpdateEvent.from_snapshot(self.aggregate())
        payload: dict[str, Any] = event.model_dump(by_alias=True)
        await self._gateway.broadcast(RelayEvent.AGGREGATE_UPDATE.value, payload)


def create_lifecycle(gateway: ConnectionManager) -> LifecycleManager:
    """Создаёт менеджер с пустым реестром и агрегатором из настроек."""
    return LifecycleManager(
        registry=ClientRegistry(),
        gateway=gateway,
        aggregator=DistanceAggregator.from_settings(),
    )
