# geo_relay/core/registry/service.py
"""
Реестр клиентов: последняя известная позиция каждого подключённого клиента.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class ClientRecord:
    """Последняя известная позиция клиента."""
    id: str
    latitude: float
    longitude: float
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ClientRegistry:
    """
    Потокобезопасный реестр `id -> ClientRecord`.

    Запись существует, пока соединение живо и прислало хотя бы одну
    координату. Все операции (чтение и запись) выполняются под одной
    блокировкой; наружу отдаются только неизменяемые снимки.

    Порядок перечисления — порядок вставки. Перезапись существующего
    id не меняет его позицию.
    """

    def __init__(self) -> None:
        self._records: dict[str, ClientRecord] = {}
        self._lock = threading.Lock()

    def upsert(self, client_id: str, latitude: float, longitude: float) -> ClientRecord:
        """
        Вставить или перезаписать позицию клиента.

        Диапазоны координат не проверяются: значения принимаются как есть.
        """
        record = ClientRecord(
            id=client_id,
            latitude=float(latitude),
            longitude=float(longitude),
        )
        with self._lock:
            self._records[client_id] = record
        return record

    def remove(self, client_id: str) -> bool:
        """
        Удалить запись клиента.

        Returns:
            True если запись была, False если нет (это не ошибка)
        """
        with self._lock:
            return self._records.pop(client_id, None) is not None

    def get(self, client_id: str) -> ClientRecord | None:
        """Получить запись клиента."""
        with self._lock:
            return self._records.get(client_id)

    def snapshot(self) -> tuple[ClientRecord, ...]:
        """Согласованная копия всех записей на текущий момент."""
        with self._lock:
            return tuple(self._records.values())

    def ids(self) -> list[str]:
        """Идентификаторы клиентов с известной позицией."""
        with self._lock:
            return list(self._records)

    def size(self) -> int:
        """Количество записей."""
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        """Удалить все записи."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, client_id: object) -> bool:
        with self._lock:
            return client_id in self._records
