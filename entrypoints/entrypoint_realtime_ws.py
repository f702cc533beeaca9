#!/usr/bin/env python3
"""
Entrypoint для Geo Relay.

Запуск:
    python entrypoints/entrypoint_realtime_ws.py

Порт по умолчанию: 3000 (переопределяется переменной PORT)
"""

import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from geo_relay.config import settings


def main() -> None:
    """Запустить Geo Relay."""
    uvicorn.run(
        "geo_relay.services.realtime_ws.app:app",
        host=settings.deployment.REALTIME_WS_HOST,
        port=settings.deployment.REALTIME_WS_PORT,
        reload=settings.system.DEBUG,
        log_level=settings.system.LOG_LEVEL.lower(),
        ws_ping_interval=settings.relay.WS_PING_INTERVAL,
        ws_ping_timeout=settings.relay.WS_PING_TIMEOUT,
    )


if __name__ == "__main__":
    main()
