# geo_relay/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины — config/config.json.
Параметры развертывания переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации (переопределяется GEO_RELAY_CONFIG)."""
    override = os.getenv("GEO_RELAY_CONFIG")
    if override:
        return Path(override)
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _env_bool(name: str, default: bool) -> bool:
    """Читает булево значение из окружения."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "geo_relay"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"


class DeploymentSettings(BaseModel):
    """Настройки развертывания сервиса."""
    REALTIME_WS_HOST: str = "0.0.0.0"
    REALTIME_WS_PORT: int = 3000


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/geo_relay.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допустимы только json и colored."""
        if v not in ("json", "colored"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class RelaySettings(BaseModel):
    """Настройки relay: расчёт расстояний, валидация, CORS, keep-alive."""
    EARTH_RADIUS_KM: float = Field(default=6371.0, gt=0)
    DISTANCE_PRECISION: int = Field(default=2, ge=0, le=10)
    STRICT_COORDINATE_RANGE: bool = False
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])
    WS_PING_INTERVAL: float = 10.0
    WS_PING_TIMEOUT: float = 20.0


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    relay: RelaySettings = Field(default_factory=RelaySettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_dict(cls, config_data: dict[str, Any]) -> "Settings":
        """
        Создаёт объект Settings из плоского словаря (формат config.json).
        Ключи, начинающиеся с _comment_, игнорируются.
        """
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "geo_relay"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=_env_bool("DEBUG", data.get("DEBUG", False)),
                LOG_LEVEL=os.getenv("LOG_LEVEL", data.get("LOG_LEVEL", "INFO")),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
            ),
            deployment=DeploymentSettings(
                REALTIME_WS_HOST=os.getenv("REALTIME_WS_HOST", data.get("REALTIME_WS_HOST", "0.0.0.0")),
                REALTIME_WS_PORT=int(os.getenv("PORT", data.get("REALTIME_WS_PORT", 3000))),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=os.getenv("LOG_LEVEL", data.get("LOG_LEVEL", "INFO")),
                LOG_TO_FILE=_env_bool("LOG_TO_FILE", data.get("LOG_TO_FILE", False)),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/geo_relay.log"),
                LOG_FORMAT=os.getenv("LOG_FORMAT", data.get("LOG_FORMAT", "colored")),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
            ),
            relay=RelaySettings(
                EARTH_RADIUS_KM=data.get("EARTH_RADIUS_KM", 6371.0),
                DISTANCE_PRECISION=data.get("DISTANCE_PRECISION", 2),
                STRICT_COORDINATE_RANGE=_env_bool(
                    "STRICT_COORDINATE_RANGE", data.get("STRICT_COORDINATE_RANGE", False)
                ),
                CORS_ORIGINS=data.get("CORS_ORIGINS", ["*"]),
                WS_PING_INTERVAL=data.get("WS_PING_INTERVAL", 10.0),
                WS_PING_TIMEOUT=data.get("WS_PING_TIMEOUT", 20.0),
            ),
        )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """Создаёт объект Settings из config.json."""
        return cls.from_dict(load_config_json())


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Перед чтением config.json подгружает .env из корня проекта.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


settings = get_settings()
