from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from geo_relay.core.geo.service import is_valid_coordinate


class InvalidLocationPayload(ValueError):
    """Сообщение send-location не прошло валидацию."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details


class LocationUpdateDTO(BaseModel):
    """Входящее обновление координат от клиента."""

    # strict: bool и строки не приводятся к float, int допустим
    latitude: float = Field(..., strict=True, allow_inf_nan=False)
    longitude: float = Field(..., strict=True, allow_inf_nan=False)

    @classmethod
    def parse(cls, data: Any, strict_range: bool = False) -> "LocationUpdateDTO":
        """
        Разобрать payload события send-location.

        Raises:
            InvalidLocationPayload: нет полей, не числа, NaN/inf,
                либо (strict_range) координаты вне диапазона
        """
        if not isinstance(data, dict):
            raise InvalidLocationPayload("Ожидается объект {latitude, longitude}")

        try:
            dto = cls.model_validate(data)
        except ValidationError as e:
            errors = [err for err in e.errors() if err.get("loc")]
            fields = ", ".join(str(err["loc"][0]) for err in errors)
            details = "; ".join(f"{err['loc'][0]}: {err['msg']}" for err in errors)
            raise InvalidLocationPayload(f"Некорректные координаты: {fields}", details=details) from e

        if strict_range and not is_valid_coordinate(dto.latitude, dto.longitude):
            raise InvalidLocationPayload(
                f"Координаты вне диапазона: ({dto.latitude}, {dto.longitude})"
            )
        return dto


class PeerLocationDTO(BaseModel):
    """Позиция клиента, рассылаемая остальным (peer-location)."""

    id: str
    latitude: float
    longitude: float

    class Config:
        from_attributes = True
