"""Pydantic response models for the Notifications API.

API schemas are separate from Protean aggregates (anti-corruption pattern).
"""

from datetime import datetime

from pydantic import BaseModel


class StatusResponse(BaseModel):
    status: str = "ok"


class CountResponse(StatusResponse):
    count: int


class NotificationResponse(BaseModel):
    id: str
    notification_type: str
    message: str
    created_at: datetime
    read: bool


class SettingResponse(BaseModel):
    id: str
    notification_type: str
    enabled: bool

    @classmethod
    def from_setting(cls, setting) -> "SettingResponse":
        return cls(
            id=str(setting.id),
            notification_type=setting.notification_type,
            enabled=bool(setting.enabled),
        )
