"""Alert models for Prometheus Alertmanager payloads."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Alertmanager emits nanosecond precision; datetime only keeps microseconds.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class AlertStatus(str, Enum):
    """Alert status from Alertmanager."""

    FIRING = "firing"
    RESOLVED = "resolved"


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp, returning None when it cannot be parsed.

    Naive values are taken as UTC.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(_FRACTION_RE.sub(r"\1", value.strip()))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class _WireModel(BaseModel):
    """Base for decoded webhook objects.

    A JSON null behaves like a missing key, and a null inside a string map
    becomes an empty string.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, dict):
                value = {k: "" if v is None else v for k, v in value.items()}
            cleaned[key] = value
        return cleaned


class Alert(_WireModel):
    """Individual alert from Alertmanager.

    Status is kept as the raw string so unknown values pass through, and
    timestamps are kept exactly as received.
    """

    status: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    starts_at: str = Field(default="", alias="startsAt")
    ends_at: str = Field(default="", alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: str = ""

    @property
    def starts_at_datetime(self) -> datetime | None:
        return parse_timestamp(self.starts_at)

    @property
    def ends_at_datetime(self) -> datetime | None:
        return parse_timestamp(self.ends_at)


class AlertmanagerPayload(_WireModel):
    """Webhook payload from Alertmanager."""

    version: str = ""
    group_key: str = Field(default="", alias="groupKey")
    truncated_alerts: int = Field(default=0, alias="truncatedAlerts")
    status: str = ""
    receiver: str = ""
    group_labels: dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_labels: dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field(default="", alias="externalURL")
    alerts: list[Alert] = Field(default_factory=list)
