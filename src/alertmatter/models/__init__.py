"""Data models for alertmatter."""

from alertmatter.models.alerts import (
    Alert,
    AlertmanagerPayload,
    AlertStatus,
    parse_timestamp,
)
from alertmatter.models.mattermost import (
    Attachment,
    AttachmentField,
    MattermostMessage,
)

__all__ = [
    "Alert",
    "AlertmanagerPayload",
    "AlertStatus",
    "Attachment",
    "AttachmentField",
    "MattermostMessage",
    "parse_timestamp",
]
