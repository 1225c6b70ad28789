"""Mattermost incoming-webhook message models."""

from pydantic import BaseModel, ConfigDict, Field


class AttachmentField(BaseModel):
    """A single title/value field inside an attachment."""

    title: str = ""
    value: str = ""
    short: bool = False

    model_config = ConfigDict(frozen=True)


class Attachment(BaseModel):
    """A message attachment, one per forwarded alert."""

    color: str = ""
    text: str = ""
    title: str = ""
    title_link: str = ""
    fields: list[AttachmentField] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class MattermostMessage(BaseModel):
    """Body posted to a Mattermost incoming webhook."""

    text: str = ""
    username: str = ""
    icon_emoji: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    channel: str = ""

    model_config = ConfigDict(frozen=True)
