"""Conversion of Alertmanager payloads into Mattermost messages.

Everything here is pure: the current instant is injectable so the same input
always yields the same message.
"""

from datetime import datetime, timedelta, timezone

from alertmatter.models.alerts import Alert, AlertmanagerPayload, AlertStatus
from alertmatter.models.mattermost import Attachment, AttachmentField, MattermostMessage

COLOR_FIRING = "#FF0000"
COLOR_RESOLVED = "#008000"
COLOR_EXPIRED = "#F0F8FF"

DEFAULT_USERNAME = "alertmatter"
DEFAULT_ICON_EMOJI = ":bell:"

_DURATION_UNITS: list[tuple[str, int]] = [
    ("year", 365 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


def set_color(status: str) -> str:
    """Map an alert status to an attachment color."""
    if status == AlertStatus.FIRING.value:
        return COLOR_FIRING
    if status == AlertStatus.RESOLVED.value:
        return COLOR_RESOLVED
    return COLOR_EXPIRED


def title_case(key: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched."""
    return " ".join(word[:1].upper() + word[1:] for word in key.split(" "))


def format_elapsed(delta: timedelta, limit: int = 2) -> str:
    """Render a duration using its ``limit`` most significant units.

    >>> format_elapsed(timedelta(hours=2, minutes=5, seconds=3))
    '2 hours 5 minutes'
    """
    remaining = max(int(delta.total_seconds()), 0)
    parts: list[str] = []
    for name, size in _DURATION_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count} {name}{'s' if count != 1 else ''}")
        if len(parts) == limit:
            break
    return " ".join(parts) or "0 seconds"


def _timestamp_line(label: str, raw: str, parsed: datetime | None, now: datetime) -> str:
    if parsed is None:
        return f"{label}: {raw}\n"
    return f"{label}: {raw} ({format_elapsed(now - parsed)} ago)\n"


def _key_value_lines(mapping: dict[str, str]) -> str:
    return "".join(f"**{title_case(key)}:** {mapping[key]}\n" for key in sorted(mapping))


def convert_alert_to_fields(
    alert: Alert,
    external_url: str,
    receiver: str,
    now: datetime | None = None,
) -> list[AttachmentField]:
    """Convert a single alert into its status field and its labels field.

    Elapsed times are measured from the alert's own timestamps to ``now``; an
    unparsable timestamp is shown without the elapsed suffix.
    """
    now = now or datetime.now(timezone.utc)

    status_msg = alert.status.upper()
    if alert.status == AlertStatus.FIRING.value:
        status_msg = f":fire: {status_msg} :fire:"

    # Annotations, Start/End, Source
    msg = _key_value_lines(alert.annotations)
    msg += _timestamp_line("Started at", alert.starts_at, alert.starts_at_datetime, now)
    if alert.status == AlertStatus.RESOLVED.value:
        msg += _timestamp_line("Ended at", alert.ends_at, alert.ends_at_datetime, now)
    msg += (
        f"Generated by a [Prometheus Alert]({alert.generator_url}) and sent to the "
        f"[Alertmanager]({external_url}) '{receiver}' receiver."
    )

    return [
        AttachmentField(title=status_msg, value=msg, short=True),
        # Labels
        AttachmentField(title="", value=_key_value_lines(alert.labels), short=True),
    ]


def prepare_message(
    payload: AlertmanagerPayload,
    channel: str,
    now: datetime | None = None,
    username: str = DEFAULT_USERNAME,
    icon_emoji: str = DEFAULT_ICON_EMOJI,
) -> MattermostMessage:
    """Build the Mattermost message for a notification, one attachment per alert."""
    now = now or datetime.now(timezone.utc)
    attachments = [
        Attachment(
            color=set_color(alert.status),
            fields=convert_alert_to_fields(alert, payload.external_url, payload.receiver, now),
        )
        for alert in payload.alerts
    ]
    return MattermostMessage(
        username=username,
        icon_emoji=icon_emoji,
        attachments=attachments,
        channel=channel,
    )
