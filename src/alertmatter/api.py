"""FastAPI application and API endpoints."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
from fastapi import FastAPI, HTTPException, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from pydantic import ValidationError

from alertmatter import __version__
from alertmatter.config import Settings, get_settings
from alertmatter.formatter import prepare_message
from alertmatter.mattermost import MattermostClient, MattermostError
from alertmatter.models.alerts import AlertmanagerPayload, AlertStatus

logger = structlog.get_logger(__name__)

# Prometheus metrics
NOTIFICATIONS_RECEIVED = Counter(
    "alertmatter_notifications_received_total",
    "Total number of alert notifications received",
)

ALERTS_FORWARDED = Counter(
    "alertmatter_alerts_forwarded_total",
    "Total number of alerts forwarded to Mattermost",
    ["status"],
)

FORWARD_FAILURES = Counter(
    "alertmatter_forward_failures_total",
    "Total number of notifications that could not be delivered to Mattermost",
)

FORWARD_DURATION = Histogram(
    "alertmatter_forward_duration_seconds",
    "Duration of the POST to the Mattermost webhook",
)


def status_label(status: str) -> str:
    """Metric label for an alert status; unknown values share one series."""
    if status in (AlertStatus.FIRING.value, AlertStatus.RESOLVED.value):
        return status
    return "other"


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. Read from the environment if omitted.
        transport: Optional transport for the outbound HTTP client.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan manager."""
        # Startup
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout),
            transport=transport,
        )
        app.state.mattermost = MattermostClient(
            settings.webhook_url,
            timeout=settings.request_timeout,
            http_client=http_client,
        )
        logger.info("alertmatter started", version=__version__)
        yield
        # Shutdown
        logger.info("alertmatter shutting down")
        await http_client.aclose()

    app = FastAPI(
        title="alertmatter",
        description="Forward Prometheus Alertmanager notifications to Mattermost",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.post("/alert")
    async def alert(request: Request, channel: str | None = None) -> Response:
        """
        Receive a notification from Alertmanager and forward it to Mattermost.

        The target channel is taken from the ``channel`` query parameter.
        """
        if not channel:
            raise HTTPException(status_code=400, detail="channel query parameter is required")

        body = await request.body()
        try:
            payload = AlertmanagerPayload.model_validate_json(body)
        except ValidationError as e:
            logger.warning("Rejected malformed alert notification", error=str(e))
            raise HTTPException(status_code=400, detail=str(e)) from e

        logger.info("Received alert notification", channel=channel, alerts=len(payload.alerts))
        NOTIFICATIONS_RECEIVED.inc()

        message = prepare_message(
            payload,
            channel,
            username=settings.username,
            icon_emoji=settings.icon_emoji,
        )

        mattermost: MattermostClient = request.app.state.mattermost
        started = time.monotonic()
        try:
            await mattermost.send(message)
        except MattermostError as e:
            FORWARD_FAILURES.inc()
            logger.error("Failed to send to Mattermost", channel=channel, error=str(e))
            raise HTTPException(status_code=500, detail=str(e)) from e
        finally:
            FORWARD_DURATION.observe(time.monotonic() - started)

        for forwarded in payload.alerts:
            ALERTS_FORWARDED.labels(status=status_label(forwarded.status)).inc()

        return Response(status_code=200)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "alertmatter", "version": __version__}

    if settings.metrics_enabled:

        @app.get(settings.metrics_path)
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST,
            )

    return app
