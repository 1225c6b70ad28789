"""Mattermost incoming-webhook client."""

import httpx
import structlog

from alertmatter.models.mattermost import MattermostMessage

logger = structlog.get_logger(__name__)


class MattermostError(Exception):
    """Exception raised when a message could not be delivered to Mattermost."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MattermostClient:
    """Client posting messages to a single Mattermost incoming webhook.

    Every call to :meth:`send` makes exactly one POST; failures are raised to
    the caller and never retried.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Mattermost client.

        Args:
            webhook_url: Incoming webhook URL messages are posted to.
            timeout: Timeout in seconds applied to each request.
            http_client: Shared connection pool. A private one is created if omitted.
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._owns_client = http_client is None

    async def send(self, message: MattermostMessage) -> None:
        """
        Post a message to the webhook.

        Args:
            message: The message to deliver

        Raises:
            MattermostError: On timeout, transport failure or a non-2xx response
        """
        body = message.model_dump_json().encode()
        log = logger.bind(channel=message.channel, attachments=len(message.attachments))
        log.debug("Sending message to Mattermost", body=body.decode())

        try:
            response = await self._client.post(
                self.webhook_url,
                content=body,
                headers={"Content-Type": "application/json"},
                timeout=httpx.Timeout(self.timeout),
            )
        except httpx.TimeoutException as e:
            error_msg = f"Mattermost request timed out after {self.timeout}s"
            log.error(error_msg, error=str(e))
            raise MattermostError(error_msg) from e
        except httpx.RequestError as e:
            error_msg = f"Error sending request to Mattermost: {e}"
            log.error(error_msg)
            raise MattermostError(error_msg) from e

        if not response.is_success:
            error_msg = (
                "received non-OK response from Mattermost: "
                f"{response.status_code} {response.reason_phrase}"
            )
            log.error(error_msg)
            raise MattermostError(error_msg, status_code=response.status_code)

        log.debug("Message delivered", status_code=response.status_code)

    async def aclose(self) -> None:
        """Close the underlying connection pool if this client created it."""
        if self._owns_client:
            await self._client.aclose()
