"""Tests for the Mattermost webhook client."""

import json

import httpx
import pytest

from alertmatter.mattermost import MattermostClient, MattermostError
from alertmatter.models.mattermost import Attachment, MattermostMessage

WEBHOOK_URL = "http://mattermost.test/hooks/abc"


@pytest.fixture
def message() -> MattermostMessage:
    """Create a minimal outbound message."""
    return MattermostMessage(
        username="alertmatter",
        icon_emoji=":bell:",
        channel="ops",
        attachments=[Attachment(color="#FF0000")],
    )


def make_client(handler) -> MattermostClient:
    """Create a client whose requests are answered by ``handler``."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MattermostClient(WEBHOOK_URL, timeout=5.0, http_client=http_client)


class TestMattermostClient:
    """Tests for MattermostClient.send."""

    async def test_send_posts_json(self, message: MattermostMessage) -> None:
        """Test a single JSON POST is made to the webhook."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text="ok")

        await make_client(handler).send(message)

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == WEBHOOK_URL
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == message.model_dump()

    async def test_non_ok_status(self, message: MattermostMessage) -> None:
        """Test non-2xx responses raise with the status text."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(502)

        with pytest.raises(MattermostError) as exc_info:
            await make_client(handler).send(message)

        assert "502 Bad Gateway" in str(exc_info.value)
        assert exc_info.value.status_code == 502
        assert calls == 1

    async def test_other_2xx_is_success(self, message: MattermostMessage) -> None:
        """Test any 2xx response counts as delivered."""
        await make_client(lambda request: httpx.Response(204)).send(message)

    async def test_transport_error(self, message: MattermostMessage) -> None:
        """Test connection failures are raised once, without retry."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(MattermostError) as exc_info:
            await make_client(handler).send(message)

        assert "connection refused" in str(exc_info.value)
        assert exc_info.value.status_code is None
        assert calls == 1

    async def test_timeout(self, message: MattermostMessage) -> None:
        """Test timeouts name the configured limit."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(MattermostError, match="timed out after 5.0s"):
            await make_client(handler).send(message)

    async def test_aclose_leaves_shared_pool_open(self) -> None:
        """Test a shared HTTP client is not closed by the wrapper."""
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        client = MattermostClient(WEBHOOK_URL, http_client=http_client)

        await client.aclose()

        assert not http_client.is_closed
        await http_client.aclose()
