"""
Unit Tests for the Application Wiring
=====================================

Request ID middleware and the render exception handler.
"""

from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

from paparazzi.api.main import render_exception_handler
from paparazzi.api.middleware import RequestIDMiddleware
from paparazzi.core.rendering.exceptions import (
    ArtifactMissing,
    InvalidParameter,
    RenderFailed,
    RenderTimeout,
)


def http_scope():
    return {"type": "http", "method": "GET", "path": "/", "headers": []}


class TestRequestIDMiddleware:
    """Test request id assignment."""

    @pytest.mark.asyncio
    async def test_passes_receive_through_unwrapped(self):
        """Test that routes read the server's own receive channel."""
        seen = {}

        async def inner(scope, receive, send):
            seen["receive"] = receive
            seen["request_id"] = scope["state"]["request_id"]
            await send({"type": "http.response.start", "status": 200, "headers": []})
            await send({"type": "http.response.body", "body": b""})

        async def receive():
            return {"type": "http.disconnect"}

        messages = []

        async def send(message):
            messages.append(message)

        await RequestIDMiddleware(inner)(http_scope(), receive, send)

        assert seen["receive"] is receive
        headers = dict(messages[0]["headers"])
        assert headers[b"x-request-id"].decode() == seen["request_id"]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self):
        ids = []

        async def inner(scope, receive, send):
            ids.append(scope["state"]["request_id"])

        middleware = RequestIDMiddleware(inner)
        await middleware(http_scope(), Mock(), Mock())
        await middleware(http_scope(), Mock(), Mock())

        assert len(set(ids)) == 2

    @pytest.mark.asyncio
    async def test_lifespan_scope_untouched(self):
        scopes = []

        async def inner(scope, receive, send):
            scopes.append(scope)

        await RequestIDMiddleware(inner)({"type": "lifespan"}, Mock(), Mock())

        assert "state" not in scopes[0]


class TestRenderExceptionHandler:
    """Test mapping of render errors to responses."""

    @pytest.fixture
    def request_stub(self):
        return SimpleNamespace(state=SimpleNamespace(request_id="req-1"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (RenderFailed("Renderer exited with status 3", returncode=3), 502),
            (RenderTimeout("Renderer exceeded 1.0s", timeout=1.0), 504),
        ],
    )
    async def test_renderer_failures_not_logged_twice(self, request_stub, exc, status_code):
        """Renderer failures are already logged by the invoker."""
        with patch("paparazzi.api.main.logger") as logger:
            response = await render_exception_handler(request_stub, exc)

        assert response.status_code == status_code
        logger.error.assert_not_called()

    @pytest.mark.asyncio
    async def test_artifact_missing_logged(self, request_stub):
        with patch("paparazzi.api.main.logger") as logger:
            response = await render_exception_handler(request_stub, ArtifactMissing("Render artifact is empty"))

        assert response.status_code == 502
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_invalid_parameter_details(self, request_stub):
        exc = InvalidParameter("Invalid value for 'lat': not a number", parameter="lat")

        with patch("paparazzi.api.main.logger"):
            response = await render_exception_handler(request_stub, exc)

        assert response.status_code == 400
        assert b'"parameter":"lat"' in response.body
        assert b'"request_id":"req-1"' in response.body
