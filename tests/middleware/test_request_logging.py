"""Tests for the request logging middleware."""

import logging

import pytest

from filerouter.middleware.logging import format_request_line, log_request
from filerouter.routing.builder import RouteBuilder


class TestFormatRequestLine:
    """Log line formatting."""

    def test_includes_client_method_path_and_query(self, make_request):
        request = make_request("GET", "/echo", query="text=hi", client=("10.0.0.5", 4000))

        assert format_request_line(request) == "➥  10.0.0.5 GET /echo?text=hi"

    def test_omits_empty_query(self, make_request):
        request = make_request("POST", "/users/1")

        assert format_request_line(request) == "➥  127.0.0.1 POST /users/1"

    def test_unknown_client(self, make_request):
        request = make_request("GET", "/", client=None)

        assert format_request_line(request).startswith("➥  - GET /")


class TestLogRequest:
    """The middleware itself."""

    @pytest.mark.asyncio
    async def test_always_continues(self, make_request):
        assert await log_request(make_request()) is True

    @pytest.mark.asyncio
    async def test_logs_at_info(self, make_request, caplog):
        with caplog.at_level(logging.INFO, logger="filerouter.middleware.logging"):
            await log_request(make_request("DELETE", "/users/9"))

        assert "DELETE /users/9" in caplog.text

    @pytest.mark.asyncio
    async def test_does_not_log_headers(self, make_request, caplog):
        request = make_request("GET", "/", headers={"Authorization": "Bearer secret-token"})

        with caplog.at_level(logging.INFO, logger="filerouter.middleware.logging"):
            await log_request(request)

        assert "secret-token" not in caplog.text

    @pytest.mark.asyncio
    async def test_usable_as_wildcard_middleware(self, make_request):
        async def handler(request):
            return {"ok": True}

        table = RouteBuilder({"*": log_request}).on("get", handler).compile()
        response = await table["GET"](make_request())

        assert response.status_code == 200
