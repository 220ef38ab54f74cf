"""
Pytest configuration for filerouter tests.

Sets up test environment and global fixtures.
"""
import json
import os
from pathlib import Path

import pytest
from fastapi import Request

# Disable config validation during tests
# This allows tests to run without a .env file or a custom ROUTES_DIR
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "DEBUG")


def build_request(
    method: str = "GET",
    path: str = "/",
    body=None,
    headers=None,
    query: str = "",
    path_params=None,
    client=("127.0.0.1", 51000),
) -> Request:
    """
    Build a Starlette request over an in-memory ASGI receive channel.

    ``body`` may be raw bytes, or any JSON-serializable value.
    """
    if body is None:
        raw = b""
    elif isinstance(body, bytes):
        raw = body
    else:
        raw = json.dumps(body).encode()

    header_items = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "client": client,
        "root_path": "",
        "path": path,
        "raw_path": path.encode(),
        "query_string": query.encode(),
        "headers": header_items,
        "path_params": dict(path_params or {}),
    }
    delivered = False

    async def receive():
        nonlocal delivered
        if delivered:
            return {"type": "http.disconnect"}
        delivered = True
        return {"type": "http.request", "body": raw, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def make_request():
    """Factory fixture for Starlette requests (see build_request)."""
    return build_request


@pytest.fixture
def routes_dir(tmp_path: Path) -> Path:
    """Create an empty routes/ directory for testing."""
    d = tmp_path / "routes"
    d.mkdir()
    return d


@pytest.fixture
def write_route():
    """Write a route module under a routes dir and return its path."""
    def _write(routes_dir: Path, name: str, content: str) -> Path:
        p = routes_dir / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content)
        return p
    return _write


def response_json(response) -> object:
    """Decode a Starlette response body built in-process."""
    return json.loads(response.body)


@pytest.fixture
def read_json():
    return response_json
