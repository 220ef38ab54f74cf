"""
Tests for the request dispatcher.

Tests cover:
- Exact, parameterized and catch-all resolution
- 404 for unknown paths regardless of method
- 405 without invoking middleware or handlers
- Single-callable entries answer every method
- Captured path parameters reach the handler
"""

from unittest.mock import MagicMock

import pytest
from fastapi.responses import JSONResponse

from filerouter.routing.builder import RouteBuilder
from filerouter.routing.dispatcher import Dispatcher
from filerouter.routing.health import SYSTEM_ENDPOINTS
from filerouter.routing.table import RouteTable, not_found_handler
from filerouter.routing.types import CATCH_ALL, HTTP_METHODS


def make_table(**routes) -> RouteTable:
    """Build a RouteTable from endpoint -> RouteBuilder (or single callable)."""
    entries = dict(SYSTEM_ENDPOINTS)
    for endpoint, value in routes.items():
        entries[endpoint] = value.compile() if isinstance(value, RouteBuilder) else value
    entries[CATCH_ALL] = not_found_handler
    return RouteTable(entries)


async def echo_params(request):
    return {"params": dict(request.path_params)}


@pytest.fixture
def dispatcher():
    users = RouteBuilder().on("get", echo_params)
    user = RouteBuilder().on("get", echo_params).on("delete", echo_params)
    comments = RouteBuilder().on("get", echo_params)
    me = RouteBuilder().on("get", lambda request: {"me": True})
    nested = RouteBuilder().on("get", echo_params)

    table = make_table(**{
        "/": RouteBuilder().on("get", lambda request: {"root": True}),
        "/users": users,
        "/users/:id": user,
        "/users/me": me,
        "/posts/:slug/comments": comments,
        "/:org/:repo": nested,
    })
    return Dispatcher(table)


class TestResolve:
    """Pathname -> entry resolution."""

    def test_exact_match(self, dispatcher):
        match = dispatcher.resolve("/users")

        assert match.endpoint == "/users"
        assert match.params == {}

    def test_root_path(self, dispatcher):
        assert dispatcher.resolve("/").endpoint == "/"

    def test_parameter_capture(self, dispatcher):
        match = dispatcher.resolve("/users/42")

        assert match.endpoint == "/users/:id"
        assert match.params == {"id": "42"}

    def test_static_endpoint_beats_parameter(self, dispatcher):
        assert dispatcher.resolve("/users/me").endpoint == "/users/me"

    def test_fewer_parameters_win(self, dispatcher):
        # "/users/42" also fits "/:org/:repo"
        assert dispatcher.resolve("/users/42").endpoint == "/users/:id"
        assert dispatcher.resolve("/acme/widgets").params == {"org": "acme", "repo": "widgets"}

    def test_nested_parameter(self, dispatcher):
        match = dispatcher.resolve("/posts/hello-world/comments")

        assert match.endpoint == "/posts/:slug/comments"
        assert match.params == {"slug": "hello-world"}

    def test_unknown_path_falls_back_to_catch_all(self, dispatcher):
        match = dispatcher.resolve("/nothing/here/at/all")

        assert match.is_catch_all
        assert match.entry is not_found_handler

    def test_empty_parameter_segment_does_not_match(self, dispatcher):
        assert dispatcher.resolve("/posts//comments").is_catch_all

    def test_trailing_slash_is_not_the_same_path(self, dispatcher):
        assert dispatcher.resolve("/users/42/").is_catch_all

    def test_literal_star_path_is_not_the_catch_all_key(self, dispatcher):
        match = dispatcher.resolve("*")

        assert match.is_catch_all
        assert match.params == {}

    def test_literal_pattern_path_binds_parameters(self, dispatcher):
        match = dispatcher.resolve("/users/:id")

        assert match.endpoint == "/users/:id"
        assert match.params == {"id": ":id"}

    def test_literal_nested_pattern_path_binds_parameters(self, dispatcher):
        match = dispatcher.resolve("/posts/:slug/comments")

        assert match.params == {"slug": ":slug"}


class TestDispatch:
    """Full resolve-and-invoke behaviour."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", HTTP_METHODS)
    async def test_unknown_path_is_404_for_every_method(self, dispatcher, make_request, read_json, method):
        response = await dispatcher.dispatch(make_request(method, "/missing"))

        assert response.status_code == 404
        assert read_json(response) == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_undeclared_method_is_405_and_runs_nothing(self, make_request, read_json):
        middleware = MagicMock(return_value=None)
        handler = MagicMock(return_value={})
        builder = RouteBuilder({"*": middleware}).on("get", handler)
        dispatcher = Dispatcher(make_table(**{"/items": builder}))

        response = await dispatcher.dispatch(make_request("POST", "/items"))

        assert response.status_code == 405
        assert read_json(response) == {"error": "Method Not Allowed"}
        middleware.assert_not_called()
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_method_table_rejects_everything(self, make_request):
        dispatcher = Dispatcher(make_table(**{"/todo": RouteBuilder()}))

        response = await dispatcher.dispatch(make_request("GET", "/todo"))

        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_method_is_matched_case_insensitively(self, dispatcher, make_request):
        response = await dispatcher.dispatch(make_request("get", "/users"))

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_single_callable_answers_any_method(self, make_request):
        calls = []

        async def anything(request):
            calls.append(request.method)
            return JSONResponse({"ok": True})

        dispatcher = Dispatcher(make_table(**{"/any": anything}))

        for method in ("GET", "DELETE", "OPTIONS"):
            response = await dispatcher.dispatch(make_request(method, "/any"))
            assert response.status_code == 200

        assert calls == ["GET", "DELETE", "OPTIONS"]

    @pytest.mark.asyncio
    async def test_path_params_reach_handler(self, dispatcher, make_request, read_json):
        response = await dispatcher.dispatch(make_request("DELETE", "/users/7"))

        assert read_json(response) == {"params": {"id": "7"}}

    @pytest.mark.asyncio
    async def test_literal_pattern_path_reaches_handler_with_params(self, make_request, read_json):
        async def read_id(request):
            return {"id": request.path_params["id"]}

        dispatcher = Dispatcher(make_table(**{"/users/:id": RouteBuilder().on("get", read_id)}))

        response = await dispatcher.dispatch(make_request("GET", "/users/:id"))

        assert response.status_code == 200
        assert read_json(response) == {"id": ":id"}

    @pytest.mark.asyncio
    async def test_inbound_request_scope_untouched(self, dispatcher, make_request):
        request = make_request("GET", "/users/7", path_params={"path": "users/7"})

        await dispatcher.dispatch(request)

        assert request.path_params == {"path": "users/7"}

    @pytest.mark.asyncio
    async def test_health_endpoint_through_dispatcher(self, dispatcher, make_request, read_json):
        response = await dispatcher.dispatch(make_request("POST", "/health"))

        assert response.status_code == 200
        assert read_json(response)["status"] == "ok"

    @pytest.mark.asyncio
    async def test_body_still_readable_after_dispatch_wrapping(self, make_request, read_json):
        async def read_body(request):
            return {"body": await request.json()}

        dispatcher = Dispatcher(make_table(**{"/notes/:id": RouteBuilder().on("post", read_body)}))

        response = await dispatcher.dispatch(make_request("POST", "/notes/1", body={"text": "hi"}))

        assert read_json(response) == {"body": {"text": "hi"}}
