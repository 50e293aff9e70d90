"""Tests for wren.app — registration, freezing, ASGI surface, lifespan."""

import re

import pytest

from wren.app import App
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import AnyResponse, Response, WebSocketUpgrade
from wren.middleware import AccessLog, ErrorBoundary, Next, ResponseTime
from wren.testing import TestClient

_RESPONSE_TIME = re.compile(r"^\d+ms$")


class TestRouting:
    async def test_string_return_is_html(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "Hello, World!"

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Hello, World!"
            assert response.content_type == "text/html; charset=utf-8"

    async def test_dict_return_is_json(self) -> None:
        app = App()

        @app.route("/api")
        async def api():
            return {"b": 1, "a": [1, 2]}

        async with TestClient(app) as client:
            response = await client.get("/api")
            assert response.content_type == "application/json"
            assert response.text == '{"b": 1, "a": [1, 2]}'

    async def test_tuple_overrides_status(self) -> None:
        app = App()

        @app.route("/things", methods=["POST"])
        def create():
            return "created", 201

        async with TestClient(app) as client:
            response = await client.post("/things")
            assert response.status == 201

    async def test_path_params_converted_by_annotation(self) -> None:
        app = App()

        @app.route("/users/{user_id:int}")
        def user(user_id: int, request: Request):
            return f"{type(user_id).__name__}:{user_id}:{request.path_params['user_id']}"

        async with TestClient(app) as client:
            response = await client.get("/users/42")
            assert response.text == "int:42:42"

    async def test_unsupported_return_type_is_500(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return object()

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 500

    async def test_unknown_path_without_fallback_is_404(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "home"

        async with TestClient(app) as client:
            response = await client.get("/nope")
            assert response.status == 404
            assert "<h1>404 - Not Found</h1>" in response.text

    async def test_method_not_allowed(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "home"

        async with TestClient(app) as client:
            response = await client.post("/")
            assert response.status == 405
            assert response.header("allow") == "GET, HEAD"

    async def test_head_on_get_route_has_no_body(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "home"

        async with TestClient(app) as client:
            response = await client.head("/")
            assert response.status == 200
            assert response.body_bytes == b""
            assert response.header("content-length") == "4"

    async def test_fallback_receives_unmatched_requests(self) -> None:
        app = App()

        @app.fallback
        def anything(request: Request):
            return f"fallback:{request.path}"

        async with TestClient(app) as client:
            response = await client.get("/some/where")
            assert response.text == "fallback:/some/where"


class TestPipeline:
    def test_fixed_stage_order(self) -> None:
        app = App()

        async def extra(request: Request, next: Next) -> AnyResponse:
            return await next(request)

        app.add_middleware(extra)
        stages = app.stages
        assert isinstance(stages[0], ErrorBoundary)
        assert isinstance(stages[1], AccessLog)
        assert isinstance(stages[2], ResponseTime)
        assert stages[3] is extra

    async def test_every_response_has_response_time(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "ok"

        @app.route("/boom")
        def boom():
            raise RuntimeError("kaput")

        async with TestClient(app) as client:
            for path in ("/", "/boom", "/missing"):
                response = await client.get(path)
                assert _RESPONSE_TIME.match(response.header("x-response-time") or "")

    async def test_failure_does_not_poison_next_request(self) -> None:
        app = App()
        calls = 0

        @app.route("/")
        def flaky():
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("first call fails")
            return "recovered"

        async with TestClient(app) as client:
            first = await client.get("/")
            second = await client.get("/")
            assert first.status == 500
            assert second.status == 200
            assert second.text == "recovered"

    async def test_added_middleware_runs_inside_stamper(self) -> None:
        app = App()
        seen: list[str | None] = []

        async def inspector(request: Request, next: Next) -> AnyResponse:
            response = await next(request)
            seen.append(response.header("x-response-time"))
            return response.with_header("X-Inspected", "yes")

        app.add_middleware(inspector)

        @app.route("/")
        def index():
            return "ok"

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.header("x-inspected") == "yes"
            assert seen == [None]

    async def test_exposed_http_error_message(self) -> None:
        app = App()

        @app.route("/teapot")
        def teapot():
            raise HTTPError(status=418, detail="Short & stout")

        async with TestClient(app) as client:
            response = await client.get("/teapot")
            assert response.status == 418
            assert "<h1>418 - Short &amp; stout</h1>" in response.text


class TestServerTiming:
    async def test_spans_become_header(self) -> None:
        app = App()

        @app.route("/")
        def index(request: Request):
            with request.timing.span("work"):
                pass
            return "ok"

        async with TestClient(app) as client:
            response = await client.get("/")
            value = response.header("server-timing")
            assert value is not None
            assert re.fullmatch(r"work;dur=\d+\.\d{3}", value)

    async def test_no_spans_no_header(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "ok"

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.header("server-timing") is None


class TestWebSocket:
    def _app(self) -> App:
        app = App()
        self.page_calls = 0

        @app.route("/_r", websocket=True)
        def live():
            return WebSocketUpgrade()

        @app.route("/")
        def index():
            self.page_calls += 1
            return "page"

        return app

    async def test_upgrade_accepted(self) -> None:
        async with TestClient(self._app()) as client:
            result = await client.websocket("/_r")
            assert result.status == 101
            assert result.accepted
            assert result.messages == ()

    async def test_plain_http_to_upgrade_route_is_426(self) -> None:
        async with TestClient(self._app()) as client:
            response = await client.get("/_r")
            assert response.status == 426
            assert response.header("upgrade") == "websocket"

    async def test_websocket_to_page_route_is_closed(self) -> None:
        async with TestClient(self._app()) as client:
            result = await client.websocket("/")
            assert result.accepted is False
            assert result.close_code == 1008
        assert self.page_calls == 0

    async def test_websocket_route_still_answers_with_upgrade_only(self) -> None:
        app = App()

        @app.route("/ws", websocket=True)
        def not_an_upgrade():
            return "plain page"

        async with TestClient(app) as client:
            result = await client.websocket("/ws")
        assert result.accepted is False
        assert result.close_code == 1008


class TestFreeze:
    def test_route_after_freeze_raises(self) -> None:
        app = App()
        _ = app.router
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.route("/late")(lambda: "late")

    def test_middleware_after_freeze_raises(self) -> None:
        app = App()
        _ = app.stages
        with pytest.raises(RuntimeError):
            app.add_middleware(ErrorBoundary())

    def test_fallback_after_freeze_raises(self) -> None:
        app = App()
        _ = app.router
        with pytest.raises(RuntimeError):
            app.fallback(lambda: "x")

    def test_router_keeps_registration_order(self) -> None:
        app = App()
        app.route("/b")(lambda: "b")
        app.route("/a")(lambda: "a")
        app.fallback(lambda: "x")
        assert [r.path for r in app.router.routes] == ["/b", "/a", "/{path:path}"]


class TestLifespan:
    async def test_hooks_run_in_order(self) -> None:
        app = App()
        events: list[str] = []

        @app.on_startup
        async def first() -> None:
            events.append("startup-1")

        @app.on_startup
        def second() -> None:
            events.append("startup-2")

        @app.on_shutdown
        async def stop() -> None:
            events.append("shutdown")

        inbox = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict] = []

        async def receive() -> dict:
            return inbox.pop(0)

        async def send(message: dict) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)

        assert events == ["startup-1", "startup-2", "shutdown"]
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_startup_failure_reported(self) -> None:
        app = App()

        @app.on_startup
        def broken() -> None:
            raise RuntimeError("no database")

        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "lifespan.startup"}

        async def send(message: dict) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        assert sent == [{"type": "lifespan.startup.failed", "message": "no database"}]

    async def test_test_client_runs_hooks(self) -> None:
        app = App()
        events: list[str] = []
        app.on_startup(lambda: events.append("up"))
        app.on_shutdown(lambda: events.append("down"))

        async with TestClient(app):
            assert events == ["up"]
        assert events == ["up", "down"]
