"""Tests for the access logger and the response-time stamper."""

import logging

import pytest

from wren.errors import NotFound
from wren.http.headers import Headers
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.access_log import AccessLog
from wren.middleware.errors import ErrorBoundary
from wren.middleware.response_time import RESPONSE_TIME_HEADER, ResponseTime
from wren.pipeline import build_pipeline


class FakeClock:
    def __init__(self, *readings: float) -> None:
        self._readings = list(readings)

    def __call__(self) -> float:
        return self._readings.pop(0)


def _request(method: str = "GET", path: str = "/") -> Request:
    return Request(method=method, path=path, headers=Headers())


async def _created(request: Request) -> Response:
    return Response("made", status=201)


class TestResponseTime:
    async def test_sets_header_in_whole_milliseconds(self) -> None:
        stage = ResponseTime(clock=FakeClock(10.0, 10.5))
        response = await stage(_request(), _created)
        assert response.header(RESPONSE_TIME_HEADER) == "500ms"

    async def test_rounds_up(self) -> None:
        stage = ResponseTime(clock=FakeClock(0.0, 0.0001))
        response = await stage(_request(), _created)
        assert response.header(RESPONSE_TIME_HEADER) == "1ms"

    async def test_zero_elapsed(self) -> None:
        stage = ResponseTime(clock=FakeClock(3.0, 3.0))
        response = await stage(_request(), _created)
        assert response.header(RESPONSE_TIME_HEADER) == "0ms"

    async def test_keeps_inner_response(self) -> None:
        response = await ResponseTime()(_request(), _created)
        assert response.status == 201
        assert response.text == "made"


class TestAccessLog:
    async def test_logs_status_method_path_and_time(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        pipeline = build_pipeline(
            [AccessLog(), ResponseTime(clock=FakeClock(0.0, 0.0025))], _created
        )
        with caplog.at_level(logging.INFO, logger="wren.access"):
            await pipeline(_request("POST", "/things"))

        assert [r.getMessage() for r in caplog.records] == ["201 POST /things - 3ms"]
        assert caplog.records[0].name == "wren.access"

    async def test_without_stamper_logs_none(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="wren.access"):
            await AccessLog()(_request(), _created)
        assert caplog.records[0].getMessage() == "201 GET / - None"

    async def test_custom_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        custom = logging.getLogger("tests.access")
        with caplog.at_level(logging.INFO, logger="tests.access"):
            await AccessLog(log=custom)(_request(), _created)
        assert caplog.records[0].name == "tests.access"

    async def test_returns_response_unchanged(self) -> None:
        response = await AccessLog()(_request(), _created)
        assert response.status == 201
        assert response.headers == ()


class TestFailurePath:
    async def test_stamper_records_total_then_reraises(self) -> None:
        async def boom(request: Request) -> Response:
            raise RuntimeError("boom")

        request = _request()
        with pytest.raises(RuntimeError):
            await ResponseTime(clock=FakeClock(0.0, 0.00390625))(request, boom)
        assert request.timing.total_ms == 4

    async def test_access_log_logs_fault_status_then_reraises(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        async def missing(request: Request) -> Response:
            raise NotFound()

        pipeline = build_pipeline(
            [AccessLog(), ResponseTime(clock=FakeClock(0.0, 0.001953125))], missing
        )
        with caplog.at_level(logging.INFO, logger="wren.access"), pytest.raises(NotFound):
            await pipeline(_request(path="/missing-asset.png"))
        assert caplog.records[0].getMessage() == "404 GET /missing-asset.png - 2ms"

    async def test_boundary_stamps_error_page(self, caplog: pytest.LogCaptureFixture) -> None:
        async def boom(request: Request) -> Response:
            raise RuntimeError("boom")

        pipeline = build_pipeline(
            [ErrorBoundary(), AccessLog(), ResponseTime(clock=FakeClock(0.0, 0.0078125))], boom
        )
        with caplog.at_level(logging.INFO, logger="wren.access"):
            response = await pipeline(_request())

        assert response.status == 500
        assert response.header(RESPONSE_TIME_HEADER) == "8ms"
        access = [r.getMessage() for r in caplog.records if r.name == "wren.access"]
        assert access == ["500 GET / - 8ms"]
