"""Tests for wren.routing.dispatch — first-match dispatch and fallbacks."""

import asyncio
import logging

import anyio
import httpx
import pytest

from wren.config import DispatchConfig
from wren.errors import ConfigurationError, HTTPError
from wren.routing.dispatch import Dispatcher, fallback_error, first_match, resolve
from wren.routing.filter import Filter, filter_http
from wren.routing.outcome import Matched, MatchedWithError, NoMatch
from wren.routing.status import FilterStatus
from wren.testing import assert_body, assert_not_found, assert_status, make_request


def _item_route(request: httpx.Request) -> Filter:
    return filter_http(request).filter_path("/item/{}").filter_method("GET")


def _hello_route(request: httpx.Request) -> Filter:
    return filter_http(request).filter_path("/hello/{}").filter_method("GET")


async def _item(chain: Filter) -> httpx.Response:
    return httpx.Response(200, text=f"Got any {chain.get_path_var(1)}?")


def _hello(chain: Filter) -> httpx.Response:
    return httpx.Response(200, text=f"Hello {chain.get_path_var(1)}")


@pytest.fixture
def dispatcher() -> Dispatcher:
    return Dispatcher().route(_item_route, _item).route(_hello_route, _hello)


class TestRegistration:
    def test_route_returns_dispatcher(self) -> None:
        d = Dispatcher()
        assert d.route(_item_route, _item) is d

    def test_decorator_form(self) -> None:
        d = Dispatcher()

        @d.route(_item_route)
        async def item(chain: Filter) -> httpx.Response:
            return httpx.Response(200)

        assert [c.name for c in d.candidates] == ["item"]
        assert d.candidates[0].handler is item

    def test_explicit_name(self) -> None:
        d = Dispatcher().route(_item_route, _item, name="items")
        assert d.candidates[0].name == "items"

    def test_order_is_preserved(self, dispatcher: Dispatcher) -> None:
        assert [c.name for c in dispatcher.candidates] == ["_item", "_hello"]

    def test_rejects_non_callable_builder(self) -> None:
        with pytest.raises(ConfigurationError, match="Chain builder must be callable"):
            Dispatcher().route("/item/{}", _item)  # type: ignore[arg-type]

    def test_rejects_non_callable_handler(self) -> None:
        with pytest.raises(ConfigurationError, match="Handler must be callable"):
            Dispatcher().route(_item_route, "nope")  # type: ignore[arg-type]


class TestDispatch:
    @pytest.mark.asyncio
    async def test_grapes_scenario(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(make_request("GET", "https://example.org/item/grapes"))
        assert_body(response, "Got any grapes?", status=200)

    @pytest.mark.asyncio
    async def test_sync_handler(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(make_request("GET", "https://example.org/hello/world"))
        assert_body(response, "Hello world")

    @pytest.mark.asyncio
    async def test_no_match_is_not_found(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch(make_request("GET", "https://example.org/other"))
        assert_not_found(response)

    @pytest.mark.asyncio
    async def test_no_candidates(self) -> None:
        response = await Dispatcher().dispatch(make_request())
        assert_not_found(response)

    @pytest.mark.asyncio
    async def test_first_match_wins(self) -> None:
        calls: list[str] = []

        def first(_chain: Filter) -> str:
            calls.append("first")
            return "first"

        def second(_chain: Filter) -> str:
            calls.append("second")
            return "second"

        d = Dispatcher().route(_item_route, first).route(_item_route, second)
        response = await d.dispatch(make_request(url="https://example.org/item/x"))
        assert response.text == "first"
        assert calls == ["first"]

    @pytest.mark.asyncio
    async def test_later_builders_not_evaluated_after_match(self) -> None:
        built: list[str] = []

        def tracked(label: str):
            def build(request: httpx.Request) -> Filter:
                built.append(label)
                return filter_http(request).filter_path("/item/{}")

            return build

        d = Dispatcher().route(tracked("a"), _item).route(tracked("b"), _item)
        await d.dispatch(make_request(url="https://example.org/item/x"))
        assert built == ["a"]

    @pytest.mark.asyncio
    async def test_fallthrough_to_second(self) -> None:
        d = (
            Dispatcher()
            .route(lambda r: filter_http(r).filter_method("POST"), lambda _: "post")
            .route(lambda r: filter_http(r).filter_method("GET"), lambda _: "get")
        )
        response = await d.dispatch(make_request("GET"))
        assert response.text == "get"

    @pytest.mark.asyncio
    async def test_handler_error_does_not_fall_through(self) -> None:
        calls: list[str] = []

        def broken(_chain: Filter) -> httpx.Response:
            raise ValueError("kaboom")

        def backup(_chain: Filter) -> str:
            calls.append("backup")
            return "backup"

        d = Dispatcher().route(_item_route, broken).route(_item_route, backup)
        response = await d.dispatch(make_request(url="https://example.org/item/x"))
        assert_status(response, 500)
        assert response.text == "kaboom"
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_from_handler(self) -> None:
        async def teapot(_chain: Filter) -> httpx.Response:
            raise HTTPError(status=418, detail="Short and spout!")

        d = Dispatcher().route(_item_route, teapot)
        response = await d.dispatch(make_request(url="https://example.org/item/x"))
        assert_body(response, "Short and spout!", status=418)

    @pytest.mark.asyncio
    async def test_custom_error_handler(self) -> None:
        def broken(_chain: Filter) -> httpx.Response:
            raise KeyError("missing")

        d = Dispatcher(error_handler=lambda err: httpx.Response(503, text=type(err).__name__))
        d.route(_item_route, broken)
        response = await d.dispatch(make_request(url="https://example.org/item/x"))
        assert_body(response, "KeyError", status=503)

    @pytest.mark.asyncio
    async def test_handler_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(_chain: Filter) -> httpx.Response:
            raise ValueError("kaboom")

        d = Dispatcher().route(_item_route, broken)
        with caplog.at_level(logging.ERROR, logger="wren.dispatch"):
            await d.dispatch(make_request(url="https://example.org/item/x"))
        assert any("kaboom" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_handler_failure_logging_can_be_disabled(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        def broken(_chain: Filter) -> httpx.Response:
            raise ValueError("kaboom")

        d = Dispatcher(DispatchConfig(log_handler_errors=False)).route(_item_route, broken)
        with caplog.at_level(logging.ERROR, logger="wren.dispatch"):
            await d.dispatch(make_request(url="https://example.org/item/x"))
        assert caplog.records == []

    @pytest.mark.asyncio
    async def test_raising_predicate_becomes_error_response(self) -> None:
        calls: list[str] = []

        def needs_role(request: httpx.Request) -> bool:
            return request.extensions["role"] == "admin"

        def backup(_chain: Filter) -> str:
            calls.append("backup")
            return "backup"

        d = (
            Dispatcher()
            .route(lambda r: filter_http(r).filter_path("/x").filter_custom(needs_role), _hello)
            .route(lambda r: filter_http(r).filter_path("/x"), backup)
        )
        response = await d.dispatch(make_request(url="https://example.org/x"))
        assert_status(response, 500)
        assert "role" in response.text
        assert calls == []

    @pytest.mark.asyncio
    async def test_raising_builder_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken_build(_request: httpx.Request) -> Filter:
            raise RuntimeError("no chain")

        d = Dispatcher().route(broken_build, _hello)
        with caplog.at_level(logging.ERROR, logger="wren.dispatch"):
            response = await d.dispatch(make_request())
        assert_body(response, "no chain", status=500)
        assert any("no chain" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_http_error_from_predicate_keeps_status(self) -> None:
        def forbid(_request: httpx.Request) -> bool:
            raise HTTPError(status=403, detail="Forbidden")

        d = Dispatcher().route(lambda r: filter_http(r).filter_custom(forbid), _hello)
        response = await d.dispatch(make_request())
        assert_body(response, "Forbidden", status=403)

    @pytest.mark.asyncio
    async def test_failing_error_handler_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(_chain: Filter) -> httpx.Response:
            raise RuntimeError("handler")

        def error_handler(_err: Exception) -> httpx.Response:
            raise ValueError("error handler")

        d = Dispatcher(error_handler=error_handler).route(_item_route, broken)
        with caplog.at_level(logging.ERROR, logger="wren.dispatch"):
            response = await d.dispatch(make_request(url="https://example.org/item/x"))
        assert_body(response, "handler", status=500)
        assert any("error handler" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_request_is_not_mutated(self, dispatcher: Dispatcher) -> None:
        request = make_request("GET", "https://example.org/item/grapes?x=1", headers={"a": "b"})
        before = (request.method, str(request.url), request.headers.multi_items(), dict(request.extensions))
        await dispatcher.dispatch(request)
        after = (request.method, str(request.url), request.headers.multi_items(), dict(request.extensions))
        assert before == after

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_independent(self, dispatcher: Dispatcher) -> None:
        async def slow_item(chain: Filter) -> httpx.Response:
            await asyncio.sleep(0.01)
            return httpx.Response(200, text=chain.get_path_var(1) or "")

        d = Dispatcher().route(_item_route, slow_item)
        names = ["apple", "banana", "cherry"]
        responses = await asyncio.gather(
            *(d.dispatch(make_request(url=f"https://example.org/item/{n}")) for n in names)
        )
        assert [r.text for r in responses] == names


class TestFallbackPolicy:
    @pytest.mark.asyncio
    async def test_method_failure_is_405_when_distinguishing(self) -> None:
        d = Dispatcher(DispatchConfig(distinguish_failures=True)).route(_item_route, _item)
        response = await d.dispatch(make_request("DELETE", "https://example.org/item/x"))
        assert_status(response, 405)

    @pytest.mark.asyncio
    async def test_path_failure_is_404_when_distinguishing(self) -> None:
        d = Dispatcher(DispatchConfig(distinguish_failures=True)).route(_item_route, _item)
        response = await d.dispatch(make_request("GET", "https://example.org/nothing"))
        assert_status(response, 404)

    @pytest.mark.asyncio
    async def test_header_failure_is_400_when_distinguishing(self) -> None:
        d = Dispatcher(DispatchConfig(distinguish_failures=True)).route(
            lambda r: filter_http(r).filter_path("/").filter_header("authorization", "{}"),
            lambda _: "ok",
        )
        response = await d.dispatch(make_request())
        assert_status(response, 400)

    @pytest.mark.asyncio
    async def test_method_failure_is_404_by_default(self) -> None:
        d = Dispatcher().route(_item_route, _item)
        response = await d.dispatch(make_request("DELETE", "https://example.org/item/x"))
        assert_not_found(response)

    @pytest.mark.asyncio
    async def test_custom_not_found_status(self) -> None:
        d = Dispatcher(DispatchConfig(not_found_status=410))
        response = await d.dispatch(make_request())
        assert_body(response, "Gone", status=410)

    def test_most_specific_failure_kept(self) -> None:
        no_match = NoMatch().merge(FilterStatus.FAIL_METHOD).merge(FilterStatus.FAIL_PATH)
        assert fallback_error(no_match, DispatchConfig(distinguish_failures=True)).status == 405


class TestDispatchSync:
    def test_runs_without_event_loop(self, dispatcher: Dispatcher) -> None:
        response = dispatcher.dispatch_sync(make_request("GET", "https://example.org/item/grapes"))
        assert_body(response, "Got any grapes?")


class TestFirstMatch:
    @pytest.mark.asyncio
    async def test_first_successful_thunk_wins(self) -> None:
        request = make_request("POST", "https://example.org/item/grapes")
        outcome = await first_match(
            lambda: filter_http(request).filter_path("/hello/{}").async_handle(_item),
            lambda: filter_http(request).filter_path("/item/{}").async_handle(_item),
        )
        assert isinstance(outcome, Matched)
        assert outcome.response.text == "Got any grapes?"

    @pytest.mark.asyncio
    async def test_later_thunks_not_called(self) -> None:
        request = make_request(url="https://example.org/item/grapes")
        calls: list[str] = []

        def second() -> NoMatch:
            calls.append("second")
            return NoMatch()

        await first_match(
            lambda: filter_http(request).filter_path("/item/{}").handle(_hello),
            second,
        )
        assert calls == []

    @pytest.mark.asyncio
    async def test_all_no_match(self) -> None:
        request = make_request()
        outcome = await first_match(
            lambda: filter_http(request).filter_path("/a").handle(_hello),
            lambda: filter_http(request).filter_method("PUT").handle(_hello),
        )
        assert outcome == NoMatch(FilterStatus.FAIL_METHOD)

    @pytest.mark.asyncio
    async def test_runs_under_anyio(self) -> None:
        request = make_request(url="https://example.org/item/grapes")

        async def slow(chain: Filter) -> httpx.Response:
            await anyio.sleep(0)
            return await _item(chain)

        outcome = await first_match(lambda: filter_http(request).async_handle(slow))
        assert isinstance(outcome, Matched)

    @pytest.mark.asyncio
    async def test_raising_thunk_stops_search(self) -> None:
        calls: list[str] = []

        def broken() -> NoMatch:
            raise KeyError("role")

        def later() -> NoMatch:
            calls.append("later")
            return NoMatch()

        outcome = await first_match(broken, later)
        assert isinstance(outcome, MatchedWithError)
        assert isinstance(outcome.error, KeyError)
        assert calls == []


class TestResolve:
    def test_matched(self) -> None:
        response = httpx.Response(201, text="made")
        assert resolve(Matched(response)) is response

    def test_matched_with_error(self) -> None:
        response = resolve(MatchedWithError(RuntimeError("bad")))
        assert_body(response, "bad", status=500)

    def test_no_match(self) -> None:
        assert_not_found(resolve(NoMatch()))

    def test_sync_chain_end_to_end(self) -> None:
        request = make_request(url="https://example.org/hello/you")
        outcome = (
            filter_http(request)
            .filter_path("/item/{}")
            .handle(_hello)
            .or_else(lambda: filter_http(request).filter_path("/hello/{}").handle(_hello))
        )
        assert_body(resolve(outcome), "Hello you")

    def test_failing_error_handler_uses_default_rendering(self) -> None:
        def error_handler(_err: Exception) -> httpx.Response:
            raise ValueError("error handler")

        response = resolve(MatchedWithError(RuntimeError("bad")), error_handler=error_handler)
        assert_body(response, "bad", status=500)
