"""
Тесты для Hook / Extension.

Проверяем:
- сортировку по order и разрешение ничьих
- single dispatch encode/decode
- цепочки on_request/on_response/handle_option
- порядок обёрток round_trip
"""

import pytest
import requests

from http_request.core.context import Context
from http_request.core.exceptions import NoDecoderError, NoEncoderError
from http_request.core.extension import Extension, Hook, HookOrder
from http_request.core.transport import TransportFunc


def encoder(tag):
    return Hook(name=tag, encode=lambda ctx, body: tag.encode())


class TestOrdering:
    """Сортировка hooks."""

    def test_sorted_by_descending_order(self):
        ext = Extension([Hook(name="low", order=-5), Hook(name="high", order=10), Hook(name="mid")])
        assert [h.name for h in ext.hooks] == ["high", "mid", "low"]

    def test_newest_batch_wins_ties(self):
        ext = Extension().with_hooks(encoder("first")).with_hooks(encoder("second"))
        assert ext.encode(Context.background(), None) == b"second"

    def test_order_within_one_batch_is_kept(self):
        ext = Extension().with_hooks(encoder("first"), encoder("second"))
        assert ext.encode(Context.background(), None) == b"first"

    def test_higher_order_beats_newer_batch(self):
        strong = Hook(name="strong", order=HookOrder.AUTH, encode=lambda ctx, body: b"strong")
        ext = Extension().with_hooks(strong).with_hooks(encoder("weak"))
        assert ext.encode(Context.background(), None) == b"strong"

    def test_with_hooks_is_immutable(self):
        base = Extension([encoder("a")])
        extended = base.with_hooks(encoder("b"))
        assert len(base) == 1
        assert len(extended) == 2

    def test_with_no_hooks_returns_self(self):
        ext = Extension()
        assert ext.with_hooks() is ext

    def test_equality_and_hash(self):
        hook = encoder("a")
        assert Extension([hook]) == Extension([hook])
        assert hash(Extension([hook])) == hash(Extension([hook]))


class TestDispatch:
    """encode / decode."""

    def test_no_encoder(self):
        with pytest.raises(NoEncoderError, match="no encoder"):
            Extension([Hook(name="noop")]).encode(Context.background(), {})

    def test_no_decoder(self):
        with pytest.raises(NoDecoderError, match="no decoder"):
            Extension().decode(Context.background(), b"", object())

    def test_decode_first_decoder_only(self):
        calls = []
        ext = Extension([
            Hook(name="a", decode=lambda ctx, data, out: calls.append("a")),
            Hook(name="b", decode=lambda ctx, data, out: calls.append("b")),
        ])
        ext.decode(Context.background(), b"{}", object())
        assert calls == ["a"]


class TestChains:
    """on_request / on_response / handle_option."""

    def test_on_request_runs_every_hook_in_order(self):
        calls = []
        ext = Extension([
            Hook(order=0, on_request=lambda r: calls.append("default")),
            Hook(order=HookOrder.AUTH, on_request=lambda r: calls.append("auth")),
            Hook(order=HookOrder.DEBUG, on_request=lambda r: calls.append("debug")),
        ])
        ext.on_request(requests.PreparedRequest())
        assert calls == ["auth", "default", "debug"]

    def test_on_response_error_stops_chain(self):
        calls = []

        def fail(response):
            raise RuntimeError("rejected")

        ext = Extension([
            Hook(order=1, on_response=fail),
            Hook(order=0, on_response=lambda r: calls.append("late")),
        ])
        with pytest.raises(RuntimeError, match="rejected"):
            ext.on_response(requests.Response())
        assert calls == []

    def test_handle_option_stops_at_first_handler(self):
        calls = []

        def handler(tag, result):
            def handle(request, option):
                calls.append(tag)
                return result
            return handle

        ext = Extension([
            Hook(order=2, handle_option=handler("skip", False)),
            Hook(order=1, handle_option=handler("take", True)),
            Hook(order=0, handle_option=handler("never", True)),
        ])
        assert ext.handle_option(None, "opt") is True
        assert calls == ["skip", "take"]

    def test_handle_option_unhandled(self):
        assert Extension().handle_option(None, "opt") is False


class TestRoundTrip:
    """Обёртки транспорта."""

    def test_lowest_order_is_outermost(self):
        calls = []

        def wrap(tag):
            def handle_request(next_transport):
                def round_trip(request, context):
                    calls.append(tag)
                    return next_transport.round_trip(request, context)
                return round_trip
            return handle_request

        def base(request, context):
            calls.append("base")
            return requests.Response()

        ext = Extension([
            Hook(name="inner", order=10, handle_request=wrap("inner")),
            Hook(name="outer", order=-10, handle_request=wrap("outer")),
        ])
        ext.round_trip(requests.PreparedRequest(), Context.background(), TransportFunc(base))
        assert calls == ["outer", "inner", "base"]

    def test_hook_can_replace_transport(self):
        replaced = requests.Response()
        replaced.status_code = 204
        ext = Extension([Hook(handle_request=lambda next_transport: lambda req, ctx: replaced)])
        response = ext.round_trip(requests.PreparedRequest(), Context.background(), TransportFunc(None))
        assert response is replaced
