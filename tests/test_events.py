"""Tests for the Evented mixin."""

import pytest

from authsession.events import Evented


class Emitter(Evented):
    pass


class TestSubscription:
    def test_on_is_idempotent(self):
        emitter = Emitter()
        calls = []
        emitter.on("ping", calls.append)
        emitter.on("ping", calls.append)

        emitter.trigger("ping", 1)

        assert calls == [1]
        assert emitter.listener_count("ping") == 1

    def test_off_single_handler(self):
        emitter = Emitter()
        first, second = [], []
        emitter.on("ping", first.append)
        emitter.on("ping", second.append)

        emitter.off("ping", first.append)
        emitter.trigger("ping", "x")

        assert first == []
        assert second == ["x"]

    def test_off_all_handlers(self):
        emitter = Emitter()
        emitter.on("ping", lambda *a: None)
        emitter.on("ping", lambda *a: None)

        emitter.off("ping")

        assert not emitter.has_listeners("ping")

    def test_off_unknown_handler_is_noop(self):
        emitter = Emitter()
        emitter.off("ping", print)
        assert emitter.listener_count("ping") == 0

    def test_failing_handler_does_not_stop_delivery(self):
        emitter = Emitter()
        calls = []

        def broken(value):
            raise RuntimeError("boom")

        emitter.on("ping", broken)
        emitter.on("ping", calls.append)
        emitter.trigger("ping", 1)

        assert calls == [1]

    def test_coroutine_handler_without_loop(self):
        emitter = Emitter()

        async def handler(value):
            pass

        emitter.on("ping", handler)
        with pytest.raises(RuntimeError, match="running event loop"):
            emitter.trigger("ping", 1)


class TestAsyncDelivery:
    @pytest.mark.asyncio
    async def test_emit_awaits_coroutine_handlers(self):
        emitter = Emitter()
        calls = []

        async def handler(value):
            calls.append(value)

        emitter.on("ping", handler)
        await emitter.emit("ping", "a")

        assert calls == ["a"]

    @pytest.mark.asyncio
    async def test_emit_logs_handler_errors(self):
        emitter = Emitter()
        calls = []

        async def broken(value):
            raise RuntimeError("boom")

        emitter.on("ping", broken)
        emitter.on("ping", calls.append)
        await emitter.emit("ping", 2)

        assert calls == [2]

    @pytest.mark.asyncio
    async def test_trigger_schedules_coroutines(self):
        emitter = Emitter()
        calls = []

        async def handler(value):
            calls.append(value)

        emitter.on("ping", handler)
        tasks = emitter.trigger("ping", "b")

        assert calls == []
        assert len(tasks) == 1
        await tasks[0]
        assert calls == ["b"]
