"""Unit tests for the asyncio Debouncer."""

import asyncio

import pytest

from notes_app.client.debounce import Debouncer

DELAY = 0.2


class TestDebouncer:
    def test_burst_fires_once(self):
        calls = []

        async def callback():
            calls.append(1)

        async def scenario():
            debouncer = Debouncer(callback, DELAY)
            for _ in range(10):
                debouncer.trigger()
                await asyncio.sleep(0.01)
            await asyncio.sleep(DELAY * 3)
            await debouncer.wait()

        asyncio.run(scenario())
        assert calls == [1]

    def test_separate_bursts_fire_separately(self):
        calls = []

        async def callback():
            calls.append(1)

        async def scenario():
            debouncer = Debouncer(callback, DELAY)
            debouncer.trigger()
            await asyncio.sleep(DELAY * 3)
            debouncer.trigger()
            await asyncio.sleep(DELAY * 3)
            await debouncer.wait()

        asyncio.run(scenario())
        assert calls == [1, 1]

    def test_cancel_prevents_fire(self):
        calls = []

        async def callback():
            calls.append(1)

        async def scenario():
            debouncer = Debouncer(callback, DELAY)
            debouncer.trigger()
            assert debouncer.pending
            debouncer.cancel()
            assert not debouncer.pending
            await asyncio.sleep(DELAY * 3)

        asyncio.run(scenario())
        assert calls == []

    def test_flush_runs_immediately(self):
        calls = []

        async def callback():
            calls.append(1)

        async def scenario():
            debouncer = Debouncer(callback, 10)
            debouncer.trigger()
            await debouncer.flush()
            assert not debouncer.pending

        asyncio.run(scenario())
        assert calls == [1]

    def test_errors_go_to_hook(self):
        errors = []

        async def callback():
            raise RuntimeError("save failed")

        async def scenario():
            debouncer = Debouncer(callback, DELAY, on_error=errors.append)
            debouncer.trigger()
            await asyncio.sleep(DELAY * 3)
            await debouncer.wait()

        asyncio.run(scenario())
        assert [str(e) for e in errors] == ["save failed"]

    def test_flush_without_hook_raises(self):
        async def callback():
            raise RuntimeError("save failed")

        async def scenario():
            await Debouncer(callback, DELAY).flush()

        with pytest.raises(RuntimeError):
            asyncio.run(scenario())
