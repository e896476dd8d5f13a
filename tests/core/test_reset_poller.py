from __future__ import annotations

import asyncio

import pytest

from perfreview.core import ResetApprovalPoller, SignatureLifecycle
from perfreview.schemas import Employee

PENDING = {"id": 7, "requestSignatureReset": 1, "approvedSignatureReset": 0}
APPROVED = {"id": 7, "requestSignatureReset": 0, "approvedSignatureReset": 1}


class FakeClock:
    def __init__(self) -> None:
        self.intervals: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.intervals.append(seconds)
        await asyncio.sleep(0)


class ScriptedFetcher:
    def __init__(self, *responses: object) -> None:
        self._responses = list(responses)
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def pending_lifecycle() -> SignatureLifecycle:
    return SignatureLifecycle(value="/signatures/7.png", reset_requested=1)


@pytest.mark.asyncio
async def test_poller_stops_once_approved():
    lifecycle = pending_lifecycle()
    clock = FakeClock()
    fetcher = ScriptedFetcher(PENDING, PENDING, APPROVED)
    poller = ResetApprovalPoller(lifecycle, fetcher, sleep=clock.sleep)

    record = await poller.run()

    assert isinstance(record, Employee)
    assert fetcher.calls == 3
    assert clock.intervals == [5.0, 5.0, 5.0]
    assert lifecycle.reset_pending is False
    assert lifecycle.can_clear is True


@pytest.mark.asyncio
async def test_poller_does_nothing_without_pending_request():
    lifecycle = SignatureLifecycle(value="/signatures/7.png")
    fetcher = ScriptedFetcher(APPROVED)
    poller = ResetApprovalPoller(lifecycle, fetcher, sleep=FakeClock().sleep)

    assert await poller.run() is None
    assert fetcher.calls == 0


@pytest.mark.asyncio
async def test_poller_keeps_polling_after_fetch_error():
    lifecycle = pending_lifecycle()
    fetcher = ScriptedFetcher(RuntimeError("boom"), APPROVED)
    poller = ResetApprovalPoller(lifecycle, fetcher, sleep=FakeClock().sleep)

    await poller.run()

    assert fetcher.calls == 2
    assert lifecycle.reset_approved is True


@pytest.mark.asyncio
async def test_rejection_also_ends_polling():
    lifecycle = pending_lifecycle()
    rejected = Employee(id=7, requestSignatureReset=0, approvedSignatureReset=0)
    poller = ResetApprovalPoller(lifecycle, ScriptedFetcher(rejected), sleep=FakeClock().sleep)

    await poller.run()

    assert lifecycle.reset_pending is False
    assert lifecycle.can_clear is False


@pytest.mark.asyncio
async def test_stop_cancels_running_task():
    lifecycle = pending_lifecycle()
    poller = ResetApprovalPoller(lifecycle, ScriptedFetcher(PENDING), sleep=FakeClock().sleep)

    task = poller.start()
    await asyncio.sleep(0)
    assert poller.running is True

    await poller.stop()

    assert poller.running is False
    assert task.cancelled()


@pytest.mark.asyncio
async def test_context_manager_tears_down_on_error():
    lifecycle = pending_lifecycle()
    poller = ResetApprovalPoller(lifecycle, ScriptedFetcher(PENDING), sleep=FakeClock().sleep)

    with pytest.raises(RuntimeError):
        async with poller:
            await asyncio.sleep(0)
            raise RuntimeError("unmounted")

    assert poller.running is False


@pytest.mark.asyncio
async def test_request_timeout_counts_as_failed_poll():
    lifecycle = pending_lifecycle()
    calls = 0

    async def slow_then_approved() -> dict:
        nonlocal calls
        calls += 1
        if calls == 1:
            await asyncio.sleep(10)
        return APPROVED

    poller = ResetApprovalPoller(
        lifecycle,
        slow_then_approved,
        request_timeout=0.01,
        sleep=FakeClock().sleep,
    )

    await poller.run()

    assert calls == 2
    assert lifecycle.reset_approved is True


@pytest.mark.asyncio
async def test_custom_interval_is_used():
    lifecycle = pending_lifecycle()
    clock = FakeClock()
    poller = ResetApprovalPoller(lifecycle, ScriptedFetcher(APPROVED), interval=1.5, sleep=clock.sleep)

    await poller.run()

    assert clock.intervals == [1.5]


@pytest.mark.asyncio
async def test_start_returns_running_task():
    poller = ResetApprovalPoller(pending_lifecycle(), ScriptedFetcher(PENDING), sleep=FakeClock().sleep)

    first = poller.start()
    second = poller.start()

    assert first is second
    await poller.stop()
