"""Background polling for signature reset approval."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Awaitable, Callable

import structlog

from ..schemas import Employee
from .signature import SignatureLifecycle

RecordFetcher = Callable[[], Awaitable[Employee | dict[str, Any]]]


class ResetApprovalPoller:
    """Re-fetch the user record while a signature reset is pending.

    The loop ends on its own once the pending flag clears (approved or
    rejected). `stop()` and the async context manager cancel it on every
    other exit path.
    """

    DEFAULT_INTERVAL_SECONDS = 5.0

    def __init__(
        self,
        lifecycle: SignatureLifecycle,
        fetch_record: RecordFetcher,
        *,
        interval: float | None = None,
        request_timeout: float | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._lifecycle = lifecycle
        self._fetch_record = fetch_record
        self._interval = interval or self.DEFAULT_INTERVAL_SECONDS
        self._request_timeout = request_timeout
        self._sleep = sleep
        self._task: asyncio.Task[Employee | None] | None = None
        self._logger = structlog.get_logger(__name__)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[Employee | None]:
        task = self._task
        if task is not None and not task.done():
            return task
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def run(self) -> Employee | None:
        """Poll until nothing is pending; return the last record applied."""
        last_record: Employee | None = None
        polls = 0
        while self._lifecycle.reset_pending:
            await self._sleep(self._interval)
            polls += 1
            try:
                record = await self._fetch()
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                self._logger.warning("signature.reset_poll_failed", attempt=polls, error=str(exc))
                continue
            self._lifecycle.apply_user_record(record)
            last_record = record
            self._logger.debug(
                "signature.reset_poll",
                attempt=polls,
                pending=self._lifecycle.reset_pending,
                approved=self._lifecycle.reset_approved,
            )
        self._logger.info(
            "signature.reset_poll_finished",
            polls=polls,
            approved=self._lifecycle.reset_approved,
        )
        return last_record

    async def _fetch(self) -> Employee:
        pending = self._fetch_record()
        if self._request_timeout is not None:
            raw = await asyncio.wait_for(pending, timeout=self._request_timeout)
        else:
            raw = await pending
        if isinstance(raw, Employee):
            return raw
        return Employee.model_validate(raw)

    async def __aenter__(self) -> "ResetApprovalPoller":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
