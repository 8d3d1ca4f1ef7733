from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

log = logging.getLogger(__name__)

RefreshFn = Callable[[], Awaitable["str | None"]]


class RefreshCoordinator:
    """Single-flight access-token refresh shared by every request of one client.

    The first caller that needs a new token starts the refresh; everybody who
    asks while it is outstanding queues behind it. When it settles, each queued
    waiter is resolved once, in the order it queued, with the same result: the
    new access token or ``None``.

    The refresh runs in its own task so that a cancelled waiter (the one that
    started it included) neither aborts it nor causes a second one.
    """

    def __init__(self, refresh: RefreshFn) -> None:
        self._refresh = refresh
        self._refreshing = False
        self._waiters: list[asyncio.Future[str | None]] = []
        self._task: asyncio.Task[None] | None = None

    @property
    def refreshing(self) -> bool:
        return self._refreshing

    @property
    def pending(self) -> int:
        return len(self._waiters)

    async def wait_for_token(self) -> str | None:
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[str | None] = loop.create_future()
        if not self._refreshing:
            self._refreshing = True
            self._waiters = [waiter]
            self._task = loop.create_task(self._run())
        else:
            self._waiters.append(waiter)
            log.debug("refresh in flight; queued waiter", extra={"waiters": len(self._waiters)})
        return await waiter

    async def _run(self) -> None:
        token: str | None = None
        try:
            token = await self._refresh()
        except Exception:
            log.exception("token refresh raised; treating as failed")
            token = None
        finally:
            self._settle(token)

    def _settle(self, token: str | None) -> None:
        waiters, self._waiters = self._waiters, []
        self._refreshing = False
        self._task = None
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(token)
