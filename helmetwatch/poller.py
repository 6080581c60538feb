import asyncio
import inspect
from datetime import datetime, timezone

from helmetwatch.logs import worker_logger
from helmetwatch.sensor_api import extract_batch, fetch_recent_data
from helmetwatch.settings import POLL_INTERVAL_SECONDS

log = worker_logger("poller")


class FeedState:
    """
    Owner of the current batch and its fetch status.

    Every fetch takes a sequence number from begin_fetch(); apply_result() only
    accepts completions newer than the last applied one, so a slow response can
    never overwrite a batch set by a later request.
    """

    def __init__(self):
        self._batch: tuple[dict, ...] = ()
        self.error: str | None = None
        self.loading = True
        self.last_fetch: datetime | None = None
        self._issued = 0
        self._applied = 0
        self._cancelled_through = 0
        self._subscribers = []

    @property
    def batch(self) -> list[dict]:
        return list(self._batch)

    @property
    def issued(self) -> int:
        return self._issued

    def snapshot(self) -> list[dict]:
        return [dict(record) for record in self._batch]

    def subscribe(self, callback):
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def begin_fetch(self) -> int:
        self._issued += 1
        self.error = None
        self.loading = True
        return self._issued

    def cancel_pending(self) -> None:
        self._cancelled_through = self._issued
        self.loading = False

    def apply_result(self, seq: int, payload=None, error: str | None = None) -> bool:
        if seq <= max(self._applied, self._cancelled_through):
            return False
        self._applied = seq
        if error:
            self.error = error
            self._batch = ()
        else:
            self._batch = tuple(extract_batch(payload))
            self.error = None
            self.last_fetch = datetime.now(timezone.utc)
        if seq >= self._issued:
            self.loading = False
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception as exc:
                log(f"ERROR: subscriber failed ({exc!r}).")
        return True


def call_transport(fetch):
    try:
        payload, error = fetch()
    except Exception as exc:
        return None, f"Fetch failed ({exc.__class__.__name__})"
    return payload, error


def run_cycle(state: FeedState, fetch=fetch_recent_data) -> bool:
    """Run one fetch cycle synchronously against state."""
    seq = state.begin_fetch()
    payload, error = call_transport(fetch)
    return state.apply_result(seq, payload, error)


class HelmetPoller:
    """
    Cooperative polling loop on the running asyncio event loop.

    start() fetches immediately and then once per interval until stop().
    Synchronous transports run in a worker thread so only the network wait
    suspends the loop.
    """

    def __init__(self, fetch=fetch_recent_data, interval: float = POLL_INTERVAL_SECONDS, state: FeedState | None = None):
        self.fetch = fetch
        self.interval = interval
        self.state = state or FeedState()
        self._timer: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._timer
        self._timer = asyncio.get_running_loop().create_task(self._tick())
        return self._timer

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.state.cancel_pending()

    async def refresh(self) -> bool:
        seq = self.state.begin_fetch()
        payload, error = await self._fetch()
        return self.state.apply_result(seq, payload, error)

    async def wait_idle(self) -> None:
        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def _fetch(self):
        if inspect.iscoroutinefunction(self.fetch):
            try:
                payload, error = await self.fetch()
            except Exception as exc:
                return None, f"Fetch failed ({exc.__class__.__name__})"
            return payload, error
        return await asyncio.to_thread(call_transport, self.fetch)

    async def _tick(self) -> None:
        while True:
            task = asyncio.get_running_loop().create_task(self.refresh())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
            await asyncio.sleep(self.interval)
