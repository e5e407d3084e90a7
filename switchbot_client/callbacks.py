"""
Callback interface for the SwitchBot client
Runs calls on a thread pool and reports results through callback / errback
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from .client import SwitchBotClient

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]
Errback = Callable[[BaseException], None]


class CallbackClient:
    """
    Wraps a SwitchBotClient so each operation returns immediately and
    reports its outcome later.

    On success callback(body) is called. On failure errback(exc) is called;
    the callback never sees an error, and an exception raised by the callback
    itself is logged and passed to errback. Every call also returns its Future, so
    a failure without an errback is still available via future.exception().

    Example:
        with CallbackClient(SwitchBotClient(token, secret)) as cb:
            cb.list_devices(print, lambda e: print(f"failed: {e}"))
    """

    def __init__(self, client: SwitchBotClient, max_workers: int = 4):
        self.client = client
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="switchbot"
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self, wait: bool = True):
        """Shut down the thread pool, then close the wrapped client"""
        self._executor.shutdown(wait=wait)
        self.client.close()

    def list_devices(self, callback: Callback, errback: Optional[Errback] = None) -> Future:
        return self._submit(callback, errback, self.client.list_devices)

    def get_device_status(
        self,
        device_id: str,
        callback: Callback,
        errback: Optional[Errback] = None
    ) -> Future:
        return self._submit(callback, errback, self.client.get_device_status, device_id)

    def set_device_status(
        self,
        device_id: str,
        command: str,
        parameter: Any,
        callback: Callback,
        errback: Optional[Errback] = None
    ) -> Future:
        return self._submit(
            callback, errback, self.client.set_device_status, device_id, command, parameter
        )

    def _submit(self, callback: Callback, errback: Optional[Errback], fn, *args) -> Future:
        future = self._executor.submit(fn, *args)
        future.add_done_callback(lambda f: self._dispatch(f, callback, errback))
        return future

    @staticmethod
    def _dispatch(future: Future, callback: Callback, errback: Optional[Errback]):
        exc = future.exception()
        if exc is None:
            try:
                callback(future.result())
                return
            except Exception as e:
                logger.exception("SwitchBot callback raised")
                exc = e
        elif errback is None:
            # Still readable from the returned future
            logger.error("SwitchBot request failed with no errback: %s", exc)

        if errback is not None:
            errback(exc)
