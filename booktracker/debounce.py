"""Coalesce rapid calls into one, run after a quiet period."""
import asyncio
import functools
from typing import Callable, Optional


class Debounced:
    """
    Wraps ``func`` so it runs only once calls stop for ``wait`` seconds.

    Each call cancels the pending one; the last call's arguments win.
    The delayed call is scheduled with ``loop.call_later`` on the caller's
    event loop, so it runs on the same thread as every other handler.
    Outside a running loop the call stays pending until ``flush()``.
    """

    def __init__(
        self,
        func: Callable,
        wait: float,
        loop: Optional[asyncio.AbstractEventLoop] = None
    ):
        self.func = func
        self.wait = wait
        self.loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending = None
        functools.update_wrapper(self, func)

    def _get_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self.loop is not None:
            return self.loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _cancel_handle(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def __call__(self, *args, **kwargs) -> None:
        self._cancel_handle()
        self._pending = (args, kwargs)
        loop = self._get_loop()
        if loop is not None:
            self._handle = loop.call_later(self.wait, self._fire)

    def _fire(self):
        self._handle = None
        call, self._pending = self._pending, None
        if call is not None:
            args, kwargs = call
            self.func(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def flush(self):
        """Run the pending call now, if any, instead of waiting."""
        self._cancel_handle()
        self._fire()

    def cancel(self):
        """Drop the pending call."""
        self._cancel_handle()
        self._pending = None


def debounce(wait: float, loop: Optional[asyncio.AbstractEventLoop] = None) -> Callable[[Callable], Debounced]:
    """
    Decorator: run the wrapped function only after ``wait`` seconds of quiet.

    Args:
        wait: Quiescence window in seconds
        loop: Event loop to schedule on (default: the running loop at call time)

    Returns:
        Decorator producing a ``Debounced`` callable
    """
    def decorator(func: Callable) -> Debounced:
        return Debounced(func, wait, loop)
    return decorator
