"""Process shutdown helpers for the lexicon server."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
import signal

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


async def wait_for_shutdown(watched: Iterable[asyncio.Task] = ()) -> str:
    """
    Block until SIGINT/SIGTERM arrives or one of ``watched`` finishes.

    Returns the signal name, or the name of the first task that finished.
    Signal handlers are removed again before returning.
    """
    loop = asyncio.get_running_loop()
    received: asyncio.Future[str] = loop.create_future()

    def _on_signal(sig: signal.Signals) -> None:
        if not received.done():
            received.set_result(sig.name)

    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, _on_signal, sig)
    try:
        done, _ = await asyncio.wait(
            [received, *watched], return_when=asyncio.FIRST_COMPLETED
        )
        if received in done:
            return received.result()
        return next(iter(done)).get_name()
    finally:
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)
        if not received.done():
            received.cancel()


async def drain(tasks: Iterable[asyncio.Task], timeout: float = 5.0) -> None:
    """Give ``tasks`` up to ``timeout`` seconds to finish, then cancel the rest."""
    pending = [t for t in tasks if not t.done()]
    if not pending:
        return
    _, late = await asyncio.wait(pending, timeout=timeout)
    for task in late:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
