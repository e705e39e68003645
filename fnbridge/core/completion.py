"""
Handler completion protocol.

A handler reports its outcome either through the ``callback(err, result)``
it was given or by returning an awaitable. Both adapters feed a single
one-shot channel: the first outcome wins and later ones are dropped.
"""

import asyncio
import inspect
import logging
import threading
from typing import Any, Awaitable, Callable, Optional

from .exceptions import HandlerError

logger = logging.getLogger("fnbridge.completion")


class Completion:
    """
    One-shot result channel for a single handler invocation.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._thread_id = threading.get_ident()
        self._pending = set()

    @property
    def done(self) -> bool:
        return self._future.done()

    def succeed(self, result: Any) -> None:
        self._deliver(None, result)

    def fail(self, error: Any) -> None:
        self._deliver(error, None)

    def callback(self, err: Any = None, result: Any = None) -> None:
        """
        Callback-style adapter handed to the handler.

        May be called from any thread. An error takes precedence over a result.
        """
        if threading.get_ident() == self._thread_id:
            self._deliver(err, result)
        else:
            self._loop.call_soon_threadsafe(self._deliver, err, result)

    def attach(self, awaitable: Awaitable[Any], ignore_none: bool = False) -> asyncio.Future:
        """
        Deferred-value adapter: resolve the channel from an awaitable.

        Args:
            awaitable: coroutine, task or future returned by the handler
            ignore_none: leave the channel open when the awaitable yields None
        """

        async def _run():
            try:
                value = await awaitable
            except Exception as e:
                self.fail(e)
                return
            if value is None and ignore_none:
                return
            self.succeed(value)

        task = asyncio.ensure_future(_run())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait(self) -> Any:
        """
        Wait for the first outcome.

        Raises:
            HandlerError: the handler reported a failure
        """
        err, result = await self._future
        if err is not None:
            if isinstance(err, HandlerError):
                raise err
            raise HandlerError(err) from (err if isinstance(err, BaseException) else None)
        return result

    def _deliver(self, err: Any, result: Any) -> None:
        if self._future.done():
            logger.debug("Ignoring handler completion after the first outcome")
            return
        self._future.set_result((err, result))


def accepts_callback(handler: Callable[..., Any]) -> bool:
    """True when the handler can take ``(event, context, callback)``."""
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return False

    positional = 0
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return True
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 3


async def invoke_handler(handler: Callable[..., Any], event: dict, context: Any) -> Any:
    """
    Call a handler and wait for its outcome through a one-shot channel.

    No deadline is applied: a handler that never completes never returns.

    Raises:
        HandlerError: the handler raised or reported a failure
    """
    completion = Completion()
    with_callback = accepts_callback(handler)

    try:
        if with_callback:
            returned = handler(event, context, completion.callback)
        else:
            returned = handler(event, context)
    except Exception as e:
        completion.fail(e)
        return await completion.wait()

    if inspect.isawaitable(returned):
        completion.attach(returned, ignore_none=with_callback)
    elif returned is not None or not with_callback:
        completion.succeed(returned)

    return await completion.wait()
