"""
Single Writer Pattern for the durable cache tier.

All durable-tier writes (puts, eviction sweeps, purges) are serialized through
one background task. Writes for the same key therefore complete in the order
they were submitted, and an eviction sweep never interleaves with a put.

Usage:
    queue = WriteQueue("TranslationCache")
    await queue.start()

    # Fire-and-forget from synchronous code
    queue.submit(lambda: store.put(key, text, ts))

    # Or wait for the result
    result = await queue.enqueue(lambda: store.count())

    await queue.stop()
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger("WriteQueue")

T = TypeVar("T")

WriteFactory = Callable[[], Awaitable[T]]


class WriteOperation:
    """Wrapper for a write operation with its result future."""

    def __init__(self, factory: WriteFactory):
        self.factory = factory
        self.future: asyncio.Future = asyncio.get_running_loop().create_future()


class WriteQueue:
    """
    Background task that processes write operations sequentially.

    Operations are passed as zero-argument coroutine factories so that an
    operation dropped at shutdown never leaves an un-awaited coroutine behind.
    """

    def __init__(self, name: str = "WriteQueue"):
        self.name = name
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self._shutdown_event: Optional[asyncio.Event] = None

    async def _run_op(self, op: WriteOperation) -> None:
        try:
            result = await op.factory()
        except Exception as e:
            logger.error(f"[{self.name}] Write operation failed: {e}")
            if not op.future.done():
                op.future.set_exception(e)
        else:
            if not op.future.done():
                op.future.set_result(result)

    async def _writer_loop(self) -> None:
        logger.info(f"[{self.name}] Write queue started - durable writes will be serialized")

        while True:
            try:
                try:
                    op: Optional[WriteOperation] = await asyncio.wait_for(self._queue.get(), timeout=1.0)
                except asyncio.TimeoutError:
                    if self._shutdown_event.is_set() and self._queue.empty():
                        return
                    continue

                # None is the shutdown sentinel, queued behind every pending write
                if op is None:
                    self._queue.task_done()
                    logger.info(f"[{self.name}] Write queue shut down gracefully")
                    return

                await self._run_op(op)
                self._queue.task_done()

            except asyncio.CancelledError:
                logger.info(f"[{self.name}] Write queue cancelled")
                raise
            except Exception as e:
                logger.error(f"[{self.name}] Unexpected error in writer loop: {e}")
                # Continue processing - don't let one error stop the queue

    async def start(self) -> None:
        """Start the background writer task."""
        if self.is_running():
            logger.warning(f"[{self.name}] Writer task already running")
            return

        self._queue = asyncio.Queue()
        self._shutdown_event = asyncio.Event()
        self._task = asyncio.create_task(self._writer_loop())

    async def stop(self, timeout: float = 10.0) -> None:
        """
        Stop the background writer task, draining pending writes first.

        Args:
            timeout: Maximum time to wait for pending writes to complete
        """
        if self._task is None:
            return

        self._shutdown_event.set()
        self._queue.put_nowait(None)

        try:
            await asyncio.wait_for(self._task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"[{self.name}] Write queue didn't stop within {timeout}s, cancelling...")
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self._task = None
        self._queue = None
        self._shutdown_event = None
        logger.info(f"[{self.name}] Write queue stopped")

    def submit(self, factory: WriteFactory) -> Optional[asyncio.Future]:
        """
        Queue a write without waiting for it.

        Returns:
            Future for the result, or None when the queue is not running
        """
        if self._queue is None or self._shutdown_event.is_set():
            return None

        op = WriteOperation(factory)
        self._queue.put_nowait(op)
        # Failures are logged by the writer loop; mark them retrieved
        op.future.add_done_callback(lambda f: f.cancelled() or f.exception())
        return op.future

    async def enqueue(self, factory: WriteFactory) -> T:
        """
        Queue a write and wait for its result.

        Falls back to executing directly when the queue is not running, so
        callers work the same during tests or after a failed start.

        Raises:
            Any exception raised by the operation
        """
        future = self.submit(factory)
        if future is None:
            logger.debug(f"[{self.name}] Write queue not running, executing directly")
            return await factory()
        return await future

    async def join(self) -> None:
        """Wait until every queued write has been processed."""
        if self._queue is not None:
            await self._queue.join()

    def is_running(self) -> bool:
        """Check if the writer task is running."""
        return self._task is not None and not self._task.done()

    def get_queue_size(self) -> int:
        """Get the current number of pending writes."""
        if self._queue is None:
            return 0
        return self._queue.qsize()
