"""
Request/response channel to the background worker.

Imports of large exports must not block the caller's event loop, so every
request runs on a worker thread. The channel:

- assigns each request a unique correlation id
- resolves the caller's pending request when its response arrives
- rejects every pending request if the background context breaks
- rejects every pending request immediately on terminate()

There are no timeouts or partial results: a request completes with its full
payload or fails.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from concurrent.futures import BrokenExecutor, ThreadPoolExecutor
from functools import partial
from typing import Any, Protocol

from bagofholding.config import settings
from bagofholding.models.failure import FailureKind, KnownError
from bagofholding.worker.messages import RESPONSE_KINDS, WorkerRequest, WorkerResponse

logger = logging.getLogger(__name__)


class RequestHandler(Protocol):
    """Anything that can execute a worker request in the background."""

    def handle(self, request: Any) -> Any: ...


class WorkerTerminatedError(KnownError):
    """The channel was terminated while (or before) the request was outstanding."""

    def __init__(self, request_id: str | None = None):
        super().__init__(
            kind=FailureKind.TRANSPORT_FAILURE,
            message="Worker terminated",
            status_code=503,
            request_id=request_id,
        )


class WorkerCrashedError(KnownError):
    """The background context failed; every outstanding request fails with it."""

    def __init__(self, request_id: str | None, cause: BaseException):
        self.cause = cause
        super().__init__(
            kind=FailureKind.TRANSPORT_FAILURE,
            message=f"Worker error: {cause}",
            detail=type(cause).__name__,
            status_code=503,
            request_id=request_id,
        )


class WorkerRequestError(Exception):
    """A handler failed for a reason the worker does not classify."""

    def __init__(self, request_id: str, cause: BaseException):
        self.request_id = request_id
        self.cause = cause
        super().__init__(f"Request {request_id} failed: {cause}")


class WorkerRPC:
    """
    Promise-style front end over a thread pool running one RequestHandler.

    Usage:
        async with WorkerRPC(HelvaultWorker()) as rpc:
            response = await rpc.call(LoadHelvaultRequest(data=data))
    """

    def __init__(
        self,
        handler: RequestHandler,
        max_workers: int | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._handler = handler
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers or settings.worker_threads,
            thread_name_prefix="helvault-worker",
        )
        self._pending: dict[str, asyncio.Future[WorkerResponse]] = {}
        self._terminated = False

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def terminated(self) -> bool:
        return self._terminated

    async def call(self, request: WorkerRequest) -> WorkerResponse:
        """
        Send a request to the worker and wait for its response.

        Raises:
            KnownError: Classified handler failures, tagged with the request id
            WorkerRequestError: Unclassified handler failures
            WorkerTerminatedError: If the channel is or becomes terminated
            WorkerCrashedError: If the background context breaks
        """
        request_id = self._generate_id()
        if self._terminated:
            raise WorkerTerminatedError(request_id)

        loop = asyncio.get_running_loop()
        pending: asyncio.Future[WorkerResponse] = loop.create_future()
        self._pending[request_id] = pending

        try:
            background = loop.run_in_executor(self._executor, self._handler.handle, request)
        except RuntimeError as e:
            # Executor already shut down underneath us
            self._pending.pop(request_id, None)
            raise WorkerCrashedError(request_id, e) from e

        kind = getattr(request, "kind", type(request).__name__)
        background.add_done_callback(partial(self._handle_result, request_id, kind))

        try:
            return await pending
        finally:
            self._pending.pop(request_id, None)

    def _handle_result(self, request_id: str, kind: str, background: asyncio.Future[Any]) -> None:
        pending = self._pending.pop(request_id, None)

        if pending is None or pending.done():
            # Caller cancelled, or the request was already rejected
            logger.debug("Dropping response for request %s", request_id)
            return

        if background.cancelled():
            pending.set_exception(WorkerTerminatedError(request_id))
            return

        error = background.exception()
        if error is None:
            pending.set_result(
                WorkerResponse(
                    id=request_id,
                    kind=RESPONSE_KINDS.get(kind, kind),
                    payload=background.result(),
                )
            )
            return

        if isinstance(error, BrokenExecutor):
            logger.error("Worker error: %s", error)
            crash = WorkerCrashedError(request_id, error)
            pending.set_exception(crash)
            self._reject_all(lambda rid: WorkerCrashedError(rid, error))
            return

        if isinstance(error, KnownError):
            error.request_id = request_id
            pending.set_exception(error)
        else:
            logger.error(
                "worker_request_failed",
                extra={"request_id": request_id, "kind": kind, "error": repr(error)},
            )
            pending.set_exception(WorkerRequestError(request_id, error))

    def _reject_all(self, make_error: Callable[[str], KnownError]) -> None:
        for request_id, pending in list(self._pending.items()):
            if not pending.done():
                pending.set_exception(make_error(request_id))
            self._pending.pop(request_id, None)

    def terminate(self) -> None:
        """
        Stop the worker.

        Every outstanding request fails with WorkerTerminatedError and later
        calls fail the same way. Handlers already running are not waited for.
        """
        if self._terminated:
            return

        self._terminated = True
        self._reject_all(WorkerTerminatedError)
        self._executor.shutdown(wait=False, cancel_futures=True)

    async def __aenter__(self) -> "WorkerRPC":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.terminate()

    def _generate_id(self) -> str:
        return uuid.uuid4().hex
