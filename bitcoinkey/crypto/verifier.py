"""Signature verification offloaded to worker threads."""

import asyncio
import functools
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Set

from coincurve import PublicKey as SecpPublicKey

from ..exceptions import BitcoinKeyError, PreconditionError
from ..types.common import VerifyResult
from ..utils.validation import ensure_bytes, validate_digest
from .signature import verify_digest

if TYPE_CHECKING:
    from .keys import Key

__all__ = ["SignatureRequest", "SignatureVerifier", "VerifyCallback"]

logger = logging.getLogger(__name__)

VerifyCallback = Callable[[Optional[BaseException], Optional[VerifyResult]], Any]


@dataclass(eq=False)
class SignatureRequest:
    """
    One in-flight verification.

    Holds the key and private copies of the input buffers from submission
    until the callback has returned.
    """

    key: Optional["Key"]
    digest: Any
    signature: Any
    callback: Optional[VerifyCallback] = None
    public_key: Optional[SecpPublicKey] = None
    future: Optional["asyncio.Future[VerifyResult]"] = None
    completed: bool = False

    def prepare(self) -> None:
        """
        Validate inputs and snapshot what the worker needs.

        Raises:
            PreconditionError: If the key has no public point
            InvalidInputError: If digest or signature are malformed
        """
        if self.key is None or not self.key.has_public:
            raise PreconditionError("Key does not have a public key set")
        self.digest = validate_digest(self.digest)
        self.signature = ensure_bytes(self.signature, "sig")
        self.public_key = self.key._public_key

    def job(self) -> Callable[[], VerifyResult]:
        """Worker-side call, bound to the prepared inputs."""
        return functools.partial(verify_digest, self.public_key, self.digest, self.signature)

    def release(self) -> None:
        self.key = None
        self.public_key = None
        self.digest = None
        self.signature = None
        self.callback = None


class SignatureVerifier:
    """
    Runs ECDSA verification off the event loop.

    By default work goes to the running loop's default executor. Pass
    max_workers to give the verifier its own thread pool, or executor to
    share an existing one. Only verification is offloaded; signing and key
    handling stay on the caller's thread.

    A key must not be mutated while a verification on it is pending.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        """
        Initialize verifier.

        Args:
            max_workers: Size of an owned thread pool
            executor: Existing executor to use instead

        Raises:
            ValueError: If both max_workers and executor are given
        """
        if max_workers is not None and executor is not None:
            raise ValueError("Pass either max_workers or executor, not both")

        self._owns_executor = max_workers is not None
        if max_workers is not None:
            executor = ThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix="bitcoinkey-verify",
            )
        self._executor = executor
        self._pending: Set[SignatureRequest] = set()
        self._closed = False
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def pending(self) -> int:
        """Number of submitted requests whose completion has not run yet."""
        return len(self._pending)

    @property
    def closed(self) -> bool:
        return self._closed

    async def verify(self, key: "Key", digest: Any, signature: Any) -> VerifyResult:
        """
        Verify a signature on a worker thread.

        Args:
            key: Key holding a public point
            digest: 32-byte message hash
            signature: DER-encoded signature

        Returns:
            VerifyResult, identical to the synchronous verify

        Raises:
            PreconditionError: If key has no public point
            InvalidInputError: If digest or signature are malformed
        """
        self._check_open()
        request = SignatureRequest(key=key, digest=digest, signature=signature)
        request.prepare()

        loop = asyncio.get_running_loop()
        self._pending.add(request)
        try:
            request.future = loop.run_in_executor(self._executor, request.job())
            result = await request.future
        finally:
            self._pending.discard(request)
            request.release()

        self._logger.debug("Offloaded verification finished: %s", result.name)
        return result

    def submit(
        self,
        key: "Key",
        digest: Any,
        signature: Any,
        callback: VerifyCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> "asyncio.Future[VerifyResult]":
        """
        Queue a verification and report through a callback.

        The callback runs exactly once, on the event loop thread, after the
        worker finishes, as callback(error, result) with one of the two set.
        Input and precondition errors, and an executor that refuses the job,
        are delivered the same way rather than raised here.

        Args:
            key: Key holding a public point
            digest: 32-byte message hash
            signature: DER-encoded signature
            callback: Completion callback
            loop: Event loop to complete on (default: the running loop)

        Returns:
            Future resolving to the VerifyResult
        """
        self._check_open()
        loop = loop or asyncio.get_running_loop()
        request = SignatureRequest(
            key=key, digest=digest, signature=signature, callback=callback
        )
        self._pending.add(request)

        try:
            request.prepare()
        except BitcoinKeyError as e:
            self._logger.warning("Rejected verification request: %s", e)
            future = self._failed_future(loop, e)
        else:
            try:
                future = loop.run_in_executor(self._executor, request.job())
            except Exception as e:
                # Executor refused the job, e.g. it was already shut down
                self._logger.warning("Could not schedule verification: %s", e)
                future = self._failed_future(loop, e)

        request.future = future
        future.add_done_callback(functools.partial(self._complete, request))
        return future

    @staticmethod
    def _failed_future(
        loop: asyncio.AbstractEventLoop, error: BaseException
    ) -> "asyncio.Future[VerifyResult]":
        future = loop.create_future()
        future.set_exception(error)
        return future

    def _complete(self, request: SignatureRequest, future: "asyncio.Future[VerifyResult]") -> None:
        if request.completed:
            return
        request.completed = True

        error: Optional[BaseException] = None
        result: Optional[VerifyResult] = None
        if future.cancelled():
            error = asyncio.CancelledError()
        else:
            error = future.exception()
            if error is None:
                result = future.result()

        if result is not None:
            self._logger.debug("Offloaded verification finished: %s", result.name)

        callback = request.callback
        try:
            if callback is not None:
                callback(error, result)
        finally:
            self._pending.discard(request)
            request.release()

    async def drain(self) -> None:
        """Wait until every submitted request has completed."""
        futures = [r.future for r in list(self._pending) if r.future is not None]
        if futures:
            await asyncio.gather(*futures, return_exceptions=True)
        # Completions run on later loop iterations than the futures resolve
        while any(r.future is not None for r in self._pending):
            await asyncio.sleep(0)
        # Requests that never got a future cannot complete; drop them
        for request in list(self._pending):
            self._pending.discard(request)
            request.release()

    def close(self, wait: bool = True) -> None:
        """Stop accepting work and shut down an owned executor."""
        self._closed = True
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=wait)
            logger.debug("Shut down verification executor")

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("SignatureVerifier is closed")

    async def __aenter__(self) -> "SignatureVerifier":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.drain()
        self.close(wait=False)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(pending={self.pending}, closed={self._closed})"
