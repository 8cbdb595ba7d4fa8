"""Generation scheduler -- supersede-on-change background generation.

Every change to the glyph or the options submits a new request.  Requests
get monotonically increasing sequence numbers and run on a bounded worker
pool; the caller's thread never waits.

Delivery rule:
    A finished request is delivered only when its sequence number is higher
    than every sequence delivered before it.  Older results that finish
    after a newer one has been delivered are dropped.  Delivered sequences
    are therefore strictly increasing, and the last submitted request is
    always delivered.

There is no preemptive cancellation: stale work runs to completion and is
discarded at the single delivery point.  Workers share no mutable state;
the sequence counters are the only shared state and are guarded by one
lock.  User callbacks never run while that lock is held.  Finished
requests are handed to a single delivery thread, which checks the sequence
and calls ``on_result``; a slow callback therefore delays later deliveries
but never ``submit``, and a callback may submit again.

States::

    IDLE -> GENERATING(seq) -> IDLE                 (delivered)
                            -> GENERATING(seq')     (superseded, seq < seq')
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from fontcode.sourcecode.errors import CodegenError
from fontcode.sourcecode.formats import Format
from fontcode.sourcecode.generator import GlyphSource, generate_source
from fontcode.sourcecode.options import SourceCodeOptions

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 2


# ---------------------------------------------------------------------------
# Request / result
# ---------------------------------------------------------------------------


class SchedulerState(Enum):
    """Whether any submitted request is still undelivered."""

    IDLE = auto()
    GENERATING = auto()


@dataclass(frozen=True)
class GenerationRequest:
    """Immutable snapshot of one generation.

    Parameters
    ----------
    sequence : int
        Submission order, starting at 1.
    source : Bitmap | Face
        Glyph snapshot.
    options : SourceCodeOptions
        Options snapshot.
    format : Format
        Target format.
    array_name : str
        Array identifier.
    """

    sequence: int
    source: GlyphSource
    options: SourceCodeOptions
    format: Format
    array_name: str


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one request: rendered text or the error that stopped it."""

    sequence: int
    text: str | None = None
    error: CodegenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_generation(request: GenerationRequest) -> GenerationResult:
    """Worker body: generate and capture every failure as a result.

    Never raises.  ``CodegenError`` is passed through as the result's
    error; anything else is logged and wrapped in a ``CodegenError``.
    """
    try:
        text = generate_source(
            request.source,
            request.options,
            request.format,
            request.array_name,
        )
    except CodegenError as exc:
        logger.info("Generation #%d rejected: %s", request.sequence, exc)
        return GenerationResult(sequence=request.sequence, error=exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Generation #%d failed", request.sequence)
        error = CodegenError(f"internal generation failure: {exc}")
        error.__cause__ = exc
        return GenerationResult(sequence=request.sequence, error=error)
    return GenerationResult(sequence=request.sequence, text=text)


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


class GenerationScheduler:
    """Serialize and supersede generation requests.

    Parameters
    ----------
    on_result : callable
        Invoked once per delivered request with its ``GenerationResult``.
        Runs on the scheduler's single delivery thread, never inside
        ``submit`` and never under the scheduler lock, so calls never
        overlap or reorder.
    on_started : callable, optional
        Invoked synchronously inside ``submit`` (outside the lock) with the
        new request, e.g. to show a pending indicator.
    max_workers : int
        Size of the internal thread pool.  Ignored with *executor*.
    executor : Executor, optional
        Externally owned executor for generation work.  The scheduler does
        not shut it down.
    delivery_executor : Executor, optional
        Externally owned executor that runs deliveries.  Must run submitted
        calls one at a time in submission order.  Defaults to a private
        single-thread pool.

    Examples
    --------
    >>> with GenerationScheduler(on_result=print) as scheduler:
    ...     scheduler.submit(bitmap, SourceCodeOptions(), "c", "glyph")
    """

    def __init__(
        self,
        on_result: Callable[[GenerationResult], None],
        on_started: Callable[[GenerationRequest], None] | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        executor: Executor | None = None,
        delivery_executor: Executor | None = None,
    ) -> None:
        if executor is None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._on_result = on_result
        self._on_started = on_started
        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="fontcode-gen",
        )
        self._owns_delivery = delivery_executor is None
        self._delivery: Executor = delivery_executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="fontcode-deliver",
        )
        self._lock = threading.Lock()
        self._latest_seq = 0
        self._delivered_seq = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def latest_sequence(self) -> int:
        """Sequence number of the most recent submission (0 before any)."""
        with self._lock:
            return self._latest_seq

    @property
    def delivered_sequence(self) -> int:
        """Highest sequence number delivered so far (0 before any)."""
        with self._lock:
            return self._delivered_seq

    @property
    def state(self) -> SchedulerState:
        with self._lock:
            if self._delivered_seq < self._latest_seq:
                return SchedulerState.GENERATING
            return SchedulerState.IDLE

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(
        self,
        source: GlyphSource,
        options: SourceCodeOptions,
        fmt: Format | str,
        array_name: str,
    ) -> int:
        """Queue a generation and return its sequence number immediately.

        Raises
        ------
        RuntimeError
            If the scheduler has been shut down.
        """
        fmt = Format.from_key(fmt)
        with self._lock:
            if self._closed:
                raise RuntimeError("GenerationScheduler is shut down")
            self._latest_seq += 1
            request = GenerationRequest(
                sequence=self._latest_seq,
                source=source,
                options=options,
                format=fmt,
                array_name=array_name,
            )
        logger.debug(
            "Submitting generation #%d (%s, %r)",
            request.sequence, fmt.identifier, array_name,
        )
        if self._on_started is not None:
            try:
                self._on_started(request)
            except Exception as exc:  # noqa: BLE001
                logger.error("Generation-started callback error: %s", exc)
        future = self._executor.submit(run_generation, request)
        # May run at once on this thread if the work already finished;
        # _on_done only hands the result to the delivery thread.
        future.add_done_callback(
            lambda f, req=request: self._on_done(req, f)
        )
        return request.sequence

    # ------------------------------------------------------------------
    # Delivery (single serialization point)
    # ------------------------------------------------------------------

    def _on_done(self, request: GenerationRequest, future: Future) -> None:
        if future.cancelled():
            logger.debug("Generation #%d cancelled", request.sequence)
            return
        exc = future.exception()
        if exc is not None:
            error = CodegenError(f"internal generation failure: {exc}")
            error.__cause__ = exc
            result = GenerationResult(sequence=request.sequence, error=error)
        else:
            result = future.result()
        try:
            self._delivery.submit(self._deliver, result)
        except RuntimeError:
            logger.debug(
                "Generation #%d finished after shutdown, not delivered",
                request.sequence,
            )

    def _deliver(self, result: GenerationResult) -> None:
        with self._lock:
            if result.sequence <= self._delivered_seq:
                logger.debug(
                    "Dropping superseded generation #%d (delivered #%d)",
                    result.sequence, self._delivered_seq,
                )
                return
            self._delivered_seq = result.sequence
        try:
            self._on_result(result)
        except Exception as exc:  # noqa: BLE001
            logger.error("Generation result callback error: %s", exc)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting requests; optionally wait for running work.

        With *wait*, work already running is finished and delivered before
        this returns.
        """
        with self._lock:
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
        if self._owns_delivery:
            self._delivery.shutdown(wait=wait)

    def __enter__(self) -> GenerationScheduler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)
