"""Background solver worker.

Runs `StatOptimizer.optimize` off the caller's thread so an interactive front
end stays responsive. The game data is shipped to the worker once; every
request after that only carries the request.

Requests are numbered. When a newer request has been submitted by the time an
older one finishes, the older future resolves to None (last request wins) and
its error, if any, is dropped. If the background executor cannot be started
the worker logs a warning and solves on the calling thread from then on.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from typing import Callable, Optional

from .models import GameData, SolverResult, SolverSettings, SolveRequest
from .optimizer import StatOptimizer

ExecutorFactory = Callable[[], Executor]


class WorkerState(str, Enum):
    BACKGROUND = "background"
    FALLBACK = "fallback"
    CLOSED = "closed"


def _default_executor() -> Executor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="stat-solver")


class SolverWorker:
    """Asynchronous front for the optimizer with last-request-wins semantics."""

    def __init__(
        self,
        data: GameData,
        *,
        logger: Optional[logging.Logger] = None,
        settings: Optional[SolverSettings] = None,
        use_background: Optional[bool] = None,
        executor_factory: Optional[ExecutorFactory] = None,
    ) -> None:
        self.data = data
        self.logger = logger or logging.getLogger("stat_optimizer")
        self.settings = settings or SolverSettings()

        self._lock = threading.Lock()
        self._latest_id = 0
        self._executor: Optional[Executor] = None
        self._optimizer: Optional[StatOptimizer] = None
        self._state = WorkerState.FALLBACK

        if use_background is None:
            use_background = self.settings.use_background_worker
        if use_background:
            self._start_background(executor_factory or _default_executor)
        else:
            self.logger.info("ℹ️ Background worker disabled — solving on the calling thread.")
            self._optimizer = self._build_optimizer()

    # ---------------- Public API ----------------
    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def latest_request_id(self) -> int:
        return self._latest_id

    def submit(self, request: SolveRequest) -> "Future[Optional[SolverResult]]":
        """Queue a solve. The future yields None if a newer request superseded it.

        Invalid bounds raise ValueError here, before anything is queued.
        """
        if self._state is WorkerState.CLOSED:
            raise RuntimeError("SolverWorker is closed")
        request.bounds.validate()

        with self._lock:
            self._latest_id += 1
            request_id = self._latest_id

        outer: "Future[Optional[SolverResult]]" = Future()
        assert self._optimizer is not None
        if self._state is WorkerState.BACKGROUND:
            assert self._executor is not None
            inner = self._executor.submit(self._optimizer.optimize, request)
        else:
            inner = Future()
            try:
                inner.set_result(self._optimizer.optimize(request))
            except Exception as exc:
                inner.set_exception(exc)
        inner.add_done_callback(lambda done: self._settle(request_id, done, outer))
        return outer

    def solve(self, request: SolveRequest) -> Optional[SolverResult]:
        """Blocking submit."""
        return self.submit(request).result()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._state = WorkerState.CLOSED

    def __enter__(self) -> "SolverWorker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---------------- Internals ----------------
    def _build_optimizer(self) -> StatOptimizer:
        return StatOptimizer(self.data, logger=self.logger, settings=self.settings)

    def _start_background(self, factory: ExecutorFactory) -> None:
        executor: Optional[Executor] = None
        try:
            executor = factory()
            # Built on the worker so the data handle lives there.
            self._optimizer = executor.submit(self._build_optimizer).result()
        except Exception as exc:
            self.logger.warning(f"⚠️ Background worker unavailable ({exc}) — falling back to the calling thread.")
            if executor is not None:
                executor.shutdown(wait=False)
            self._optimizer = self._build_optimizer()
            self._state = WorkerState.FALLBACK
            return
        self._executor = executor
        self._state = WorkerState.BACKGROUND
        self.logger.debug("🧵 Background solver worker ready.")

    def _settle(self, request_id: int, done: Future, outer: Future) -> None:
        with self._lock:
            stale = request_id != self._latest_id
        if stale:
            self.logger.debug(f"⏭️ Dropping result of superseded request #{request_id}")
            outer.set_result(None)
            return
        exc = done.exception()
        if exc is not None:
            outer.set_exception(exc)
        else:
            outer.set_result(done.result())
