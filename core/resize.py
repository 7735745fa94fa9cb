"""
Debounced re-layout on container resize.

The engine never observes the viewport itself. The host forwards every resize
notification to a ResizeCoordinator, which waits for a quiet period before
recomputing and hands the fresh LayoutResult to the host's callback. Only one
computation runs at a time; a run that fires while another is in flight is
skipped, and the pending dimensions get a fresh quiet period once the run in
flight finishes.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Optional

from core.engine import LayoutEngine
from models import LayoutResult

logger = logging.getLogger(__name__)

LayoutCallback = Callable[[LayoutResult], None]


@dataclass(frozen=True)
class ResizeHistoryEntry:
    timestamp: float
    container_width: float
    container_height: float
    card_count: int
    duration_ms: float
    success: bool
    error: Optional[str] = None


class ResizeCoordinator:
    """
    Debounces resize notifications into layout computations.

    Create one per rendering surface when the app starts and call
    ``dispose()`` at teardown.
    """

    def __init__(
        self,
        engine: LayoutEngine,
        on_layout: LayoutCallback,
        debounce_ms: Optional[float] = None,
        max_history: int = 50,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        """
        Args:
            engine: Engine used for every recomputation
            on_layout: Called with each new LayoutResult
            debounce_ms: Quiet period before recomputing; defaults to the
                engine config's ``debounce_ms``
            max_history: Number of runs kept in the history
            timer_factory: Builds the debounce timer, ``threading.Timer`` signature
        """
        self.engine = engine
        self.on_layout = on_layout
        self.debounce_ms = engine.config.debounce_ms if debounce_ms is None else debounce_ms
        self._timer_factory = timer_factory

        self._state_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[tuple[int, float, float]] = None
        self._disposed = False
        self._rerun_requested = False

        self._history: deque = deque(maxlen=max_history)
        self._metrics = {
            "resize_count": 0,
            "debounce_hits": 0,
            "skipped_in_flight": 0,
            "total_duration_ms": 0.0,
            "last_resize_time": 0.0,
        }

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def history(self) -> list[ResizeHistoryEntry]:
        with self._state_lock:
            return list(self._history)

    def notify_resize(self, card_count: int, container_width: float, container_height: float) -> None:
        """Record new container dimensions and restart the quiet period"""
        with self._state_lock:
            if self._disposed:
                logger.debug("Resize notification after dispose ignored")
                return

            self._pending = (card_count, container_width, container_height)
            if self._timer is not None:
                self._metrics["debounce_hits"] += 1
            self._start_timer()

    def flush(self) -> Optional[LayoutResult]:
        """Run a pending recomputation now instead of waiting for the timer"""
        with self._state_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        return self._run_pending()

    def _start_timer(self) -> None:
        # caller holds _state_lock
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._timer_factory(self.debounce_ms / 1000.0, self._run_pending)
        self._timer.daemon = True
        self._timer.start()

    def _run_pending(self) -> Optional[LayoutResult]:
        if not self._run_lock.acquire(blocking=False):
            with self._state_lock:
                self._metrics["skipped_in_flight"] += 1
                self._rerun_requested = True
            logger.warning("Layout computation already in progress, skipping")
            # the run in flight may have finished before the request was recorded
            if not self._run_lock.locked():
                self._reschedule_skipped()
            return None

        try:
            with self._state_lock:
                pending = self._pending
                self._pending = None
                self._timer = None
            if pending is None:
                return None
            return self._execute(*pending)
        finally:
            self._run_lock.release()
            self._reschedule_skipped()

    def _reschedule_skipped(self) -> None:
        """Restart the quiet period for dimensions whose run was skipped"""
        with self._state_lock:
            if not self._rerun_requested:
                return
            self._rerun_requested = False
            if self._pending is None or self._disposed:
                return
            logger.debug(f"Rescheduling skipped layout for {self._pending}")
            self._start_timer()

    def _execute(
        self, card_count: int, container_width: float, container_height: float
    ) -> Optional[LayoutResult]:
        start_time = time.perf_counter()
        result = None
        error = None

        try:
            result = self.engine.compute_for_viewport(card_count, container_width, container_height)
            self.on_layout(result)
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            logger.error(f"Resize layout callback failed: {error}")

        duration_ms = (time.perf_counter() - start_time) * 1000
        with self._state_lock:
            self._metrics["resize_count"] += 1
            self._metrics["total_duration_ms"] += duration_ms
            self._metrics["last_resize_time"] = time.time()
            self._history.append(
                ResizeHistoryEntry(
                    timestamp=time.time(),
                    container_width=container_width,
                    container_height=container_height,
                    card_count=card_count,
                    duration_ms=duration_ms,
                    success=error is None,
                    error=error,
                )
            )

        if duration_ms > self.engine.config.performance_budget_ms:
            logger.warning(f"Resize recomputation took {duration_ms:.1f} ms")
        return result

    def get_metrics(self) -> dict[str, Any]:
        with self._state_lock:
            metrics = dict(self._metrics)
            failures = sum(1 for entry in self._history if not entry.success)
        count = metrics["resize_count"]
        return {
            **metrics,
            "average_duration_ms": metrics["total_duration_ms"] / count if count else 0.0,
            "recent_failures": failures,
        }

    def dispose(self) -> None:
        """Cancel the pending timer and refuse further notifications"""
        with self._state_lock:
            self._disposed = True
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.debug("Resize coordinator disposed")
