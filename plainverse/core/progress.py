"""
Throughput and ETA tracking for a transform run.
"""
import logging
from time import perf_counter
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Counts processed verses against the number a run intends to process.

    Args:
        total: Verses the run will process
        clock: Monotonic time source in seconds (default: perf_counter)
    """

    def __init__(self, total: int = 0, clock: Callable[[], float] = perf_counter):
        self.total = total
        self.processed = 0
        self.skipped = 0
        self.failed = 0
        self._clock = clock
        self.start_time: Optional[float] = None

    def start(self, total: Optional[int] = None) -> None:
        if total is not None:
            self.total = total
        self.processed = 0
        self.skipped = 0
        self.failed = 0
        self.start_time = self._clock()

    def record(self, failed: bool = False) -> None:
        """Count one processed verse"""
        if self.start_time is None:
            self.start_time = self._clock()
        self.processed += 1
        if failed:
            self.failed += 1

    def record_skip(self) -> None:
        self.skipped += 1

    @property
    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return max(self._clock() - self.start_time, 0.0)

    @property
    def rate(self) -> float:
        """Processed verses per second"""
        elapsed = self.elapsed
        if elapsed <= 0:
            return 0.0
        return self.processed / elapsed

    @property
    def remaining(self) -> int:
        return max(self.total - self.processed, 0)

    @property
    def remaining_seconds(self) -> Optional[float]:
        """Estimated seconds left, or None before a rate is known"""
        rate = self.rate
        if rate <= 0:
            return None
        return self.remaining / rate

    def format_status(self, label: str = "") -> str:
        eta = self.remaining_seconds
        eta_text = f"~{round(eta)}s remaining" if eta is not None else "estimating..."
        prefix = f"[{self.processed}/{self.total}]"
        if label:
            prefix += f" {label}"
        return f"{prefix} - {self.rate:.1f} verses/sec, {eta_text}"
