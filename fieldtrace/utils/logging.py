# fieldtrace/utils/logging.py
"""
Logging utilities: timers, memory monitoring, and verbose messages.

Lightweight performance monitoring for the command line and for long
sampling passes. Uses Python's built-in facilities plus psutil.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
import time
import gc
from contextlib import contextmanager

try:
    import psutil
    PSUTIL_AVAILABLE = True
except Exception:
    PSUTIL_AVAILABLE = False

from .config import get_config


def log(message: str) -> None:
    """Print a diagnostic message when the package is configured verbose."""
    if get_config().verbose:
        print(f"[fieldtrace] {message}")


class Timer:
    """
    Simple timer for performance monitoring.

    Can be used as a context manager or manually started/stopped.
    Tracks wall time and optional memory usage.
    """

    def __init__(self, name: str = "Timer", track_memory: bool = False, quiet: bool = False):
        self.name = name
        self.track_memory = track_memory
        self.quiet = quiet
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.start_memory: Optional[Dict[str, Any]] = None
        self.end_memory: Optional[Dict[str, Any]] = None

    def start(self) -> None:
        """Start the timer."""
        self.start_time = time.perf_counter()
        self.end_time = None
        if self.track_memory:
            self.start_memory = memory_info()

    def stop(self) -> float:
        """Stop the timer and return elapsed time in seconds."""
        if self.start_time is None:
            raise RuntimeError("Timer not started")
        self.end_time = time.perf_counter()
        if self.track_memory:
            self.end_memory = memory_info()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    @property
    def memory_delta(self) -> Optional[Dict[str, Any]]:
        """Get memory usage delta (if tracking enabled)."""
        if not self.track_memory or self.start_memory is None or self.end_memory is None:
            return None

        delta = {}
        for key in self.start_memory:
            if key in self.end_memory and isinstance(self.start_memory[key], (int, float)):
                delta[key] = self.end_memory[key] - self.start_memory[key]
        return delta

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
        if not self.quiet:
            self.report()

    def report(self) -> None:
        """Print a timing report."""
        print(f"{self.name}: {self.elapsed:.6f}s")
        delta = self.memory_delta
        if delta is not None and "rss_mb" in delta:
            print(f"  Memory delta: {delta['rss_mb']:.1f} MB")


@contextmanager
def timeit(name: str = "Operation", track_memory: bool = False):
    """
    Context manager for timing operations.

    Example
    -------
    >>> with timeit("Arrow layout"):
    ...     pass
    """
    timer = Timer(name, track_memory=track_memory)
    with timer:
        yield timer


def memory_info() -> Dict[str, Any]:
    """
    Get current process memory usage.

    Returns
    -------
    dict
        Memory info with keys like 'rss_mb', 'available_mb'
    """
    info: Dict[str, Any] = {}

    if PSUTIL_AVAILABLE:
        try:
            mem = psutil.Process().memory_info()
            info["rss_mb"] = mem.rss / 1024 / 1024
            info["vms_mb"] = mem.vms / 1024 / 1024

            vm = psutil.virtual_memory()
            info["available_mb"] = vm.available / 1024 / 1024
            info["percent_used"] = vm.percent
        except Exception:
            pass

    # Fallback: object count only
    if not info:
        gc.collect()
        info["objects_count"] = len(gc.get_objects())
        info["rss_mb"] = 0.0

    return info
