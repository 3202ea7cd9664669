"""Shared service-layer helper functions."""

from __future__ import annotations

import time


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000
