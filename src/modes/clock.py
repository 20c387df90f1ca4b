"""
Session clock.

Counts down when a time limit is set, otherwise counts up. The clock is
advanced by whoever owns the timer (one tick per second). A tick that
arrives after the clock has stopped means the session already ended: it
changes nothing and is not an error.
"""

from __future__ import annotations

WARNING_SECONDS = 10


class SessionClock:
    """Cooperative one-second clock."""

    def __init__(self, time_limit: int = 0):
        if time_limit < 0:
            raise ValueError("time_limit must be non-negative")
        self.time_limit = time_limit
        self.elapsed = 0
        self.running = True

    @property
    def counts_down(self) -> bool:
        return self.time_limit > 0

    @property
    def remaining(self) -> int | None:
        """Seconds left, or None for an open-ended clock."""
        if not self.counts_down:
            return None
        return max(0, self.time_limit - self.elapsed)

    @property
    def expired(self) -> bool:
        return self.counts_down and self.elapsed >= self.time_limit

    @property
    def display_seconds(self) -> int:
        """What a timer label shows: remaining when counting down, elapsed otherwise."""
        remaining = self.remaining
        return self.elapsed if remaining is None else remaining

    @property
    def in_warning_zone(self) -> bool:
        """Last WARNING_SECONDS of a countdown."""
        remaining = self.remaining
        return remaining is not None and 0 < remaining <= WARNING_SECONDS

    def tick(self) -> int:
        """
        Advance one second.

        Returns:
            display_seconds after the tick
        """
        if not self.running:
            return self.display_seconds
        self.elapsed += 1
        if self.expired:
            self.running = False
        return self.display_seconds

    def advance(self, seconds: int) -> int:
        """Apply several ticks at once (wall-clock catch-up)."""
        for _ in range(max(0, seconds)):
            if not self.running:
                break
            self.tick()
        return self.display_seconds

    def stop(self) -> None:
        self.running = False
