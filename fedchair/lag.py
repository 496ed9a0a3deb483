"""Policy lag queue: the rate in effect each turn, read back with a fixed lookback."""

from collections import deque
from typing import Iterator, NamedTuple, Optional


class LagEntry(NamedTuple):
    rate: float
    period: int


class PolicyLagQueue:
    """Append-only record of effective rates.

    Grows for the whole session unless `maxlen` is given, in which case the
    oldest entries are dropped. `maxlen` must leave room for the lookback the
    caller uses.
    """

    def __init__(self, maxlen: Optional[int] = None):
        self._entries = deque(maxlen=maxlen)

    def seed(self, rate: float, count: int, first_period: int = 0) -> None:
        for i in range(count):
            self.push(rate, first_period + i)

    def push(self, rate: float, period: int) -> None:
        self._entries.append(LagEntry(float(rate), period))

    def lookback(self, n: int, fallback: float) -> float:
        """Rate stored `n` entries before the tail, or `fallback` if too short."""
        if n < 0:
            raise ValueError("lookback must be non-negative")
        if len(self._entries) < n + 1:
            return fallback
        return self._entries[-1 - n].rate

    @property
    def latest(self) -> Optional[LagEntry]:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LagEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"PolicyLagQueue(len={len(self)}, latest={self.latest})"
