"""Connection idle timers and per-event occurrence statistics."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from ..constants import BURST_WINDOW_SECONDS, FREQUENCY_TABLE_CAP
from ..logs.logger import IRCLogger

# Positional handler arguments that get a frequency table; params is excluded.
TRACKED_FIELDS = ("origin", "origin_host", "target")


def bump_frequency(table: dict[str, int], key: str, cap: int) -> str | None:
    """Count ``key`` in a bounded frequency table.

    The table keeps insertion order; when a new key pushes it over ``cap``
    the oldest inserted key is evicted (FIFO, counting does not refresh a
    key's position). Returns the evicted key, if any.
    """
    table[key] = table.get(key, 0) + 1
    if len(table) > cap:
        oldest = next(iter(table))
        del table[oldest]
        return oldest
    return None


@dataclass
class EventStat:
    times: int
    interval: int
    last: float
    origin: dict[str, int] = field(default_factory=dict)
    origin_host: dict[str, int] = field(default_factory=dict)
    target: dict[str, int] = field(default_factory=dict)


@dataclass
class ConnectionStats:
    started: float
    rx_idle_since: float
    tx_idle_since: float
    events: dict[str, EventStat] = field(default_factory=dict)


class StatsTracker:
    """Owns the ConnectionStats of one connection.

    Idle durations are derived when a snapshot is taken; nothing is updated
    in the background.
    """

    def __init__(
        self,
        logger: IRCLogger | None = None,
        clock: Callable[[], float] = time.time,
        burst_window: float = BURST_WINDOW_SECONDS,
        table_cap: int = FREQUENCY_TABLE_CAP,
    ) -> None:
        self.logger = logger or IRCLogger()
        self.clock = clock
        self.burst_window = burst_window
        self.table_cap = table_cap
        self.stats = self._fresh()

    def _fresh(self) -> ConnectionStats:
        now = self.clock()
        return ConnectionStats(started=now, rx_idle_since=now, tx_idle_since=now)

    def reset(self) -> None:
        """Start a new session; called when a transport is opened."""
        self.stats = self._fresh()

    def record_transmit(self) -> None:
        self.stats.tx_idle_since = self.clock()

    def record_receive(self) -> None:
        self.stats.rx_idle_since = self.clock()

    def record_event(self, name: str, args: Sequence[str | None] = ()) -> EventStat:
        self.logger.log_event("stats", "event_update", level=5, event=name)
        now = self.clock()
        stat = self.stats.events.get(name)
        if stat is None:
            stat = EventStat(times=1, interval=1, last=now)
            self.stats.events[name] = stat
            return stat

        stat.times += 1
        if now - stat.last < self.burst_window:
            stat.interval += 1
        else:
            stat.interval = 0
        self.logger.log_event("stats", "interval", level=5, interval=stat.interval)

        for table_name, value in zip(TRACKED_FIELDS, args):
            if not value:
                continue
            table: dict[str, int] = getattr(stat, table_name)
            evicted = bump_frequency(table, value, self.table_cap)
            if evicted is not None:
                self.logger.log_event(
                    "stats", "drop_key", level=5, table=table_name, key=evicted
                )
        stat.last = now
        self.stats.events[name] = stat
        return stat

    def snapshot(self, label: str | None = None) -> Any:
        """Return the stats with derived idle durations.

        Labels: ``rx_idle``, ``rx_idle_since``, ``tx_idle``, ``tx_idle_since``,
        ``started``, ``running`` and ``events``. An unknown label gives None;
        no label gives the whole structure as a dict.
        """
        now = self.clock()
        data = asdict(self.stats)
        data["rx_idle"] = now - self.stats.rx_idle_since
        data["tx_idle"] = now - self.stats.tx_idle_since
        data["running"] = now - self.stats.started
        if label:
            return data.get(label)
        return data
