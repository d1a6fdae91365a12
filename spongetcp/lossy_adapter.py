"""An adapter wrapper that drops segments at random."""

from __future__ import annotations

import random
from typing import Any, Optional

from .tcp_config import FdAdapterConfig
from .tcp_segment import TCPSegment


class LossyAdapter:
    """Passes reads and writes to another adapter, dropping some of them.

    The loss rates in the adapter's configuration are out of 65535; a rate
    of zero never drops.
    """

    def __init__(self, adapter: Any, rng: Optional[random.Random] = None) -> None:
        self._adapter = adapter
        self._rng = rng if rng is not None else random.Random()

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self._adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and self._rng.getrandbits(16) < loss

    def read(self) -> Optional[TCPSegment]:
        """Read from the wrapped adapter; None if it had nothing or the segment was dropped."""
        segment = self._adapter.read()
        if self._should_drop(False):
            return None
        return segment

    def write(self, seg: TCPSegment) -> None:
        """Write through the wrapped adapter unless the segment is dropped."""
        if self._should_drop(True):
            return
        self._adapter.write(seg)

    def set_listening(self, listening: bool) -> None:
        self._adapter.set_listening(listening)

    def config(self) -> FdAdapterConfig:
        """The wrapped adapter's configuration."""
        return self._adapter.config

    def tick(self, ms_since_last_tick: int) -> None:
        self._adapter.tick(ms_since_last_tick)