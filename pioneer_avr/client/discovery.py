# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Input discovery state machine.

At startup every candidate input id in the receiver model's table is probed
once. Each probe settles with either a discovered input or an explicit
"not found"; once every candidate has settled the device is ready. Readiness
is one-way for the lifetime of the client.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..exceptions import PioneerAvrError
from ..pkg_logging import logger

class DiscoveryPhase(Enum):
    IDLE = 0
    DISCOVERING = 1
    READY = 2

class DiscoveryProgress:
    settled: int
    expected: int

    def __init__(self, expected: int) -> None:
        self.settled = 0
        self.expected = expected

    @property
    def all_settled(self) -> bool:
        """True when every candidate has settled. Readiness itself is
           InputDiscovery.is_ready, which also depends on the phase."""
        return self.settled == self.expected

    def __str__(self) -> str:
        return f"{self.settled}/{self.expected}"

    def __repr__(self) -> str:
        return f"DiscoveryProgress({self})"

class InputDiscovery:
    """Tracks discovery progress and signals readiness exactly once."""
    candidate_ids: List[str]
    phase: DiscoveryPhase
    progress: DiscoveryProgress
    _ready_event: asyncio.Event

    def __init__(self, candidate_ids: Iterable[str]) -> None:
        self.candidate_ids = list(candidate_ids)
        self.phase = DiscoveryPhase.IDLE
        self.progress = DiscoveryProgress(len(self.candidate_ids))
        self._ready_event = asyncio.Event()

    @property
    def is_discovering(self) -> bool:
        return self.phase == DiscoveryPhase.DISCOVERING

    @property
    def is_ready(self) -> bool:
        return self.phase == DiscoveryPhase.READY

    def begin(self) -> None:
        """Transitions from IDLE to DISCOVERING.

        Discovery runs once per session; a second call raises PioneerAvrError
        rather than issuing duplicate probes.
        """
        if self.phase != DiscoveryPhase.IDLE:
            raise PioneerAvrError(f"Input discovery already started (phase={self.phase.name})")
        logger.debug(f"Discovering inputs: {self.candidate_ids}")
        self.phase = DiscoveryPhase.DISCOVERING
        if self.progress.all_settled:
            self._set_ready()

    def settle(self) -> bool:
        """Records one terminal probe outcome (discovered or not found).

        Only counts while DISCOVERING. Returns True if this settle made the
        device ready.
        """
        if self.phase != DiscoveryPhase.DISCOVERING:
            return False
        self.progress.settled += 1
        logger.debug(f"Input discovery progress: {self.progress}")
        if self.progress.all_settled:
            self._set_ready()
            return True
        return False

    def _set_ready(self) -> None:
        self.phase = DiscoveryPhase.READY
        logger.info(f"Input discovery complete ({self.progress}); receiver ready")
        self._ready_event.set()

    async def wait_ready(self, timeout: Optional[float]=None) -> None:
        """Waits until every candidate has settled.

        Raises asyncio.TimeoutError if timeout (seconds) expires first.
        """
        if timeout is None:
            await self._ready_event.wait()
        else:
            await asyncio.wait_for(self._ready_event.wait(), timeout)

    def __str__(self) -> str:
        return f"InputDiscovery(phase={self.phase.name}, progress={self.progress})"

    def __repr__(self) -> str:
        return str(self)
