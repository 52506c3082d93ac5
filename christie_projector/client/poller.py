# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Periodic projector status poller.

Opens a fresh StatusQuerySession on a fixed interval to keep the cached power
and input state current. Poll failures are logged and otherwise ignored; the
next cycle runs on schedule.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..constants import POLL_INTERVAL
from ..pkg_logging import logger

from .client_config import ChristieProjectorConfig
from .device_state import DeviceState
from .session import StatusQuerySession

class StatePoller:
    """Polls projector status every interval_secs seconds."""

    config: ChristieProjectorConfig
    on_status: Callable[[DeviceState], None]
    interval_secs: float
    session: Optional[StatusQuerySession] = None
    """The in-flight poll session, if any. There is never more than one."""

    timer_task: Optional[asyncio.Task[None]] = None
    destroyed: bool = False
    _cycle_tasks: Set[asyncio.Task[Optional[DeviceState]]]

    def __init__(
            self,
            config: ChristieProjectorConfig,
            on_status: Callable[[DeviceState], None],
            interval_secs: float=POLL_INTERVAL,
          ) -> None:
        self.config = config
        self.on_status = on_status
        self.interval_secs = interval_secs
        self._cycle_tasks = set()

    @property
    def is_running(self) -> bool:
        return self.timer_task is not None and not self.timer_task.done()

    @property
    def is_idle(self) -> bool:
        """True if the timer is stopped and no poll cycle is in flight."""
        return not self.is_running and len(self._cycle_tasks) == 0

    def start(self) -> None:
        """Starts (or restarts) the timer. The first cycle begins immediately."""
        self.stop()
        logger.debug(f"{self}: Starting")
        self.timer_task = asyncio.ensure_future(self._run_timer())

    def stop(self) -> None:
        """Stops the timer. A poll session already in flight is left to finish."""
        if self.timer_task is not None:
            logger.debug(f"{self}: Stopping")
            self.timer_task.cancel()
            self.timer_task = None

    def destroy(self) -> None:
        """Stops the timer and forcibly closes any in-flight poll session.

        Cycles that have not yet opened their session will not open one.
        """
        self.destroyed = True
        self.stop()
        if self.session is not None:
            self.session.destroy()
            self.session = None

    async def _run_timer(self) -> None:
        while True:
            self.begin_cycle()
            await asyncio.sleep(self.interval_secs)

    def begin_cycle(self) -> asyncio.Task[Optional[DeviceState]]:
        """Starts one poll cycle in the background.

        If the previous cycle's session is still open, it is destroyed first, so
        cycles never overlap and a stalled session lasts at most one interval.
        """
        if self.session is not None and not self.session.final_status.done():
            logger.debug(f"{self}: Previous poll still in flight; abandoning {self.session}")
            self.session.destroy()
        task = asyncio.ensure_future(self.poll_once())
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_tasks.discard)
        return task

    async def poll_once(self) -> Optional[DeviceState]:
        """Runs one poll cycle to completion.

        Returns the state read, or None if no host is configured or the poll failed
        or was abandoned. on_status is called before returning if the poll succeeded.
        """
        if self.destroyed:
            return None
        if not self.config.has_host:
            logger.debug(f"{self}: No host configured; skipping poll")
            return None
        session = StatusQuerySession(self.config, on_status=self.on_status)
        self.session = session
        try:
            await session.run()
        except Exception as e:
            logger.warning(f"{self}: Status poll failed: {e}")
            return None
        finally:
            if self.session is session:
                self.session = None
        if not session.is_complete:
            return None
        return session.device_state

    def __str__(self) -> str:
        return f"StatePoller({self.config.host}:{self.config.port}, every {self.interval_secs}s)"

    def __repr__(self) -> str:
        return str(self)
