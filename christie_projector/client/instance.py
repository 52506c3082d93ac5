# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie Projector host instance.

The object the host application talks to. It holds the current configuration,
the cached device state, the active command session and the status poller.
"""

from __future__ import annotations

import asyncio
import logging

from ..internal_types import *
from ..exceptions import ChristieProjectorConfigError
from ..constants import LINGER_DELAY, POLL_INTERVAL
from ..pkg_logging import logger
from ..protocol import CommandCode, action_to_command_code

from .client_config import ChristieProjectorConfig
from .device_state import DeviceState
from .host import ProjectorHost, ConnectionStatus
from .session import ProjectorSession, CommandSession
from .poller import StatePoller
from .definitions import (
    POWER_STATE_FEEDBACK,
    INPUT_SOURCE_FEEDBACK,
    FEEDBACK_KINDS,
    get_config_fields,
    get_action_definitions,
    get_feedback_definitions,
    get_variable_definitions,
  )

ConfigLike = Union[ChristieProjectorConfig, Mapping[str, Any], None]

class ChristieProjectorInstance:
    """A single controlled projector, as seen by the host."""

    host: ProjectorHost
    config: ChristieProjectorConfig
    state: DeviceState
    session: Optional[CommandSession] = None
    """The most recent command session, while it is open."""

    poller: Optional[StatePoller] = None
    _retired_pollers: Set[StatePoller]
    """Replaced pollers whose last cycle may still be in flight."""

    poll_interval_secs: float
    linger_secs: float
    _tasks: Set[asyncio.Task[None]]

    def __init__(
            self,
            host: ProjectorHost,
            poll_interval_secs: float=POLL_INTERVAL,
            linger_secs: float=LINGER_DELAY,
          ) -> None:
        self.host = host
        self.config = ChristieProjectorConfig()
        self.state = DeviceState()
        self.poll_interval_secs = poll_interval_secs
        self.linger_secs = linger_secs
        self._tasks = set()
        self._retired_pollers = set()

    # Lifecycle hooks called by the host

    async def init(self, config: ConfigLike) -> None:
        """Called by the host once, when the instance is created."""
        if self.set_config(config):
            self.host.update_status(ConnectionStatus.OK)
        self.host.set_action_definitions(self.get_action_definitions())
        self.host.set_feedback_definitions(self.get_feedback_definitions())
        self.host.set_variable_definitions(self.get_variable_definitions())
        self.start_poller()

    async def config_updated(self, config: ConfigLike) -> None:
        """Called by the host whenever the user changes the configuration.

        Sessions already in flight are left to finish against the old configuration.
        """
        if self.set_config(config):
            self.start_poller()

    async def execute_action(self, action: Union[str, Mapping[str, Any]]) -> Optional[CommandSession]:
        """Called by the host when the user triggers an action.

        action is either the action identifier or a host action event dict with an
        "action" entry. Unknown actions are ignored. Returns the command session
        started, if any; the caller does not need to wait for it.
        """
        action_id = action if isinstance(action, str) else action.get('action')
        code = None if action_id is None else action_to_command_code(action_id)
        if code is None:
            logger.debug(f"{self}: Ignoring unknown action {action_id!r}")
            return None
        return self.send_command(code)

    async def destroy(self) -> None:
        """Called by the host when the instance is removed. Forcibly closes everything."""
        logger.debug(f"{self}: Destroying")
        if self.poller is not None:
            self.poller.destroy()
            self.poller = None
        for poller in self._retired_pollers:
            poller.destroy()
        self._retired_pollers.clear()
        if self.session is not None:
            self.session.destroy()
            self.session = None
        if len(self._tasks) > 0:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # Schema calls

    def get_config_fields(self) -> List[JsonableDict]:
        return get_config_fields()

    def get_action_definitions(self) -> Dict[str, JsonableDict]:
        return get_action_definitions()

    def get_feedback_definitions(self) -> Dict[str, JsonableDict]:
        return get_feedback_definitions()

    def get_variable_definitions(self) -> List[JsonableDict]:
        return get_variable_definitions()

    # Implementation

    def set_config(self, config: ConfigLike) -> bool:
        """Replaces the configuration. A malformed configuration is reported to the
           host and the previous configuration is kept.

           Returns True if the configuration was accepted."""
        try:
            if isinstance(config, ChristieProjectorConfig):
                new_config = config
            else:
                new_config = ChristieProjectorConfig.from_jsonable(config)
        except ChristieProjectorConfigError as e:
            self.log_user('error', f"Invalid configuration: {e}")
            self.host.update_status(ConnectionStatus.BAD_CONFIG, str(e))
            return False
        logger.debug(f"{self}: New configuration {new_config}")
        self.config = new_config
        return True

    def start_poller(self) -> None:
        """Replaces the poller with one using the current configuration.

        The old poller's timer is stopped; its in-flight cycle is left to finish
        but is still closed by destroy().
        """
        self._retired_pollers = set(p for p in self._retired_pollers if not p.is_idle)
        if self.poller is not None:
            self.poller.stop()
            if not self.poller.is_idle:
                self._retired_pollers.add(self.poller)
        self.poller = StatePoller(self.config, self.handle_status, interval_secs=self.poll_interval_secs)
        self.poller.start()

    def send_command(self, command_code: CommandCode) -> Optional[CommandSession]:
        """Opens a new connection and sends one command over it.

        Any previous command session is destroyed first, whether or not it has
        finished. Returns None without connecting if no host is configured.
        """
        if not self.config.has_host:
            self.log_user('error', "Host not configured")
            return None
        if self.session is not None:
            logger.debug(f"{self}: Replacing {self.session}")
            self.session.destroy()
        session = CommandSession(
            self.config,
            command_code,
            linger_secs=self.linger_secs,
            on_connected=self.handle_connected,
          )
        self.session = session
        self.spawn(self.run_command_session(session))
        return session

    async def run_command_session(self, session: CommandSession) -> None:
        try:
            await session.run()
        except Exception as e:
            self.log_user('error', f"Network error: {e}")
            self.host.update_status(ConnectionStatus.CONNECTION_FAILURE, str(e))
        finally:
            if self.session is session:
                self.session = None

    def handle_connected(self, session: ProjectorSession) -> None:
        self.host.update_status(ConnectionStatus.OK)

    def handle_status(self, state: DeviceState) -> None:
        """Called by the poller with freshly read device state."""
        self.state = DeviceState(state.power_state, state.input_state)
        self.host.set_variable_values(self.state.variable_values())
        self.host.check_feedbacks(*FEEDBACK_KINDS)

    def check_feedback(self, feedback_kind: str, options: Mapping[str, Any]) -> bool:
        """Evaluates a boolean feedback against the cached device state."""
        if feedback_kind == POWER_STATE_FEEDBACK:
            return self.state.power_state is not None and self.state.power_state == str(options.get('state'))
        if feedback_kind == INPUT_SOURCE_FEEDBACK:
            return self.state.input_state is not None and self.state.input_state == str(options.get('input'))
        return False

    def spawn(self, coro: Awaitable[None]) -> asyncio.Task[None]:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def log_user(self, level: str, message: str) -> None:
        """Logs a message both to the package logger and to the host's log."""
        logger.log(logging.getLevelName(level.upper()), f"{self}: {message}")
        self.host.log(level, message)

    def __str__(self) -> str:
        return f"ChristieProjectorInstance({self.config.host}:{self.config.port})"

    def __repr__(self) -> str:
        return str(self)
