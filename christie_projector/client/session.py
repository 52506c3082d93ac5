# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie Projector TCP/IP connection sessions.

A session owns exactly one TCP connection and performs exactly one exchange
with the projector: wait for the password prompt, send the password, wait for
the greeting, then send either a control command (CommandSession) or the pair
of status queries (StatusQuerySession). Sessions are never reused.

Sessions are asyncio protocols; every received chunk runs the session's
transition function, so no read ever blocks the event loop.
"""

from __future__ import annotations

import asyncio
from asyncio import Future
from enum import Enum
from itertools import count

from ..internal_types import *
from ..exceptions import ChristieProjectorConnectionError, ChristieProjectorConfigError
from ..constants import LINGER_DELAY
from ..pkg_logging import logger
from ..protocol import (
    LineCodec,
    CommandCode,
    PASSWORD_PROMPT,
    HELLO_PROMPT,
    STATUS_TOKEN,
    POWER_STATUS_QUERY,
    INPUT_STATUS_QUERY,
  )

from .client_config import ChristieProjectorConfig
from .device_state import DeviceState

class SessionState(Enum):
    CONNECTING = "connecting"
    AWAITING_PASSWORD = "awaiting_password"
    AWAITING_HELLO = "awaiting_hello"
    COMMAND_SENT = "command_sent"
    AWAITING_POWER = "awaiting_power"
    AWAITING_INPUT = "awaiting_input"
    CLOSED = "closed"

_session_ids = count()

class ProjectorSession(asyncio.Protocol):
    """Base class for a single connection to the projector."""

    config: ChristieProjectorConfig
    session_id: int
    state: SessionState
    codec: LineCodec
    transport: Optional[asyncio.Transport] = None
    password_sent: bool = False
    hello_received: bool = False
    destroyed: bool = False
    closing: bool = False
    final_status: Future[None]

    writes: List[bytes]
    """Every line written to the projector, in order."""

    on_connected: Optional[Callable[[ProjectorSession], None]]
    """Called once the TCP connection is established."""

    _connect_task: Optional[asyncio.Task[Any]] = None

    def __init__(
            self,
            config: ChristieProjectorConfig,
            on_connected: Optional[Callable[[ProjectorSession], None]]=None,
          ) -> None:
        super().__init__()
        if not config.has_host:
            raise ChristieProjectorConfigError("Host not configured")
        self.config = config
        self.session_id = next(_session_ids)
        self.state = SessionState.CONNECTING
        self.codec = LineCodec()
        self.writes = []
        self.on_connected = on_connected
        self.final_status = asyncio.get_running_loop().create_future()

    @property
    def is_complete(self) -> bool:
        """True once the session has done everything it was created for.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    def on_hello(self) -> None:
        """Called once when the projector's greeting has been received.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    def handle_lines(self, lines: List[str]) -> None:
        """Called with complete reply lines received after the greeting.

        The default implementation discards them.
        """
        for line in lines:
            logger.debug(f"{self}: Ignoring line {line!r} in state {self.state.value}")

    async def run(self) -> None:
        """Connects to the projector, and waits for the exchange to finish and the
           connection to close.

        Raises the network error (e.g., OSError) if the connection could not be made
        or failed before the exchange finished. Returns normally if the session is
        destroyed.
        """
        loop = asyncio.get_running_loop()
        if not self.final_status.done():
            logger.debug(f"{self}: Connecting to projector at {self.config.host}:{self.config.port}")
            self._connect_task = asyncio.ensure_future(
                loop.create_connection(lambda: self, self.config.host, self.config.port))
            try:
                await self._connect_task
            except asyncio.CancelledError:
                if not self.destroyed:
                    raise
            except Exception as e:
                logger.debug(f"{self}: Connect failed: {e}")
                self.set_final_status(e)
            finally:
                self._connect_task = None
        await self.wait()

    async def wait(self) -> None:
        """Waits for the session to finish. Does not initiate shutdown.

        Raises an exception if the final status of the session is an exception.
        """
        await asyncio.shield(self.final_status)

    def set_final_status(self, exc: Optional[BaseException]=None) -> None:
        """Sets the final status of the session, if not already set."""
        if not self.final_status.done():
            if exc is None:
                self.final_status.set_result(None)
            else:
                self.final_status.set_exception(exc)

    def set_state(self, state: SessionState) -> None:
        logger.debug(f"{self}: {self.state.value} -> {state.value}")
        self.state = state

    def write_line(self, text: str, secret: bool=False) -> None:
        """Writes a single line, adding the line terminator."""
        assert self.transport is not None
        data = self.codec.encode(text)
        logger.debug(f"{self}: Writing {'<password>' if secret else repr(data)}")
        self.writes.append(data)
        self.transport.write(data)

    def advance(self) -> None:
        """Runs the transition function against the text received so far."""
        if self.state == SessionState.AWAITING_PASSWORD:
            if self.password_sent or not self.codec.find_prompt(PASSWORD_PROMPT):
                return
            self.password_sent = True
            self.set_state(SessionState.AWAITING_HELLO)
            self.write_line(self.config.password, secret=True)
        if self.state == SessionState.AWAITING_HELLO:
            if self.hello_received or not self.codec.find_prompt(HELLO_PROMPT):
                return
            self.hello_received = True
            self.on_hello()
        if self.state not in (SessionState.CONNECTING, SessionState.AWAITING_PASSWORD,
                              SessionState.AWAITING_HELLO, SessionState.CLOSED):
            self.handle_lines(self.codec.read_lines())

    def close(self) -> None:
        """Closes the connection, flushing anything already written."""
        if self.transport is None:
            self.set_state(SessionState.CLOSED)
            self.set_final_status()
        elif not self.closing:
            logger.debug(f"{self}: Closing connection")
            self.closing = True
            self.transport.close()

    def destroy(self, exc: Optional[BaseException]=None) -> None:
        """Forcibly tears the session down without waiting for anything to drain.

        Safe to call at any time, including before the connection is made and
        after it has closed. If exc is not None, it becomes the final status.
        """
        if self.destroyed:
            return
        self.destroyed = True
        self.closing = True
        logger.debug(f"{self}: Destroying session")
        if self._connect_task is not None:
            self._connect_task.cancel()
        if self.transport is not None:
            self.transport.abort()
        self.set_state(SessionState.CLOSED)
        self.set_final_status(exc)

    # asyncio.Protocol callbacks

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        if self.destroyed:
            transport.abort()
            return
        # The projector speaks first; nothing is written until its prompt arrives.
        self.set_state(SessionState.AWAITING_PASSWORD)
        if self.on_connected is not None:
            try:
                self.on_connected(self)
            except Exception:
                logger.exception(f"{self}: Exception in connected callback")

    def data_received(self, data: bytes) -> None:
        logger.debug(f"{self}: Received {data!r}")
        if self.state == SessionState.CLOSED or self.closing:
            return
        self.codec.feed(data)
        self.advance()

    def eof_received(self) -> Optional[bool]:
        logger.debug(f"{self}: Projector closed its end of the connection")
        return None

    def connection_lost(self, exc: Optional[Exception]) -> None:
        prior_state = self.state
        self.state = SessionState.CLOSED
        if exc is not None and not self.is_complete:
            logger.debug(f"{self}: Connection lost: {exc}")
            self.set_final_status(exc)
        elif not self.is_complete and not self.closing:
            self.set_final_status(ChristieProjectorConnectionError(
                f"Connection closed by projector before exchange completed (state={prior_state.value})"))
        else:
            logger.debug(f"{self}: Connection closed")
            self.set_final_status()

    def __str__(self) -> str:
        return f"{self.__class__.__name__}#{self.session_id}({self.config.host}:{self.config.port})"

    def __repr__(self) -> str:
        return str(self)


class CommandSession(ProjectorSession):
    """Sends one control command, then closes after a fixed grace period.

    The projector does not acknowledge control commands, so the connection is
    simply held open for linger_secs after the command is written.
    """
    command_code: CommandCode
    linger_secs: float
    command_sent: bool = False
    _linger_handle: Optional[asyncio.TimerHandle] = None

    def __init__(
            self,
            config: ChristieProjectorConfig,
            command_code: CommandCode,
            linger_secs: float=LINGER_DELAY,
            on_connected: Optional[Callable[[ProjectorSession], None]]=None,
          ) -> None:
        super().__init__(config, on_connected=on_connected)
        self.command_code = command_code
        self.linger_secs = linger_secs

    @property
    def is_complete(self) -> bool:
        return self.command_sent

    def on_hello(self) -> None:
        if self.command_sent:
            return
        self.command_sent = True
        self.set_state(SessionState.COMMAND_SENT)
        self.write_line(self.command_code)
        self._linger_handle = asyncio.get_running_loop().call_later(self.linger_secs, self.close)

    def close(self) -> None:
        if self._linger_handle is not None:
            self._linger_handle.cancel()
            self._linger_handle = None
        super().close()

    def destroy(self, exc: Optional[BaseException]=None) -> None:
        if self._linger_handle is not None:
            self._linger_handle.cancel()
            self._linger_handle = None
        super().destroy(exc)

    def __str__(self) -> str:
        return f"CommandSession#{self.session_id}({self.config.host}:{self.config.port}, {self.command_code})"


class StatusQuerySession(ProjectorSession):
    """Reads the power and input status, then closes.

    The queries are strictly sequential: the input query is not sent until the
    reply to the power query has been parsed.
    """
    on_status: Callable[[DeviceState], None]
    power_state: Optional[str] = None
    input_state: Optional[str] = None

    def __init__(
            self,
            config: ChristieProjectorConfig,
            on_status: Callable[[DeviceState], None],
            on_connected: Optional[Callable[[ProjectorSession], None]]=None,
          ) -> None:
        super().__init__(config, on_connected=on_connected)
        self.on_status = on_status

    @property
    def is_complete(self) -> bool:
        return self.power_state is not None and self.input_state is not None

    @property
    def device_state(self) -> DeviceState:
        return DeviceState(self.power_state, self.input_state)

    def on_hello(self) -> None:
        self.set_state(SessionState.AWAITING_POWER)
        self.write_line(POWER_STATUS_QUERY.command_code)

    def handle_lines(self, lines: List[str]) -> None:
        for line in lines:
            if self.closing:
                break
            if self.state not in (SessionState.AWAITING_POWER, SessionState.AWAITING_INPUT):
                logger.debug(f"{self}: Ignoring line {line!r} in state {self.state.value}")
                continue
            if not STATUS_TOKEN.match(line):
                logger.debug(f"{self}: Ignoring non-status line {line!r}")
                continue
            if self.state == SessionState.AWAITING_POWER:
                self.power_state = line
                self.set_state(SessionState.AWAITING_INPUT)
                self.write_line(INPUT_STATUS_QUERY.command_code)
            else:
                self.input_state = line
                self.finish()

    def finish(self) -> None:
        state = self.device_state
        logger.info(f"{self}: Read projector status {state}")
        try:
            self.on_status(state)
        except Exception:
            logger.exception(f"{self}: Exception in status callback")
        finally:
            self.close()
