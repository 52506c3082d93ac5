# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie Projector emulator.

Provides a simple emulation of a Christie projector on TCP/IP.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import POWER_STATUS_QUERY, INPUT_STATUS_QUERY
from ..constants import DEFAULT_PORT

from .session import ChristieProjectorEmulatorSession

POWER_ON_TOKEN = "00"
STANDBY_TOKEN = "80"

_input_commands: Dict[str, str] = {
    "C05": "1",
    "C06": "2",
    "C07": "3",
    "C08": "4",
  }

class ChristieProjectorEmulator(AsyncContextManager['ChristieProjectorEmulator']):
    password: Optional[str]
    bind_addr: str
    port: int
    power: str
    input: str
    menu_visible: bool = False
    messages: List[str]
    """Every line received from any client, including passwords, in order."""

    sessions: Dict[int, ChristieProjectorEmulatorSession]
    next_session_id: int = 0
    server: Optional[asyncio.Server] = None
    final_result: asyncio.Future[None]

    def __init__(
            self,
            password: Optional[str] = None,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            power: str = STANDBY_TOKEN,
            input: str = "1",
          ):
        self.password = password
        self.bind_addr = '127.0.0.1' if bind_addr is None else bind_addr
        self.port = port
        self.power = power
        self.input = input
        self.messages = []
        self.sessions = {}
        self.final_result = asyncio.get_running_loop().create_future()

    @property
    def bound_port(self) -> int:
        """The port actually listened on; differs from port if port was 0."""
        assert self.server is not None
        return self.server.sockets[0].getsockname()[1]

    @property
    def commands(self) -> List[str]:
        """Received lines that look like command codes (i.e., excluding passwords)."""
        return [m for m in self.messages if len(m) == 3 and m[0] == 'C']

    def alloc_session_id(self, session: ChristieProjectorEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_line_received(self, session: ChristieProjectorEmulatorSession, line: str) -> None:
        logger.debug(f"{session}: Emulator received {line!r}")
        self.messages.append(line)

    def check_password(self, password: str) -> bool:
        return self.password is None or self.password == '' or password == self.password

    def handle_command(self, session: ChristieProjectorEmulatorSession, command_code: str) -> Optional[str]:
        """Handles a single command line, and returns the reply line, if any.

        Control commands are not acknowledged.
        """
        if command_code == POWER_STATUS_QUERY.command_code:
            return self.power
        if command_code == INPUT_STATUS_QUERY.command_code:
            return self.input
        if command_code == "C00":
            self.power = POWER_ON_TOKEN
        elif command_code == "C01":
            self.power = STANDBY_TOKEN
        elif command_code in _input_commands:
            self.input = _input_commands[command_code]
        elif command_code == "C1C":
            self.menu_visible = True
        elif command_code == "C1D":
            self.menu_visible = False
        else:
            logger.debug(f"{session}: Emulator ignoring unknown command {command_code!r}")
        return None

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.server = await loop.create_server(
                lambda: ChristieProjectorEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.bound_port}")
            await self.server.start_serving()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException:
                pass
            raise

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown."""
        try:
            await self.final_result
        finally:
            if self.server is not None:
                server = self.server
                self.server = None
                for session in list(self.sessions.values()):
                    session.close()
                server.close()
                await server.wait_closed()

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)

    async def __aenter__(self) -> ChristieProjectorEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            await self.wait_closed()
        except Exception:
            pass
