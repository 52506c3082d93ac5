# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie Projector emulator session.

One emulated projector connection: prompts for a password, greets, then
answers status queries and applies control commands.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import LineCodec

if TYPE_CHECKING:
    from .emulator_impl import ChristieProjectorEmulator

class ChristieProjectorEmulatorSession(asyncio.Protocol):
    emulator: ChristieProjectorEmulator
    session_id: int
    transport: Optional[asyncio.Transport] = None
    codec: LineCodec
    authenticated: bool = False

    def __init__(self, emulator: ChristieProjectorEmulator) -> None:
        super().__init__()
        self.emulator = emulator
        self.session_id = emulator.alloc_session_id(self)
        self.codec = LineCodec()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        logger.debug(f"{self}: Connection made; sending password prompt")
        self.write_line("PASSWORD:")

    def data_received(self, data: bytes) -> None:
        for line in self.codec.decode(data, keep_empty=True):
            self.emulator.on_line_received(self, line)
            if self.transport is None or self.transport.is_closing():
                break
            if not self.authenticated:
                if not self.emulator.check_password(line):
                    logger.debug(f"{self}: Bad password; closing")
                    self.close()
                    break
                self.authenticated = True
                self.write_line("HELLO")
            else:
                reply = self.emulator.handle_command(self, line)
                if reply is not None:
                    self.write_line(reply)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost: {exc}")
        self.transport = None
        self.emulator.free_session_id(self.session_id)

    def write_line(self, text: str) -> None:
        if self.transport is not None and not self.transport.is_closing():
            self.transport.write(self.codec.encode(text))

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()

    def __str__(self) -> str:
        return f"EmulatorSession#{self.session_id}"

    def __repr__(self) -> str:
        return str(self)
