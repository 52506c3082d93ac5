# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Line codec for the Christie projector control protocol.

Every line in either direction is terminated by a single carriage return. TCP
segments are not line aligned, so incoming text is accumulated until either a
prompt is found in it or complete lines can be split off.
"""

from __future__ import annotations

from ..internal_types import *
from ..constants import END_OF_LINE, MAX_PROMPT_BUFFER
from ..pkg_logging import logger

class LineCodec:
    """Encoder and stream reassembler for carriage-return terminated lines."""

    buffer: str
    """Received text that has not yet been consumed by a prompt match or split into lines."""

    max_prompt_buffer: int

    def __init__(self, max_prompt_buffer: int=MAX_PROMPT_BUFFER) -> None:
        self.buffer = ''
        self.max_prompt_buffer = max_prompt_buffer

    @staticmethod
    def encode(command_code: str) -> bytes:
        """Encodes a command code (or password) as a single protocol line"""
        return (command_code + END_OF_LINE).encode('ascii')

    def feed(self, data: bytes) -> None:
        """Appends a received chunk to the accumulated text"""
        self.buffer += data.decode('ascii', errors='replace')

    def read_lines(self, keep_empty: bool=False) -> List[str]:
        """Splits off and returns all complete lines in the accumulated text.

        A trailing partial line is retained for the next chunk. Lines are stripped
        of surrounding whitespace. Empty lines are dropped unless keep_empty is True
        (an empty password is sent as an empty line).
        """
        parts = self.buffer.split(END_OF_LINE)
        self.buffer = parts.pop()
        lines = [line.strip() for line in parts]
        if not keep_empty:
            lines = [line for line in lines if line != '']
        return lines

    def decode(self, data: bytes, keep_empty: bool=False) -> List[str]:
        """Feeds a received chunk and returns the complete lines now available"""
        self.feed(data)
        return self.read_lines(keep_empty=keep_empty)

    def find_prompt(self, pattern: Pattern[str]) -> bool:
        """Searches the accumulated text for a prompt.

        If found, the text up to and including the prompt (and a directly following
        line terminator) is consumed, so one prompt occurrence matches only once.
        If not found, the accumulated text is trimmed to the most recent
        max_prompt_buffer characters.
        """
        m = pattern.search(self.buffer)
        if m is None:
            if len(self.buffer) > self.max_prompt_buffer:
                logger.debug(f"Discarding {len(self.buffer) - self.max_prompt_buffer} characters while waiting for prompt")
                self.buffer = self.buffer[-self.max_prompt_buffer:]
            return False
        end = m.end()
        if self.buffer.startswith(END_OF_LINE, end):
            end += len(END_OF_LINE)
        self.buffer = self.buffer[end:]
        return True

    def __str__(self) -> str:
        return f"LineCodec(buffer={self.buffer!r})"

    def __repr__(self) -> str:
        return str(self)
