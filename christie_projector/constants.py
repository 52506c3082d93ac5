# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by christie_projector"""

DEFAULT_PORT = 10000
"""The listen port number used by the projector for TCP/IP control."""

DEFAULT_PASSWORD = ""
"""The password sent when none is configured. The projector still prompts for one."""

LINGER_DELAY = 1.0
"""Seconds to keep a command connection open after the command is written. The
   projector sends no acknowledgement that can be waited on, so the connection is
   closed after this grace period."""

POLL_INTERVAL = 30.0
"""Seconds between power/input status polls."""

MAX_PROMPT_BUFFER = 4096
"""Maximum number of characters retained while waiting for a prompt."""

END_OF_LINE = "\r"
"""Terminator for every line sent to or received from the projector."""

# Connection handshake:
#   Projector: "PASSWORD:\r"
#   Client: f"{password}\r" (an empty password still sends the "\r")
#   Projector: "HELLO\r"
#   Client: f"{command_code}\r"
#   <for status queries, the projector answers with a short token line>
