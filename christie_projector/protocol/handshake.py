# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import re

# Initial connection handshake:
#   Projector: "PASSWORD:\r"
#   Client: f"{password}\r", with an empty password if none is set
#   Projector: "HELLO\r" (some firmware sends "Hello")
#   <One command line may now be sent>

PASSWORD_PROMPT = re.compile(r"PASSWORD:", re.IGNORECASE)
"""Sent by the projector immediately on connecting. May arrive embedded in a larger
   buffer or split across reads, so it is searched for rather than matched as a line."""

HELLO_PROMPT = re.compile(r"HELLO", re.IGNORECASE)
"""Sent by the projector after it has received a password line. The projector
   accepts exactly one command after this greeting."""

STATUS_TOKEN = re.compile(r"^[0-9A-Fa-f]{1,2}$")
"""A reply line to a status query: one or two hex-like characters."""
