# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for Christie projectors.

The projector speaks a line-oriented ASCII protocol over TCP: a password prompt,
a greeting, and then a single three-character command per connection.
"""

from .handshake import (
    PASSWORD_PROMPT,
    HELLO_PROMPT,
    STATUS_TOKEN,
  )

from .codec import (
    LineCodec,
  )

from .command_meta import (
    CommandCode,
    CommandMeta,
    POWER_STATUS_QUERY,
    INPUT_STATUS_QUERY,
    power_status_map,
    input_status_map,
    action_command_codes,
    get_all_commands,
    get_action_commands,
    name_to_command_meta,
    action_to_command_code,
    power_status_name,
  )
