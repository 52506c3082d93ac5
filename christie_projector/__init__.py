# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package christie_projector provides an API for controlling Christie projectors
via their proprietary line-oriented TCP/IP protocol, in the shape of a plugin for a
device-control host application.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    ChristieProjectorError,
    ChristieProjectorConfigError,
    ChristieProjectorConnectionError,
  )

from .constants import DEFAULT_PORT, LINGER_DELAY, POLL_INTERVAL

from .client import (
    ChristieProjectorConfig,
    ChristieProjectorInstance,
    ProjectorHost,
    ConnectionStatus,
    DeviceState,
    SessionState,
    ProjectorSession,
    CommandSession,
    StatusQuerySession,
    StatePoller,
  )

from .protocol import (
    LineCodec,
    CommandMeta,
    get_all_commands,
    name_to_command_meta,
    action_to_command_code,
    power_status_map,
    input_status_map,
  )
