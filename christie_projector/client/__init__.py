# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie Projector client.

Provides per-operation TCP/IP sessions, a status poller, and the instance
object that a device-control host application drives.
"""

from .client_config import ChristieProjectorConfig, HOSTNAME_REGEX, PORT_REGEX
from .device_state import DeviceState
from .host import ProjectorHost, ConnectionStatus
from .session import (
    SessionState,
    ProjectorSession,
    CommandSession,
    StatusQuerySession,
  )
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
from .instance import ChristieProjectorInstance
