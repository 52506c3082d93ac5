# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Static definitions published to the host: configuration fields, actions,
feedbacks and variables.
"""

from __future__ import annotations

from ..internal_types import *
from ..constants import DEFAULT_PORT, DEFAULT_PASSWORD
from ..protocol import get_action_commands, power_status_map, input_status_map
from .client_config import HOSTNAME_REGEX, PORT_REGEX

POWER_STATE_FEEDBACK = "power_state"
INPUT_SOURCE_FEEDBACK = "input_source"

FEEDBACK_KINDS: Tuple[str, ...] = (POWER_STATE_FEEDBACK, INPUT_SOURCE_FEEDBACK)
"""Feedback kinds that depend on polled device state"""

def combine_rgb(r: int, g: int, b: int) -> int:
    """Packs an RGB colour into the host's integer colour format"""
    return ((r & 0xff) << 16) | ((g & 0xff) << 8) | (b & 0xff)

def get_config_fields() -> List[JsonableDict]:
    """Returns the configuration fields shown by the host: host, port and password"""
    return [
        dict(
            type='textinput',
            id='host',
            label='Projector IP',
            width=6,
            regex=HOSTNAME_REGEX,
          ),
        dict(
            type='textinput',
            id='port',
            label='Port',
            width=6,
            regex=PORT_REGEX,
            default=DEFAULT_PORT,
          ),
        dict(
            type='textinput',
            id='password',
            label='Password',
            width=6,
            default=DEFAULT_PASSWORD,
          ),
      ]

def get_action_definitions() -> Dict[str, JsonableDict]:
    """Returns the action definitions, indexed by action identifier"""
    return dict(
        (meta.name, dict(name=meta.description, options=[]))
        for meta in get_action_commands()
      )

def _choices(response_map: Dict[str, str]) -> List[JsonableDict]:
    return [dict(id=token, label=label) for token, label in response_map.items()]

def get_feedback_definitions() -> Dict[str, JsonableDict]:
    """Returns the boolean feedback definitions, indexed by feedback kind"""
    return {
        POWER_STATE_FEEDBACK: dict(
            type='boolean',
            name='Power State',
            description='Active when the projector reports the selected power state',
            default_style=dict(bgcolor=combine_rgb(0, 255, 0), color=combine_rgb(0, 0, 0)),
            options=[
                dict(
                    type='dropdown',
                    id='state',
                    label='State',
                    default='00',
                    choices=_choices(power_status_map),
                  ),
              ],
          ),
        INPUT_SOURCE_FEEDBACK: dict(
            type='boolean',
            name='Input Source',
            description='Active when the projector reports the selected input',
            default_style=dict(bgcolor=combine_rgb(0, 255, 0), color=combine_rgb(0, 0, 0)),
            options=[
                dict(
                    type='dropdown',
                    id='input',
                    label='Input',
                    default='1',
                    choices=_choices(input_status_map),
                  ),
              ],
          ),
      }

def get_variable_definitions() -> List[JsonableDict]:
    """Returns the variable definitions"""
    return [
        dict(variableId='power_state', name='Power State'),
        dict(variableId='input_source', name='Input Source'),
      ]
