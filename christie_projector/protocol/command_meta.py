# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie projector known command codes and metadata.

There is no protocol implementation here; only metadata about the protocol.
"""
from __future__ import annotations

from types import MappingProxyType

from ..internal_types import *
from ..exceptions import ChristieProjectorError

CommandCode = str

power_status_map: Dict[str, str] = {
    "00": "Power ON",
    "80": "Standby",
    "40": "Countdown",
    "20": "Cooling Down",
    "10": "Power Failure",
    "28": "Cooling Down (Abnormal Temperature)",
    "88": "Standby (Abnormal Temperature)",
    "24": "Power Save Cooling",
    "04": "Power Save",
    "21": "Cooling Down (Lamp Failure)",
    "81": "Standby (Lamp Failure)",
  }
"""Reply tokens for the power_status.query command, and the projector power states they correspond to."""

input_status_map: Dict[str, str] = {
    "1": "Input 1",
    "2": "Input 2",
    "3": "Input 3",
    "4": "Input 4",
  }
"""Reply tokens for the input_status.query command, and the projector inputs they correspond to."""

class CommandMeta:
    """Metadata for a single command"""
    name: str
    """Unique name of the command. For user actions, this is the action identifier."""

    command_code: CommandCode
    """Three-character code sent to the projector, without the line terminator."""

    description: Optional[str]

    response_map: Optional[Dict[str, str]]
    """For status queries, a map of reply tokens to friendly strings. None for commands
       that receive no reply."""

    def __init__(
            self,
            name: str,
            command_code: CommandCode,
            description: Optional[str]=None,
            response_map: Optional[Dict[str, str]]=None
          ):
        assert len(command_code) == 3
        self.name = name
        self.command_code = command_code
        self.description = description
        self.response_map = response_map

    @property
    def is_query(self) -> bool:
        """True iff the projector answers this command with a status token"""
        return self.response_map is not None

    def __str__(self) -> str:
        return f"CommandMeta({self.name}: {self.command_code})"

    def __repr__(self) -> str:
        return str(self)

_C = CommandMeta

# User actions. Each action identifier maps to exactly one command code.
_action_metas: List[CommandMeta] = [
    _C("power_on", "C00", "Power On"),
    _C("power_off", "C01", "Power Off"),
    _C("input_1", "C05", "Select Input 1"),
    _C("input_2", "C06", "Select Input 2"),
    _C("input_3", "C07", "Select Input 3"),
    _C("input_4", "C08", "Select Input 4"),
    _C("menu_on", "C1C", "Menu On"),
    _C("menu_off", "C1D", "Menu Off"),
  ]

POWER_STATUS_QUERY = _C("power_status.query", "CR0", "Query power status", response_map=power_status_map)
INPUT_STATUS_QUERY = _C("input_status.query", "CR1", "Query input source", response_map=input_status_map)

command_metas: Dict[str, CommandMeta] = {}
"""All known commands, indexed by name"""

for _meta in _action_metas + [POWER_STATUS_QUERY, INPUT_STATUS_QUERY]:
    assert _meta.name not in command_metas
    command_metas[_meta.name] = _meta

action_command_codes: Mapping[str, CommandCode] = MappingProxyType(
    dict((meta.name, meta.command_code) for meta in _action_metas))
"""Read-only map of action identifier to the command code it sends"""

def get_all_commands() -> List[CommandMeta]:
    """Returns metadata for all known commands"""
    return list(command_metas.values())

def get_action_commands() -> List[CommandMeta]:
    """Returns metadata for all commands that can be invoked as user actions"""
    return list(_action_metas)

def name_to_command_meta(name: str) -> CommandMeta:
    """Returns the metadata for a command by name. Raises ChristieProjectorError if unknown."""
    result = command_metas.get(name)
    if result is None:
        raise ChristieProjectorError(f"Unknown command name: {name}")
    return result

def action_to_command_code(action_id: str) -> Optional[CommandCode]:
    """Returns the command code for an action identifier, or None if the action is unknown"""
    return action_command_codes.get(action_id)

def power_status_name(token: str) -> str:
    """Returns the friendly name of a power status token, or the token itself if unknown"""
    return power_status_map.get(token, token)
