# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Cached projector state, as last reported by a status poll."""

from __future__ import annotations

from ..internal_types import *
from ..protocol import power_status_name

class DeviceState:
    """Power and input tokens last read from the projector.

    Either token may be None if no status poll has completed yet.
    """
    power_state: Optional[str]
    input_state: Optional[str]

    def __init__(self, power_state: Optional[str]=None, input_state: Optional[str]=None):
        self.power_state = power_state
        self.input_state = input_state

    def variable_values(self) -> Dict[str, Any]:
        """Returns the host variable values for this state.

        The power state is reported by its friendly name; the input source as an
        int when the token is numeric.
        """
        power: Optional[str] = None if self.power_state is None else power_status_name(self.power_state)
        input_source: Optional[Union[int, str]] = self.input_state
        if self.input_state is not None and self.input_state.isdigit():
            input_source = int(self.input_state)
        return dict(power_state=power, input_source=input_source)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceState):
            return NotImplemented
        return self.power_state == other.power_state and self.input_state == other.input_state

    def __str__(self) -> str:
        return f"DeviceState(power_state={self.power_state!r}, input_state={self.input_state!r})"

    def __repr__(self) -> str:
        return str(self)
