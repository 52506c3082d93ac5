# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Host application interface.

The device-control host application drives a ChristieProjectorInstance through
its lifecycle methods, and receives status, variable values, definitions and
feedback re-evaluation requests through this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from ..internal_types import *

class ConnectionStatus(str, Enum):
    """Connectivity status reported to the host"""
    OK = "ok"
    CONNECTING = "connecting"
    CONNECTION_FAILURE = "connection_failure"
    BAD_CONFIG = "bad_config"
    DISCONNECTED = "disconnected"

class ProjectorHost(ABC):
    """Abstract base class for the host side of a projector instance."""

    @abstractmethod
    def update_status(self, status: ConnectionStatus, message: Optional[str]=None) -> None:
        """Reports the connectivity status of the instance.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def set_variable_values(self, values: Dict[str, Any]) -> None:
        """Publishes new values for some or all variables.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def check_feedbacks(self, *feedback_kinds: str) -> None:
        """Requests re-evaluation of all feedbacks of the given kinds.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def set_action_definitions(self, definitions: Dict[str, JsonableDict]) -> None:
        raise NotImplementedError()

    @abstractmethod
    def set_feedback_definitions(self, definitions: Dict[str, JsonableDict]) -> None:
        raise NotImplementedError()

    @abstractmethod
    def set_variable_definitions(self, definitions: List[JsonableDict]) -> None:
        raise NotImplementedError()

    def log(self, level: str, message: str) -> None:
        """Shows a message in the host's log for this instance.

        May be overridden by subclasses. The default implementation does nothing.
        """
        pass
