# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
In-memory ProjectorHost used by the REST server.

Records everything the instance reports so that it can be served over HTTP.
"""

from __future__ import annotations

from ..internal_types import *
from ..client import ProjectorHost, ConnectionStatus
from .logger import logger

class RestProjectorHost(ProjectorHost):
    status: ConnectionStatus
    status_message: Optional[str] = None
    variable_values: Dict[str, Any]
    action_definitions: Dict[str, JsonableDict]
    feedback_definitions: Dict[str, JsonableDict]
    variable_definitions: List[JsonableDict]
    feedback_checks: int = 0
    """Number of feedback re-evaluation requests received."""

    log_messages: List[Tuple[str, str]]

    def __init__(self) -> None:
        self.status = ConnectionStatus.DISCONNECTED
        self.variable_values = {}
        self.action_definitions = {}
        self.feedback_definitions = {}
        self.variable_definitions = []
        self.log_messages = []

    def update_status(self, status: ConnectionStatus, message: Optional[str]=None) -> None:
        logger.debug(f"Status: {status.value} {message or ''}")
        self.status = status
        self.status_message = message

    def set_variable_values(self, values: Dict[str, Any]) -> None:
        self.variable_values.update(values)

    def check_feedbacks(self, *feedback_kinds: str) -> None:
        logger.debug(f"Feedback check requested: {', '.join(feedback_kinds)}")
        self.feedback_checks += 1

    def set_action_definitions(self, definitions: Dict[str, JsonableDict]) -> None:
        self.action_definitions = definitions

    def set_feedback_definitions(self, definitions: Dict[str, JsonableDict]) -> None:
        self.feedback_definitions = definitions

    def set_variable_definitions(self, definitions: List[JsonableDict]) -> None:
        self.variable_definitions = definitions

    def log(self, level: str, message: str) -> None:
        self.log_messages.append((level, message))
