# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie Projector client configuration.

Holds the host, port and password used to open connections to the projector.
A configuration is never modified after construction; a configuration change
replaces the whole object.
"""

from __future__ import annotations

import os
import re

from ..internal_types import *
from ..exceptions import ChristieProjectorConfigError
from ..constants import DEFAULT_PORT, DEFAULT_PASSWORD

HOSTNAME_REGEX = r'^(([a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9\-]*[a-zA-Z0-9])\.)*([A-Za-z0-9]|[A-Za-z0-9][A-Za-z0-9\-]*[A-Za-z0-9])$'
"""Pattern a configured host (hostname or IPV4 address) must match."""

PORT_REGEX = r'^[0-9]{1,5}$'
"""Pattern a configured port must match. The numeric range is checked separately."""

_hostname_re = re.compile(HOSTNAME_REGEX)
_port_re = re.compile(PORT_REGEX)

class ChristieProjectorConfig:
    """Christie Projector client configuration."""
    host: Optional[str]
    port: int
    password: str

    def __init__(
            self,
            host: Optional[str]=None,
            port: Optional[Union[int, str]]=None,
            password: Optional[str]=None,
            *,
            base_config: Optional[ChristieProjectorConfig]=None
          ) -> None:
        """Creates a configuration for a Christie Projector client.

           Args:
             host: The hostname or IPV4 address of the projector.
                   If None, the host will be taken from the base
                   configuration, or if there is none, from the
                   CHRISTIE_PROJECTOR_HOST environment variable.
                   If still not found, or if host is the empty string,
                   no host is configured, and commands will fail with a
                   configuration error.
             port: The TCP/IP port number to use, as an int or a numeric string.
                   If None or empty, the port will be taken from the base
                   configuration, or from CHRISTIE_PROJECTOR_PORT. If that
                   environment variable is not found, the default port (10000)
                   will be used.
             password:
                   The projector password. If None, the password is taken from
                   the base configuration or from CHRISTIE_PROJECTOR_PASSWORD.
                   If still not found, an empty password is sent.
             base_config:
                   An optional base configuration to use.

           Raises:
             ChristieProjectorConfigError if the host, port or password is malformed.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if host == '':
            self.host = None
        elif host is not None:
            self.host = host

        if port is not None and port != '':
            self.port = self.parse_port(port)

        if password is not None:
            self.password = password

        self.validate()

    def init_from_defaults(self) -> None:
        """Initializes the configuration from the environment and defaults."""
        host: Optional[str] = os.environ.get('CHRISTIE_PROJECTOR_HOST')
        if host == '':
            host = None
        self.host = host
        port_str = os.environ.get('CHRISTIE_PROJECTOR_PORT')
        if port_str is None or port_str == '':
            self.port = DEFAULT_PORT
        else:
            self.port = self.parse_port(port_str)
        password = os.environ.get('CHRISTIE_PROJECTOR_PASSWORD')
        if password is None:
            password = DEFAULT_PASSWORD
        self.password = password

    def init_from_base_config(self, base_config: ChristieProjectorConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.host = base_config.host
        self.port = base_config.port
        self.password = base_config.password

    @staticmethod
    def parse_port(port: Union[int, str]) -> int:
        """Converts a port given as an int or numeric string to an int."""
        if isinstance(port, int) and not isinstance(port, bool):
            return port
        if isinstance(port, str) and _port_re.match(port.strip()):
            return int(port.strip())
        raise ChristieProjectorConfigError(f"Invalid projector port: {port!r}")

    def validate(self) -> None:
        """Raises ChristieProjectorConfigError if the configuration is malformed.

        The password is sent as an ASCII line. A missing host is not an error here; it is reported when a connection is attempted.
        """
        if self.host is not None and not _hostname_re.match(self.host):
            raise ChristieProjectorConfigError(f"Invalid projector host: {self.host!r}")
        if not (0 < self.port < 65536):
            raise ChristieProjectorConfigError(f"Projector port out of range: {self.port}")
        if not self.password.isascii():
            raise ChristieProjectorConfigError("Projector password must be ASCII")

    @property
    def has_host(self) -> bool:
        """True iff a projector host is configured"""
        return self.host is not None and self.host != ''

    @classmethod
    def from_jsonable(
            cls,
            jsonable: Optional[Mapping[str, Any]],
            base_config: Optional[ChristieProjectorConfig]=None
          ) -> ChristieProjectorConfig:
        """Creates a configuration from a host-provided config dict with optional
           "host", "port" and "password" entries."""
        if jsonable is None:
            jsonable = {}
        return cls(
            host=jsonable.get('host'),
            port=jsonable.get('port'),
            password=jsonable.get('password'),
            base_config=base_config,
          )

    def to_jsonable(self) -> JsonableDict:
        """Returns the configuration as a host config dict."""
        return dict(host=self.host, port=self.port, password=self.password)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChristieProjectorConfig):
            return NotImplemented
        return (self.host, self.port, self.password) == (other.host, other.port, other.password)

    def __hash__(self) -> int:
        return hash((self.host, self.port, self.password))

    def __str__(self) -> str:
        return (
            f"ChristieProjectorConfig("
            f"host={self.host}, "
            f"port={self.port})"
          )

    def __repr__(self) -> str:
        return str(self)
