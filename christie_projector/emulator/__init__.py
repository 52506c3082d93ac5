# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Christie Projector emulator.

Provides a simple emulation of a Christie projector on TCP/IP.
"""

from .emulator_impl import ChristieProjectorEmulator, POWER_ON_TOKEN, STANDBY_TOKEN
from .session import ChristieProjectorEmulatorSession
