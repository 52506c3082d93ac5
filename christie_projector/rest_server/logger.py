#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Logging for the REST server that hosts a Christie projector instance.
"""

from __future__ import annotations

import logging

logger = logging.getLogger('christie_projector.rest_server')
