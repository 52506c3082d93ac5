# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that hosts a Christie projector instance.
"""
from .app import proj_api, get_projector_instance, get_projector_host, get_projector_config, get_raw_config
