#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that hosts a Christie projector instance.
"""

from __future__ import annotations

from fastapi import FastAPI

import os
import json

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from ..client import ChristieProjectorInstance, ChristieProjectorConfig
from .rest_host import RestProjectorHost

from .api import router as api_router

def load_raw_config() -> JsonableDict:
    """Loads the instance configuration from the JSON file named by CHRISTIE_PROJECTOR_CONFIG,
       or from christie_projector_config.json in the current directory if it exists."""
    config_file = os.environ.get("CHRISTIE_PROJECTOR_CONFIG", None)
    if config_file is None:
        if os.path.exists("christie_projector_config.json"):
            config_file = "christie_projector_config.json"
    if config_file is None:
        return {}
    with open(config_file, "r") as f:
        raw_config: JsonableDict = json.load(f)
    return raw_config

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """
    logger.info("Projector REST server starting up--initializing...")
    raw_config = load_raw_config()
    app.state.raw_config = raw_config
    host = RestProjectorHost()
    app.state.projector_host = host
    instance = ChristieProjectorInstance(host)
    app.state.projector_instance = instance
    await instance.init(raw_config)
    logger.info(f"Serving API for projector at {instance}...")
    try:
        yield
    finally:
        logger.info("Projector REST server shutting down--cleaning up...")
        await instance.destroy()

proj_api = FastAPI(lifespan=fastapi_lifetime)
proj_api.include_router(api_router)

def get_projector_instance() -> ChristieProjectorInstance:
    return proj_api.state.projector_instance

def get_projector_host() -> RestProjectorHost:
    return proj_api.state.projector_host

def get_projector_config() -> ChristieProjectorConfig:
    return get_projector_instance().config

def get_raw_config() -> JsonableDict:
    return proj_api.state.raw_config
