# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
REST API routes for the hosted Christie projector instance.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from ..internal_types import *
from ..exceptions import ChristieProjectorConfigError
from ..client import (
    ChristieProjectorInstance,
    ChristieProjectorConfig,
    POWER_STATE_FEEDBACK,
    INPUT_SOURCE_FEEDBACK,
  )
from .rest_host import RestProjectorHost
from .logger import logger

router = APIRouter(prefix="/api")

_feedback_option_ids: Dict[str, str] = {
    POWER_STATE_FEEDBACK: 'state',
    INPUT_SOURCE_FEEDBACK: 'input',
  }
"""The option holding the expected token, for each feedback kind"""

class ConfigBody(BaseModel):
    host: Optional[str] = None
    port: Optional[Union[int, str]] = None
    password: Optional[str] = None

def _instance(request: Request) -> ChristieProjectorInstance:
    return request.app.state.projector_instance

def _host(request: Request) -> RestProjectorHost:
    return request.app.state.projector_host

def _public_config(config: ChristieProjectorConfig) -> JsonableDict:
    return dict(host=config.host, port=config.port)

@router.get("/config-fields")
async def get_config_fields(request: Request) -> List[Dict[str, Any]]:
    return _instance(request).get_config_fields()

@router.get("/config")
async def get_config(request: Request) -> Dict[str, Any]:
    return _public_config(_instance(request).config)

@router.put("/config")
async def put_config(request: Request, body: ConfigBody) -> Dict[str, Any]:
    instance = _instance(request)
    try:
        config = ChristieProjectorConfig.from_jsonable(body.model_dump(exclude_none=True))
    except ChristieProjectorConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info(f"Reconfiguring {instance} with {config}")
    await instance.config_updated(config)
    return _public_config(instance.config)

@router.get("/actions")
async def get_actions(request: Request) -> Dict[str, Dict[str, Any]]:
    return _instance(request).get_action_definitions()

@router.post("/actions/{action_id}")
async def post_action(request: Request, action_id: str) -> Dict[str, Any]:
    session = await _instance(request).execute_action(action_id)
    return dict(action=action_id, accepted=session is not None)

@router.get("/feedbacks")
async def get_feedbacks(request: Request) -> Dict[str, Dict[str, Any]]:
    return _instance(request).get_feedback_definitions()

@router.get("/feedbacks/{kind}")
async def get_feedback(request: Request, kind: str, value: str) -> Dict[str, Any]:
    option_id = _feedback_option_ids.get(kind)
    if option_id is None:
        raise HTTPException(status_code=404, detail=f"Unknown feedback: {kind}")
    active = _instance(request).check_feedback(kind, {option_id: value})
    return dict(kind=kind, value=value, active=active)

@router.get("/variables")
async def get_variables(request: Request) -> Dict[str, Any]:
    return _host(request).variable_values

@router.get("/status")
async def get_status(request: Request) -> Dict[str, Any]:
    host = _host(request)
    state = _instance(request).state
    return dict(
        status=host.status.value,
        message=host.status_message,
        power_state=state.power_state,
        input_state=state.input_state,
      )
