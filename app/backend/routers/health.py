from __future__ import annotations

from fastapi import APIRouter, Request

from app.backend import config, constants
from app.backend.response import success_response
from app.backend.schemas import ApiEnvelope


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", response_model=ApiEnvelope)
def get_health(request: Request):
	return success_response(
		request=request,
		data={
			"app": constants.APP_NAME,
			"version": constants.APP_VERSION,
			"rules": list(constants.RULE_ORDER),
			"search_context_lines": config.search_context_lines(),
		},
	)
