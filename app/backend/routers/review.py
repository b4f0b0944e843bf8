from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from app.backend.response import success_response
from app.backend.review.errors import DeliverableError, ManifestError
from app.backend.schemas import (
	AnalyzeRequest,
	ApiEnvelope,
	DeliverableRequest,
	ListTestsRequest,
	SearchRequest,
)
from app.backend.services import review_service


router = APIRouter(prefix="/api/review", tags=["review"])


@router.post("/analyze", response_model=ApiEnvelope)
def analyze(request: Request, payload: AnalyzeRequest):
	analysis = review_service.run_analysis(
		payload.logs.as_mapping(),
		payload.manifest,
		payload.source_diff,
		payload.report,
	)
	return success_response(
		request=request,
		data={"analysis": analysis},
	)


@router.post("/search", response_model=ApiEnvelope)
def search(request: Request, payload: SearchRequest):
	results = review_service.run_search(
		payload.logs.as_mapping(),
		payload.test_name,
		payload.context_lines,
	)
	return success_response(
		request=request,
		data={"test_name": payload.test_name, "results": results},
	)


@router.post("/tests", response_model=ApiEnvelope)
def list_tests(request: Request, payload: ListTestsRequest):
	try:
		tests = review_service.list_tests(payload.manifest, payload.filter)
	except ManifestError as exc:
		raise HTTPException(
			status_code=400,
			detail={"code": "manifest_invalid", "message": str(exc)},
		) from exc
	return success_response(
		request=request,
		data=tests,
	)


@router.post("/deliverable", response_model=ApiEnvelope)
def review_deliverable(request: Request, payload: DeliverableRequest):
	try:
		if payload.test_name is not None:
			results = review_service.search_deliverable(payload.path, payload.test_name, payload.context_lines)
			data = {"test_name": payload.test_name, "results": results}
		else:
			data = {"analysis": review_service.analyze_deliverable(payload.path)}
	except DeliverableError as exc:
		raise HTTPException(
			status_code=404,
			detail={"code": "deliverable_invalid", "message": str(exc), "evidence": exc.found},
		) from exc
	return success_response(
		request=request,
		data=data,
	)
