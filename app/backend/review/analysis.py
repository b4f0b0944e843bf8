# app/backend/review/analysis.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Tuple

from app.backend import config
from .engine import evaluate_rules
from .errors import ManifestError
from .log_parser import parse_declared_statuses, parse_log, split_lines
from .manifest import parse_manifest
from .report import AnalysisResult, build_analysis_result
from .search import search_logs
from .status_matrix import build_status_matrix
from .types import (
	STAGES,
	AnalysisWarning,
	LogDocument,
	Manifest,
	RuleContext,
	SearchResult,
	Stage,
	TestStatus,
)


logger = logging.getLogger(__name__)


def resolve_stage_texts(logs: Mapping[object, Optional[str]]) -> Dict[Stage, str]:
	"""Key raw log texts by ``Stage``; stages not supplied become blank logs."""
	texts: Dict[Stage, str] = {stage: "" for stage in STAGES}
	for key, text in logs.items():
		texts[Stage.resolve(key)] = text or ""
	return texts


def parse_documents(texts: Mapping[Stage, str]) -> Dict[Stage, LogDocument]:
	if config.parallel_parse_enabled():
		with ThreadPoolExecutor(max_workers=len(STAGES)) as pool:
			futures = {stage: pool.submit(parse_log, texts.get(stage, ""), stage) for stage in STAGES}
			return {stage: futures[stage].result() for stage in STAGES}
	return {stage: parse_log(texts.get(stage, ""), stage) for stage in STAGES}


def _document_warnings(documents: Mapping[Stage, LogDocument]) -> List[AnalysisWarning]:
	warnings: List[AnalysisWarning] = []
	for stage in STAGES:
		document = documents[stage]
		if document.degraded:
			warnings.append(
				AnalysisWarning(
					code="parse_degraded",
					message=f"{stage.value} log could not be parsed ({document.parse_error}); "
					"every test is reported as missing for this stage.",
					stage=stage,
				)
			)
		if document.conflicts:
			warnings.append(
				AnalysisWarning(
					code="status_conflict",
					message=f"{stage.value} log reports conflicting statuses for: {', '.join(document.conflicts)}",
					stage=stage,
				)
			)
	return warnings


def _read_manifest(manifest_text: Optional[str]) -> Tuple[Manifest, List[AnalysisWarning]]:
	warnings: List[AnalysisWarning] = []
	try:
		manifest = parse_manifest(manifest_text)
	except ManifestError as exc:
		logger.warning("Manifest rejected: %s", exc)
		manifest = Manifest()
		warnings.append(AnalysisWarning(code="manifest_invalid", message=str(exc)))
	for problem in manifest.problems:
		logger.warning("Manifest list ignored: %s", problem)
		warnings.append(AnalysisWarning(code="manifest_invalid", message=problem))
	if manifest.is_empty:
		warnings.append(
			AnalysisWarning(code="manifest_empty", message="Manifest declares no fail_to_pass or pass_to_pass tests.")
		)
	if manifest.overlap:
		warnings.append(
			AnalysisWarning(
				code="manifest_overlap",
				message=f"Tests declared as both fail_to_pass and pass_to_pass: {', '.join(manifest.overlap)}",
			)
		)
	return manifest, warnings


def _read_report(report_text: Optional[str]) -> Tuple[Optional[Dict[str, TestStatus]], List[AnalysisWarning]]:
	if report_text is None or not report_text.strip():
		return None, []
	try:
		return parse_declared_statuses(report_text), []
	except ValueError as exc:
		logger.warning("Report rejected: %s", exc)
		return None, [AnalysisWarning(code="report_invalid", message=f"Report could not be parsed: {exc}")]


def analyze(
	logs: Mapping[object, Optional[str]],
	manifest_text: Optional[str],
	source_diff_text: Optional[str] = None,
	report_text: Optional[str] = None,
) -> AnalysisResult:
	"""Run the full review over one deliverable.

	Bad input never raises: unreadable logs, manifests and reports are turned
	into warnings on the returned result.
	"""
	documents = parse_documents(resolve_stage_texts(logs))
	manifest, manifest_warnings = _read_manifest(manifest_text)
	report, report_warnings = _read_report(report_text)
	rows = build_status_matrix(manifest, documents)
	checks = evaluate_rules(
		RuleContext(
			rows=rows,
			documents=documents,
			manifest=manifest,
			source_diff=source_diff_text,
			report=report,
		)
	)
	warnings = _document_warnings(documents) + manifest_warnings + report_warnings
	return build_analysis_result(rows, checks, warnings, documents)


def search(
	logs: Mapping[object, Optional[str]],
	test_name: str,
	context_lines: Optional[int] = None,
) -> Dict[Stage, List[SearchResult]]:
	if context_lines is None:
		context_lines = config.search_context_lines()
	if not test_name:
		return {stage: [] for stage in STAGES}
	texts = resolve_stage_texts(logs)
	documents = {stage: LogDocument(stage=stage, lines=split_lines(texts[stage])) for stage in STAGES}
	return search_logs(documents, test_name, context_lines)
