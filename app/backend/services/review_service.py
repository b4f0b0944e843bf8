from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from app.backend.adapters import deliverable_adapter
from app.backend.review.analysis import analyze, search
from app.backend.review.manifest import parse_manifest
from app.backend.review.report import serialize_result, serialize_search_result


logger = logging.getLogger(__name__)


def run_analysis(
	logs: Mapping[str, Optional[str]],
	manifest_text: Optional[str],
	source_diff_text: Optional[str] = None,
	report_text: Optional[str] = None,
) -> Dict[str, object]:
	result = analyze(logs, manifest_text, source_diff_text, report_text)
	logger.info(
		"Analysis finished: %d tests, status=%s, warnings=%s",
		len(result.rows),
		"fail" if result.has_problem else "pass",
		result.warning_codes() or "none",
	)
	return serialize_result(result)


def run_search(
	logs: Mapping[str, Optional[str]],
	test_name: str,
	context_lines: Optional[int] = None,
) -> Dict[str, List[Dict[str, object]]]:
	results = search(logs, test_name, context_lines)
	return {
		f"{stage.value}_results": [serialize_search_result(item) for item in items]
		for stage, items in results.items()
	}


def _filtered(names, needle: str) -> List[str]:
	if not needle:
		return list(names)
	lowered = needle.lower()
	return [name for name in names if lowered in name.lower()]


def list_tests(manifest_text: str, name_filter: Optional[str] = None) -> Dict[str, List[str]]:
	"""Declared test lists, optionally narrowed by a case-insensitive filter.

	Raises ``ManifestError`` when the manifest cannot be read.
	"""
	manifest = parse_manifest(manifest_text)
	needle = (name_filter or "").strip()
	return {
		"fail_to_pass": _filtered(manifest.fail_to_pass, needle),
		"pass_to_pass": _filtered(manifest.pass_to_pass, needle),
	}


def analyze_deliverable(root_path: str) -> Dict[str, object]:
	texts = deliverable_adapter.load_deliverable(root_path)
	return run_analysis(
		{stage.value: text for stage, text in texts.logs.items()},
		texts.manifest_text,
		texts.source_diff_text,
		texts.report_text,
	)


def search_deliverable(root_path: str, test_name: str, context_lines: Optional[int] = None) -> Dict[str, List[Dict[str, object]]]:
	texts = deliverable_adapter.load_deliverable(root_path)
	return run_search({stage.value: text for stage, text in texts.logs.items()}, test_name, context_lines)
