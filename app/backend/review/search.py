# app/backend/review/search.py
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from .types import STAGES, LogDocument, SearchResult, Stage


def search_log(document: LogDocument, test_name: str, context_lines: int = 3) -> List[SearchResult]:
	"""Every line of ``document`` containing ``test_name``, in line order.

	Matching is a plain case-sensitive substring test. Context is clipped at
	the start and end of the log.
	"""
	if not test_name:
		return []
	context_lines = max(context_lines, 0)
	lines = document.lines
	results: List[SearchResult] = []
	for index, line in enumerate(lines):
		if test_name not in line:
			continue
		start = max(index - context_lines, 0)
		results.append(
			SearchResult(
				stage=document.stage,
				line_number=index + 1,
				line_content=line,
				context_before=tuple(lines[start:index]),
				context_after=tuple(lines[index + 1:index + 1 + context_lines]),
			)
		)
	return results


def search_logs(
	documents: Mapping[Stage, LogDocument],
	test_name: str,
	context_lines: int = 3,
) -> Dict[Stage, List[SearchResult]]:
	results: Dict[Stage, List[SearchResult]] = {}
	for stage in STAGES:
		document = documents.get(stage)
		results[stage] = search_log(document, test_name, context_lines) if document is not None else []
	return results


def next_index(current: int, count: int) -> int:
	if count <= 0:
		return 0
	return (current + 1) % count


def previous_index(current: int, count: int) -> int:
	if count <= 0:
		return 0
	return (current - 1) % count


def select_result(results: Sequence[SearchResult], index: int) -> Optional[SearchResult]:
	if not results:
		return None
	return results[index % len(results)]
