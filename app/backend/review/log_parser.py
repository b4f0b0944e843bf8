# app/backend/review/log_parser.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .types import LogDocument, LogRecord, Stage, TestStatus


logger = logging.getLogger(__name__)

_PASSED_TOKENS = {"passed", "pass", "ok", "success"}
_FAILED_TOKENS = {"failed", "fail", "failure", "error"}

# test yank::explicit_version ... ok
_LIBTEST_RE = re.compile(r"\btest\s+(\S+)\s+\.\.\.\s+(ok|FAILED|ignored)\b")
# PASSED tests/test_api.py::test_health
_PYTEST_SUMMARY_RE = re.compile(r"^(PASSED|FAILED|ERROR|SKIPPED|XFAIL|XPASS)\s+(\S+)")
# tests/test_api.py::test_health PASSED [ 50%]
_PYTEST_VERBOSE_RE = re.compile(r"^(\S+::\S+)\s+(PASSED|FAILED|ERROR|SKIPPED|XFAIL|XPASS)\b")


def normalize_status(token: Any) -> TestStatus:
	if not isinstance(token, str):
		return TestStatus.MISSING
	value = token.strip().lower()
	if value in _PASSED_TOKENS:
		return TestStatus.PASSED
	if value in _FAILED_TOKENS:
		return TestStatus.FAILED
	return TestStatus.MISSING


def _merge_status(existing: TestStatus, incoming: TestStatus) -> TestStatus:
	if existing == incoming or incoming == TestStatus.MISSING:
		return existing
	if existing == TestStatus.MISSING:
		return incoming
	return TestStatus.FAILED


class _DocumentBuilder:
	def __init__(self, stage: Stage, lines: Tuple[str, ...]):
		self.stage = stage
		self.lines = lines
		self.records: List[LogRecord] = []
		self.statuses: Dict[str, TestStatus] = {}
		self.occurrences: Dict[str, int] = {}
		self.conflicts: List[str] = []

	def add(self, test_name: str, status: str, line_number: int = 0, occurrences: Optional[int] = None) -> None:
		normalized = normalize_status(status)
		if occurrences is None:
			occurrences = 0 if normalized == TestStatus.MISSING else 1
		self.records.append(
			LogRecord(
				test_name=test_name,
				status=status,
				normalized=normalized,
				line_number=line_number,
				occurrences=occurrences,
			)
		)
		self.occurrences[test_name] = self.occurrences.get(test_name, 0) + occurrences
		existing = self.statuses.get(test_name)
		if existing is None:
			self.statuses[test_name] = normalized
			return
		merged = _merge_status(existing, normalized)
		if {existing, normalized} == {TestStatus.PASSED, TestStatus.FAILED} and test_name not in self.conflicts:
			self.conflicts.append(test_name)
		self.statuses[test_name] = merged

	def build(self) -> LogDocument:
		return LogDocument(
			stage=self.stage,
			lines=self.lines,
			records=tuple(self.records),
			statuses=dict(self.statuses),
			occurrences=dict(self.occurrences),
			conflicts=tuple(self.conflicts),
		)


def _degraded(stage: Stage, lines: Tuple[str, ...], reason: str) -> LogDocument:
	logger.warning("Log for stage %s could not be parsed: %s", stage.value, reason)
	return LogDocument(stage=stage, lines=lines, parse_error=reason)


def _entry_occurrences(entry: Dict[str, Any]) -> Optional[int]:
	# "occurences" is the spelling older analysis files were written with.
	for key in ("occurrences", "occurences"):
		value = entry.get(key)
		if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
			return value
	return None


def _entries(payload: Any) -> Optional[List[Any]]:
	if isinstance(payload, list):
		return payload
	if isinstance(payload, dict) and isinstance(payload.get("test_results"), list):
		return payload["test_results"]
	return None


def _parse_json_entries(builder: _DocumentBuilder, entries: Iterable[Any]) -> Tuple[int, int]:
	used = 0
	skipped = 0
	for entry in entries:
		if not isinstance(entry, dict):
			skipped += 1
			continue
		name = entry.get("test_name")
		if not isinstance(name, str) or not name:
			skipped += 1
			continue
		status = entry.get("status")
		builder.add(
			name,
			status if isinstance(status, str) else "",
			occurrences=_entry_occurrences(entry),
		)
		used += 1
	return used, skipped


def _match_runner_line(line: str) -> Optional[Tuple[str, str, bool]]:
	"""Return ``(name, status, is_summary)`` for a runner result line."""
	match = _LIBTEST_RE.search(line)
	if match:
		return match.group(1), match.group(2), False
	stripped = line.strip()
	match = _PYTEST_SUMMARY_RE.match(stripped)
	if match:
		return match.group(2), match.group(1), True
	match = _PYTEST_VERBOSE_RE.match(stripped)
	if match:
		return match.group(1), match.group(2), False
	return None


def _parse_runner_lines(builder: _DocumentBuilder) -> int:
	found = 0
	# pytest restates verbose results in its short summary; those lines are not new entries.
	unrestated: Dict[str, int] = {}
	for line_number, line in enumerate(builder.lines, start=1):
		matched = _match_runner_line(line)
		if matched is None:
			continue
		name, status, is_summary = matched
		occurrences = None
		if is_summary and unrestated.get(name, 0) > 0:
			unrestated[name] -= 1
			occurrences = 0
		elif not is_summary:
			unrestated[name] = unrestated.get(name, 0) + 1
		builder.add(name, status, line_number=line_number, occurrences=occurrences)
		found += 1
	return found


def split_lines(text: Optional[str]) -> Tuple[str, ...]:
	"""Split on newlines only, dropping a trailing carriage return per line."""
	if not text:
		return ()
	lines = text.split("\n")
	if lines[-1] == "":
		lines.pop()
	return tuple(line[:-1] if line.endswith("\r") else line for line in lines)


def parse_log(text: Optional[str], stage: Stage) -> LogDocument:
	"""Parse one stage log into a LogDocument.

	JSON logs may be a flat list of ``{test_name, status}`` entries or an object
	holding a ``test_results`` list. Text that is not JSON at all is scanned for
	test-runner result lines. Anything else yields an empty, degraded document
	whose ``parse_error`` explains why; this function does not raise on bad input.
	"""
	raw = text or ""
	lines = split_lines(raw)
	if not raw.strip():
		return LogDocument(stage=stage, lines=lines)

	builder = _DocumentBuilder(stage, lines)
	try:
		payload = json.loads(raw)
	except json.JSONDecodeError:
		if _parse_runner_lines(builder) == 0:
			return _degraded(stage, lines, "not JSON and no recognised test result lines")
		return builder.build()

	entries = _entries(payload)
	if entries is None:
		return _degraded(stage, lines, "JSON is neither a result list nor an object with test_results")
	used, skipped = _parse_json_entries(builder, entries)
	if entries and used == 0:
		return _degraded(stage, lines, f"no usable test result entries ({skipped} malformed)")
	if skipped:
		logger.info("Skipped %d malformed entries in %s log", skipped, stage.value)
	return builder.build()


def parse_declared_statuses(text: str) -> Dict[str, TestStatus]:
	"""Read a report of declared per-test statuses.

	Accepts the log shapes understood by :func:`parse_log` or a plain object
	mapping test names to status tokens. Raises ``ValueError`` when the text is
	not a usable report.
	"""
	payload = json.loads(text)
	entries = _entries(payload)
	if entries is not None:
		builder = _DocumentBuilder(Stage.AGENT, ())
		used, _skipped = _parse_json_entries(builder, entries)
		if entries and used == 0:
			raise ValueError("report has no usable test result entries")
		return dict(builder.statuses)
	if isinstance(payload, dict):
		return {
			name: normalize_status(token)
			for name, token in payload.items()
			if isinstance(name, str) and isinstance(token, str)
		}
	raise ValueError("report must be a JSON list or object")
