# app/backend/review/report.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.backend import constants
from .types import (
	STAGES,
	AnalysisWarning,
	LogDocument,
	RuleCheck,
	SearchResult,
	Stage,
	StatusMatrixRow,
	TestSet,
	TestStatus,
)


@dataclass(frozen=True)
class AnalysisResult:
	rows: Tuple[StatusMatrixRow, ...]
	rule_checks: Tuple[RuleCheck, ...]
	warnings: Tuple[AnalysisWarning, ...] = ()
	documents: Mapping[Stage, LogDocument] = field(default_factory=dict)
	rules_by_test: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
	_rows_by_name: Mapping[str, StatusMatrixRow] = field(default_factory=dict, repr=False)

	@property
	def has_problem(self) -> bool:
		return any(check.has_problem for check in self.rule_checks)

	def row(self, test_name: str) -> Optional[StatusMatrixRow]:
		return self._rows_by_name.get(test_name)

	def status_of(self, test_name: str, stage: Stage) -> TestStatus:
		row = self.row(test_name)
		if row is None:
			return TestStatus.MISSING
		return row.status(stage)

	def rule_check(self, rule_id: str) -> RuleCheck:
		for check in self.rule_checks:
			if check.rule_id == rule_id:
				return check
		raise KeyError(rule_id)

	def warning_codes(self) -> List[str]:
		return [warning.code for warning in self.warnings]

	def violations_for(self, test_name: str) -> List[str]:
		"""Rule ids flagging ``test_name`` plus its after-stage checks.

		``missing_in_after`` and ``failed_in_after`` are derived from the row on
		every call, so they always agree with C2.
		"""
		violations = list(self.rules_by_test.get(test_name, ()))
		row = self.row(test_name)
		if row is None:
			return violations
		if row.after == TestStatus.MISSING:
			violations.append("missing_in_after")
		elif row.after == TestStatus.FAILED:
			violations.append("failed_in_after")
		return violations

	def violation_messages(self, test_name: str) -> List[str]:
		messages: List[str] = []
		for violation in self.violations_for(test_name):
			if violation in constants.RULE_DESCRIPTIONS:
				messages.append(constants.RULE_DESCRIPTIONS[violation])
			else:
				messages.append(constants.TEST_VIOLATION_MESSAGES[violation])
		return messages

	def has_any_violation(self, test_name: str) -> bool:
		return bool(self.violations_for(test_name))


def _reverse_index(rule_checks: Sequence[RuleCheck]) -> Dict[str, Tuple[str, ...]]:
	index: Dict[str, List[str]] = {}
	for check in rule_checks:
		if not check.has_problem:
			continue
		for test_name in check.examples:
			index.setdefault(test_name, []).append(check.rule_id)
	return {name: tuple(rule_ids) for name, rule_ids in index.items()}


def build_analysis_result(
	rows: Sequence[StatusMatrixRow],
	rule_checks: Sequence[RuleCheck],
	warnings: Sequence[AnalysisWarning] = (),
	documents: Optional[Mapping[Stage, LogDocument]] = None,
) -> AnalysisResult:
	return AnalysisResult(
		rows=tuple(rows),
		rule_checks=tuple(rule_checks),
		warnings=tuple(warnings),
		documents=dict(documents or {}),
		rules_by_test=_reverse_index(rule_checks),
		_rows_by_name={row.test_name: row for row in rows},
	)


def serialize_result(result: AnalysisResult) -> Dict[str, Any]:
	f2p: Dict[str, Dict[str, str]] = {}
	p2p: Dict[str, Dict[str, str]] = {}
	for row in result.rows:
		target = f2p if row.test_set == TestSet.F2P else p2p
		target[row.test_name] = row.as_dict()
	return {
		"status": "fail" if result.has_problem else "pass",
		"f2p_analysis": f2p,
		"p2p_analysis": p2p,
		"rows": [
			{
				"test_name": row.test_name,
				"type": row.test_set.value,
				**{f"{stage.value}_status": row.status(stage).value for stage in STAGES},
				"violations": result.violations_for(row.test_name),
			}
			for row in result.rows
		],
		"rule_checks": {
			check.key: {
				"rule_id": check.rule_id,
				"has_problem": check.has_problem,
				"examples": list(check.examples),
				"description": check.description,
			}
			for check in result.rule_checks
		},
		"warnings": [
			{
				"code": warning.code,
				"message": warning.message,
				"stage": warning.stage.value if warning.stage else None,
			}
			for warning in result.warnings
		],
	}


def serialize_search_result(result: SearchResult) -> Dict[str, Any]:
	return {
		"line_number": result.line_number,
		"line_content": result.line_content,
		"context_before": list(result.context_before),
		"context_after": list(result.context_after),
	}
