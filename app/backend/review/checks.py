# app/backend/review/checks.py
from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from app.backend import constants
from .types import RuleCheck, StatusMatrixRow, TestSet


RowPredicate = Callable[[StatusMatrixRow], bool]


def matching_rows(
	rows: Iterable[StatusMatrixRow],
	predicate: RowPredicate,
	test_set: Optional[TestSet] = None,
) -> List[str]:
	names: List[str] = []
	for row in rows:
		if test_set is not None and row.test_set != test_set:
			continue
		if predicate(row) and row.test_name not in names:
			names.append(row.test_name)
	return names


def build_check(rule_id: str, examples: Iterable[str], description: Optional[str] = None) -> RuleCheck:
	ordered = tuple(examples)
	return RuleCheck(
		rule_id=rule_id,
		key=constants.RULE_KEYS[rule_id],
		has_problem=bool(ordered),
		examples=ordered,
		description=description or constants.RULE_DESCRIPTIONS[rule_id],
	)
