# app/backend/review/p2p_never_passed.py
from __future__ import annotations

from .checks import build_check, matching_rows
from .types import RuleCheck, RuleContext, StatusMatrixRow, TestSet, TestStatus


def _never_passed_before_fix(row: StatusMatrixRow) -> bool:
	return row.base == TestStatus.MISSING and row.before in {TestStatus.MISSING, TestStatus.FAILED}


def check(ctx: RuleContext) -> RuleCheck:
	examples = matching_rows(ctx.rows, _never_passed_before_fix, test_set=TestSet.P2P)
	return build_check("C4", examples)
