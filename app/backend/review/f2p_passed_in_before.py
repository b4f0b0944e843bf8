# app/backend/review/f2p_passed_in_before.py
from __future__ import annotations

from .checks import build_check, matching_rows
from .types import RuleCheck, RuleContext, TestSet, TestStatus


def check(ctx: RuleContext) -> RuleCheck:
	examples = matching_rows(
		ctx.rows,
		lambda row: row.before == TestStatus.PASSED,
		test_set=TestSet.F2P,
	)
	return build_check("C3", examples)
