# app/backend/review/p2p_failed_in_base.py
from __future__ import annotations

from .checks import build_check, matching_rows
from .types import RuleCheck, RuleContext, TestSet, TestStatus


def check(ctx: RuleContext) -> RuleCheck:
	examples = matching_rows(
		ctx.rows,
		lambda row: row.base == TestStatus.FAILED,
		test_set=TestSet.P2P,
	)
	return build_check("C1", examples)
