# app/backend/review/failed_in_after.py
from __future__ import annotations

from .checks import build_check, matching_rows
from .types import RuleCheck, RuleContext, StatusMatrixRow, TestStatus


def _not_passing_after(row: StatusMatrixRow) -> bool:
	return row.after in {TestStatus.FAILED, TestStatus.MISSING}


def check(ctx: RuleContext) -> RuleCheck:
	return build_check("C2", matching_rows(ctx.rows, _not_passing_after))
