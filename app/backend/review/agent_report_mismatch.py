# app/backend/review/agent_report_mismatch.py
from __future__ import annotations

from .checks import build_check
from .types import RuleCheck, RuleContext


def check(ctx: RuleContext) -> RuleCheck:
	if ctx.report is None:
		return build_check("C6", [], "No report supplied; agent log statuses were not cross-checked.")
	examples = []
	for row in ctx.rows:
		declared = ctx.report.get(row.test_name)
		if declared is None:
			continue
		if declared != row.agent:
			examples.append(row.test_name)
	return build_check("C6", examples)
