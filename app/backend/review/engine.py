# app/backend/review/engine.py
from __future__ import annotations

import logging
from typing import List

from app.backend import constants
from .agent_report_mismatch import check as check_agent_report_mismatch
from .duplicate_entries import check as check_duplicate_entries
from .f2p_in_diff import check as check_f2p_in_diff
from .f2p_passed_in_before import check as check_f2p_passed_in_before
from .failed_in_after import check as check_failed_in_after
from .p2p_failed_in_base import check as check_p2p_failed_in_base
from .p2p_never_passed import check as check_p2p_never_passed
from .types import RuleCheck, RuleContext


logger = logging.getLogger(__name__)


def evaluate_rules(ctx: RuleContext) -> List[RuleCheck]:
	checks = {
		"C1": check_p2p_failed_in_base,
		"C2": check_failed_in_after,
		"C3": check_f2p_passed_in_before,
		"C4": check_p2p_never_passed,
		"C5": check_duplicate_entries,
		"C6": check_agent_report_mismatch,
		"C7": check_f2p_in_diff,
	}
	results: List[RuleCheck] = [checks[rule_id](ctx) for rule_id in constants.RULE_ORDER]
	failing = [result.rule_id for result in results if result.has_problem]
	logger.info("Evaluated %d rules over %d tests; failing: %s", len(results), len(ctx.rows), failing or "none")
	return results
