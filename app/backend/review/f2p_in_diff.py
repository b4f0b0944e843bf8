# app/backend/review/f2p_in_diff.py
from __future__ import annotations

from typing import List

from .checks import build_check
from .log_parser import split_lines
from .types import RuleCheck, RuleContext, TestSet


_DIFF_MARKERS = ("diff ", "+", "-")


def changed_lines(diff_text: str) -> List[str]:
	"""Lines of a unified diff that add, remove or name a file.

	Text without any unified diff marker is returned whole.
	"""
	lines = list(split_lines(diff_text))
	changed = [line for line in lines if line.startswith(_DIFF_MARKERS)]
	return changed if changed else lines


def check(ctx: RuleContext) -> RuleCheck:
	if not ctx.source_diff:
		return build_check("C7", [], "No source diff supplied; F2P tests were not checked against it.")
	lines = changed_lines(ctx.source_diff)
	examples = []
	for row in ctx.rows:
		if row.test_set != TestSet.F2P:
			continue
		if any(row.test_name in line for line in lines):
			examples.append(row.test_name)
	return build_check("C7", examples)
