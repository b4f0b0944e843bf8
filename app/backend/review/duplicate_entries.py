# app/backend/review/duplicate_entries.py
from __future__ import annotations

from typing import List

from .checks import build_check
from .types import STAGES, RuleCheck, RuleContext


def check(ctx: RuleContext) -> RuleCheck:
	repeated_in_manifest = set(ctx.manifest.duplicates) | set(ctx.manifest.overlap)
	examples: List[str] = []
	for row in ctx.rows:
		if row.test_name in repeated_in_manifest:
			examples.append(row.test_name)
			continue
		for stage in STAGES:
			document = ctx.documents.get(stage)
			if document is not None and document.occurrence_count(row.test_name) > 1:
				examples.append(row.test_name)
				break
	return build_check("C5", examples)
