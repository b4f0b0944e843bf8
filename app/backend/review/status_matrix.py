# app/backend/review/status_matrix.py
from __future__ import annotations

from typing import List, Mapping

from .types import LogDocument, Manifest, Stage, StatusMatrixRow, TestStatus


def _lookup(documents: Mapping[Stage, LogDocument], stage: Stage, test_name: str) -> TestStatus:
	document = documents.get(stage)
	if document is None:
		return TestStatus.MISSING
	return document.status_of(test_name)


def build_status_matrix(
	manifest: Manifest,
	documents: Mapping[Stage, LogDocument],
) -> List[StatusMatrixRow]:
	rows: List[StatusMatrixRow] = []
	for test_name, test_set in manifest.declared():
		rows.append(
			StatusMatrixRow(
				test_name=test_name,
				test_set=test_set,
				base=_lookup(documents, Stage.BASE, test_name),
				before=_lookup(documents, Stage.BEFORE, test_name),
				after=_lookup(documents, Stage.AFTER, test_name),
				agent=_lookup(documents, Stage.AGENT, test_name),
			)
		)
	return rows
