# app/backend/review/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple


class TestStatus(str, Enum):
	__test__ = False

	PASSED = "passed"
	FAILED = "failed"
	MISSING = "missing"


class Stage(str, Enum):
	BASE = "base"
	BEFORE = "before"
	AFTER = "after"
	AGENT = "agent"

	@classmethod
	def resolve(cls, value: object) -> "Stage":
		if isinstance(value, Stage):
			return value
		if isinstance(value, str):
			try:
				return cls(value.strip().lower())
			except ValueError:
				pass
		raise ValueError(f"Unknown stage: {value!r}")


class TestSet(str, Enum):
	__test__ = False

	F2P = "fail_to_pass"
	P2P = "pass_to_pass"


STAGES: Tuple[Stage, ...] = (Stage.BASE, Stage.BEFORE, Stage.AFTER, Stage.AGENT)


@dataclass(frozen=True)
class LogRecord:
	test_name: str
	status: str
	normalized: TestStatus
	line_number: int = 0
	occurrences: int = 1


@dataclass(frozen=True)
class LogDocument:
	stage: Stage
	lines: Tuple[str, ...] = ()
	records: Tuple[LogRecord, ...] = ()
	statuses: Mapping[str, TestStatus] = field(default_factory=dict)
	occurrences: Mapping[str, int] = field(default_factory=dict)
	conflicts: Tuple[str, ...] = ()
	parse_error: Optional[str] = None

	@property
	def degraded(self) -> bool:
		return self.parse_error is not None

	def status_of(self, test_name: str) -> TestStatus:
		return self.statuses.get(test_name, TestStatus.MISSING)

	def occurrence_count(self, test_name: str) -> int:
		return self.occurrences.get(test_name, 0)

	def duplicates(self) -> List[str]:
		return [name for name, count in self.occurrences.items() if count > 1]


@dataclass(frozen=True)
class Manifest:
	fail_to_pass: Tuple[str, ...] = ()
	pass_to_pass: Tuple[str, ...] = ()
	duplicates: Tuple[str, ...] = ()
	overlap: Tuple[str, ...] = ()
	problems: Tuple[str, ...] = ()

	@property
	def is_empty(self) -> bool:
		return not self.fail_to_pass and not self.pass_to_pass

	def declared(self) -> Iterator[Tuple[str, TestSet]]:
		seen = set()
		for test_set, names in ((TestSet.F2P, self.fail_to_pass), (TestSet.P2P, self.pass_to_pass)):
			for name in names:
				if name in seen:
					continue
				seen.add(name)
				yield name, test_set


@dataclass(frozen=True)
class StatusMatrixRow:
	test_name: str
	test_set: TestSet
	base: TestStatus
	before: TestStatus
	after: TestStatus
	agent: TestStatus

	def status(self, stage: Stage) -> TestStatus:
		return getattr(self, stage.value)

	def as_dict(self) -> Dict[str, str]:
		return {stage.value: self.status(stage).value for stage in STAGES}


@dataclass(frozen=True)
class RuleCheck:
	rule_id: str
	key: str
	has_problem: bool
	examples: Tuple[str, ...]
	description: str


@dataclass(frozen=True)
class SearchResult:
	stage: Stage
	line_number: int
	line_content: str
	context_before: Tuple[str, ...]
	context_after: Tuple[str, ...]


@dataclass(frozen=True)
class AnalysisWarning:
	code: str
	message: str
	stage: Optional[Stage] = None


@dataclass
class RuleContext:
	rows: List[StatusMatrixRow]
	documents: Mapping[Stage, LogDocument]
	manifest: Manifest
	source_diff: Optional[str] = None
	report: Optional[Mapping[str, TestStatus]] = None
