from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.backend import constants


class ApiError(BaseModel):
	model_config = ConfigDict(extra="forbid")

	code: str
	message: str
	evidence: List[str] = Field(default_factory=list)


class ApiEnvelope(BaseModel):
	model_config = ConfigDict(extra="allow")

	ok: bool
	generated_at: str
	request_id: Optional[str] = None
	data: Optional[Dict[str, Any]] = None
	error: Optional[ApiError] = None


class StageLogs(BaseModel):
	model_config = ConfigDict(extra="forbid")

	base: Optional[str] = Field(default=None, description="Raw base log text.")
	before: Optional[str] = Field(default=None, description="Raw before log text.")
	after: Optional[str] = Field(default=None, description="Raw after log text.")
	agent: Optional[str] = Field(default=None, description="Raw post agent patch log text.")

	def as_mapping(self) -> Dict[str, Optional[str]]:
		return {
			"base": self.base,
			"before": self.before,
			"after": self.after,
			"agent": self.agent,
		}


class AnalyzeRequest(BaseModel):
	model_config = ConfigDict(extra="forbid")

	logs: StageLogs = Field(default_factory=StageLogs)
	manifest: str = Field(..., description="main.json text with fail_to_pass / pass_to_pass.")
	source_diff: Optional[str] = Field(default=None, description="Optional source code diff.")
	report: Optional[str] = Field(default=None, description="Optional report of declared statuses.")


class SearchRequest(BaseModel):
	model_config = ConfigDict(extra="forbid")

	logs: StageLogs = Field(default_factory=StageLogs)
	test_name: str = Field(default="", description="Exact, case-sensitive text to look for.")
	context_lines: Optional[int] = Field(default=None, ge=0, le=constants.MAX_SEARCH_CONTEXT_LINES)


class ListTestsRequest(BaseModel):
	model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

	manifest: str
	filter: Optional[str] = Field(default=None, description="Case-insensitive name filter.")


class DeliverableRequest(BaseModel):
	model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

	path: str = Field(..., min_length=1, description="Local deliverable folder.")
	test_name: Optional[str] = Field(default=None, description="When set, search instead of analyze.")
	context_lines: Optional[int] = Field(default=None, ge=0, le=constants.MAX_SEARCH_CONTEXT_LINES)
