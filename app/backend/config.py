from __future__ import annotations

import logging
import os
from typing import Optional

from app.backend import constants


_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _int_env(name: str, default: int, minimum: int = 0, maximum: Optional[int] = None) -> int:
	raw = os.getenv(name, "").strip()
	if not raw:
		return default
	try:
		value = int(raw)
	except ValueError:
		return default
	if value < minimum:
		return default
	if maximum is not None and value > maximum:
		return maximum
	return value


def _bool_env(name: str, default: bool) -> bool:
	value = os.getenv(name, "").strip().lower()
	if not value:
		return default
	return value not in {"0", "false", "off", "no"}


def search_context_lines() -> int:
	return _int_env(
		"REVIEW_SEARCH_CONTEXT_LINES",
		constants.DEFAULT_SEARCH_CONTEXT_LINES,
		minimum=0,
		maximum=constants.MAX_SEARCH_CONTEXT_LINES,
	)


def parallel_parse_enabled() -> bool:
	return _bool_env("REVIEW_PARALLEL_PARSE", True)


def log_level() -> str:
	value = os.getenv("REVIEW_LOG_LEVEL", "").strip().upper()
	return value if value in _LOG_LEVELS else constants.DEFAULT_LOG_LEVEL


def configure_logging() -> None:
	logging.basicConfig(level=log_level(), format=_LOG_FORMAT)
