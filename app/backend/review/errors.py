# app/backend/review/errors.py
from __future__ import annotations

from typing import List, Optional


class ReviewError(Exception):
	"""Base class for errors raised by the review engine and its adapters."""


class ManifestError(ReviewError):
	pass


class DeliverableError(ReviewError):
	def __init__(self, message: str, found: Optional[List[str]] = None):
		super().__init__(message)
		self.found = list(found or [])
