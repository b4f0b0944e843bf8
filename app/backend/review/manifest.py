# app/backend/review/manifest.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import ManifestError
from .types import Manifest


_F2P_KEYS = ("fail_to_pass", "FAIL_TO_PASS", "f2p")
_P2P_KEYS = ("pass_to_pass", "PASS_TO_PASS", "p2p")


def _raw_names(payload: Dict[str, Any], keys: Sequence[str]) -> Tuple[List[str], Optional[str]]:
	"""Return the names under the first present key and a problem, if any.

	A bad value only empties its own list.
	"""
	value: Optional[Any] = None
	found_key = keys[0]
	for key in keys:
		if key in payload:
			value = payload[key]
			found_key = key
			break
	if isinstance(value, str):
		# SWE-bench instance files store the list as a JSON-encoded string.
		try:
			value = json.loads(value)
		except json.JSONDecodeError as exc:
			return [], f"Invalid test list under {found_key}: {exc}"
	if value is None:
		return [], None
	if not isinstance(value, list):
		return [], f"{found_key} must be a list of test names."
	return [item for item in value if isinstance(item, str) and item], None


def _repeated(names: List[str]) -> List[str]:
	duplicates: List[str] = []
	seen = set()
	for name in names:
		if name in seen:
			if name not in duplicates:
				duplicates.append(name)
			continue
		seen.add(name)
	return duplicates


def parse_manifest(text: Optional[str]) -> Manifest:
	"""Parse ``main.json`` into the ordered F2P and P2P name lists.

	Absent keys are empty lists, as are empty names. A key holding something
	other than a list of names is read as empty and noted on ``Manifest.problems``;
	only text that is not a JSON object raises ``ManifestError``. Repeated
	names and names declared in both sets are kept in the lists (manifest order
	is the report order) and reported on ``Manifest.duplicates`` /
	``Manifest.overlap``.
	"""
	if text is None or not text.strip():
		return Manifest()
	try:
		payload = json.loads(text)
	except json.JSONDecodeError as exc:
		raise ManifestError(f"Manifest is not valid JSON: {exc}") from exc
	if not isinstance(payload, dict):
		raise ManifestError("Manifest must be a JSON object.")

	f2p_list, f2p_problem = _raw_names(payload, _F2P_KEYS)
	p2p_list, p2p_problem = _raw_names(payload, _P2P_KEYS)
	fail_to_pass = tuple(f2p_list)
	pass_to_pass = tuple(p2p_list)
	f2p_dupes = _repeated(f2p_list)
	p2p_dupes = _repeated(p2p_list)
	p2p_names = set(pass_to_pass)
	overlap: List[str] = []
	for name in fail_to_pass:
		if name in p2p_names and name not in overlap:
			overlap.append(name)
	duplicates = f2p_dupes + [name for name in p2p_dupes if name not in f2p_dupes]
	return Manifest(
		fail_to_pass=fail_to_pass,
		pass_to_pass=pass_to_pass,
		duplicates=tuple(duplicates),
		overlap=tuple(overlap),
		problems=tuple(problem for problem in (f2p_problem, p2p_problem) if problem),
	)
