from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from app.backend import constants
from app.backend.review.errors import DeliverableError
from app.backend.review.types import Stage


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliverablePaths:
	root: str
	manifest_path: str
	log_paths: Dict[Stage, str] = field(default_factory=dict)
	diff_path: Optional[str] = None
	report_path: Optional[str] = None


@dataclass(frozen=True)
class DeliverableTexts:
	manifest_text: str
	logs: Dict[Stage, str]
	source_diff_text: Optional[str] = None
	report_text: Optional[str] = None


def _files(directory: Path) -> List[Path]:
	return sorted(path for path in directory.iterdir() if path.is_file())


def _instance_name(root: Path) -> str:
	parts = root.name.split()
	return parts[0] if parts else root.name


def _find_manifest(root: Path) -> Optional[Path]:
	# Drive deliverables name the manifest after the folder's first word.
	candidates = [f"{_instance_name(root)}.json", constants.MANIFEST_FALLBACK_NAME]
	main_dir = root / "main"
	for directory in (root, main_dir):
		if not directory.is_dir():
			continue
		for name in candidates:
			path = directory / name
			if path.is_file():
				return path
		if directory == main_dir:
			json_files = [path for path in _files(directory) if path.suffix.lower() == ".json"]
			if len(json_files) == 1:
				return json_files[0]
	return None


def _find_logs_dir(root: Path) -> Optional[Path]:
	for path in sorted(root.iterdir()):
		if path.is_dir() and path.name.lower() == constants.LOGS_DIR_NAME:
			return path
	return None


def _match_stage_logs(logs_dir: Path) -> Dict[Stage, Path]:
	matched: Dict[Stage, Path] = {}
	for path in _files(logs_dir):
		lower = path.name.lower()
		for stage_name, suffix in constants.STAGE_LOG_SUFFIXES.items():
			stage = Stage.resolve(stage_name)
			if lower.endswith(suffix) and stage not in matched:
				matched[stage] = path
	return matched


def _find_optional(root: Path, logs_dir: Path, predicate) -> Optional[Path]:
	for directory in (root, logs_dir):
		for path in _files(directory):
			if predicate(path):
				return path
	return None


def locate_deliverable(root_path: str) -> DeliverablePaths:
	"""Tag every file of a local deliverable folder with its role.

	Roles are decided here, once, from the folder layout; nothing downstream
	looks at file names again.
	"""
	root = Path(root_path)
	if not root.is_dir():
		raise DeliverableError(f"Deliverable folder not found: {root_path}")
	found = sorted(path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file())

	manifest_path = _find_manifest(root)
	if manifest_path is None:
		raise DeliverableError(
			f"Missing required manifest: {_instance_name(root)}.json",
			found=found,
		)
	logs_dir = _find_logs_dir(root)
	if logs_dir is None:
		raise DeliverableError("Missing required 'logs' folder (case insensitive search)", found=found)
	log_paths = _match_stage_logs(logs_dir)
	for stage_name, suffix in constants.STAGE_LOG_SUFFIXES.items():
		if Stage.resolve(stage_name) not in log_paths:
			raise DeliverableError(
				f"Missing required log file ending with: {suffix} (case insensitive search)",
				found=found,
			)

	diff_path = _find_optional(root, logs_dir, lambda path: path.suffix.lower() in constants.DIFF_SUFFIXES)
	report_path = _find_optional(
		root,
		logs_dir,
		lambda path: path.name.lower() in constants.REPORT_FILE_NAMES,
	)
	logger.info("Located deliverable %s (diff=%s, report=%s)", root, bool(diff_path), bool(report_path))
	return DeliverablePaths(
		root=root.as_posix(),
		manifest_path=manifest_path.as_posix(),
		log_paths={stage: path.as_posix() for stage, path in log_paths.items()},
		diff_path=diff_path.as_posix() if diff_path else None,
		report_path=report_path.as_posix() if report_path else None,
	)


def _read(path: str) -> str:
	return Path(path).read_text(encoding="utf-8", errors="replace")


def read_deliverable(paths: DeliverablePaths) -> DeliverableTexts:
	return DeliverableTexts(
		manifest_text=_read(paths.manifest_path),
		logs={stage: _read(path) for stage, path in paths.log_paths.items()},
		source_diff_text=_read(paths.diff_path) if paths.diff_path else None,
		report_text=_read(paths.report_path) if paths.report_path else None,
	)


def load_deliverable(root_path: str) -> DeliverableTexts:
	return read_deliverable(locate_deliverable(root_path))
