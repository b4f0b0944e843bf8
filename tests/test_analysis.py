import json
import os
from unittest import TestCase

from app.backend.review.analysis import analyze, search
from app.backend.review.report import serialize_result
from app.backend.review.types import STAGES, Stage, TestStatus


def _log(entries) -> str:
	return json.dumps([{"test_name": name, "status": status} for name, status in entries])


SCENARIO_MANIFEST = json.dumps({"fail_to_pass": ["t1"], "pass_to_pass": ["t2"]})
SCENARIO_LOGS = {
	"base": _log([("t2", "failed")]),
	"before": _log([("t1", "passed")]),
	"after": _log([("t1", "passed"), ("t2", "passed")]),
	"agent": "",
}


class AnalyzeScenarioTests(TestCase):
	def test_reference_scenario(self) -> None:
		result = analyze(SCENARIO_LOGS, SCENARIO_MANIFEST)
		problems = {check.rule_id: list(check.examples) for check in result.rule_checks if check.has_problem}
		self.assertEqual(problems, {"C1": ["t2"], "C3": ["t1"]})
		self.assertFalse(result.rule_check("C2").has_problem)
		self.assertFalse(result.rule_check("C4").has_problem)
		self.assertEqual(result.warnings, ())
		self.assertTrue(result.has_problem)

	def test_unparseable_stage_degrades_with_warning(self) -> None:
		logs = dict(SCENARIO_LOGS, after="not json")
		result = analyze(logs, SCENARIO_MANIFEST)
		for name in ("t1", "t2"):
			self.assertEqual(result.status_of(name, Stage.AFTER), TestStatus.MISSING)
		self.assertEqual(result.warning_codes(), ["parse_degraded"])
		self.assertEqual(result.warnings[0].stage, Stage.AFTER)
		self.assertEqual(len(result.rule_checks), 7)
		self.assertEqual(list(result.rule_check("C2").examples), ["t1", "t2"])

	def test_matrix_order_follows_manifest(self) -> None:
		manifest = json.dumps({"fail_to_pass": ["zz", "yy", "xx"], "pass_to_pass": ["ww", "vv"]})
		result = analyze({}, manifest)
		self.assertEqual([row.test_name for row in result.rows], ["zz", "yy", "xx", "ww", "vv"])
		self.assertEqual(list(serialize_result(result)["f2p_analysis"]), ["zz", "yy", "xx"])

	def test_undeclared_everywhere_gives_four_missing(self) -> None:
		result = analyze({}, json.dumps({"fail_to_pass": ["ghost"]}))
		row = result.row("ghost")
		self.assertEqual([row.status(stage) for stage in STAGES], [TestStatus.MISSING] * 4)

	def test_empty_manifest_warns_and_completes(self) -> None:
		result = analyze(SCENARIO_LOGS, "{}")
		self.assertEqual(result.rows, ())
		self.assertIn("manifest_empty", result.warning_codes())
		self.assertFalse(result.has_problem)

	def test_invalid_manifest_is_a_warning(self) -> None:
		result = analyze(SCENARIO_LOGS, "not json")
		self.assertEqual(result.warning_codes(), ["manifest_invalid", "manifest_empty"])

	def test_bad_manifest_list_keeps_the_other_set(self) -> None:
		manifest = json.dumps({"fail_to_pass": "t1", "pass_to_pass": ["t2"]})
		result = analyze({"base": _log([("t2", "failed")])}, manifest)
		self.assertEqual([row.test_name for row in result.rows], ["t2"])
		self.assertEqual(result.warning_codes(), ["manifest_invalid"])
		self.assertEqual(list(result.rule_check("C1").examples), ["t2"])

	def test_pytest_short_summary_is_not_a_duplicate(self) -> None:
		after = "\n".join(
			[
				"tests/test_a.py::test_x FAILED [100%]",
				"=== short test summary info ===",
				"FAILED tests/test_a.py::test_x - AssertionError",
			]
		)
		result = analyze({"after": after}, json.dumps({"fail_to_pass": ["tests/test_a.py::test_x"]}))
		self.assertFalse(result.rule_check("C5").has_problem)
		self.assertEqual(result.status_of("tests/test_a.py::test_x", Stage.AFTER), TestStatus.FAILED)

	def test_overlap_and_conflict_warnings(self) -> None:
		manifest = json.dumps({"fail_to_pass": ["t1"], "pass_to_pass": ["t1"]})
		logs = {"after": _log([("t1", "passed"), ("t1", "failed")])}
		result = analyze(logs, manifest)
		self.assertEqual(result.warning_codes(), ["status_conflict", "manifest_overlap"])
		self.assertEqual(list(result.rule_check("C5").examples), ["t1"])

	def test_unknown_stage_key_is_rejected(self) -> None:
		with self.assertRaises(ValueError):
			analyze({"post_agent": "[]"}, SCENARIO_MANIFEST)

	def test_stage_enum_keys_are_accepted(self) -> None:
		logs = {Stage.resolve(key): text for key, text in SCENARIO_LOGS.items()}
		self.assertEqual(
			[c.has_problem for c in analyze(logs, SCENARIO_MANIFEST).rule_checks],
			[c.has_problem for c in analyze(SCENARIO_LOGS, SCENARIO_MANIFEST).rule_checks],
		)

	def test_sequential_parse_matches_parallel(self) -> None:
		previous = os.environ.get("REVIEW_PARALLEL_PARSE")
		os.environ["REVIEW_PARALLEL_PARSE"] = "0"
		try:
			sequential = serialize_result(analyze(SCENARIO_LOGS, SCENARIO_MANIFEST))
		finally:
			if previous is None:
				os.environ.pop("REVIEW_PARALLEL_PARSE", None)
			else:
				os.environ["REVIEW_PARALLEL_PARSE"] = previous
		self.assertEqual(sequential, serialize_result(analyze(SCENARIO_LOGS, SCENARIO_MANIFEST)))

	def test_diff_and_report_feed_c6_and_c7(self) -> None:
		logs = dict(SCENARIO_LOGS, agent=_log([("t1", "passed"), ("t2", "failed")]))
		report = json.dumps({"t1": "passed", "t2": "passed"})
		result = analyze(logs, SCENARIO_MANIFEST, "+    def t1(self):", report)
		self.assertEqual(list(result.rule_check("C6").examples), ["t2"])
		self.assertEqual(list(result.rule_check("C7").examples), ["t1"])

	def test_invalid_report_is_a_warning(self) -> None:
		result = analyze(SCENARIO_LOGS, SCENARIO_MANIFEST, report_text="nope")
		self.assertEqual(result.warning_codes(), ["report_invalid"])
		self.assertFalse(result.rule_check("C6").has_problem)


class ViolationSummaryTests(TestCase):
	def setUp(self) -> None:
		manifest = json.dumps({"fail_to_pass": ["f_ok", "f_fail", "f_gone"], "pass_to_pass": ["p_base"]})
		logs = {
			"base": _log([("p_base", "failed")]),
			"before": _log([("f_ok", "passed")]),
			"after": _log([("f_ok", "passed"), ("f_fail", "failed"), ("p_base", "passed")]),
		}
		self.result = analyze(logs, manifest)

	def test_reverse_index_lists_rules_per_test(self) -> None:
		self.assertEqual(self.result.rules_by_test["f_ok"], ("C3",))
		self.assertEqual(self.result.rules_by_test["p_base"], ("C1",))
		self.assertEqual(self.result.violations_for("f_fail"), ["C2", "failed_in_after"])
		self.assertEqual(self.result.violations_for("f_gone"), ["C2", "missing_in_after"])
		self.assertEqual(self.result.violations_for("unknown"), [])

	def test_per_test_after_checks_agree_with_c2(self) -> None:
		c2 = set(self.result.rule_check("C2").examples)
		for row in self.result.rows:
			per_test = set(self.result.violations_for(row.test_name)) & {"missing_in_after", "failed_in_after"}
			self.assertEqual(bool(per_test), row.test_name in c2, row.test_name)

	def test_violation_messages(self) -> None:
		self.assertEqual(
			self.result.violation_messages("f_gone"),
			[
				"At least one failed test in after log is present in F2P / P2P",
				"Test is missing in after log",
			],
		)
		self.assertTrue(self.result.has_any_violation("f_ok"))

	def test_serialized_shape(self) -> None:
		payload = serialize_result(self.result)
		self.assertEqual(payload["status"], "fail")
		self.assertEqual(payload["p2p_analysis"]["p_base"]["base"], "failed")
		self.assertEqual(
			payload["rule_checks"]["c1_failed_in_base_present_in_P2P"]["examples"],
			["p_base"],
		)
		self.assertEqual(payload["rows"][0]["after_status"], "passed")
		self.assertEqual(payload["rows"][0]["type"], "fail_to_pass")


class SearchEntryPointTests(TestCase):
	def test_search_returns_every_stage(self) -> None:
		logs = {"base": "a\nt1 one\nb\nt1 two", "after": "t1"}
		results = search(logs, "t1", context_lines=1)
		self.assertEqual([r.line_number for r in results[Stage.BASE]], [2, 4])
		self.assertEqual(results[Stage.BASE][0].context_before, ("a",))
		self.assertEqual(results[Stage.BASE][0].context_after, ("b",))
		self.assertEqual(len(results[Stage.AFTER]), 1)
		self.assertEqual(results[Stage.AGENT], [])

	def test_line_numbers_count_newlines_only(self) -> None:
		results = search({"base": "header\x0cpage2\r\ntest_x ok\n"}, "test_x", context_lines=1)
		self.assertEqual(results[Stage.BASE][0].line_number, 2)
		self.assertEqual(results[Stage.BASE][0].context_before, ("header\x0cpage2",))

	def test_empty_test_name_returns_empty_results(self) -> None:
		results = search({"base": "t1"}, "")
		self.assertEqual(results, {stage: [] for stage in STAGES})

	def test_default_context_comes_from_environment(self) -> None:
		previous = os.environ.get("REVIEW_SEARCH_CONTEXT_LINES")
		os.environ["REVIEW_SEARCH_CONTEXT_LINES"] = "1"
		try:
			results = search({"base": "a\nb\nt1\nc\nd"}, "t1")
		finally:
			if previous is None:
				os.environ.pop("REVIEW_SEARCH_CONTEXT_LINES", None)
			else:
				os.environ["REVIEW_SEARCH_CONTEXT_LINES"] = previous
		self.assertEqual(results[Stage.BASE][0].context_before, ("b",))
		self.assertEqual(results[Stage.BASE][0].context_after, ("c",))
