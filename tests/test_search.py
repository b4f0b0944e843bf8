from unittest import TestCase

from app.backend.review.search import next_index, previous_index, search_log, search_logs, select_result
from app.backend.review.types import STAGES, LogDocument, Stage


def _document(lines, stage: Stage = Stage.BASE) -> LogDocument:
	return LogDocument(stage=stage, lines=tuple(lines))


class LogSearchTests(TestCase):
	def test_two_matches_in_line_order_with_wraparound(self) -> None:
		lines = [f"line {i}" for i in range(1, 11)]
		lines[2] = "RUN test_alpha"
		lines[7] = "PASS test_alpha"
		results = search_log(_document(lines), "test_alpha")
		self.assertEqual([r.line_number for r in results], [3, 8])
		self.assertEqual(next_index(1, len(results)), 0)
		self.assertEqual(previous_index(0, len(results)), 1)
		self.assertEqual(select_result(results, 2).line_number, 3)

	def test_context_is_clipped_at_boundaries(self) -> None:
		lines = ["test_a starts", "one", "two", "three", "four", "test_a ends"]
		first, last = search_log(_document(lines), "test_a", context_lines=3)
		self.assertEqual(first.context_before, ())
		self.assertEqual(first.context_after, ("one", "two", "three"))
		self.assertEqual(last.context_before, ("two", "three", "four"))
		self.assertEqual(last.context_after, ())
		self.assertEqual(last.line_content, "test_a ends")

	def test_matching_is_case_sensitive_substring(self) -> None:
		lines = ["Test_Alpha", "xtest_alphax", "test_alph"]
		results = search_log(_document(lines), "test_alpha")
		self.assertEqual([r.line_number for r in results], [2])

	def test_regex_characters_are_literal(self) -> None:
		lines = ["test[param-1] PASSED", "testXparam-1] PASSED"]
		results = search_log(_document(lines), "test[param-1]")
		self.assertEqual([r.line_number for r in results], [1])

	def test_no_match_and_empty_name_return_empty(self) -> None:
		doc = _document(["a", "b"])
		self.assertEqual(search_log(doc, "zzz"), [])
		self.assertEqual(search_log(doc, ""), [])
		self.assertIsNone(select_result([], 0))
		self.assertEqual(next_index(0, 0), 0)

	def test_search_logs_covers_every_stage(self) -> None:
		documents = {Stage.AFTER: _document(["t1 ok"], Stage.AFTER)}
		results = search_logs(documents, "t1")
		self.assertEqual(list(results), list(STAGES))
		self.assertEqual(len(results[Stage.AFTER]), 1)
		self.assertEqual(results[Stage.AFTER][0].stage, Stage.AFTER)
		self.assertEqual(results[Stage.BASE], [])
