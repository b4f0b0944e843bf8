APP_NAME = "Deliverable Review App"
APP_VERSION = "1.0.0"
DEFAULT_CORS_ALLOW_ORIGINS = [
	"http://localhost",
	"http://127.0.0.1",
	"http://localhost:3000",
	"tauri://localhost",
]
DEFAULT_TRUSTED_HOSTS = [
	"127.0.0.1",
	"localhost",
	"testserver",
]

DEFAULT_SEARCH_CONTEXT_LINES = 3
MAX_SEARCH_CONTEXT_LINES = 50
DEFAULT_LOG_LEVEL = "INFO"

RULE_ORDER = [
	"C1",
	"C2",
	"C3",
	"C4",
	"C5",
	"C6",
	"C7",
]

RULE_KEYS = {
	"C1": "c1_failed_in_base_present_in_P2P",
	"C2": "c2_failed_in_after_present_in_F2P_or_P2P",
	"C3": "c3_F2P_success_in_before",
	"C4": "c4_P2P_missing_in_base_and_not_passing_in_before",
	"C5": "c5_duplicates_in_same_log_for_F2P_or_P2P",
	"C6": "c6_agent_status_disagrees_with_report",
	"C7": "c7_F2P_present_in_source_diff",
}

RULE_DESCRIPTIONS = {
	"C1": "At least one failed test in base log is present in P2P",
	"C2": "At least one failed test in after log is present in F2P / P2P",
	"C3": "At least one F2P test is present and successful in before log",
	"C4": (
		"At least one P2P, that is missing in base, and is found but failing in before "
		"or is missing from base and before"
	),
	"C5": "At least one F2P / P2P test name is duplicated (present 2 times in the same logs)",
	"C6": "At least one test status in the report disagrees with the agent log",
	"C7": "At least one F2P test name appears in the source code diff",
}

TEST_VIOLATION_MESSAGES = {
	"missing_in_after": "Test is missing in after log",
	"failed_in_after": "Test failed in after log",
}

# Deliverable folder layout: <instance>.json next to a logs/ folder.
LOGS_DIR_NAME = "logs"
MANIFEST_FALLBACK_NAME = "main.json"
REPORT_FILE_NAMES = ("report.json", "analysis.json", "results.json")
DIFF_SUFFIXES = (".diff", ".patch")
STAGE_LOG_SUFFIXES = {
	"base": "_base.log",
	"before": "_before.log",
	"after": "_after.log",
	"agent": "_post_agent_patch.log",
}
