"""Unit tests for utils/report_utils.py"""

import json
import sys
from pathlib import Path

_python_dir = Path(__file__).parent.parent / "python"
if str(_python_dir.absolute()) not in sys.path:
    sys.path.insert(0, str(_python_dir.absolute()))

from utils.image_migrator import MigrationResult
from utils.outcome_log import Outcome
from utils.report_utils import build_results_table, save_json, summarize_results

TARGET = "111122223333.dkr.ecr.us-east-1.amazonaws.com/docker-dev/foo/bar:1.0"


def _results():
    return [
        MigrationResult("host/docker-dev/foo/bar:1.0", Outcome.PUSHED, TARGET),
        MigrationResult("host/docker-dev/foo/baz:2.0", Outcome.SKIP_EXISTED, TARGET.replace("bar:1.0", "baz:2.0")),
        MigrationResult("host/docker-release/x:1", Outcome.SKIP_SCOPE),
        MigrationResult("host/docker-dev/broken:1", Outcome.FAILED_PUSH, TARGET.replace("bar:1.0", "broken:1")),
    ]


class TestSummaries:
    def test_summarize_results(self):
        summary = summarize_results(_results())

        assert summary["total"] == 4
        assert summary["succeeded"] == 3
        assert summary["failed"] == 1
        assert summary["by_outcome"] == {
            "FAILED_PUSH": 1,
            "PUSHED": 1,
            "SKIP-EXISTED": 1,
            "SKIP-SCOPE": 1,
        }

    def test_summarize_empty(self):
        assert summarize_results([]) == {"total": 0, "succeeded": 0, "failed": 0, "by_outcome": {}}

    def test_build_results_table(self):
        table = build_results_table(_results())

        assert "Outcome" in table
        assert "PUSHED" in table
        assert "FAILED_PUSH" in table
        assert TARGET in table
        # Skipped-by-scope rows have no target
        assert " - " in table


class TestSaveJson:
    def test_save_json_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "summary.json"
        data = {"summary": {"total": 1}, "results": [{"artifact": "a", "target": None}]}

        saved = save_json(str(path), data)

        assert saved == str(path)
        with open(path) as f:
            assert json.load(f) == data
