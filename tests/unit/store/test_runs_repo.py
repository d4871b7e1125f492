"""Tests for store.runs_repo and store.errors_repo modules."""

from sqlalchemy import text

from store.errors_repo import record_error
from store.runs_repo import RunCounters, derive_run_status, finish_run, start_run


class TestDeriveRunStatus:
    def test_success_when_no_source_failed(self) -> None:
        assert derive_run_status(RunCounters(sources_ok=3)) == "success"

    def test_success_with_no_sources(self) -> None:
        assert derive_run_status(RunCounters()) == "success"

    def test_partial_failure(self) -> None:
        assert derive_run_status(RunCounters(sources_ok=2, sources_failed=1)) == "partial_failure"

    def test_failure_when_all_failed(self) -> None:
        assert derive_run_status(RunCounters(sources_failed=2)) == "failure"


class TestRunLifecycle:
    def test_start_then_finish(self, session) -> None:
        start_run(session, "run-1")
        row = session.execute(text("SELECT status FROM runs WHERE run_id = 'run-1'")).one()
        assert row.status == "in_progress"

        counters = RunCounters(sources_ok=1, sources_failed=1, items_new=4, duration_ms=1200)
        assert finish_run(session, "run-1", counters) == "partial_failure"

        row = session.execute(text("SELECT * FROM runs WHERE run_id = 'run-1'")).mappings().one()
        assert row["status"] == "partial_failure"
        assert row["items_new"] == 4
        assert row["duration_ms"] == 1200
        assert row["finished_at"] is not None


class TestRecordError:
    def test_stores_message_and_code(self, session) -> None:
        class CodedError(RuntimeError):
            code = "http_503"

        record_error(session, "run-1", "ingest", "ynet_main", None, CodedError("Feed HTTP 503"))

        row = session.execute(text("SELECT * FROM error_events")).mappings().one()
        assert row["phase"] == "ingest"
        assert row["source_id"] == "ynet_main"
        assert row["story_id"] is None
        assert row["code"] == "http_503"
        assert row["message"] == "Feed HTTP 503"

    def test_plain_string_reason(self, session) -> None:
        record_error(session, "run-1", "summary", None, "s1", "format_parse_failed")
        row = session.execute(text("SELECT code, message FROM error_events")).one()
        assert row.code is None
        assert row.message == "format_parse_failed"
