import pytest
from kombu.exceptions import OperationalError

import jobs.handle
import jobs.runner
from db.models import JobStatus, Material
from jobs import JobHandle, create_job, get_job, run_job, submit
from jobs.runner import mark_finished
from tests.workbooks import truncated_sheet, xlsx_bytes

CSV = b"name,category,supplier\nSteel Rod,Metals,Acme Co\nCopper Pipe,Metals,Acme Co\n"


@pytest.fixture
def make_job(session, tmp_path):
    def _make(content=CSV, filename="materials.csv", mode="deferred"):
        path = tmp_path / filename
        path.write_bytes(content)
        return create_job(session, filename=filename, stored_path=str(path),
                          size_bytes=len(content), mode=mode)
    return _make


def test_job_starts_pending(make_job):
    job = make_job()
    assert job.status == JobStatus.PENDING
    assert not job.is_terminal


def test_run_job_completes(make_job, session):
    job = run_job(make_job().id)

    assert job.status == JobStatus.COMPLETED
    assert job.created_count == 2
    assert job.started_at is not None
    assert job.finished_at is not None
    assert session.query(Material).count() == 2


def test_all_rows_rejected_is_still_completed(make_job):
    """Rejections are data; the batch itself did not fail."""
    job = run_job(make_job(b"name,category,supplier\n,Metals,\n").id)

    assert job.status == JobStatus.COMPLETED_WITH_REJECTIONS
    assert job.rejected_count == 1
    assert job.rejections[0]["row"] == 1


def test_unparseable_file_fails(make_job):
    job = run_job(make_job(b"not a workbook", "broken.xlsx").id)

    assert job.status == JobStatus.FAILED
    assert "Unreadable XLSX" in job.error
    assert job.total_rows == 0


def test_truncated_sheet_fails_instead_of_hanging(make_job):
    content = truncated_sheet(xlsx_bytes(
        [["Name", "Category", "Supplier"]]
        + [[f"Rod {i}", "Metals", "Acme Co"] for i in range(50)]
    ))
    job = run_job(make_job(content, "materials.xlsx").id)

    assert job.status == JobStatus.FAILED
    assert "Unreadable XLSX sheet" in job.error
    assert get_job(job.id).status == JobStatus.FAILED


def test_unexpected_read_error_ends_in_failed(make_job, monkeypatch):
    def broken_reader(path, filename=None):
        raise RuntimeError("disk vanished")

    monkeypatch.setattr(jobs.runner, "read_rows_from_path", broken_reader)
    job = run_job(make_job().id)

    assert job.status == JobStatus.FAILED
    assert job.error == "Unexpected: disk vanished"


def test_oversized_cell_keeps_other_rows(make_job, session):
    big = "x" * 200_000
    content = f"name,category,supplier,description\nA,M,S,\nB,M,S,{big}\nC,M,S,\n".encode()
    job = run_job(make_job(content).id)

    assert job.status == JobStatus.COMPLETED
    assert job.created_count == 3
    assert session.query(Material).count() == 3


def test_crash_ends_in_failed(make_job, monkeypatch):
    class Exploding:
        def __init__(self, *args, **kwargs):
            pass

        def run(self, rows):
            raise RuntimeError("worker lost its marbles")

    monkeypatch.setattr(jobs.runner, "ImportOrchestrator", Exploding)
    job = run_job(make_job().id)

    assert job.status == JobStatus.FAILED
    assert job.error == "Unexpected: worker lost its marbles"


def test_finished_job_is_not_rerun(make_job, session):
    job_id = make_job().id
    run_job(job_id)
    again = run_job(job_id)

    assert again.status == JobStatus.COMPLETED
    assert session.query(Material).count() == 2


def test_mark_finished_only_once(make_job, session):
    job = make_job()
    assert mark_finished(session, job, JobStatus.FAILED, error="first")
    assert not mark_finished(session, job, JobStatus.COMPLETED)
    assert get_job(job.id).status == JobStatus.FAILED


def test_mark_finished_needs_terminal_status(make_job, session):
    with pytest.raises(ValueError):
        mark_finished(session, make_job(), JobStatus.RUNNING)


def test_unknown_job(app):
    assert run_job("does-not-exist") is None
    assert get_job("does-not-exist") is None


def test_submit_returns_handle_with_terminal_state(make_job):
    handle = submit(make_job().id)

    assert isinstance(handle, JobHandle)
    # Eager queue: the task already ran
    assert handle.is_terminal()
    assert handle.status() == JobStatus.COMPLETED
    assert handle.fetch().created_count == 2


def test_submit_broker_failure_marks_failed(make_job, monkeypatch):
    class DeadBroker:
        def delay(self, *args):
            raise OperationalError("connection refused")

    monkeypatch.setattr(jobs.handle, "run_import_job", DeadBroker())
    job = make_job()

    with pytest.raises(OperationalError):
        submit(job.id)
    stored = get_job(job.id)
    assert stored.status == JobStatus.FAILED
    assert "connection refused" in stored.error


def test_job_to_dict(make_job):
    data = run_job(make_job().id).to_dict()
    assert data["status"] == "completed"
    assert data["created"] == 2
    assert data["rejections"] == []


def test_job_summary_matches_persisted_counts(make_job):
    job = run_job(make_job(CSV + b",Metals,\n").id)
    assert job.summary() == {
        "status": JobStatus.COMPLETED_WITH_REJECTIONS,
        "total_rows": 3,
        "created": 2,
        "rejected": 1,
        "rejections": job.rejections,
    }
    assert job.rejections[0]["row"] == 3
