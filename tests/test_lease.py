from __future__ import annotations

from datetime import timedelta

from seo_sync.db.models import SyncJob, SyncJobStatus
from seo_sync.worker.lease import RunLease

from conftest import NOW

DAY = timedelta(hours=24)


def _job(session_factory, name="daily-update"):
    with session_factory() as session:
        return session.get(SyncJob, name)


def test_first_claim_wins(session_factory):
    lease = RunLease(session_factory, owner="a")

    assert lease.claim("daily-update", NOW, DAY) is True

    job = _job(session_factory)
    assert job.status == SyncJobStatus.running
    assert job.lease_owner == "a"


def test_second_replica_loses_the_same_fire(session_factory):
    first = RunLease(session_factory, owner="a")
    second = RunLease(session_factory, owner="b")

    assert first.claim("daily-update", NOW, DAY) is True
    assert second.claim("daily-update", NOW + timedelta(seconds=5), DAY) is False
    assert _job(session_factory).lease_owner == "a"


def test_claim_opens_again_before_the_next_fire(session_factory):
    first = RunLease(session_factory, owner="a", slack=timedelta(minutes=30))
    second = RunLease(session_factory, owner="b")
    first.claim("daily-update", NOW, DAY)

    assert second.claim("daily-update", NOW + DAY - timedelta(minutes=31), DAY) is False
    assert second.claim("daily-update", NOW + DAY - timedelta(minutes=1), DAY) is True
    assert _job(session_factory).lease_owner == "b"


def test_release_records_outcome(session_factory):
    lease = RunLease(session_factory, owner="a")
    lease.claim("daily-update", NOW, DAY)

    lease.release("daily-update", SyncJobStatus.failed, error="x" * 600)

    job = _job(session_factory)
    assert job.status == SyncJobStatus.failed
    assert len(job.error_message) == 500


def test_release_by_non_owner_is_ignored(session_factory):
    RunLease(session_factory, owner="a").claim("daily-update", NOW, DAY)

    RunLease(session_factory, owner="b").release("daily-update", SyncJobStatus.completed)

    assert _job(session_factory).status == SyncJobStatus.running


def test_jobs_are_independent(session_factory):
    lease = RunLease(session_factory, owner="a")
    assert lease.claim("daily-update", NOW, DAY) is True
    assert lease.claim("weekly-report", NOW, DAY) is True
