import pytest

from siterelay.exceptions import DuplicateJobError, InvalidJobStateError
from siterelay.schemas import ImageUrls, JobRecord, JobStatus
from siterelay.services.job_store import InMemoryJobStore, JobStore, mark_done, mark_error, mark_running


def make_record(job_id="job-1", **overrides):
    data = {"job_id": job_id, "row_id": "r1", "callback_url": "https://cb.test/x"}
    data.update(overrides)
    return JobRecord(**data)


def test_create_and_get(store):
    store.create(make_record())
    record = store.get("job-1")
    assert record.status == JobStatus.QUEUED
    assert record.site_url is None and record.error is None


def test_get_unknown_returns_none(store):
    assert store.get("unknown123") is None


def test_create_duplicate_rejected(store):
    store.create(make_record())
    with pytest.raises(DuplicateJobError):
        store.create(make_record())


def test_create_requires_queued(store):
    with pytest.raises(InvalidJobStateError):
        store.create(make_record(status=JobStatus.RUNNING))


def test_update_unknown_is_noop(store):
    assert store.update("missing", mark_running) is None
    assert len(store) == 0


def test_full_success_lifecycle(store):
    store.create(make_record(chat_id="c0"))
    store.update("job-1", mark_running)
    images = ImageUrls(hero="data:h", contact="data:c")
    record = store.update("job-1", mark_done("c1", "https://demo.test/c1", images))

    assert record.status == JobStatus.DONE
    assert record.chat_id == "c1"
    assert record.site_url == "https://demo.test/c1"
    assert record.image_urls == images
    assert record.error is None


def test_error_keeps_incoming_chat_id(store):
    store.create(make_record(chat_id="c0"))
    store.update("job-1", mark_running)
    record = store.update("job-1", mark_error("site step: boom"))

    assert record.status == JobStatus.ERROR
    assert record.error == "site step: boom"
    assert record.chat_id == "c0"
    assert record.site_url is None


def test_cannot_skip_running(store):
    store.create(make_record())
    with pytest.raises(InvalidJobStateError):
        store.update("job-1", mark_done(None, "https://demo.test", None))
    assert store.get("job-1").status == JobStatus.QUEUED


@pytest.mark.parametrize("finish", [
    mark_done("c1", "https://demo.test/c1", None),
    mark_error("image step: nope"),
])
def test_terminal_states_are_final(store, finish):
    store.create(make_record())
    store.update("job-1", mark_running)
    final = store.update("job-1", finish)

    for mutator in (mark_running, mark_error("again"), mark_done("c2", "https://other.test", None)):
        with pytest.raises(InvalidJobStateError):
            store.update("job-1", mutator)
    assert store.get("job-1") == final


def test_done_requires_site_url(store):
    store.create(make_record())
    store.update("job-1", mark_running)
    with pytest.raises(InvalidJobStateError):
        store.update("job-1", lambda r: r.model_copy(update={"status": JobStatus.DONE}))


def test_immutable_fields_protected(store):
    store.create(make_record())
    with pytest.raises(InvalidJobStateError):
        store.update("job-1", lambda r: r.model_copy(update={"status": JobStatus.RUNNING, "row_id": "r2"}))


def test_stored_snapshot_not_mutated_by_update(store):
    created = store.create(make_record())
    store.update("job-1", mark_running)
    assert created.status == JobStatus.QUEUED
    assert store.get("job-1").status == JobStatus.RUNNING


def test_store_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        JobStore()
    assert len(InMemoryJobStore()) == 0
