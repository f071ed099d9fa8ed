from __future__ import annotations

import threading
from typing import Callable, Dict, Optional, Protocol

from ..exceptions import DuplicateJobError, InvalidJobStateError
from ..schemas import ImageUrls, JobRecord, JobStatus


ALLOWED_TRANSITIONS = {
    JobStatus.QUEUED: {JobStatus.RUNNING},
    JobStatus.RUNNING: {JobStatus.DONE, JobStatus.ERROR},
    JobStatus.DONE: set(),
    JobStatus.ERROR: set(),
}

IMMUTABLE_FIELDS = ("job_id", "row_id", "callback_url")

JobMutator = Callable[[JobRecord], JobRecord]


def check_transition(current: JobRecord, updated: JobRecord) -> None:
    """
    Validate one step of the job lifecycle.

    Rules:
    - status moves queued -> running -> done|error, terminal states are final
    - job_id, row_id and callback_url never change
    - site_url is set iff done, error is set iff error
    """
    job_id = current.job_id
    if updated.status not in ALLOWED_TRANSITIONS[current.status]:
        raise InvalidJobStateError(
            job_id, current.status.value, f"cannot move to '{updated.status.value}'"
        )
    for field in IMMUTABLE_FIELDS:
        if getattr(updated, field) != getattr(current, field):
            raise InvalidJobStateError(job_id, current.status.value, f"{field} is immutable")
    if (updated.site_url is not None) != (updated.status == JobStatus.DONE):
        raise InvalidJobStateError(
            job_id, current.status.value, "site_url must be set exactly when the job is done"
        )
    if (updated.error is not None) != (updated.status == JobStatus.ERROR):
        raise InvalidJobStateError(
            job_id, current.status.value, "error must be set exactly when the job failed"
        )


def mark_running(record: JobRecord) -> JobRecord:
    return record.model_copy(update={"status": JobStatus.RUNNING})


def mark_done(chat_id: Optional[str], site_url: str, image_urls: Optional[ImageUrls]) -> JobMutator:
    def _apply(record: JobRecord) -> JobRecord:
        return record.model_copy(update={
            "status": JobStatus.DONE,
            "chat_id": chat_id,
            "site_url": site_url,
            "image_urls": image_urls,
            "error": None,
        })
    return _apply


def mark_error(message: str) -> JobMutator:
    # chat_id is left as received so the caller can retry against the same chat
    def _apply(record: JobRecord) -> JobRecord:
        return record.model_copy(update={
            "status": JobStatus.ERROR,
            "site_url": None,
            "image_urls": None,
            "error": message,
        })
    return _apply


class JobStore(Protocol):
    """Storage interface used by the HTTP layer and the orchestrator."""

    def create(self, record: JobRecord) -> JobRecord:
        ...

    def get(self, job_id: str) -> Optional[JobRecord]:
        ...

    def update(self, job_id: str, mutator: JobMutator) -> Optional[JobRecord]:
        ...


class InMemoryJobStore(JobStore):
    """
    Process-wide job table.

    Records live as long as the process: nothing is evicted or persisted.
    Stored records are never mutated in place, updates swap in a new copy.
    """

    def __init__(self):
        self._jobs: Dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: JobRecord) -> JobRecord:
        if record.status != JobStatus.QUEUED:
            raise InvalidJobStateError(record.job_id, record.status.value, "new jobs start queued")
        with self._lock:
            if record.job_id in self._jobs:
                raise DuplicateJobError(record.job_id)
            self._jobs[record.job_id] = record
        return record

    def get(self, job_id: str) -> Optional[JobRecord]:
        with self._lock:
            return self._jobs.get(job_id)

    def update(self, job_id: str, mutator: JobMutator) -> Optional[JobRecord]:
        """Apply `mutator` to the stored record; returns None if the job is unknown."""
        with self._lock:
            current = self._jobs.get(job_id)
            if current is None:
                return None
            updated = mutator(current)
            check_transition(current, updated)
            self._jobs[job_id] = updated
            return updated

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
