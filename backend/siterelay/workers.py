import asyncio
from typing import Awaitable, Dict, List
from .logger import logger


class JobDispatcher:
    """
    Runs each accepted job as its own asyncio task.

    Request handlers hand a job over with `submit` and return immediately;
    in-flight tasks stay visible through `pending()` until they finish.
    """

    def __init__(self):
        self._tasks: Dict[str, asyncio.Task] = {}

    def submit(self, job_id: str, work: Awaitable) -> asyncio.Task:
        task = asyncio.ensure_future(work)
        self._tasks[job_id] = task
        task.add_done_callback(lambda t: self._on_done(job_id, t))
        logger.info(f"Job {job_id} scheduled", extra={"job_id": job_id, "in_flight": len(self._tasks)})
        return task

    def _on_done(self, job_id: str, task: asyncio.Task) -> None:
        self._tasks.pop(job_id, None)
        if task.cancelled():
            logger.warning(f"Job task cancelled: {job_id}", extra={"job_id": job_id})
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Job task crashed: {job_id}: {exc}",
                extra={"job_id": job_id, "exc_type": type(exc).__name__},
            )

    def pending(self) -> List[str]:
        return list(self._tasks)

    async def drain(self) -> None:
        """Wait until every in-flight job task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)
