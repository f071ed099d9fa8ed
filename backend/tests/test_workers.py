import asyncio

import pytest

from siterelay.workers import JobDispatcher


@pytest.mark.asyncio
async def test_submit_runs_in_background_and_drain_waits():
    dispatcher = JobDispatcher()
    release = asyncio.Event()
    finished = []

    async def work():
        await release.wait()
        finished.append("job-1")

    dispatcher.submit("job-1", work())
    await asyncio.sleep(0)

    assert dispatcher.pending() == ["job-1"]
    assert finished == []

    release.set()
    await dispatcher.drain()

    assert finished == ["job-1"]
    assert dispatcher.pending() == []


@pytest.mark.asyncio
async def test_crashed_task_is_dropped():
    dispatcher = JobDispatcher()

    async def work():
        raise RuntimeError("boom")

    task = dispatcher.submit("job-1", work())
    await dispatcher.drain()

    assert task.done()
    assert dispatcher.pending() == []
