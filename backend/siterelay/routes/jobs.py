"""
Job routes: accept a site build and report its progress
"""
from fastapi import APIRouter, Depends

from ..auth import require_api_key
from ..config import settings
from ..dependencies import get_dispatcher, get_job_store, get_orchestrator
from ..exceptions import JobNotFoundError, MissingFieldsError, ServerMisconfiguredError
from ..logger import logger
from ..schemas import JobCreateRequest, JobQueuedResponse, JobRecord
from ..services.job_ids import make_job_id
from ..services.job_store import JobStore
from ..services.orchestrator import JobOrchestrator
from ..workers import JobDispatcher

router = APIRouter(tags=["Jobs"], dependencies=[Depends(require_api_key)])

def _ensure_collaborators_configured() -> None:
    if not settings.V0_API_KEY:
        raise ServerMisconfiguredError("V0_API_KEY")
    if settings.GENERATE_IMAGES and not settings.AI_GATEWAY_API_KEY:
        raise ServerMisconfiguredError("AI_GATEWAY_API_KEY")

@router.post("/jobs", response_model=JobQueuedResponse)
async def create_job(
    payload: JobCreateRequest,
    store: JobStore = Depends(get_job_store),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
    dispatcher: JobDispatcher = Depends(get_dispatcher),
):
    """
    Queue a site build and answer right away.
    The outcome is delivered to callback_url once the job finishes.
    """
    missing = payload.missing_fields()
    if missing:
        logger.warning(f"Job request missing fields: {missing}")
        raise MissingFieldsError(missing)
    _ensure_collaborators_configured()

    job_id = make_job_id()
    store.create(JobRecord(
        job_id=job_id,
        row_id=payload.row_id,
        chat_id=payload.incoming_chat_id(),
        callback_url=payload.callback_url.strip(),
    ))
    logger.info(
        f"Job created: {job_id}",
        extra={"job_id": job_id, "row_id": payload.row_id, "edit": bool(payload.incoming_chat_id())},
    )

    dispatcher.submit(job_id, orchestrator.run(job_id, payload))
    return JobQueuedResponse(job_id=job_id)

@router.get("/jobs/{job_id}", response_model=JobRecord)
async def get_job(job_id: str, store: JobStore = Depends(get_job_store)):
    record = store.get(job_id)
    if record is None:
        logger.warning(f"Job not found: {job_id}")
        raise JobNotFoundError(job_id)
    return record
