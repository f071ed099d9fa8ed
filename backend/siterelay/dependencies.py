"""
Process-wide collaborators handed to the routes through FastAPI dependencies
"""
from fastapi import Depends
from .config import settings
from .inference.image_gateway import ImageGatewayClient
from .inference.site_builder import SiteBuilderClient
from .services.callbacks import CallbackNotifier
from .services.job_store import InMemoryJobStore, JobStore
from .services.orchestrator import JobOrchestrator
from .workers import JobDispatcher

job_store = InMemoryJobStore()
dispatcher = JobDispatcher()

def get_job_store() -> JobStore:
    return job_store

def get_dispatcher() -> JobDispatcher:
    return dispatcher

def get_image_client() -> ImageGatewayClient:
    return ImageGatewayClient.from_settings(settings)

def get_orchestrator(store: JobStore = Depends(get_job_store)) -> JobOrchestrator:
    return JobOrchestrator(
        store=store,
        image_client=get_image_client(),
        site_client=SiteBuilderClient.from_settings(settings),
        notifier=CallbackNotifier.from_settings(settings),
        generate_images=settings.GENERATE_IMAGES,
    )
