from __future__ import annotations

import traceback
from typing import Any, Dict, Optional, Protocol, Tuple

from ..exceptions import InvalidJobStateError
from ..inference.site_builder import extract_chat_id, extract_site_url
from ..logger import logger
from ..schemas import CallbackPayload, ImageUrls, JobCreateRequest, JobRecord
from .callbacks import CallbackNotifier
from .job_store import JobStore, mark_done, mark_error, mark_running
from .prompts import build_image_prompts, build_site_prompt


class ImageClient(Protocol):
    async def generate_image(self, prompt: str) -> str: ...


class SiteClient(Protocol):
    async def create_chat(self, message: str) -> Dict[str, Any]: ...

    async def send_message(self, chat_id: str, message: str) -> Dict[str, Any]: ...


class JobStepError(Exception):
    step = "job"

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"{self.step} step: {cause}")


class ImageStepError(JobStepError):
    step = "image"


class SiteStepError(JobStepError):
    step = "site"


class JobOrchestrator:
    """
    Runs one job: running -> images -> site -> done|error -> callback.

    Nothing escapes `run`: step failures end the job in `error` and are
    reported to the caller's callback like any other outcome.
    """

    def __init__(
        self,
        store: JobStore,
        image_client: ImageClient,
        site_client: SiteClient,
        notifier: CallbackNotifier,
        generate_images: bool = True,
    ):
        self.store = store
        self.image_client = image_client
        self.site_client = site_client
        self.notifier = notifier
        self.generate_images = generate_images

    async def run(self, job_id: str, request: JobCreateRequest) -> Optional[JobRecord]:
        try:
            record = self.store.update(job_id, mark_running)
        except InvalidJobStateError as e:
            logger.error(f"Job {job_id} cannot start: {e.message}", extra={"job_id": job_id})
            return None
        if record is None:
            logger.error(f"Job not found in store: {job_id}")
            return None
        logger.info(f"Job {job_id} status updated to 'running'", extra={"job_id": job_id, "row_id": record.row_id})

        try:
            image_urls = None
            if self.generate_images:
                image_urls = await self._image_step(job_id, request)
            chat_id, site_url = await self._site_step(job_id, request, image_urls)
        except JobStepError as e:
            record = self._finish(job_id, mark_error(str(e)))
            logger.error(
                f"Job {job_id} failed in {e.step} step: {e.cause}",
                extra={"job_id": job_id, "step": e.step},
            )
        except Exception as e:
            record = self._finish(job_id, mark_error(f"{type(e).__name__}: {e}"))
            logger.error(
                f"Unexpected failure for job {job_id}: {e}",
                extra={"job_id": job_id, "exc_traceback": traceback.format_exc()},
            )
        else:
            record = self._finish(job_id, mark_done(chat_id, site_url, image_urls))
            logger.info(
                f"Job {job_id} completed",
                extra={"job_id": job_id, "chat_id": chat_id, "site_url": site_url},
            )

        if record is not None:
            await self.notifier.notify(record.callback_url, CallbackPayload.from_record(record))
        return record

    def _finish(self, job_id: str, mutator) -> Optional[JobRecord]:
        try:
            return self.store.update(job_id, mutator)
        except Exception as e:
            logger.error(f"Failed to record outcome for job {job_id}: {e}", extra={"job_id": job_id})
            return None

    async def _image_step(self, job_id: str, request: JobCreateRequest) -> ImageUrls:
        hero_prompt, contact_prompt = build_image_prompts(
            request.site_name, request.business_type, request.location
        )
        logger.info(f"Generating images for job {job_id}", extra={"job_id": job_id, "step": "image"})
        try:
            hero = await self.image_client.generate_image(hero_prompt)
            contact = await self.image_client.generate_image(contact_prompt)
        except Exception as e:
            raise ImageStepError(str(e)) from e
        if not hero or not contact:
            raise ImageStepError("no usable image returned")
        return ImageUrls(hero=hero, contact=contact)

    async def _site_step(
        self,
        job_id: str,
        request: JobCreateRequest,
        image_urls: Optional[ImageUrls],
    ) -> Tuple[Optional[str], str]:
        message = build_site_prompt(request.prompt or "", image_urls)
        incoming_chat_id = request.incoming_chat_id()
        logger.info(
            f"Requesting site for job {job_id}",
            extra={"job_id": job_id, "step": "site", "edit": bool(incoming_chat_id)},
        )
        try:
            if incoming_chat_id:
                response = await self.site_client.send_message(incoming_chat_id, message)
            else:
                response = await self.site_client.create_chat(message)
        except Exception as e:
            raise SiteStepError(str(e)) from e

        site_url = extract_site_url(response)
        if not site_url:
            raise SiteStepError("v0 did not return a demo/webUrl/url")
        return extract_chat_id(response, incoming_chat_id), site_url
