"""
Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, field_validator
from typing import Optional, List, Any
from enum import Enum

# ===== Job Schemas =====

class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"

class ImageUrls(BaseModel):
    hero: str
    contact: str

class JobRecord(BaseModel):
    job_id: str
    row_id: str
    status: JobStatus = JobStatus.QUEUED
    chat_id: Optional[str] = None
    site_url: Optional[str] = None
    image_urls: Optional[ImageUrls] = None
    error: Optional[str] = None
    callback_url: str

class JobCreateRequest(BaseModel):
    """
    Body of POST /jobs.

    Required fields are declared optional so that a missing or blank value is
    reported as a single 400 listing every missing field.
    """
    row_id: Optional[str] = None
    prompt: Optional[str] = None
    callback_url: Optional[str] = None
    chat_id: Optional[str] = None
    site_name: Optional[str] = None
    business_type: Optional[str] = None
    location: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_scalars(cls, value: Any) -> Any:
        # Spreadsheet automations send numeric row ids
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def missing_fields(self) -> List[str]:
        return [
            name for name in ("row_id", "prompt", "callback_url")
            if not (getattr(self, name) or "").strip()
        ]

    def incoming_chat_id(self) -> Optional[str]:
        chat_id = (self.chat_id or "").strip()
        return chat_id or None

class JobQueuedResponse(BaseModel):
    status: JobStatus = JobStatus.QUEUED
    job_id: str

class CallbackPayload(BaseModel):
    row_id: str
    job_id: str
    status: JobStatus
    chat_id: Optional[str] = None
    site_url: Optional[str] = None
    hero_image_url: Optional[str] = None
    contact_image_url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_record(cls, record: JobRecord) -> "CallbackPayload":
        images = record.image_urls
        return cls(
            row_id=record.row_id,
            job_id=record.job_id,
            status=record.status,
            chat_id=record.chat_id,
            site_url=record.site_url,
            hero_image_url=images.hero if images else None,
            contact_image_url=images.contact if images else None,
            error=record.error,
        )
