from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
import time
import uvicorn
from .config import settings
from .dependencies import dispatcher
from .logger import logger
from .routes import debug, jobs
from .exceptions import (
    SiteRelayBaseException,
    siterelay_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler,
)

app = FastAPI(
    title="Site Relay API",
    version="1.0.0",
    description="Queues website builds on v0 and reports the result to a webhook"
)

app.add_exception_handler(SiteRelayBaseException, siterelay_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    
    logger.info(
        f"Request: {request.method} {request.url.path}",
        extra={
            "method": request.method,
            "path": request.url.path,
        }
    )
    
    response = await call_next(request)
    
    duration = time.time() - start_time
    logger.info(
        f"Response: {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2),
        }
    )
    
    return response

app.include_router(jobs.router)
app.include_router(debug.router)

@app.on_event("startup")
async def startup():
    logger.info(
        "Starting Site Relay API",
        extra={
            "generate_images": settings.GENERATE_IMAGES,
            "image_model": settings.IMAGE_MODEL,
            "api_key_configured": bool(settings.API_KEY),
        }
    )

@app.on_event("shutdown")
async def shutdown():
    logger.info("Shutting down Site Relay API", extra={"in_flight_jobs": len(dispatcher.pending())})
    await dispatcher.drain()

@app.get("/", response_class=PlainTextResponse)
async def liveness():
    """Liveness check, no auth"""
    return "OK"

def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
