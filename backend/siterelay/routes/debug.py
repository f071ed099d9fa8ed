"""
Diagnostics for the image gateway credentials and model
"""
import base64
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..auth import require_api_key
from ..config import settings
from ..dependencies import get_image_client
from ..inference.image_gateway import ImageGatewayClient
from ..logger import logger

router = APIRouter(tags=["Debug"], dependencies=[Depends(require_api_key)])

DEBUG_IMAGE_PROMPT = "Render a photorealistic picture of a red balloon. No text."

@router.get("/debug-gateway")
async def debug_gateway(client: ImageGatewayClient = Depends(get_image_client)):
    try:
        credits = await client.get_credits()
    except Exception as e:
        logger.warning(f"Gateway check failed: {e}")
        return JSONResponse(status_code=500, content={
            "ok": False,
            "error": str(e),
            "has_key": bool(settings.AI_GATEWAY_API_KEY),
            "key_len": len(settings.AI_GATEWAY_API_KEY),
            "model": settings.IMAGE_MODEL,
        })
    return {"ok": True, "credits": credits}

@router.get("/debug-image")
async def debug_image(client: ImageGatewayClient = Depends(get_image_client)):
    try:
        data_url = await client.generate_image(DEBUG_IMAGE_PROMPT)
    except Exception as e:
        logger.warning(f"Debug image generation failed: {e}")
        return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})

    header, _, b64 = data_url.partition(",")
    if not header.startswith("data:") or not b64:
        return JSONResponse(status_code=500, content={"ok": False, "error": "Image is not a data URL"})
    media_type = header[len("data:"):].split(";")[0]
    try:
        base64.b64decode(b64, validate=True)
    except ValueError:
        return JSONResponse(status_code=500, content={"ok": False, "error": "Image payload is not valid base64"})
    return {
        "ok": True,
        "media_type": media_type,
        "data_url_prefix": f"{header},",
        "base64_len": len(b64),
    }
