from __future__ import annotations

from typing import Optional, Tuple

from ..schemas import ImageUrls


DEFAULT_BUSINESS_NAME = "Local Services"
DEFAULT_BUSINESS_TYPE = "services"
DEFAULT_LOCATION = "Quebec"


def _or_default(value: Optional[str], default: str) -> str:
    value = (value or "").strip()
    return value or default


def build_image_prompts(
    site_name: Optional[str],
    business_type: Optional[str],
    location: Optional[str],
) -> Tuple[str, str]:
    """Return the (hero, contact) image prompts for a business."""
    name = _or_default(site_name, DEFAULT_BUSINESS_NAME)
    kind = _or_default(business_type, DEFAULT_BUSINESS_TYPE)
    place = _or_default(location, DEFAULT_LOCATION)

    hero = (
        "Photorealistic hero image for a local service business website. "
        f"Business: {name}. Type: {kind}. "
        f"Location: {place}. Clean, modern, professional, natural lighting. "
        "No text, no logos, no watermarks."
    )
    contact = (
        "Photorealistic image for the contact section of a local services website. "
        f"Business: {name}. Type: {kind}. "
        f"Location: {place}. Friendly, trustworthy, professional. "
        "No text, no logos, no watermarks."
    )
    return hero, contact


def build_image_instruction(image_urls: ImageUrls) -> str:
    return (
        "IMPORTANT: Use these exact image URLs in the page.\n"
        f"- Hero image URL: {image_urls.hero}\n"
        f"- Contact image URL: {image_urls.contact}\n"
        "Do not use placeholders. Do not generate additional images.\n"
    )


def build_site_prompt(prompt: str, image_urls: Optional[ImageUrls]) -> str:
    if image_urls is None:
        return prompt
    return f"{prompt}\n\n{build_image_instruction(image_urls)}"
