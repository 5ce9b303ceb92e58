"""
Shared field types and response models.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel

from .. import config

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def _check_image_url(value: str) -> str:
    """Accept absolute http(s) URLs and paths served by the local upload mount."""
    if any(ch.isspace() for ch in value):
        raise ValueError("URL must not contain whitespace")
    if value.startswith(("http://", "https://")) and len(value.split("://", 1)[1]) > 0:
        return value
    if value.startswith(config.LOCAL_UPLOAD_URL_PREFIX + "/"):
        return value
    raise ValueError("Invalid URL")


ImageUrl = Annotated[str, AfterValidator(_check_image_url)]


class MessageOut(BaseModel):
    message: str

