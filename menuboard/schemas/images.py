"""
Image Schemas for Menuboard
===========================

Items carry one or more images, shown in ``(sort_order, id)`` order.

- ImageIn: an image nested in an item or category create request
- ImageCreate: POST /images, an image referenced by URL
- ImageUpdate: PUT /images/{id}
- ImagePatch: one entry of an item's ``images`` array in an update. Entries
  with ``id`` update that image, entries without ``id`` create one, and
  ``"_delete": true`` removes the image named by ``id``.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, StringConstraints, model_validator

from .common import ImageUrl

ItemImageUrl = Annotated[ImageUrl, Field(max_length=1024)]
AltText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]
MAX_SORT_ORDER = 999

SortOrder = Annotated[int, Field(ge=0, le=MAX_SORT_ORDER)]


class ImageIn(BaseModel):
    url: ItemImageUrl
    alt: Optional[AltText] = None
    sort_order: Optional[SortOrder] = None
    active: Optional[bool] = None


class ImageCreate(ImageIn):
    item_id: PositiveInt


class ImageUpdate(BaseModel):
    url: Optional[ItemImageUrl] = None
    alt: Optional[AltText] = None
    sort_order: Optional[SortOrder] = None
    active: Optional[bool] = None


class ImagePatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[PositiveInt] = None
    url: Optional[ItemImageUrl] = None
    alt: Optional[AltText] = None
    sort_order: Optional[SortOrder] = None
    active: Optional[bool] = None
    delete: bool = Field(default=False, alias="_delete")

    @model_validator(mode="after")
    def check_intent(self) -> "ImagePatch":
        if self.delete and not self.id:
            raise ValueError("An id is required to delete an image")
        if not self.id and not self.delete and not self.url:
            raise ValueError("URL required when creating a new image")
        return self


def ensure_unique_ids(entries: Optional[List[BaseModel]], label: str) -> None:
    """Raise ValueError when two entries of a patch array name the same id."""
    seen = set()
    for entry in entries or []:
        entry_id = getattr(entry, "id", None)
        if entry_id is None:
            continue
        if entry_id in seen:
            raise ValueError(f"{label} id {entry_id} appears more than once")
        seen.add(entry_id)


class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int
    url: str
    alt: Optional[str] = None
    sort_order: int
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
