"""
Item Schemas for Menuboard
==========================

Items are the dishes of a category. Prices are non-negative with two decimals
of precision in storage.

- ItemCreate: POST /items, optionally with up to 20 images
- ItemUpdate: PUT /items/{id}, optionally with an ``images`` patch array
  (see ImagePatch)
- ItemIn / ItemPatch: the nested forms used by the deep category endpoints
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator

from .images import ImageIn, ImageOut, ImagePatch, ensure_unique_ids

ItemTitle = Annotated[str, Field(min_length=1, max_length=160)]
Description = Annotated[str, Field(max_length=10_000)]
Price = Annotated[float, Field(ge=0)]

MAX_IMAGES_ON_CREATE = 20
MAX_IMAGES_ON_UPDATE = 30


class ItemIn(BaseModel):
    title: ItemTitle
    description: Optional[Description] = None
    price: Price
    active: Optional[bool] = None
    images: List[ImageIn] = Field(default_factory=list, max_length=MAX_IMAGES_ON_CREATE)


class ItemCreate(ItemIn):
    """
    Request model for creating an item.

    Example:
        {
            "category_id": 3,
            "title": "Muzzarella",
            "description": "Classic mozzarella pizza",
            "price": 7500.00,
            "images": [{"url": "https://cdn.example.com/muzza.jpg", "alt": "Muzzarella"}]
        }
    """
    category_id: PositiveInt


class ItemUpdate(BaseModel):
    title: Optional[ItemTitle] = None
    description: Optional[Description] = None
    price: Optional[Price] = None
    active: Optional[bool] = None
    images: Optional[List[ImagePatch]] = Field(default=None, max_length=MAX_IMAGES_ON_UPDATE)

    @field_validator("images")
    @classmethod
    def unique_image_ids(cls, images):
        ensure_unique_ids(images, "Image")
        return images


class ItemPatch(ItemUpdate):
    """One entry of a category's ``items`` array in a deep update."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[PositiveInt] = None
    delete: bool = Field(default=False, alias="_delete")

    @model_validator(mode="after")
    def check_intent(self) -> "ItemPatch":
        if self.delete and not self.id:
            raise ValueError("An id is required to delete an item")
        if not self.id and not self.delete and (self.title is None or self.price is None):
            raise ValueError("title and price are required when creating a new item")
        return self


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    title: str
    description: Optional[str] = None
    price: float
    active: bool
    images: List[ImageOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
