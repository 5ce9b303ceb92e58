"""
Category Schemas for Menuboard
==============================

Categories group the items of a menu ("Pizzas", "Desserts"). Besides flat CRUD
they support a "deep" form that creates or updates a category together with
its items and their images in a single request.

Deep Create:
------------
    POST /categories/deep
    {
        "menu_id": 1,
        "title": "Pizzas",
        "items": [
            {"title": "Muzzarella", "price": 7500,
             "images": [{"url": "https://cdn.example.com/muzza.jpg"}]}
        ]
    }

Deep Update:
------------
Arrays are patches matched by id: entries with ``id`` update, entries without
``id`` create, ``"_delete": true`` removes. Existing children that are not
listed stay as they are. Omitting ``items`` leaves all children untouched.

    PUT /categories/7/deep
    {
        "title": "Pizzas & Calzones",
        "items": [
            {"id": 12, "price": 7900},
            {"id": 13, "_delete": true},
            {"title": "Calzone", "price": 8800,
             "images": [{"url": "https://cdn.example.com/calzone.jpg"}]},
            {"id": 14, "images": [{"id": 30, "_delete": true}, {"id": 31, "sort_order": 0}]}
        ]
    }
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from .images import ensure_unique_ids
from .items import ItemIn, ItemOut, ItemPatch

CategoryTitle = Annotated[str, Field(min_length=1, max_length=120)]

MAX_ITEMS_PER_REQUEST = 100


class CategoryCreate(BaseModel):
    menu_id: PositiveInt
    title: CategoryTitle
    active: Optional[bool] = None


class CategoryUpdate(BaseModel):
    title: Optional[CategoryTitle] = None
    active: Optional[bool] = None


class CategoryDeepCreate(CategoryCreate):
    items: List[ItemIn] = Field(default_factory=list, max_length=MAX_ITEMS_PER_REQUEST)


class CategoryDeepUpdate(CategoryUpdate):
    items: Optional[List[ItemPatch]] = Field(default=None, max_length=MAX_ITEMS_PER_REQUEST)

    @field_validator("items")
    @classmethod
    def unique_item_ids(cls, items):
        ensure_unique_ids(items, "Item")
        return items


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    menu_id: int
    title: str
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryTreeOut(CategoryOut):
    items: List[ItemOut] = []
