"""
Nested Writes for Menuboard
===========================

Builds and patches the item -> image children of categories and items. These
helpers only stage changes on the session; the calling service owns the
transaction and rolls everything back if any entry fails.

Patch Semantics:
----------------
A patch array is matched against the parent's active children by id:

- ``{"id": 5, ...}``            update child 5
- ``{"id": 5, "_delete": true}`` soft-delete child 5
- ``{...}`` without id          create a new child

Children not named in the array are left unchanged. An id that is not an
active child of the parent raises 404 and aborts the whole request.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..errors import ApiError
from ..models import Category, Image, Item
from ..schemas.images import MAX_SORT_ORDER, ImageIn, ImagePatch
from ..schemas.items import ItemIn, ItemPatch
from .helpers import apply_changes, deactivate_item

logger = logging.getLogger(__name__)

_ITEM_NULLABLE = ("description",)
_IMAGE_NULLABLE = ("alt",)


def next_sort_order(item: Item) -> int:
    """
    Sort order that places a new image after the item's active images.

    Capped at MAX_SORT_ORDER; images sharing the cap are ordered by id.
    """
    orders = [image.sort_order for image in item.images if image.active]
    return min(max(orders) + 1, MAX_SORT_ORDER) if orders else 0


# =============================================================================
# Creation
# =============================================================================

def build_images(db: Session, item: Item, entries: Iterable[ImageIn]) -> List[Image]:
    """Add new images to ``item``; missing sort orders follow list position."""
    images = []
    for index, entry in enumerate(entries):
        image = Image(
            url=entry.url,
            alt=entry.alt,
            sort_order=entry.sort_order if entry.sort_order is not None else index,
            active=entry.active if entry.active is not None else True,
        )
        item.images.append(image)
        db.add(image)
        images.append(image)
    return images


def build_item(db: Session, category: Category, entry: ItemIn) -> Item:
    item = Item(
        title=entry.title,
        description=entry.description,
        price=entry.price,
        active=entry.active if entry.active is not None else True,
    )
    category.items.append(item)
    db.add(item)
    build_images(db, item, entry.images)
    return item


# =============================================================================
# Patching
# =============================================================================

def sync_images(db: Session, item: Item, entries: Optional[List[ImagePatch]]) -> None:
    """Apply an image patch array to ``item``."""
    if entries is None:
        return

    existing = {image.id: image for image in item.images if image.active and image.id}
    for entry in entries:
        if entry.id is None:
            image = Image(
                url=entry.url,
                alt=entry.alt,
                sort_order=entry.sort_order if entry.sort_order is not None else next_sort_order(item),
                active=entry.active if entry.active is not None else True,
            )
            item.images.append(image)
            db.add(image)
            continue

        image = existing.get(entry.id)
        if image is None:
            raise ApiError(f"Image {entry.id} not found in item", 404)

        if entry.delete:
            image.active = False
            continue

        changes = entry.model_dump(exclude_unset=True, exclude={"id", "delete"})
        apply_changes(image, changes, nullable=_IMAGE_NULLABLE)


def sync_items(db: Session, category: Category, entries: Optional[List[ItemPatch]]) -> None:
    """Apply an item patch array (with nested image patches) to ``category``."""
    if entries is None:
        return

    existing = {item.id: item for item in category.items if item.active and item.id}
    for entry in entries:
        if entry.id is None:
            item = Item(
                title=entry.title,
                description=entry.description,
                price=entry.price,
                active=entry.active if entry.active is not None else True,
            )
            category.items.append(item)
            db.add(item)
            sync_images(db, item, entry.images)
            continue

        item = existing.get(entry.id)
        if item is None:
            raise ApiError(f"Item {entry.id} not found in category", 404)

        if entry.delete:
            deactivate_item(item)
            continue

        changes = entry.model_dump(exclude_unset=True, exclude={"id", "delete", "images"})
        apply_changes(item, changes, nullable=_ITEM_NULLABLE)
        sync_images(db, item, entry.images)
