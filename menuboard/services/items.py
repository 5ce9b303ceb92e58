"""
Item Service for Menuboard
==========================

Owner-scoped item CRUD. Items can be created with their images and updated
with an ``images`` patch array in the same request.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from ..models import Item, User
from ..schemas.items import ItemCreate, ItemUpdate
from .helpers import (
    apply_changes,
    deactivate_item,
    get_owned_category,
    get_owned_item,
    owned_items_query,
)
from .nested import build_item, sync_images

logger = logging.getLogger(__name__)


def list_items(db: Session, user: User, category_id: Optional[int] = None) -> List[Item]:
    query = owned_items_query(db, user).options(selectinload(Item.images))
    if category_id is not None:
        get_owned_category(db, user, category_id)
        query = query.filter(Item.category_id == category_id)
    return query.order_by(Item.id.asc()).all()


def get_item(db: Session, user: User, item_id: int) -> Item:
    return get_owned_item(db, user, item_id)


def create_item(db: Session, user: User, payload: ItemCreate) -> Item:
    category = get_owned_category(db, user, payload.category_id)
    try:
        item = build_item(db, category, payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(item)
    logger.info("Created item: %s (id=%d, category=%d)", item.title, item.id, category.id)
    return item


def update_item(db: Session, user: User, item_id: int, payload: ItemUpdate) -> Item:
    item = get_owned_item(db, user, item_id)
    try:
        changes = payload.model_dump(exclude_unset=True, exclude={"images"})
        apply_changes(item, changes, nullable=("description",))
        sync_images(db, item, payload.images)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(item)
    logger.info("Updated item: %s (id=%d)", item.title, item.id)
    return item


def delete_item(db: Session, user: User, item_id: int) -> None:
    item = get_owned_item(db, user, item_id)
    logger.info("Deleting item: %s (id=%d)", item.title, item.id)
    deactivate_item(item)
    db.commit()
