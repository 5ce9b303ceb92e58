"""
Category Service for Menuboard
==============================

Owner-scoped category CRUD plus the deep create/update that writes a category,
its items and their images in one transaction (see services/nested.py for the
patch rules).
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from ..errors import ApiError
from ..models import Category, Item, User
from ..schemas.categories import (
    CategoryCreate,
    CategoryDeepCreate,
    CategoryDeepUpdate,
    CategoryUpdate,
)
from .helpers import (
    apply_changes,
    deactivate_category,
    get_owned_category,
    get_owned_menu,
    owned_categories_query,
)
from .nested import build_item, sync_items

logger = logging.getLogger(__name__)


# =============================================================================
# Queries
# =============================================================================

def list_categories(db: Session, user: User, menu_id: Optional[int] = None) -> List[Category]:
    query = owned_categories_query(db, user)
    if menu_id is not None:
        get_owned_menu(db, user, menu_id)
        query = query.filter(Category.menu_id == menu_id)
    return query.order_by(Category.id.asc()).all()


def get_category(db: Session, user: User, category_id: int) -> Category:
    return get_owned_category(db, user, category_id)


def get_category_deep(db: Session, user: User, category_id: int) -> Category:
    category = (
        owned_categories_query(db, user)
        .filter(Category.id == category_id)
        .options(selectinload(Category.items).selectinload(Item.images))
        .first()
    )
    if not category:
        raise ApiError("Category not found", 404)
    return category


# =============================================================================
# Mutations
# =============================================================================

def create_category(db: Session, user: User, payload: CategoryCreate) -> Category:
    menu = get_owned_menu(db, user, payload.menu_id)
    category = Category(
        menu_id=menu.id,
        title=payload.title,
        active=payload.active if payload.active is not None else True,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Created category: %s (id=%d, menu=%d)", category.title, category.id, menu.id)
    return category


def create_category_deep(db: Session, user: User, payload: CategoryDeepCreate) -> Category:
    """
    Create a category with its items and images atomically.

    Raises:
        ApiError (404): The menu does not exist or belongs to another user.
    """
    menu = get_owned_menu(db, user, payload.menu_id)
    try:
        category = Category(
            menu_id=menu.id,
            title=payload.title,
            active=payload.active if payload.active is not None else True,
        )
        db.add(category)
        for entry in payload.items:
            build_item(db, category, entry)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Created category %s (id=%d) with %d item(s)",
        category.title, category.id, len(payload.items),
    )
    db.refresh(category)
    return category


def update_category(db: Session, user: User, category_id: int, payload: CategoryUpdate) -> Category:
    category = get_owned_category(db, user, category_id)
    apply_changes(category, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(category)
    logger.info("Updated category: %s (id=%d)", category.title, category.id)
    return category


def update_category_deep(
    db: Session,
    user: User,
    category_id: int,
    payload: CategoryDeepUpdate,
) -> Category:
    """
    Patch a category and its item/image children atomically.

    Raises:
        ApiError (404): The category, or an item/image id named in the patch,
            is not found. Nothing is written in that case.
    """
    category = get_category_deep(db, user, category_id)
    try:
        apply_changes(category, payload.model_dump(exclude_unset=True, exclude={"items"}))
        sync_items(db, category, payload.items)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Deep-updated category: %s (id=%d)", category.title, category.id)
    db.refresh(category)
    return category


def delete_category(db: Session, user: User, category_id: int) -> None:
    category = get_owned_category(db, user, category_id)
    logger.info("Deleting category: %s (id=%d)", category.title, category.id)
    deactivate_category(category)
    db.commit()
