"""
Helper Functions for Menuboard
==============================

This module contains shared utility functions used across the services and
routes: tenant-scoped lookups and ORM-to-schema serialization.

Key Functions:
--------------
- get_owned_menu / get_owned_category / get_owned_item / get_owned_image:
  Load a row only if it is active, sits under active parents, and belongs to
  a menu owned by the given user. Anything else is reported as 404 so one
  tenant cannot probe another tenant's ids.
- apply_changes: Copy the fields a client actually sent onto a model.
- serialize_*: Convert ORM objects to response models, dropping inactive
  children from nested trees.

Usage:
------
    from menuboard.services.helpers import get_owned_item, serialize_item

    item = get_owned_item(db, current_user, item_id)
    return serialize_item(item)
"""

import logging
from typing import Any, Dict, Iterable

from sqlalchemy.orm import Session

from ..errors import ApiError
from ..models import Category, Image, Item, Menu, User
from ..schemas.categories import CategoryOut, CategoryTreeOut
from ..schemas.images import ImageOut
from ..schemas.items import ItemOut
from ..schemas.menus import MenuColor, MenuOut, MenuTreeOut

logger = logging.getLogger(__name__)


# =============================================================================
# Tenant-scoped Lookups
# =============================================================================

def owned_menus_query(db: Session, user: User):
    return db.query(Menu).filter(Menu.user_id == user.id, Menu.active.is_(True))


def owned_categories_query(db: Session, user: User):
    return (
        db.query(Category)
        .join(Menu, Category.menu_id == Menu.id)
        .filter(
            Menu.user_id == user.id,
            Menu.active.is_(True),
            Category.active.is_(True),
        )
    )


def owned_items_query(db: Session, user: User):
    return (
        db.query(Item)
        .join(Category, Item.category_id == Category.id)
        .join(Menu, Category.menu_id == Menu.id)
        .filter(
            Menu.user_id == user.id,
            Menu.active.is_(True),
            Category.active.is_(True),
            Item.active.is_(True),
        )
    )


def owned_images_query(db: Session, user: User):
    return (
        db.query(Image)
        .join(Item, Image.item_id == Item.id)
        .join(Category, Item.category_id == Category.id)
        .join(Menu, Category.menu_id == Menu.id)
        .filter(
            Menu.user_id == user.id,
            Menu.active.is_(True),
            Category.active.is_(True),
            Item.active.is_(True),
            Image.active.is_(True),
        )
    )


def get_owned_menu(db: Session, user: User, menu_id: int) -> Menu:
    menu = owned_menus_query(db, user).filter(Menu.id == menu_id).first()
    if not menu:
        raise ApiError("Menu not found", 404)
    return menu


def get_owned_category(db: Session, user: User, category_id: int) -> Category:
    category = owned_categories_query(db, user).filter(Category.id == category_id).first()
    if not category:
        raise ApiError("Category not found", 404)
    return category


def get_owned_item(db: Session, user: User, item_id: int) -> Item:
    item = owned_items_query(db, user).filter(Item.id == item_id).first()
    if not item:
        raise ApiError("Item not found", 404)
    return item


def get_owned_image(db: Session, user: User, image_id: int) -> Image:
    image = owned_images_query(db, user).filter(Image.id == image_id).first()
    if not image:
        raise ApiError("Image not found", 404)
    return image


# =============================================================================
# Mutation Helpers
# =============================================================================

def apply_changes(obj: Any, changes: Dict[str, Any], nullable: Iterable[str] = ()) -> None:
    """
    Set each field in ``changes`` on ``obj``.

    An explicit ``None`` clears a field only when it is listed in ``nullable``;
    for required columns it is ignored.
    """
    nullable = set(nullable)
    for field, value in changes.items():
        if value is None and field not in nullable:
            continue
        setattr(obj, field, value)


def deactivate_item(item: Item) -> None:
    """Soft-delete an item together with its images."""
    item.active = False
    for image in item.images:
        image.active = False


def deactivate_category(category: Category) -> None:
    """Soft-delete a category together with its items and their images."""
    category.active = False
    for item in category.items:
        deactivate_item(item)


# =============================================================================
# Serialization
# =============================================================================

def serialize_image(image: Image) -> ImageOut:
    return ImageOut.model_validate(image)


def serialize_item(item: Item) -> ItemOut:
    """Convert an Item to its response model with active images only."""
    return ItemOut(
        id=item.id,
        category_id=item.category_id,
        title=item.title,
        description=item.description,
        price=float(item.price),
        active=item.active,
        images=[serialize_image(img) for img in item.images if img.active],
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def serialize_category(category: Category) -> CategoryOut:
    return CategoryOut.model_validate(category)


def serialize_category_tree(category: Category) -> CategoryTreeOut:
    return CategoryTreeOut(
        **serialize_category(category).model_dump(),
        items=[serialize_item(item) for item in category.items if item.active],
    )


def serialize_menu(menu: Menu) -> MenuOut:
    """Convert a Menu to its response model, folding the two color columns together."""
    color = None
    if menu.color_primary or menu.color_secondary:
        color = MenuColor(
            primary=menu.color_primary or "#000000",
            secondary=menu.color_secondary or "#FFFFFF",
        )
    return MenuOut(
        id=menu.id,
        user_id=menu.user_id,
        title=menu.title,
        active=menu.active,
        logo=menu.logo,
        background_image=menu.background_image,
        color=color,
        pos=menu.pos,
        created_at=menu.created_at,
        updated_at=menu.updated_at,
    )


def serialize_menu_tree(menu: Menu) -> MenuTreeOut:
    return MenuTreeOut(
        **serialize_menu(menu).model_dump(),
        categories=[
            serialize_category_tree(category)
            for category in menu.categories
            if category.active
        ],
    )
