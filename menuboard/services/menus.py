"""
Menu Service for Menuboard
==========================

Owner-scoped menu CRUD. Menus accept their branding images either as URLs in
the body or as uploaded files; see ``normalize_menu_body`` for the tolerated
request shapes.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session, selectinload

from ..errors import ApiError
from ..models import Category, Item, Menu, User
from ..schemas.menus import MenuCreate, MenuUpdate
from ..storage import discard_objects, upload_image
from .helpers import apply_changes, get_owned_menu, owned_menus_query

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_COLOR = "#000000"
DEFAULT_SECONDARY_COLOR = "#FFFFFF"

# Upload field name -> menu column
MENU_FILE_FIELDS = {
    "logo": "logo",
    "background_image": "background_image",
    "backgroundImage": "background_image",
}

_NULLABLE_FIELDS = ("logo", "background_image", "pos")


def _tree_loader():
    return (
        selectinload(Menu.categories)
        .selectinload(Category.items)
        .selectinload(Item.images)
    )


def _pop_first(body: Dict[str, Any], *keys: str) -> Any:
    found = None
    for key in keys:
        value = body.pop(key, None)
        if found is None and value not in (None, ""):
            found = value
    return found


def normalize_menu_body(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Reshape a tolerant menu request body into the MenuCreate/MenuUpdate shape.

    - A ``payload`` field holding a JSON object (or its string form) is merged
      into the body.
    - ``backgroundImage`` is accepted for ``background_image``.
    - ``active`` given as "true"/"false" becomes a boolean; an empty string is
      dropped so the field counts as not sent.
    - Flat ``color_primary``/``color_secondary`` (or camelCase) are folded into
      ``color``, defaulting the missing side to black/white.
    - Empty strings for logo, background_image and pos mean null.

    Raises:
        ApiError (400): ``payload`` is a string that is not a JSON object.
    """
    body = dict(raw)

    payload = body.pop("payload", None)
    if isinstance(payload, str):
        try:
            parsed = json.loads(payload)
        except ValueError:
            raise ApiError("Invalid payload: not JSON", 400)
        if not isinstance(parsed, dict):
            raise ApiError("Invalid payload: expected a JSON object", 400)
        body.update(parsed)
    elif isinstance(payload, dict):
        body.update(payload)

    if "backgroundImage" in body:
        value = body.pop("backgroundImage")
        body.setdefault("background_image", value)

    if isinstance(body.get("active"), str):
        active = body["active"].strip().lower()
        if not active:
            body.pop("active")
        elif active in ("true", "false"):
            body["active"] = active == "true"

    color = body.get("color") if isinstance(body.get("color"), dict) else {}
    primary = _pop_first(body, "color_primary", "colorPrimary")
    secondary = _pop_first(body, "color_secondary", "colorSecondary")
    if primary or secondary:
        body["color"] = {
            "primary": primary or color.get("primary") or DEFAULT_PRIMARY_COLOR,
            "secondary": secondary or color.get("secondary") or DEFAULT_SECONDARY_COLOR,
        }

    for field in _NULLABLE_FIELDS:
        if body.get(field) == "":
            body[field] = None

    return body


def _apply_color(menu: Menu, color: Optional[Dict[str, str]]) -> None:
    if color is None:
        menu.color_primary = None
        menu.color_secondary = None
    else:
        menu.color_primary = color["primary"]
        menu.color_secondary = color["secondary"]


def _apply_uploads(menu: Menu, user: User, files: Mapping[str, UploadFile]) -> List[str]:
    stored_keys = []
    for field, upload in files.items():
        column = MENU_FILE_FIELDS.get(field)
        if column is None:
            continue
        stored = upload_image(upload, prefix="menus", owner_id=user.id)
        setattr(menu, column, stored.url)
        stored_keys.append(stored.key)
    return stored_keys


def _commit_or_discard(db: Session, stored_keys: List[str]) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        discard_objects(stored_keys)
        raise


# =============================================================================
# Queries
# =============================================================================

def list_menus(db: Session, user: User) -> List[Menu]:
    return owned_menus_query(db, user).order_by(Menu.id.asc()).all()


def get_menu(db: Session, user: User, menu_id: int) -> Menu:
    return get_owned_menu(db, user, menu_id)


def list_menu_trees(db: Session, user: User) -> List[Menu]:
    """Load every active menu of ``user`` with its children eagerly."""
    return (
        owned_menus_query(db, user)
        .options(_tree_loader())
        .order_by(Menu.id.asc())
        .all()
    )


def get_menu_tree(db: Session, user: User, menu_id: int) -> Menu:
    """Load a menu with categories, items and images eagerly."""
    menu = (
        owned_menus_query(db, user)
        .filter(Menu.id == menu_id)
        .options(_tree_loader())
        .first()
    )
    if not menu:
        raise ApiError("Menu not found", 404)
    return menu


# =============================================================================
# Mutations
# =============================================================================

def create_menu(
    db: Session,
    user: User,
    payload: MenuCreate,
    files: Optional[Mapping[str, UploadFile]] = None,
) -> Menu:
    data = payload.model_dump(exclude_unset=True, exclude={"color"})
    menu = Menu(user_id=user.id, active=True)
    apply_changes(menu, data, nullable=_NULLABLE_FIELDS)
    if payload.color is not None:
        _apply_color(menu, payload.color.model_dump())

    stored_keys = _apply_uploads(menu, user, files) if files else []

    db.add(menu)
    _commit_or_discard(db, stored_keys)
    db.refresh(menu)
    logger.info("Created menu: %s (id=%d, user=%d)", menu.title, menu.id, user.id)
    return menu


def update_menu(
    db: Session,
    user: User,
    menu_id: int,
    payload: MenuUpdate,
    files: Optional[Mapping[str, UploadFile]] = None,
) -> Menu:
    menu = get_owned_menu(db, user, menu_id)
    changes = payload.model_dump(exclude_unset=True)

    color_given = "color" in changes
    color = changes.pop("color", None)
    apply_changes(menu, changes, nullable=_NULLABLE_FIELDS)
    if color_given:
        _apply_color(menu, color)

    stored_keys = _apply_uploads(menu, user, files) if files else []

    _commit_or_discard(db, stored_keys)
    db.refresh(menu)
    logger.info("Updated menu: %s (id=%d)", menu.title, menu.id)
    return menu


def delete_menu(db: Session, user: User, menu_id: int) -> None:
    menu = get_owned_menu(db, user, menu_id)
    logger.info("Deleting menu: %s (id=%d)", menu.title, menu.id)
    menu.active = False
    db.commit()
