"""
Menu Routes for Menuboard
=========================

Owner endpoints for menus. A menu is the top of the
menu -> category -> item -> image tree.

Endpoints:
----------
- GET /menus: List the current user's active menus
- GET /menus/{id}: Get a menu
- GET /menus/{id}/full: Get a menu with its categories, items and images
- POST /menus: Create a menu
- PUT /menus/{id}: Update a menu
- DELETE /menus/{id}: Soft-delete a menu

Request Bodies:
---------------
POST and PUT accept ``application/json`` or ``multipart/form-data``. With
multipart, the menu fields come either as form fields or as one JSON string in
a ``payload`` field, and the branding images are sent as files:

    curl -X POST /menus \\
        -H "Authorization: Bearer ..." \\
        -F 'payload={"title": "Carta", "color": {"primary": "#112233", "secondary": "#FFFFFF"}}' \\
        -F logo=@logo.png \\
        -F backgroundImage=@wall.jpg

See services/menus.normalize_menu_body for the accepted spellings.
"""

import logging
from typing import Any, Dict, List, Tuple, Type, TypeVar

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from ..auth import get_current_user
from ..db import get_db
from ..errors import ApiError
from ..models import User
from ..schemas.menus import MenuCreate, MenuOut, MenuTreeOut, MenuUpdate
from ..services import menus as menu_service
from ..services.helpers import serialize_menu, serialize_menu_tree

logger = logging.getLogger(__name__)

# Router definition
menus_router = APIRouter(prefix="/menus", tags=["Menus"])

ModelT = TypeVar("ModelT", bound=BaseModel)

MenuRequest = Tuple[Dict[str, Any], Dict[str, UploadFile]]


# =============================================================================
# Request Parsing
# =============================================================================

async def read_menu_request(request: Request) -> MenuRequest:
    """Read a JSON or multipart menu body into (fields, files)."""
    content_type = request.headers.get("content-type", "")
    files: Dict[str, UploadFile] = {}

    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        fields: Dict[str, Any] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key in menu_service.MENU_FILE_FIELDS and value.filename:
                    files[key] = value
            else:
                fields[key] = value
        return menu_service.normalize_menu_body(fields), files

    raw = await request.body()
    if not raw:
        return menu_service.normalize_menu_body({}), files
    try:
        body = await request.json()
    except ValueError:
        raise ApiError("Invalid JSON body", 400)
    if not isinstance(body, dict):
        raise ApiError("Request body must be a JSON object", 400)
    return menu_service.normalize_menu_body(body), files


def validate_body(model: Type[ModelT], body: Dict[str, Any]) -> ModelT:
    """Validate a parsed body, reporting failures like FastAPI body validation."""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


# =============================================================================
# Menu Endpoints
# =============================================================================

@menus_router.get("", response_model=List[MenuOut])
def list_menus(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[MenuOut]:
    return [serialize_menu(m) for m in menu_service.list_menus(db, current_user)]


@menus_router.get("/{menu_id}", response_model=MenuOut)
def get_menu(
    menu_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MenuOut:
    return serialize_menu(menu_service.get_menu(db, current_user, menu_id))


@menus_router.get("/{menu_id}/full", response_model=MenuTreeOut)
def get_menu_full(
    menu_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MenuTreeOut:
    """Get a menu with its active categories, items and images."""
    return serialize_menu_tree(menu_service.get_menu_tree(db, current_user, menu_id))


@menus_router.post("", response_model=MenuOut, status_code=status.HTTP_201_CREATED)
def create_menu(
    menu_request: MenuRequest = Depends(read_menu_request),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MenuOut:
    """Create a menu from a JSON or multipart body."""
    body, files = menu_request
    payload = validate_body(MenuCreate, body)
    return serialize_menu(menu_service.create_menu(db, current_user, payload, files))


@menus_router.put("/{menu_id}", response_model=MenuOut)
def update_menu(
    menu_id: int,
    menu_request: MenuRequest = Depends(read_menu_request),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MenuOut:
    """Update a menu. Only the fields sent are changed."""
    body, files = menu_request
    payload = validate_body(MenuUpdate, body)
    return serialize_menu(menu_service.update_menu(db, current_user, menu_id, payload, files))


@menus_router.delete("/{menu_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu(
    menu_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    menu_service.delete_menu(db, current_user, menu_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
