"""
Item Routes for Menuboard
=========================

Owner endpoints for the items (dishes) of a category.

Endpoints:
----------
- GET /items?category_id=: List active items with their images
- GET /items/{id}: Get an item
- POST /items: Create an item, optionally with images
- PUT /items/{id}: Update an item; ``images`` is a patch array
- DELETE /items/{id}: Soft-delete an item with its images

Usage:
------
    PUT /items/12
    {
        "price": 7900,
        "images": [
            {"id": 30, "_delete": true},
            {"url": "https://cdn.example.com/muzza-2.jpg", "alt": "Muzzarella"}
        ]
    }
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db
from ..models import User
from ..schemas.items import ItemCreate, ItemOut, ItemUpdate
from ..services import items as item_service
from ..services.helpers import serialize_item

logger = logging.getLogger(__name__)

# Router definition
items_router = APIRouter(prefix="/items", tags=["Items"])


@items_router.get("", response_model=List[ItemOut])
def list_items(
    category_id: Optional[int] = Query(None, description="Only items of this category"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[ItemOut]:
    return [serialize_item(i) for i in item_service.list_items(db, current_user, category_id)]


@items_router.get("/{item_id}", response_model=ItemOut)
def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ItemOut:
    return serialize_item(item_service.get_item(db, current_user, item_id))


@items_router.post("", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: ItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ItemOut:
    return serialize_item(item_service.create_item(db, current_user, payload))


@items_router.put("/{item_id}", response_model=ItemOut)
def update_item(
    item_id: int,
    payload: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ItemOut:
    return serialize_item(item_service.update_item(db, current_user, item_id, payload))


@items_router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    item_service.delete_item(db, current_user, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
