"""
Category Routes for Menuboard
=============================

Owner endpoints for the categories of a menu, including the "deep" variants
that write a category together with its items and images.

Endpoints:
----------
- GET /categories?menu_id=: List active categories (optionally of one menu)
- GET /categories/{id}: Get a category
- GET /categories/{id}/deep: Get a category with items and images
- POST /categories: Create a category
- POST /categories/deep: Create a category with items and images
- PUT /categories/{id}: Update a category
- PUT /categories/{id}/deep: Patch a category and its items/images
- DELETE /categories/{id}: Soft-delete a category with its items and images

Deep Writes:
------------
Deep requests run in one transaction. If any entry fails (for example an item
id that is not in the category) nothing is written. See schemas/categories.py
for request examples.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db
from ..models import User
from ..schemas.categories import (
    CategoryCreate,
    CategoryDeepCreate,
    CategoryDeepUpdate,
    CategoryOut,
    CategoryTreeOut,
    CategoryUpdate,
)
from ..services import categories as category_service
from ..services.helpers import serialize_category, serialize_category_tree

logger = logging.getLogger(__name__)

# Router definition
categories_router = APIRouter(prefix="/categories", tags=["Categories"])


@categories_router.get("", response_model=List[CategoryOut])
def list_categories(
    menu_id: Optional[int] = Query(None, description="Only categories of this menu"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[CategoryOut]:
    categories = category_service.list_categories(db, current_user, menu_id)
    return [serialize_category(c) for c in categories]


@categories_router.post("/deep", response_model=CategoryTreeOut, status_code=status.HTTP_201_CREATED)
def create_category_deep(
    payload: CategoryDeepCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryTreeOut:
    """Create a category with its items and their images in one transaction."""
    category = category_service.create_category_deep(db, current_user, payload)
    return serialize_category_tree(category)


@categories_router.get("/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryOut:
    return serialize_category(category_service.get_category(db, current_user, category_id))


@categories_router.get("/{category_id}/deep", response_model=CategoryTreeOut)
def get_category_deep(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryTreeOut:
    return serialize_category_tree(category_service.get_category_deep(db, current_user, category_id))


@categories_router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryOut:
    return serialize_category(category_service.create_category(db, current_user, payload))


@categories_router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryOut:
    category = category_service.update_category(db, current_user, category_id, payload)
    return serialize_category(category)


@categories_router.put("/{category_id}/deep", response_model=CategoryTreeOut)
def update_category_deep(
    category_id: int,
    payload: CategoryDeepUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryTreeOut:
    """Patch a category and its items/images in one transaction."""
    category = category_service.update_category_deep(db, current_user, category_id, payload)
    return serialize_category_tree(category)


@categories_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    category_service.delete_category(db, current_user, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
