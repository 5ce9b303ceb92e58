"""
Image Routes for Menuboard
==========================

Owner endpoints for item images, either by URL or uploaded to storage.

Endpoints:
----------
- GET /images?item_id=: List active images
- GET /images/{id}: Get an image
- POST /images: Attach an image by URL
- POST /images/items/{item_id}: Upload image files (multipart ``files``)
- PUT /images/{id}: Update an image
- DELETE /images/{id}: Soft-delete an image and remove its stored file

Uploads:
--------
    curl -X POST /images/items/12 \\
        -H "Authorization: Bearer ..." \\
        -F files=@front.jpg -F files=@side.jpg -F alt="Muzzarella"

Files are stored under ``items/<user_id>/`` and appended after the item's
existing images in the order sent.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db
from ..models import User
from ..schemas.images import ImageCreate, ImageOut, ImageUpdate
from ..services import images as image_service
from ..services.helpers import serialize_image

logger = logging.getLogger(__name__)

# Router definition
images_router = APIRouter(prefix="/images", tags=["Images"])


@images_router.get("", response_model=List[ImageOut])
def list_images(
    item_id: Optional[int] = Query(None, description="Only images of this item"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[ImageOut]:
    return [serialize_image(i) for i in image_service.list_images(db, current_user, item_id)]


@images_router.get("/{image_id}", response_model=ImageOut)
def get_image(
    image_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ImageOut:
    return serialize_image(image_service.get_image(db, current_user, image_id))


@images_router.post("", response_model=ImageOut, status_code=status.HTTP_201_CREATED)
def create_image(
    payload: ImageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ImageOut:
    return serialize_image(image_service.create_image(db, current_user, payload))


@images_router.post(
    "/items/{item_id}",
    response_model=List[ImageOut],
    status_code=status.HTTP_201_CREATED,
)
def upload_images(
    item_id: int,
    files: List[UploadFile] = File(..., description="Image files (jpeg, png, webp, gif)"),
    alt: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[ImageOut]:
    """Upload one or more image files and attach them to an item."""
    images = image_service.upload_images(db, current_user, item_id, files, alt)
    return [serialize_image(i) for i in images]


@images_router.put("/{image_id}", response_model=ImageOut)
def update_image(
    image_id: int,
    payload: ImageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ImageOut:
    return serialize_image(image_service.update_image(db, current_user, image_id, payload))


@images_router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_image(
    image_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    image_service.delete_image(db, current_user, image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
