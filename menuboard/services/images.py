"""
Image Service for Menuboard
===========================

Owner-scoped image CRUD. Images either reference an external URL or point at
an object this service uploaded, in which case ``storage_key`` is recorded so
the object can be removed when the image is deleted.
"""

import logging
from typing import List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy.orm import Session

from .. import config
from ..errors import ApiError
from ..models import Image, User
from ..schemas.images import MAX_SORT_ORDER, ImageCreate, ImageUpdate
from ..storage import discard_objects, get_storage, upload_image
from .helpers import apply_changes, get_owned_image, get_owned_item, owned_images_query
from .nested import next_sort_order

logger = logging.getLogger(__name__)


def list_images(db: Session, user: User, item_id: Optional[int] = None) -> List[Image]:
    query = owned_images_query(db, user)
    if item_id is not None:
        get_owned_item(db, user, item_id)
        query = query.filter(Image.item_id == item_id)
    return query.order_by(Image.item_id.asc(), Image.sort_order.asc(), Image.id.asc()).all()


def get_image(db: Session, user: User, image_id: int) -> Image:
    return get_owned_image(db, user, image_id)


def create_image(db: Session, user: User, payload: ImageCreate) -> Image:
    item = get_owned_item(db, user, payload.item_id)
    image = Image(
        item_id=item.id,
        url=payload.url,
        alt=payload.alt,
        sort_order=payload.sort_order if payload.sort_order is not None else next_sort_order(item),
        active=payload.active if payload.active is not None else True,
    )
    db.add(image)
    db.commit()
    db.refresh(image)
    logger.info("Created image id=%d for item id=%d", image.id, item.id)
    return image


def upload_images(
    db: Session,
    user: User,
    item_id: int,
    files: Sequence[UploadFile],
    alt: Optional[str] = None,
) -> List[Image]:
    """
    Upload files to storage and attach them to an item, in the given order.

    Raises:
        ApiError (400): No files, too many files, or an invalid image.
        ApiError (404): The item is not found.
        ApiError (413): A file is larger than MAX_UPLOAD_BYTES.
    """
    item = get_owned_item(db, user, item_id)
    if not files:
        raise ApiError("At least one file is required", 400)
    if len(files) > config.MAX_UPLOAD_FILES:
        raise ApiError(f"Too many files. Max: {config.MAX_UPLOAD_FILES}", 400)

    alt = (alt.strip() or None) if alt else None
    sort_order = next_sort_order(item)
    stored_keys = []
    images = []
    try:
        for upload in files:
            stored = upload_image(upload, prefix="items", owner_id=user.id)
            stored_keys.append(stored.key)
            image = Image(
                item_id=item.id,
                url=stored.url,
                alt=alt,
                sort_order=sort_order,
                storage_key=stored.key,
                active=True,
            )
            db.add(image)
            images.append(image)
            sort_order = min(sort_order + 1, MAX_SORT_ORDER)
        db.commit()
    except Exception:
        db.rollback()
        discard_objects(stored_keys)
        raise

    for image in images:
        db.refresh(image)
    logger.info("Uploaded %d image(s) for item id=%d", len(images), item.id)
    return images


def update_image(db: Session, user: User, image_id: int, payload: ImageUpdate) -> Image:
    image = get_owned_image(db, user, image_id)
    apply_changes(image, payload.model_dump(exclude_unset=True), nullable=("alt",))
    db.commit()
    db.refresh(image)
    logger.info("Updated image id=%d", image.id)
    return image


def delete_image(db: Session, user: User, image_id: int) -> None:
    image = get_owned_image(db, user, image_id)
    image.active = False
    db.commit()
    logger.info("Deleted image id=%d", image.id)

    if image.storage_key:
        get_storage().delete(image.storage_key)
