"""
Public Routes for Menuboard
===========================

Read-only endpoints for the diner-facing menu site. No authentication; the
restaurant is identified by its tenant subdomain.

Endpoints:
----------
- GET /public/menus: The tenant's active menus with categories, items and images
- GET /public/menus/{id}: One of those menus

Tenant Resolution:
------------------
The tenant comes from the X-Tenant-Subdomain header, the ``?tenant=`` query
parameter or the request host (see tenant.py):

    GET /public/menus
    X-Tenant-Subdomain: don-pepe

Data Filtering:
---------------
Only active rows are returned at every level of the tree.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import User
from ..schemas.menus import MenuTreeOut
from ..services import menus as menu_service
from ..services.helpers import serialize_menu_tree
from ..tenant import get_tenant

logger = logging.getLogger(__name__)

# Router definition
public_router = APIRouter(prefix="/public", tags=["Public"])


@public_router.get("/menus", response_model=List[MenuTreeOut])
def list_public_menus(
    db: Session = Depends(get_db),
    tenant: User = Depends(get_tenant),
) -> List[MenuTreeOut]:
    return [serialize_menu_tree(m) for m in menu_service.list_menu_trees(db, tenant)]


@public_router.get("/menus/{menu_id}", response_model=MenuTreeOut)
def get_public_menu(
    menu_id: int,
    db: Session = Depends(get_db),
    tenant: User = Depends(get_tenant),
) -> MenuTreeOut:
    return serialize_menu_tree(menu_service.get_menu_tree(db, tenant, menu_id))
