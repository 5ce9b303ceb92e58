"""
Schemas Package for Menuboard
=============================

This package contains all Pydantic models (schemas) used for API request
validation and response serialization.

Schema Organization:
--------------------
- **common.py**: Shared field types (image URLs, colors) and message models
- **users.py**: Sign-up, profile, login and password reset schemas
- **menus.py**: Menu CRUD schemas and the nested menu tree
- **categories.py**: Category CRUD and deep create/update schemas
- **items.py**: Item CRUD schemas and nested item forms
- **images.py**: Image CRUD schemas and image patch entries

Naming Conventions:
-------------------
- *Out: Response models (e.g., MenuOut) - what API returns
- *Create: Request models for POST - what client sends to create
- *Update: Request models for PUT - what client sends to update
- *In / *Patch: Nested entries inside a create / update request
- *Request: Other request bodies (e.g., LoginRequest)

Pydantic Configuration:
-----------------------
Response models set ``from_attributes=True`` so they can be built from
SQLAlchemy objects with ``Model.model_validate(obj)``.
"""

from .categories import (
    CategoryCreate,
    CategoryDeepCreate,
    CategoryDeepUpdate,
    CategoryOut,
    CategoryTreeOut,
    CategoryUpdate,
)
from .common import MessageOut
from .images import ImageCreate, ImageIn, ImageOut, ImagePatch, ImageUpdate
from .items import ItemCreate, ItemIn, ItemOut, ItemPatch, ItemUpdate
from .menus import MenuColor, MenuCreate, MenuOut, MenuTreeOut, MenuUpdate
from .users import (
    ForgotPasswordRequest,
    LoginRequest,
    PaginatedUsers,
    RestorePasswordRequest,
    TokenOut,
    UserCreate,
    UserOut,
    UserUpdate,
)

__all__ = [
    "CategoryCreate",
    "CategoryDeepCreate",
    "CategoryDeepUpdate",
    "CategoryOut",
    "CategoryTreeOut",
    "CategoryUpdate",
    "ForgotPasswordRequest",
    "ImageCreate",
    "ImageIn",
    "ImageOut",
    "ImagePatch",
    "ImageUpdate",
    "ItemCreate",
    "ItemIn",
    "ItemOut",
    "ItemPatch",
    "ItemUpdate",
    "LoginRequest",
    "MenuColor",
    "MenuCreate",
    "MenuOut",
    "MenuTreeOut",
    "MenuUpdate",
    "MessageOut",
    "PaginatedUsers",
    "RestorePasswordRequest",
    "TokenOut",
    "UserCreate",
    "UserOut",
    "UserUpdate",
]
