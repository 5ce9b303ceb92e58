"""
Menu Schemas for Menuboard
==========================

This module defines Pydantic models for menu CRUD and for the nested menu tree
returned to owners and public visitors.

Endpoint Coverage:
------------------
- GET /menus, GET /menus/{id}: MenuOut
- GET /menus/{id}/full, GET /public/menus: MenuTreeOut
- POST /menus: MenuCreate -> MenuOut
- PUT /menus/{id}: MenuUpdate -> MenuOut

Branding Fields:
----------------
- logo / background_image: Image URLs (absolute, or /uploads/... for the local
  backend). Multipart requests may upload the files instead; the stored URL
  then replaces the field.
- color: ``{"primary": "#RRGGBB", "secondary": "#RRGGBB"}``
- pos: Free-form point-of-sale reference

Nullable fields accept ``null`` to clear the stored value. On update, omitted
fields are left unchanged.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .categories import CategoryTreeOut
from .common import HEX_COLOR_PATTERN, ImageUrl

MenuTitle = Annotated[str, Field(min_length=1, max_length=120)]
BrandingUrl = Annotated[ImageUrl, Field(max_length=255)]
HexColor = Annotated[str, Field(pattern=HEX_COLOR_PATTERN)]


class MenuColor(BaseModel):
    primary: HexColor
    secondary: HexColor


class MenuCreate(BaseModel):
    """
    Request model for creating a menu.

    Example:
        {
            "title": "Pizzeria Don Pepe",
            "color": {"primary": "#AA0000", "secondary": "#FFFFFF"},
            "logo": "https://cdn.example.com/logo.png"
        }
    """
    title: MenuTitle
    active: Optional[bool] = None
    logo: Optional[BrandingUrl] = None
    background_image: Optional[BrandingUrl] = None
    color: Optional[MenuColor] = None
    pos: Optional[Annotated[str, Field(max_length=255)]] = None


class MenuUpdate(BaseModel):
    title: Optional[MenuTitle] = None
    active: Optional[bool] = None
    logo: Optional[BrandingUrl] = None
    background_image: Optional[BrandingUrl] = None
    color: Optional[MenuColor] = None
    pos: Optional[Annotated[str, Field(max_length=255)]] = None


class MenuOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    active: bool
    logo: Optional[str] = None
    background_image: Optional[str] = None
    color: Optional[MenuColor] = None
    pos: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MenuTreeOut(MenuOut):
    categories: List[CategoryTreeOut] = []
