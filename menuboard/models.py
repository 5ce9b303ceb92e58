from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    Index,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


# --- Tenants ---

class User(TimestampMixin, Base):
    """A tenant. Owns menus and is addressed publicly by its subdomain."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)  # stored trimmed + lowercased
    cel = Column(String(255), nullable=False)
    role_id = Column(Integer, nullable=False)
    subdomain = Column(String(63), unique=True, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    password_hash = Column(String(255), nullable=False)

    menus = relationship("Menu", back_populates="user", order_by="Menu.id")
    reset_tokens = relationship(
        "PasswordResetToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class PasswordResetToken(TimestampMixin, Base):
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(255), unique=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="reset_tokens")


# --- Menu tree: menu -> category -> item -> image ---

class Menu(TimestampMixin, Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    logo = Column(String(255), nullable=True)
    background_image = Column(String(255), nullable=True)
    color_primary = Column(String(7), nullable=True)  # "#RRGGBB"
    color_secondary = Column(String(7), nullable=True)
    pos = Column(String(255), nullable=True)

    user = relationship("User", back_populates="menus")
    categories = relationship("Category", back_populates="menu", order_by="Category.id")

    # Owner listings filter on user + active
    __table_args__ = (
        Index("ix_menus_user_id_active", "user_id", "active"),
    )


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    menu = relationship("Menu", back_populates="categories")
    items = relationship("Item", back_populates="category", order_by="Item.id")


class Item(TimestampMixin, Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    title = Column(String(160), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    category = relationship("Category", back_populates="items")
    images = relationship(
        "Image",
        back_populates="item",
        order_by=lambda: [Image.sort_order, Image.id],
    )


class Image(TimestampMixin, Base):
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    url = Column(String(1024), nullable=False)
    alt = Column(String(255), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    storage_key = Column(String(512), nullable=True)  # set only for uploaded files
    active = Column(Boolean, nullable=False, default=True)

    item = relationship("Item", back_populates="images")
