"""
Seed a demo tenant with two menus.

Creates the owner ``demo@menuboard.local`` (subdomain ``demo``) with a pizza
menu and a cafe menu, each with categories, items and images. Does nothing if
the demo owner already exists.

    alembic upgrade head
    python -m menuboard.seed_menu
"""

from dotenv import load_dotenv
load_dotenv()

import logging
import os

from . import config
from .auth import hash_password
from . import db as db_module
from .models import Category, Image, Item, Menu, User
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@menuboard.local"
DEMO_SUBDOMAIN = "demo"

MENUS = [
    {
        "title": "Pizzería Don Pepe",
        "color_primary": "#B22222",
        "color_secondary": "#FFF8E7",
        "categories": [
            {
                "title": "Pizzas",
                "items": [
                    ("Muzzarella", "Salsa de tomate, muzzarella y aceitunas", 7500,
                     ["https://images.unsplash.com/photo-1513104890138-7c749659a591"]),
                    ("Napolitana", "Muzzarella, tomate en rodajas, ajo y albahaca", 8900,
                     ["https://images.unsplash.com/photo-1574071318508-1cdbab80d002"]),
                    ("Fugazzeta", "Cebolla, muzzarella y orégano", 8600, []),
                ],
            },
            {
                "title": "Empanadas",
                "items": [
                    ("Carne cortada a cuchillo", None, 1500, []),
                    ("Jamón y queso", None, 1400, []),
                ],
            },
        ],
    },
    {
        "title": "Cafetería La Plaza",
        "color_primary": "#4B2E2A",
        "color_secondary": "#F5EBDD",
        "categories": [
            {
                "title": "Cafés",
                "items": [
                    ("Espresso", None, 1800, []),
                    ("Cortado", "Espresso con un toque de leche", 2000,
                     ["https://images.unsplash.com/photo-1510591509098-f4fdc6d0ff04"]),
                ],
            },
            {
                "title": "Pastelería",
                "items": [
                    ("Medialunas (3)", "De manteca", 2400,
                     ["https://images.unsplash.com/photo-1555507036-ab1f4038808a"]),
                ],
            },
        ],
    },
]


def seed_menu():
    # Tables should be created via Alembic migrations first
    db = db_module.SessionLocal()
    try:
        if db.query(User).filter(User.email == DEMO_EMAIL).first():
            print(f"Demo user {DEMO_EMAIL} already exists. Not seeding again.")
            return False

        password = os.getenv("DEMO_PASSWORD", "demo12345")
        owner = User(
            name="Demo",
            last_name="Owner",
            email=DEMO_EMAIL,
            cel="+54 11 5555 0000",
            role_id=config.ROLE_OWNER,
            subdomain=DEMO_SUBDOMAIN,
            active=True,
            password_hash=hash_password(password),
        )
        db.add(owner)

        for menu_data in MENUS:
            menu = Menu(
                title=menu_data["title"],
                color_primary=menu_data["color_primary"],
                color_secondary=menu_data["color_secondary"],
                active=True,
            )
            owner.menus.append(menu)
            for category_data in menu_data["categories"]:
                category = Category(title=category_data["title"], active=True)
                menu.categories.append(category)
                for title, description, price, urls in category_data["items"]:
                    item = Item(title=title, description=description, price=price, active=True)
                    category.items.append(item)
                    for position, url in enumerate(urls):
                        item.images.append(
                            Image(url=url, alt=title, sort_order=position, active=True)
                        )

        db.commit()
        logger.info("Seeded demo tenant %s with %d menus", DEMO_SUBDOMAIN, len(MENUS))
        print(f"Seeded demo user {DEMO_EMAIL} (subdomain '{DEMO_SUBDOMAIN}') with {len(MENUS)} menus.")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    seed_menu()
