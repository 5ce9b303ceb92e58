"""
Create all tables directly from the models.

Production databases are managed with Alembic (``alembic upgrade head``); this
script is for local development against a throwaway database.

    python -m menuboard.init_db
"""

from dotenv import load_dotenv
load_dotenv()

from .db import init_db
from .logging_config import setup_logging


if __name__ == "__main__":
    setup_logging()
    init_db()
    print("Database initialized successfully!")
