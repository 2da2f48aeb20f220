# create_tables.py
import sys

from app.database import Base, engine, init_db


def create_tables(drop_existing: bool = False, bind=None):
    """Create all tables, optionally dropping the existing ones first"""
    bind = bind or engine
    if drop_existing:
        # Importing the models registers their tables for drop_all
        from app.models import task, user  # noqa: F401
        Base.metadata.drop_all(bind=bind)
        print("Existing tables dropped")
    init_db(bind=bind)
    print("All tables created successfully!")


if __name__ == "__main__":
    create_tables(drop_existing="--drop" in sys.argv)
