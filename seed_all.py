"""
Master Database Seeding Script
Creates database tables and populates with demo data
"""

import sys
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.models.task import Task
from app.models.user import User
from app.utils.dates import utcnow
from create_tables import create_tables
from demo_tasks import DEMO_TASKS
from demo_users import DEMO_USERS


def seed_demo_users(session: Session) -> dict:
    """Create demo users, returning a username -> id mapping"""
    id_mapping = {}
    for user_data in DEMO_USERS:
        existing_user = session.query(User).filter(User.email == user_data["email"]).first()
        if existing_user:
            print(f"[SKIP] User {user_data['email']} already exists, skipping...")
            id_mapping[user_data["username"]] = existing_user.id
            continue

        user = User(
            username=user_data["username"],
            email=user_data["email"],
            first_name=user_data["first_name"],
            last_name=user_data["last_name"],
        )
        user.set_password(user_data["password"])
        session.add(user)
        session.flush()
        id_mapping[user.username] = user.id
        print(f"[SUCCESS] Created user: {user.full_name} ({user.email})")

    session.commit()
    return id_mapping


def seed_demo_tasks(session: Session, id_mapping: dict) -> int:
    """Create demo tasks owned by the demo users"""
    created = 0
    now = utcnow()
    for task_data in DEMO_TASKS:
        if session.query(Task).filter(Task.title == task_data["title"]).first():
            print(f"[SKIP] Task '{task_data['title']}' already exists, skipping...")
            continue

        due_in_days = task_data["due_in_days"]
        task = Task(
            title=task_data["title"],
            description=task_data["description"],
            status=task_data["status"],
            priority=task_data["priority"],
            due_date=now + timedelta(days=due_in_days) if due_in_days is not None else None,
            tags=task_data["tags"],
            user_id=id_mapping.get(task_data["owner"]),
        )
        session.add(task)
        created += 1
        print(f"[SUCCESS] Created task: {task.title}")

    session.commit()
    return created


def main():
    """Main function to run all seeding operations"""
    print("MASTER DATABASE SEEDING SCRIPT")
    print("=" * 60)

    create_tables(drop_existing="--drop" in sys.argv)

    session = SessionLocal()
    try:
        id_mapping = seed_demo_users(session)
        created = seed_demo_tasks(session, id_mapping)
    except SQLAlchemyError as e:
        session.rollback()
        print(f"[ERROR] Seeding failed: {e}")
        sys.exit(1)
    finally:
        session.close()

    print("=" * 60)
    print(f"Users: {len(id_mapping)}, new tasks: {created}")
    print("\n[INFO] Login Credentials:")
    for user_data in DEMO_USERS:
        print(f"   {user_data['email']} / {user_data['password']}")


if __name__ == "__main__":
    main()
