# app/routers/user.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import AppConfig
from app.database import get_db
from app.models.user import User
from app.schemas import Pagination
from app.schemas.user import UserOut, UserUpdate, UserListOut, ProfileUpdateOut
from app.utils.auth import get_current_user
from app.utils.errors import ModelValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=UserListOut)
def get_all_users(
    page: int = Query(1, ge=1),
    limit: int = Query(AppConfig.DEFAULT_PAGE_SIZE, ge=1, le=AppConfig.MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """Get users newest first"""
    try:
        total = db.query(User).count()
        users = (
            db.query(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise HTTPException(status_code=500, detail="Failed to fetch users")

    return {
        "users": users,
        "pagination": Pagination.build(page=page, limit=limit, total=total),
    }


@router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get the user the bearer token belongs to"""
    return current_user


@router.get("/profile/{user_id}", response_model=UserOut)
def get_profile(user_id: int, db: Session = Depends(get_db)):
    """Get a specific user by ID"""
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/profile/{user_id}", response_model=ProfileUpdateOut)
def update_profile(user_id: int, user_update: UserUpdate, db: Session = Depends(get_db)):
    """Update a user's profile; email and username must stay unique"""
    db_user = db.get(User, user_id)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    update_data = user_update.model_dump(exclude_unset=True)

    # Check if email/username is already taken by another user
    clashes = []
    if update_data.get("email"):
        clashes.append(User.email == update_data["email"])
    if update_data.get("username"):
        clashes.append(User.username == update_data["username"])
    if clashes:
        existing_user = db.query(User).filter(User.id != user_id, or_(*clashes)).first()
        if existing_user:
            raise HTTPException(status_code=400, detail="Email or username already in use")

    # Handle password update separately (hash it if provided)
    password = update_data.pop("password", None)
    if password:
        db_user.set_password(password)

    for field, value in update_data.items():
        # username and email cannot be cleared
        if value is None and field in ("username", "email"):
            continue
        setattr(db_user, field, value)

    try:
        db.commit()
    except ModelValidationError:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email or username already in use")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating user profile %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to update profile")
    db.refresh(db_user)

    return {"message": "Profile updated successfully", "user": db_user}
