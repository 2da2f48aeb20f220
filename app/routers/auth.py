import logging

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.user import UserCreate, UserLogin
from app.schemas.tokens import AuthOut
from app.utils.errors import ModelValidationError
from app.utils.security import create_user_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Authentication"])

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    existing_user = db.query(User).filter(
        or_(User.email == user.email, User.username == user.username)
    ).first()
    if existing_user:
        raise HTTPException(
            status_code=400,
            detail="User with this email or username already exists"
        )

    new_user = User(
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
    )
    new_user.set_password(user.password)

    try:
        db.add(new_user)
        db.commit()
    except ModelValidationError:
        db.rollback()
        raise
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        raise HTTPException(
            status_code=400,
            detail="User with this email or username already exists"
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration error")
        raise HTTPException(status_code=500, detail="Failed to register user")
    db.refresh(new_user)

    logger.info("User %s registered", new_user.id)
    return {
        "message": "User registered successfully",
        "user": new_user,
        "token": create_user_token(new_user),
    }


@router.post("/login", response_model=AuthOut)
def login(user: UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == user.email).first()
    # Same answer for an unknown email and a wrong password
    if not db_user or not db_user.check_password(user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    if not db_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    db_user.record_login()
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Login error")
        raise HTTPException(status_code=500, detail="Failed to login")
    db.refresh(db_user)

    logger.info("User %s logged in", db_user.id)
    return {
        "message": "Login successful",
        "user": db_user,
        "token": create_user_token(db_user),
    }
