# app/models/user.py
import re

from sqlalchemy import Column, Integer, String, DateTime, Boolean, event
from sqlalchemy.orm import validates

from app.config.security import SecurityConfig
from app.constants import USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH
from app.database import Base
from app.utils.dates import utcnow
from app.utils.errors import ModelValidationError
from app.utils.security import hash_password, verify_password, BCRYPT_MAX_BYTES

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role = Column(String, default="user", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @validates("username", "first_name", "last_name")
    def _strip_text(self, key, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @validates("email")
    def _normalize_email(self, key, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def password(self):
        raise AttributeError("password is write-only; only its hash is stored")

    @password.setter
    def password(self, plain_password: str):
        self.set_password(plain_password)

    def set_password(self, plain_password: str) -> None:
        """Hash and store a new password. The plaintext is never kept."""
        min_length = SecurityConfig.PASSWORDS['min_length']
        if not plain_password:
            raise ModelValidationError.single("password", "Password is required")
        if len(plain_password) < min_length:
            raise ModelValidationError.single(
                "password", f"Password must be at least {min_length} characters"
            )
        if len(plain_password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ModelValidationError.single(
                "password", f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes"
            )
        self.hashed_password = hash_password(plain_password)

    def check_password(self, candidate_password: str) -> bool:
        return verify_password(candidate_password, self.hashed_password)

    def record_login(self) -> None:
        self.last_login = utcnow()

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.username

    def apply_defaults(self) -> None:
        if self.role is None:
            self.role = "user"
        if self.is_active is None:
            self.is_active = True

    def validate(self) -> None:
        errors = []

        if not self.username:
            errors.append({"field": "username", "message": "Username is required"})
        elif len(self.username) < USERNAME_MIN_LENGTH:
            errors.append({
                "field": "username",
                "message": f"Username must be at least {USERNAME_MIN_LENGTH} characters",
            })
        elif len(self.username) > USERNAME_MAX_LENGTH:
            errors.append({
                "field": "username",
                "message": f"Username cannot exceed {USERNAME_MAX_LENGTH} characters",
            })

        if not self.email:
            errors.append({"field": "email", "message": "Email is required"})
        elif not EMAIL_PATTERN.match(self.email):
            errors.append({"field": "email", "message": "Please provide a valid email"})

        if not self.hashed_password:
            errors.append({"field": "password", "message": "Password is required"})

        if errors:
            raise ModelValidationError(errors)


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def _user_before_save(mapper, connection, target):
    target.apply_defaults()
    target.validate()
