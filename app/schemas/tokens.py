# app/schemas/tokens.py
from app.schemas.common import CamelModel
from app.schemas.user import UserOut


class AuthOut(CamelModel):
    message: str
    user: UserOut
    token: str
    token_type: str = "bearer"
