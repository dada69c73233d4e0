# backend/app/schemas/auth.py
from pydantic import EmailStr, Field

from backend.app.schemas.base import CamelModel, PersonName
from backend.app.schemas.users import UserOut


class RegisterRequest(CamelModel):
    first_name: PersonName = Field(min_length=1)
    last_name: PersonName = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthData(CamelModel):
    token: str
    user: UserOut


class AuthResponse(CamelModel):
    success: bool = True
    data: AuthData
