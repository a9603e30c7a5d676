"""Pydantic schemas for users and authentication."""
from datetime import datetime
from pydantic import BaseModel, EmailStr


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    user_id: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileOut(UserOut):
    updated_at: datetime


class AuthOut(BaseModel):
    user: UserOut
    token: str
