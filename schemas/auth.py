from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, model_validator


class RegisterSchema(BaseModel):
    username: str = Field(..., min_length=3, max_length=256, pattern=r"^[^@\s]+$")
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class LoginSchema(BaseModel):
    email_or_username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """
    Returned on successful registration or login.
    """
    access_token: str
    token_type: Literal["bearer"]
    username: str
    email: str
    expires_at: datetime


class ChangePasswordSchema(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_new_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_new_password:
            raise ValueError("New password and confirmation password do not match.")
        return self


class ChangeEmailSchema(BaseModel):
    new_email: EmailStr


class ChangeNumberSchema(BaseModel):
    number: str = Field(..., pattern=r"^\d{8}$", description="Exactly 8 digits")


class DeleteAccountSchema(BaseModel):
    password: str = Field(..., min_length=1)
