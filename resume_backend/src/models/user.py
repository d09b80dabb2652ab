"""User account DTOs.

Wire format is camelCase (``middleName``, ``secondLastName``); attributes are
snake_case. Models accept either spelling on input and serialize by alias.
"""
from __future__ import annotations
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model using camelCase aliases on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserNames(CamelModel):
    """Name fields shared by registration payloads and stored users."""
    name: str = Field(..., min_length=1, description="Given name")
    middle_name: Optional[str] = Field(None, description="Middle name")
    last_name: Optional[str] = Field(None, description="First surname")
    second_last_name: Optional[str] = Field(None, description="Second surname")

    @field_validator("name", "middle_name", "last_name", "second_last_name", mode="before")
    @classmethod
    def _strip_names(cls, value: Any, info: ValidationInfo) -> Any:
        """Trim names before length checks; blank optional names become None."""
        if not isinstance(value, str):
            return value
        trimmed = value.strip()
        if not trimmed and info.field_name != "name":
            return None
        return trimmed


class UserRegister(UserNames):
    """Registration payload."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="Raw password, replaced by its hash before saving.")


class LoginCredentials(CamelModel):
    """Login payload."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="Password")


class TokenModel(UserNames):
    """Public projection of a stored user; embedded in issued tokens."""
    id: str = Field(..., description="User identifier")
    email: str = Field(..., description="User email address")


class StoredUser(TokenModel):
    """Persisted user record, including the password hash."""
    password: str = Field(..., description="bcrypt password hash")
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")

    def to_token_model(self) -> TokenModel:
        return TokenModel(
            id=self.id,
            email=self.email,
            name=self.name,
            middle_name=self.middle_name,
            last_name=self.last_name,
            second_last_name=self.second_last_name,
        )


class LoginResponse(TokenModel):
    """Login response: the token projection plus ``token: "Bearer <jwt>"``."""
    token: str = Field(..., description="Bearer access token")
