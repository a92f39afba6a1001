from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class RegisterRequest(BaseModel):
    """Payload for creating a new user."""

    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Credentials submitted to obtain a token."""

    email: str
    password: str


class UserOut(BaseModel):
    """Response schema for user data (never carries the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    created_at: datetime


class AuthResponse(BaseModel):
    """Token issued on login together with the user it identifies."""

    token: str
    user: UserOut


class TokenClaims(BaseModel):
    """Payload stored inside a JWT token."""

    sub: str
    iat: int
    exp: int


class ContactCreate(BaseModel):
    """Schema for creating new contact.

    Field rules are checked by :mod:`contactbook.validation` so that every
    violation is reported together.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ContactUpdate(BaseModel):
    """Schema for updating contact (all fields optional).

    Only fields present in the payload are applied.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class AddressCreate(BaseModel):
    """Schema for adding an address to a contact."""

    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class AddressUpdate(BaseModel):
    """Schema for updating an address (all fields optional)."""

    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class AddressOut(BaseModel):
    """Schema for returning an address."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: str


class ContactOut(BaseModel):
    """Schema for returning contact with its addresses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    addresses: List[AddressOut] = []
