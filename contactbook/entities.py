"""Domain records handled by the use-cases and repository ports."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    """A registered account. ``email`` is unique across the directory."""

    id: str
    username: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


@dataclass
class Contact:
    """A person in a user's address book.

    ``owner_id`` is set once from the authenticated caller and never
    changes afterwards.
    """

    id: str
    owner_id: str
    first_name: str
    last_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class Address:
    """A postal address belonging to a contact.

    Its effective owner is the owner of ``contact_id``.
    """

    id: str
    contact_id: str
    street: Optional[str]
    city: Optional[str]
    province: Optional[str]
    postal_code: Optional[str]
    country: str
    created_at: datetime
    updated_at: datetime
