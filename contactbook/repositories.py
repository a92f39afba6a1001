"""Repository ports and their SQLAlchemy implementations.

The use-cases depend only on :class:`UserRepository` and
:class:`ContactRepository`. ``SqlUserRepository`` and
``SqlContactRepository`` implement them on top of a request-scoped
SQLAlchemy session; rows are mapped to the dataclasses in
:mod:`contactbook.entities` so that ORM state never leaks upwards.

Any SQLAlchemy failure is rolled back, logged and re-raised as
:class:`~contactbook.errors.RepositoryError`.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .entities import Address, Contact, User
from .errors import DuplicateEmailError, RepositoryError

logger = logging.getLogger("contactbook.repositories")


class UserRepository(ABC):
    """Durable store of users keyed by unique email."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Persist ``user``; raise ``DuplicateEmailError`` if the email is taken."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]: ...


class ContactRepository(ABC):
    """Durable store of contacts and their addresses.

    Deleting a contact must delete its addresses.
    """

    @abstractmethod
    def create_contact(self, contact: Contact) -> Contact: ...

    @abstractmethod
    def update_contact(self, contact: Contact) -> Contact: ...

    @abstractmethod
    def delete_contact(self, contact_id: str) -> None: ...

    @abstractmethod
    def find_contact_by_id(self, contact_id: str) -> Optional[Contact]: ...

    @abstractmethod
    def find_contacts_by_owner(self, owner_id: str) -> list[Contact]:
        """Return the owner's contacts in creation order."""

    @abstractmethod
    def create_address(self, address: Address) -> Address: ...

    @abstractmethod
    def update_address(self, address: Address) -> Address: ...

    @abstractmethod
    def delete_address(self, address_id: str) -> None: ...

    @abstractmethod
    def find_address_by_id(self, address_id: str) -> Optional[Address]: ...

    @abstractmethod
    def find_addresses_by_contact(self, contact_id: str) -> list[Address]:
        """Return the contact's addresses in creation order."""


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_user(row: models.User) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _row_to_contact(row: models.Contact) -> Contact:
    return Contact(
        id=row.id,
        owner_id=row.owner_id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        phone=row.phone,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _row_to_address(row: models.Address) -> Address:
    return Address(
        id=row.id,
        contact_id=row.contact_id,
        street=row.street,
        city=row.city,
        province=row.province,
        postal_code=row.postal_code,
        country=row.country,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class _SqlRepository:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Storage failure during %s", action)
            raise RepositoryError(f"storage failure during {action}") from exc


class SqlUserRepository(_SqlRepository, UserRepository):
    """User directory backed by the ``users`` table."""

    def create(self, user: User) -> User:
        row = models.User(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateEmailError("email already exists") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Storage failure during user create")
            raise RepositoryError("storage failure during user create") from exc
        with self._guard("user create"):
            self.db.refresh(row)
            return _row_to_user(row)

    def find_by_email(self, email: str) -> Optional[User]:
        with self._guard("user lookup"):
            row = self.db.execute(
                select(models.User).where(models.User.email == email)
            ).scalar_one_or_none()
        return _row_to_user(row) if row else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._guard("user lookup"):
            row = self.db.get(models.User, user_id)
        return _row_to_user(row) if row else None


class SqlContactRepository(_SqlRepository, ContactRepository):
    """Contact ledger backed by the ``contacts`` and ``addresses`` tables."""

    def create_contact(self, contact: Contact) -> Contact:
        row = models.Contact(
            id=contact.id,
            owner_id=contact.owner_id,
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email,
            phone=contact.phone,
            created_at=contact.created_at,
            updated_at=contact.updated_at,
        )
        with self._guard("contact create"):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return _row_to_contact(row)

    def update_contact(self, contact: Contact) -> Contact:
        with self._guard("contact update"):
            row = self.db.get(models.Contact, contact.id)
            if row is None:
                raise RepositoryError(f"contact {contact.id} no longer exists")
            row.first_name = contact.first_name
            row.last_name = contact.last_name
            row.email = contact.email
            row.phone = contact.phone
            row.updated_at = contact.updated_at
            self.db.commit()
            self.db.refresh(row)
            return _row_to_contact(row)

    def delete_contact(self, contact_id: str) -> None:
        with self._guard("contact delete"):
            row = self.db.get(models.Contact, contact_id)
            if row is not None:
                self.db.delete(row)
                self.db.commit()

    def find_contact_by_id(self, contact_id: str) -> Optional[Contact]:
        with self._guard("contact lookup"):
            row = self.db.get(models.Contact, contact_id)
        return _row_to_contact(row) if row else None

    def find_contacts_by_owner(self, owner_id: str) -> list[Contact]:
        with self._guard("contact search"):
            rows = self.db.scalars(
                select(models.Contact)
                .where(models.Contact.owner_id == owner_id)
                .order_by(models.Contact.created_at, models.Contact.id)
            ).all()
        return [_row_to_contact(row) for row in rows]

    def create_address(self, address: Address) -> Address:
        row = models.Address(
            id=address.id,
            contact_id=address.contact_id,
            street=address.street,
            city=address.city,
            province=address.province,
            postal_code=address.postal_code,
            country=address.country,
            created_at=address.created_at,
            updated_at=address.updated_at,
        )
        with self._guard("address create"):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return _row_to_address(row)

    def update_address(self, address: Address) -> Address:
        with self._guard("address update"):
            row = self.db.get(models.Address, address.id)
            if row is None:
                raise RepositoryError(f"address {address.id} no longer exists")
            row.street = address.street
            row.city = address.city
            row.province = address.province
            row.postal_code = address.postal_code
            row.country = address.country
            row.updated_at = address.updated_at
            self.db.commit()
            self.db.refresh(row)
            return _row_to_address(row)

    def delete_address(self, address_id: str) -> None:
        with self._guard("address delete"):
            row = self.db.get(models.Address, address_id)
            if row is not None:
                self.db.delete(row)
                self.db.commit()

    def find_address_by_id(self, address_id: str) -> Optional[Address]:
        with self._guard("address lookup"):
            row = self.db.get(models.Address, address_id)
        return _row_to_address(row) if row else None

    def find_addresses_by_contact(self, contact_id: str) -> list[Address]:
        with self._guard("address search"):
            rows = self.db.scalars(
                select(models.Address)
                .where(models.Address.contact_id == contact_id)
                .order_by(models.Address.created_at, models.Address.id)
            ).all()
        return [_row_to_address(row) for row in rows]
