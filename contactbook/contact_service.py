"""Contact and address management behind the ownership gate.

Every public method takes the caller's ``user_id`` (resolved from a
verified token by the HTTP layer), loads the target contact and compares
its ``owner_id`` with ``user_id`` before doing anything else. Addresses
have no owner of their own; access always goes through their contact.

Reads and writes are plain read-then-write sequences. Concurrent updates
to the same contact are last-writer-wins.
"""

import logging
import uuid
from typing import Callable

from . import schemas
from .core import utcnow
from .entities import Address, Contact
from .errors import NotFoundError, UnauthorizedError
from .repositories import ContactRepository
from .validation import address_violations, contact_violations, ensure_valid

logger = logging.getLogger("contactbook.contacts")


def _present_changes(payload) -> dict:
    """Return fields the client actually supplied with a non-null value.

    Omitted fields and explicit nulls both keep the stored value.
    """
    return {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }


def _address_view(address: Address) -> schemas.AddressOut:
    return schemas.AddressOut.model_validate(address)


def _contact_view(contact: Contact, addresses: list[Address]) -> schemas.ContactOut:
    return schemas.ContactOut(
        id=contact.id,
        first_name=contact.first_name,
        last_name=contact.last_name,
        email=contact.email,
        phone=contact.phone,
        addresses=[_address_view(address) for address in addresses],
    )


class ContactService:
    """CRUD on contacts and addresses for a single authenticated caller."""

    def __init__(self, contacts: ContactRepository, clock: Callable = utcnow):
        self.contacts = contacts
        self.clock = clock

    def _owned_contact(self, user_id: str, contact_id: str) -> Contact:
        """Load ``contact_id`` and make sure ``user_id`` owns it.

        Raises:
            NotFoundError: If the contact does not exist.
            UnauthorizedError: If it belongs to another user.
        """
        contact = self.contacts.find_contact_by_id(contact_id)
        if contact is None:
            raise NotFoundError("contact not found")
        if contact.owner_id != user_id:
            logger.warning(
                "User %s denied access to contact %s", user_id, contact_id
            )
            raise UnauthorizedError("not the owner of this contact")
        return contact

    def _owned_address(self, user_id: str, contact_id: str, address_id: str) -> Address:
        self._owned_contact(user_id, contact_id)
        address = self.contacts.find_address_by_id(address_id)
        if address is None or address.contact_id != contact_id:
            raise NotFoundError("address not found")
        return address

    # ------------------------------ contacts ------------------------------

    def create_contact(self, user_id: str, fields: schemas.ContactCreate) -> schemas.ContactOut:
        """Create a contact owned by ``user_id``."""
        data = fields.model_dump()
        ensure_valid(contact_violations(data))

        now = self.clock()
        contact = Contact(
            id=str(uuid.uuid4()),
            owner_id=user_id,
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            phone=data["phone"],
            created_at=now,
            updated_at=now,
        )
        created = self.contacts.create_contact(contact)
        logger.info("User %s created contact %s", user_id, created.id)
        return _contact_view(created, [])

    def update_contact(
        self, user_id: str, contact_id: str, changes: schemas.ContactUpdate
    ) -> schemas.ContactOut:
        """Apply the supplied fields of ``changes`` to an owned contact."""
        contact = self._owned_contact(user_id, contact_id)
        present = _present_changes(changes)
        ensure_valid(contact_violations(present, partial=True))

        for key, value in present.items():
            setattr(contact, key, value)
        contact.updated_at = self.clock()

        updated = self.contacts.update_contact(contact)
        addresses = self.contacts.find_addresses_by_contact(updated.id)
        return _contact_view(updated, addresses)

    def delete_contact(self, user_id: str, contact_id: str) -> None:
        """Delete an owned contact. Its addresses go with it in storage."""
        self._owned_contact(user_id, contact_id)
        self.contacts.delete_contact(contact_id)
        logger.info("User %s deleted contact %s", user_id, contact_id)

    def get_contact(self, user_id: str, contact_id: str) -> schemas.ContactOut:
        """Return an owned contact with its addresses in creation order."""
        contact = self._owned_contact(user_id, contact_id)
        addresses = self.contacts.find_addresses_by_contact(contact.id)
        return _contact_view(contact, addresses)

    def search_contacts(self, user_id: str) -> list[schemas.ContactOut]:
        """Return every contact of ``user_id`` in creation order."""
        return [
            _contact_view(contact, self.contacts.find_addresses_by_contact(contact.id))
            for contact in self.contacts.find_contacts_by_owner(user_id)
        ]

    # ------------------------------ addresses -----------------------------

    def create_address(
        self, user_id: str, contact_id: str, fields: schemas.AddressCreate
    ) -> schemas.AddressOut:
        """Add an address to an owned contact.

        Field rules are checked before any storage access; ``contact_id``
        always comes from the path.
        """
        data = fields.model_dump()
        ensure_valid(address_violations(data))
        self._owned_contact(user_id, contact_id)

        now = self.clock()
        address = Address(
            id=str(uuid.uuid4()),
            contact_id=contact_id,
            street=data["street"],
            city=data["city"],
            province=data["province"],
            postal_code=data["postal_code"],
            country=data["country"],
            created_at=now,
            updated_at=now,
        )
        created = self.contacts.create_address(address)
        logger.info("User %s added address %s to contact %s", user_id, created.id, contact_id)
        return _address_view(created)

    def list_addresses(self, user_id: str, contact_id: str) -> list[schemas.AddressOut]:
        """Return the addresses of an owned contact in creation order."""
        self._owned_contact(user_id, contact_id)
        return [
            _address_view(address)
            for address in self.contacts.find_addresses_by_contact(contact_id)
        ]

    def update_address(
        self,
        user_id: str,
        contact_id: str,
        address_id: str,
        changes: schemas.AddressUpdate,
    ) -> schemas.AddressOut:
        """Apply the supplied fields of ``changes`` to an address of an owned contact.

        Raises:
            NotFoundError: If the address is missing or belongs to another
                contact than ``contact_id``.
        """
        address = self._owned_address(user_id, contact_id, address_id)
        present = _present_changes(changes)
        ensure_valid(address_violations(present, partial=True))

        for key, value in present.items():
            setattr(address, key, value)
        address.updated_at = self.clock()
        return _address_view(self.contacts.update_address(address))

    def delete_address(self, user_id: str, contact_id: str, address_id: str) -> None:
        """Delete an address of an owned contact."""
        self._owned_address(user_id, contact_id, address_id)
        self.contacts.delete_address(address_id)
        logger.info("User %s deleted address %s", user_id, address_id)
