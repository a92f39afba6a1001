"""Contact and address routes for the contact book API."""

from fastapi import APIRouter, Depends, status
from typing import List

from . import schemas
from .auth import get_contact_service, get_current_user_id
from .contact_service import ContactService

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.post("", response_model=schemas.ContactOut, status_code=status.HTTP_201_CREATED)
def create_contact(
    contact_in: schemas.ContactCreate,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Create a new contact owned by the current user.

    Args:
        contact_in (ContactCreate): Contact input data.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.

    Returns:
        ContactOut: Created contact with an empty address list.
    """
    return service.create_contact(user_id, contact_in)


@router.get("", response_model=List[schemas.ContactOut])
def search_contacts(
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Retrieve every contact belonging to the current user, with addresses.

    Returns:
        list[ContactOut]: Contacts in creation order.
    """
    return service.search_contacts(user_id)


@router.get("/{contact_id}", response_model=schemas.ContactOut)
def get_contact(
    contact_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Retrieve a single contact by ID for the current user.

    Args:
        contact_id (str): Contact identifier.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.

    Returns:
        ContactOut: Contact data with addresses.
    """
    return service.get_contact(user_id, contact_id)


@router.api_route(
    "/{contact_id}", methods=["PUT", "PATCH"], response_model=schemas.ContactOut
)
def update_contact(
    contact_id: str,
    changes: schemas.ContactUpdate,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Partially update an existing contact.

    Only fields provided in the request will be updated.

    Args:
        contact_id (str): Contact identifier.
        changes (ContactUpdate): Fields to update.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.

    Returns:
        ContactOut: Updated contact.
    """
    return service.update_contact(user_id, contact_id, changes)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact(
    contact_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Delete a contact owned by the current user together with its addresses.

    Args:
        contact_id (str): Contact identifier.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.
    """
    service.delete_contact(user_id, contact_id)


@router.post(
    "/{contact_id}/addresses",
    response_model=schemas.AddressOut,
    status_code=status.HTTP_201_CREATED,
)
def create_address(
    contact_id: str,
    address_in: schemas.AddressCreate,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Add an address to a contact of the current user.

    Args:
        contact_id (str): Parent contact identifier.
        address_in (AddressCreate): Address data; ``country`` is required.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.

    Returns:
        AddressOut: Created address.
    """
    return service.create_address(user_id, contact_id, address_in)


@router.get("/{contact_id}/addresses", response_model=List[schemas.AddressOut])
def list_addresses(
    contact_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Retrieve the addresses of a contact of the current user.

    Args:
        contact_id (str): Parent contact identifier.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.

    Returns:
        list[AddressOut]: Addresses in creation order.
    """
    return service.list_addresses(user_id, contact_id)


@router.put("/{contact_id}/addresses/{address_id}", response_model=schemas.AddressOut)
def update_address(
    contact_id: str,
    address_id: str,
    changes: schemas.AddressUpdate,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Partially update an address of a contact of the current user.

    Args:
        contact_id (str): Parent contact identifier.
        address_id (str): Address identifier.
        changes (AddressUpdate): Fields to update.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.

    Returns:
        AddressOut: Updated address.
    """
    return service.update_address(user_id, contact_id, address_id, changes)


@router.delete(
    "/{contact_id}/addresses/{address_id}", status_code=status.HTTP_204_NO_CONTENT
)
def delete_address(
    contact_id: str,
    address_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service),
):
    """
    Delete an address of a contact of the current user.

    Args:
        contact_id (str): Parent contact identifier.
        address_id (str): Address identifier.
        user_id (str): Authenticated user id.
        service (ContactService): Contact use-case.
    """
    service.delete_address(user_id, contact_id, address_id)
