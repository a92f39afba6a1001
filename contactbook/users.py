"""User registration, login and profile routes."""

from fastapi import APIRouter, Depends, status

from . import schemas
from .auth import get_current_user_id, get_identity_service
from .identity import IdentityService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/register", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED
)
def register(
    user_in: schemas.RegisterRequest,
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Register a new user.

    Args:
        user_in (RegisterRequest): Username, email and password.
        identity (IdentityService): Identity use-case.

    Returns:
        UserOut: Created user without the password hash.
    """
    return identity.register(user_in.username, user_in.email, user_in.password)


@router.post("/login", response_model=schemas.AuthResponse)
def login(
    credentials: schemas.LoginRequest,
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Authenticate a user and return a bearer token.

    Args:
        credentials (LoginRequest): Email and password.
        identity (IdentityService): Identity use-case.

    Returns:
        AuthResponse: Token and user profile.
    """
    return identity.login(credentials.email, credentials.password)


@router.get("/me", response_model=schemas.UserOut)
def read_me(
    user_id: str = Depends(get_current_user_id),
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Retrieve details of the currently authenticated user.

    Args:
        user_id (str): Identifier resolved from the bearer token.
        identity (IdentityService): Identity use-case.

    Returns:
        UserOut: User profile information.
    """
    return identity.get_user(user_id)
