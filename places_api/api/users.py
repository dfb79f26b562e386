"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from places_api.api.dependencies import get_user_service
from places_api.schemas.auth import AuthResponse, UserLogin, UserSignup
from places_api.schemas.user import UserResponse, UsersEnvelope
from places_api.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UsersEnvelope)
def get_users(users: Annotated[UserService, Depends(get_user_service)]):
    """List all users (without passwords)."""
    return UsersEnvelope(users=[UserResponse.model_validate(u) for u in users.list_users()])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    user_data: UserSignup,
    users: Annotated[UserService, Depends(get_user_service)],
):
    """Register a new user and return a token."""
    result = users.signup(user_data.name, user_data.email, user_data.password, user_data.image)
    return AuthResponse(user_id=result.user_id, email=result.email, token=result.token)


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    users: Annotated[UserService, Depends(get_user_service)],
):
    """Login with email and password."""
    result = users.login(credentials.email, credentials.password)
    return AuthResponse(user_id=result.user_id, email=result.email, token=result.token)
