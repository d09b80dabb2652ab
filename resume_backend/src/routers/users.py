"""User account routes: register, login, list, me.

Routes delegate to ``UserController`` and map its outcome to the HTTP
response; the persistence provider follows DATA_PROVIDER.

PySecure-4-Minimal:
- Validate inputs via Pydantic models.
- Hash passwords; do not log secrets.
- Use Bearer token with JWT.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.controllers.user_controller import UserController
from src.core.responses import api_response, success_response
from src.models.user import LoginCredentials, TokenModel, UserRegister
from src.security.jwt import decode_token
from src.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/users/login")


# PUBLIC_INTERFACE
def get_user_service() -> UserService:
    """Dependency providing the user service for the configured provider."""
    return UserService()


# PUBLIC_INTERFACE
def get_user_controller(user_service: UserService = Depends(get_user_service)) -> UserController:
    """Dependency providing a controller bound to the request's user service."""
    return UserController(user_service)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    user_service: UserService = Depends(get_user_service),
) -> TokenModel:
    """Dependency to extract current user from JWT token."""
    try:
        payload = decode_token(token)
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    stored = await user_service.get_user_by_id(sub)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="user not found")
    return stored.to_token_model()


# PUBLIC_INTERFACE
@router.post(
    "/register",
    summary="Register user",
    description="Create a new user account. The response status is the save result reported by persistence.",
)
async def register(payload: UserRegister, controller: UserController = Depends(get_user_controller)):
    """Register a new user with hashed password.

    Returns:
        201 with "Created" if the user is stored.
        400 if the email already exists.
        500 on unexpected errors.
    """
    return api_response(await controller.register(payload))


# PUBLIC_INTERFACE
@router.post("/login", summary="Login", description="Authenticate and receive a bearer token.")
async def login(payload: LoginCredentials, controller: UserController = Depends(get_user_controller)):
    """Authenticate a user and return the public profile plus a bearer token."""
    return api_response(await controller.login(payload))


# PUBLIC_INTERFACE
@router.get("", summary="List users", description="List every registered user without password hashes.")
async def list_users(controller: UserController = Depends(get_user_controller)):
    """Return all users."""
    return api_response(await controller.get_all_users())


# PUBLIC_INTERFACE
@router.get("/me", summary="Current user", description="Return the user that owns the bearer token.")
async def me(current: TokenModel = Depends(get_current_user)):
    """Return current user data."""
    return api_response(success_response(current))
