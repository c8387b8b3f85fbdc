# src/storefront/api/auth.py

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from .deps import get_current_user, get_user_repository
from ..crud.user import UserRepository
from ..models.user import UserInDB
from ..schemas.base import DataResponse
from ..schemas.user import AuthResponse, LoginRequest, RegisterRequest, Token, UserPublic
from ..services import auth as auth_service

router = APIRouter()


def to_public(user: UserInDB) -> UserPublic:
    return UserPublic(**user.model_dump(exclude={"hashed_password"}))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, users: UserRepository = Depends(get_user_repository)):
    """Creates a `user` account and logs it in."""
    user, token = await auth_service.register_user(payload, users)
    return AuthResponse(token=token, data=to_public(user))


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, users: UserRepository = Depends(get_user_repository)):
    user, token = await auth_service.authenticate(payload.email, payload.password, users)
    return AuthResponse(token=token, data=to_public(user))


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    users: UserRepository = Depends(get_user_repository),
):
    """OAuth2 password flow (the `username` field holds the email), used by the interactive docs."""
    _, token = await auth_service.authenticate(form_data.username.strip().lower(), form_data.password, users)
    return Token(access_token=token, token_type="bearer")


@router.get("/me", response_model=DataResponse[UserPublic], response_model_exclude_none=True)
async def read_me(current_user: UserInDB = Depends(get_current_user)):
    return DataResponse(data=to_public(current_user))
