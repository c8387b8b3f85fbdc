# src/storefront/services/auth.py

import logging
from typing import Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from ..core import security
from ..core.exceptions import AuthenticationError, ValidationError
from ..crud.user import UserRepository
from ..models.user import Role, UserInDB
from ..schemas.user import RegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
DUPLICATE_EMAIL = "User already exists with this email"


def issue_token(user: UserInDB) -> str:
    return security.create_access_token(data={"sub": str(user.id), "role": user.role})


async def register_user(payload: RegisterRequest, users: UserRepository) -> Tuple[UserInDB, str]:
    """Creates a `user`-role account and returns it with a fresh access token."""
    if await users.get_by_email(payload.email):
        raise ValidationError(DUPLICATE_EMAIL)

    new_user = UserInDB(
        id=ObjectId(),
        name=payload.name,
        email=payload.email,
        hashed_password=security.get_password_hash(payload.password),
        role=Role.USER,
    )
    try:
        user = await users.create(new_user)
    except DuplicateKeyError:
        # lost a race with a concurrent registration of the same email
        raise ValidationError(DUPLICATE_EMAIL)

    logger.info(f"Registered new user '{user.email}'")
    return user, issue_token(user)


async def authenticate(email: str, password: str, users: UserRepository) -> Tuple[UserInDB, str]:
    """Verifies the credentials; the failure message never says which part was wrong."""
    logger.info(f"--- [LOGIN ATTEMPT] {email} ---")

    user = await users.get_by_email(email)
    if user is None:
        security.dummy_verify()
        logger.warning(f"Login failed for '{email}': unknown email")
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not security.verify_password(password, user.hashed_password):
        logger.warning(f"Login failed for '{email}': password mismatch")
        raise AuthenticationError(INVALID_CREDENTIALS)

    logger.info(f"--- [LOGIN SUCCESS] {email} ---")
    return user, issue_token(user)


async def resolve_token(token: str, users: UserRepository) -> UserInDB:
    """Maps a bearer token to the live user it was issued for."""
    payload = security.decode_access_token(token)

    user_id = payload["sub"]
    if not ObjectId.is_valid(user_id):
        raise AuthenticationError("Not authorized, token is invalid or expired")

    user = await users.get_by_id(ObjectId(user_id))
    if user is None:
        raise AuthenticationError("Not authorized, user no longer exists")
    return user
