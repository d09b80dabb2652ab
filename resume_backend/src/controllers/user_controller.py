"""User account controller: register, login and user listing.

Each operation returns a ``Success`` or ``Failure`` outcome and never raises;
unexpected errors are logged and collapsed to a generic 500.
"""
from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Optional

from starlette.concurrency import run_in_threadpool

from src.core.config import get_settings
from src.core.responses import Outcome, failed_response, get_status_text, success_response
from src.models.user import LoginCredentials, LoginResponse, UserRegister
from src.security.jwt import create_token, encrypt_password, is_equal_password
from src.services.user_service import SaveResult, UserService

logger = logging.getLogger(__name__)

# The persistence layer reports save outcomes as HTTP-shaped codes; the
# registration response status is taken straight from this table.
SAVE_RESULT_STATUS: dict[SaveResult, HTTPStatus] = {
    SaveResult.CREATED: HTTPStatus.CREATED,
    SaveResult.CONFLICT: HTTPStatus.CONFLICT,
}

USER_NOT_FOUND = "user not found"
EMAIL_ALREADY_EXISTS = "email already exists"


def _internal_error() -> Outcome:
    return failed_response(
        get_status_text(HTTPStatus.INTERNAL_SERVER_ERROR),
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )


class UserController:
    """Maps user account requests to service calls and response outcomes."""

    def __init__(self, user_service: UserService, password_hash_rounds: Optional[int] = None) -> None:
        self.user_service = user_service
        if password_hash_rounds is None:
            password_hash_rounds = get_settings().password_hash_rounds
        if not 4 <= password_hash_rounds <= 31:
            raise ValueError("bcrypt cost factor must be between 4 and 31")
        self.password_hash_rounds = password_hash_rounds

    async def register(self, user: UserRegister) -> Outcome:
        """Register a new user.

        Returns 400 if the email is taken; otherwise the status reported by
        ``UserService.save`` with its reason phrase as data.
        """
        try:
            logger.info("register")
            existing = await self.user_service.get_user_by_email(user.email)
            if existing is not None:
                logger.warning("the email %s already exists", existing.email)
                return failed_response(EMAIL_ALREADY_EXISTS, HTTPStatus.BAD_REQUEST)

            hashed = await run_in_threadpool(encrypt_password, user.password, self.password_hash_rounds)
            to_save = user.model_copy(update={"password": hashed})

            result = await self.user_service.save(to_save)
            status_code = SAVE_RESULT_STATUS[result]
            return success_response(get_status_text(status_code), status_code)
        except Exception:
            logger.exception("error while register")
            return _internal_error()

    async def login(self, credentials: LoginCredentials) -> Outcome:
        """Authenticate a user and issue a bearer token.

        Unknown email and wrong password both answer 404 "user not found".
        """
        try:
            logger.info("login %s", credentials.email)
            stored = await self.user_service.get_user_by_email(credentials.email)
            if stored is None:
                logger.warning("user not found: %s", credentials.email)
                return failed_response(USER_NOT_FOUND, HTTPStatus.NOT_FOUND)

            same_password = await run_in_threadpool(is_equal_password, stored.password, credentials.password)
            if not same_password:
                logger.warning("wrong password")
                return failed_response(USER_NOT_FOUND, HTTPStatus.NOT_FOUND)

            to_send = stored.to_token_model()
            token = create_token(to_send)
            body = LoginResponse(**to_send.model_dump(), token=f"Bearer {token}")
            return success_response(body, HTTPStatus.OK)
        except Exception:
            logger.exception("error while login")
            return _internal_error()

    async def get_all_users(self) -> Outcome:
        logger.info("getAllUsers")
        try:
            users = await self.user_service.get_all_users()
            return success_response(users, HTTPStatus.OK)
        except Exception:
            logger.exception("error while getting all users")
            return _internal_error()
