from typing import Dict, Optional

from ..errors import InvalidCredentials, Unauthenticated
from ..utils.dto import to_user_dto
from .logging import log_event
from .token_service import Claims, TokenService
from .user_service import UserService


class AuthService:
    """Registration and login on top of the credential store and token service."""

    def __init__(self, users: UserService, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def _session_for(self, user) -> Dict:
        dto = to_user_dto(user)
        token = self._tokens.issue(user.id, user.email, dto["roles"])
        return {"accessToken": token, "user": dto}

    def register(
        self,
        *,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Dict:
        user = self._users.create(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        log_event("info", "auth.registered", user_id=user.id)
        return self._session_for(user)

    def login(self, *, email: str, password: str) -> Dict:
        user = self._users.find_by_email(email)
        if user is None or not user.verify_password(password or ""):
            # same answer for unknown email and wrong password
            log_event("info", "auth.login_failed")
            raise InvalidCredentials("Invalid credentials.")
        log_event("info", "auth.login", user_id=user.id)
        return self._session_for(user)

    def profile(self, claims: Claims) -> Dict:
        user = self._users.find_by_id(claims.user_id)
        if user is None:
            raise Unauthenticated("Token subject no longer exists.")
        return to_user_dto(user)
