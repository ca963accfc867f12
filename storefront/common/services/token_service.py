from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt

from ...config import StorefrontConfig
from ..errors import ExpiredToken, InvalidSignature, MalformedToken, MissingToken
from ..utils.roles import normalize_roles
from .logging import log_event


@dataclass(frozen=True)
class Claims:
    user_id: str
    email: str
    roles: Tuple[str, ...] = ()


class TokenService:
    """Issues and verifies signed, time-bounded session tokens.

    The secret comes from the shared ``StorefrontConfig``; changing it
    invalidates every outstanding token.
    """

    def __init__(self, config: StorefrontConfig):
        if not config.secret_key:
            raise ValueError("secret_key must be configured")
        self._config = config

    @property
    def ttl_seconds(self) -> int:
        return self._config.token_ttl_seconds

    def issue(self, user_id: str, email: str, roles, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "roles": normalize_roles(roles),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + timedelta(seconds=self._config.token_ttl_seconds)).timestamp()),
        }
        return jwt.encode(payload, self._config.secret_key, algorithm=self._config.token_algorithm)

    def verify(self, token: Optional[str]) -> Claims:
        if not token or not token.strip():
            raise MissingToken("No authentication token provided.")
        token = token.strip()
        if token.count(".") != 2:
            self._reject("malformed", "wrong segment count")
            raise MalformedToken("Token is malformed.")
        try:
            payload = jwt.decode(
                token,
                self._config.secret_key,
                algorithms=[self._config.token_algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            self._reject("expired", "exp in the past")
            raise ExpiredToken("Token has expired.")
        except jwt.InvalidSignatureError as exc:
            self._reject("invalid_signature", str(exc))
            raise InvalidSignature("Token signature is invalid.")
        except jwt.InvalidTokenError as exc:
            # DecodeError, missing or invalid claims, wrong algorithm
            self._reject("malformed", str(exc))
            raise MalformedToken("Token is malformed.")

        user_id = payload.get("sub")
        email = payload.get("email")
        if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
            self._reject("malformed", "missing identity claims")
            raise MalformedToken("Token claims are incomplete.")
        return Claims(user_id=user_id, email=email, roles=tuple(normalize_roles(payload.get("roles"))))

    @staticmethod
    def _reject(kind: str, detail: str) -> None:
        log_event("warning", "auth.token_rejected", reason=kind, detail=detail)
