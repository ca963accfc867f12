"""Per-request authentication and role checks for the API blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request

from ..common.errors import Forbidden, MissingToken
from ..common.services.logging import log_event
from ..common.services.token_service import Claims
from ..common.utils.roles import has_role


def extract_bearer(header_value: Optional[str]) -> str:
    if not header_value:
        raise MissingToken("No authentication token provided.")
    parts = header_value.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise MissingToken("Authorization header is not a bearer token.")
    return parts[1].strip()


def authenticate(req=None) -> Claims:
    req = req if req is not None else request
    token = extract_bearer(req.headers.get("Authorization"))
    tokens = current_app.extensions["storefront_components"]["token_service"]
    return tokens.verify(token)


def require_role(claims: Claims, role: str) -> None:
    if not has_role(claims.roles, role):
        log_event("warning", "auth.forbidden", user_id=claims.user_id, required=role)
        raise Forbidden(f"Role '{role}' required.")


def current_claims() -> Claims:
    return g.claims


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.claims = authenticate()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            claims = authenticate()
            for role in roles:
                require_role(claims, role)
            g.claims = claims
            return view(*args, **kwargs)

        return wrapper

    return decorator
