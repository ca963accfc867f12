"""Registration, login and profile endpoints."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from ..common.errors import ValidationFailed
from .guards import current_claims, login_required


auth_bp = Blueprint("storefront_auth", __name__, url_prefix="/auth")


def _auth_service():
    return current_app.extensions["storefront_components"]["auth_service"]


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationFailed("request body must be a JSON object")
    return payload


@auth_bp.post("/register")
def register():
    payload = _json_body()
    result = _auth_service().register(
        email=payload.get("email"),
        password=payload.get("password"),
        first_name=payload.get("firstName"),
        last_name=payload.get("lastName"),
    )
    return jsonify(result), 201


@auth_bp.post("/login")
def login():
    payload = _json_body()
    email = payload.get("email")
    password = payload.get("password")
    if not isinstance(email, str) or not email.strip():
        raise ValidationFailed("email is required")
    if not isinstance(password, str) or not password:
        raise ValidationFailed("password is required")
    return jsonify(_auth_service().login(email=email, password=password))


@auth_bp.get("/profile")
@login_required
def profile():
    return jsonify(_auth_service().profile(current_claims()))
