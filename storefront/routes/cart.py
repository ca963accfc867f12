"""Cart endpoints; every route acts on the caller's own cart."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..common.errors import ValidationFailed
from .guards import current_claims, login_required


cart_bp = Blueprint("storefront_cart", __name__, url_prefix="/cart")


def _carts():
    return current_app.extensions["storefront_components"]["cart_service"]


def _body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationFailed("request body must be a JSON object")
    return payload


@cart_bp.get("")
@login_required
def get_cart():
    return jsonify(_carts().get_cart(current_claims().user_id))


@cart_bp.post("/items")
@login_required
def add_item():
    payload = _body()
    cart = _carts().add_item(
        current_claims().user_id,
        payload.get("productId"),
        payload.get("quantity", 1),
    )
    return jsonify(cart), 201


@cart_bp.patch("/items/<item_id>")
@login_required
def update_item(item_id: str):
    payload = _body()
    if "quantity" not in payload:
        raise ValidationFailed("quantity is required")
    return jsonify(_carts().update_item_quantity(current_claims().user_id, item_id, payload["quantity"]))


@cart_bp.delete("/items/<item_id>")
@login_required
def remove_item(item_id: str):
    return jsonify(_carts().remove_item(current_claims().user_id, item_id))


@cart_bp.delete("")
@login_required
def clear_cart():
    return jsonify(_carts().clear_cart(current_claims().user_id))
