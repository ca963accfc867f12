"""Checkout and order history endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from .guards import current_claims, login_required


orders_bp = Blueprint("storefront_orders", __name__, url_prefix="/orders")


def _orders():
    return current_app.extensions["storefront_components"]["order_service"]


@orders_bp.post("")
@login_required
def create_order():
    order = _orders().create_order_from_cart(current_claims().user_id)
    return jsonify(order), 201


@orders_bp.get("")
@login_required
def list_orders():
    return jsonify(_orders().find_all_for_user(current_claims().user_id))


@orders_bp.get("/<order_id>")
@login_required
def get_order(order_id: str):
    return jsonify(_orders().find_one_for_user(order_id, current_claims().user_id))
