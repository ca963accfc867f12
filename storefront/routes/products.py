"""Catalog endpoints: public reads, admin-only mutations."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..common.errors import ValidationFailed
from ..common.utils.roles import UserRole
from .guards import roles_required


products_bp = Blueprint("storefront_products", __name__, url_prefix="/products")


def _catalog():
    return current_app.extensions["storefront_components"]["catalog_service"]


def _body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationFailed("request body must be a JSON object")
    return payload


@products_bp.get("")
def list_products():
    return jsonify(_catalog().list_products())


@products_bp.get("/<product_id>")
def get_product(product_id: str):
    return jsonify(_catalog().get_product(product_id))


@products_bp.post("")
@roles_required(UserRole.ADMIN.value)
def create_product():
    return jsonify(_catalog().create_product(_body())), 201


@products_bp.patch("/<product_id>")
@roles_required(UserRole.ADMIN.value)
def update_product(product_id: str):
    return jsonify(_catalog().update_product(product_id, _body()))


@products_bp.delete("/<product_id>")
@roles_required(UserRole.ADMIN.value)
def delete_product(product_id: str):
    _catalog().delete_product(product_id)
    return "", 204
