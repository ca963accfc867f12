"""Storefront REST API Flask application."""

from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .common.db.session import build_engine, create_session_factory
from .common.errors import StorefrontError
from .common.models import Base
from .common.services import logging as event_log
from .common.services.auth_service import AuthService
from .common.services.cart_service import CartService
from .common.services.catalog_service import CatalogService
from .common.services.logging import log_event
from .common.services.order_service import OrderService
from .common.services.token_service import TokenService
from .common.services.user_service import UserService
from .config import StorefrontConfig
from .routes import auth, cart, orders, products


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StorefrontError)
    def handle_storefront_error(exc: StorefrontError):
        if exc.status_code >= 500:
            log_event("error", "request.error", error=exc.code, detail=exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": code, "message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        log_event("error", "request.error", error=type(exc).__name__, detail=str(exc))
        return jsonify({"error": "internal_error", "message": "Unexpected server error."}), 500


def create_app(config: Optional[StorefrontConfig] = None) -> Flask:
    config = config or StorefrontConfig.load()
    event_log.configure(config.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["STOREFRONT_CONFIG"] = config

    engine = build_engine(config.database_url)
    Base.metadata.create_all(engine)
    session_factory = create_session_factory(engine)

    users = UserService(session_factory)
    tokens = TokenService(config)
    components = {
        "engine": engine,
        "session_factory": session_factory,
        "user_service": users,
        "token_service": tokens,
        "auth_service": AuthService(users, tokens),
        "catalog_service": CatalogService(session_factory),
        "cart_service": CartService(session_factory),
        "order_service": OrderService(session_factory),
    }
    app.extensions["storefront_components"] = components

    if config.seed_catalog and config.seed_products_file.exists():
        components["catalog_service"].seed_defaults(config.seed_products_file)
    if config.admin_email and config.admin_password:
        users.ensure_admin(config.admin_email, config.admin_password)

    app.register_blueprint(auth.auth_bp)
    app.register_blueprint(cart.cart_bp)
    app.register_blueprint(orders.orders_bp)
    app.register_blueprint(products.products_bp)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    log_event("info", "app.started", database=engine.url.render_as_string(hide_password=True))
    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=3000, debug=False)


if __name__ == "__main__":
    main()
