from storefront.common.db.session import build_engine, create_session_factory
from storefront.common.models import Base
from storefront.common.services import (
    AuthService,
    CartService,
    CatalogService,
    OrderService,
    TokenService,
    UserService,
)
from storefront.common.services import logging as event_log
from storefront.config import StorefrontConfig


TEST_SECRET = "test-secret"


def make_config(**overrides) -> StorefrontConfig:
    values = dict(
        secret_key=TEST_SECRET,
        database_url="sqlite:///:memory:",
        token_ttl_seconds=3600,
        log_level="CRITICAL",
        seed_catalog=True,
    )
    values.update(overrides)
    return StorefrontConfig(**values)


class Services:
    """Wires the services against a fresh database, mirroring create_app."""

    def __init__(self, database_url: str = "sqlite:///:memory:", seed: bool = True):
        self.config = make_config(database_url=database_url)
        event_log.configure(self.config.log_level)
        self.engine = build_engine(database_url)
        Base.metadata.create_all(self.engine)
        self.session_factory = create_session_factory(self.engine)
        self.users = UserService(self.session_factory)
        self.tokens = TokenService(self.config)
        self.auth = AuthService(self.users, self.tokens)
        self.catalog = CatalogService(self.session_factory)
        self.carts = CartService(self.session_factory)
        self.orders = OrderService(self.session_factory)
        if seed:
            self.catalog.seed_defaults(self.config.seed_products_file)

    def new_user(self, email: str = "ana@example.com") -> str:
        return self.users.create(email=email, password="password123").id

    def dispose(self) -> None:
        self.engine.dispose()
