"""Storefront API: catalog, cart, checkout and order history over Flask + SQLAlchemy."""

__version__ = "0.1.0"
