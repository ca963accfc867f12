"""Storefront application settings."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_TOKEN_TTL_SECONDS = 3600
NON_SECRET_KEYS = {"DATABASE_URL", "LOG_LEVEL", "STOREFRONT_TOKEN_TTL", "STOREFRONT_SEED_CATALOG"}


def parse_ttl(value) -> int:
    try:
        ttl = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid token TTL: {value!r}")
    if ttl <= 0:
        raise ValueError("Invalid token TTL: expected a positive number of seconds")
    return ttl


def parse_flag(value, default: bool = True) -> bool:
    if value is None or value == "":
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class StorefrontConfig:
    """Process-wide settings, constructed once at startup."""

    secret_key: str
    database_url: str
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    token_algorithm: str = "HS256"
    log_level: str = "INFO"
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    seed_catalog: bool = True
    package_root: Path = Path(__file__).resolve().parent

    @property
    def data_dir(self) -> Path:
        return self.package_root / "data"

    @property
    def seed_products_file(self) -> Path:
        return self.data_dir / "seed_products.json"

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.json"

    @classmethod
    def load(cls) -> "StorefrontConfig":
        """Build settings from the environment (and an optional ``.env`` file).

        Non-secret keys may also be overridden by ``data/settings.json``; the
        signing secret and admin credentials only come from the environment.
        """

        package_root = Path(__file__).resolve().parent
        # .env in the working directory; real environment variables win
        load_dotenv(Path.cwd() / ".env", override=False)
        overrides = _load_settings_file(package_root / "data" / "settings.json")

        def pick(key: str, default=None):
            if key in NON_SECRET_KEYS and overrides.get(key) not in (None, ""):
                return overrides[key]
            return os.environ.get(key, default)

        return cls(
            secret_key=os.environ.get("STOREFRONT_SECRET_KEY", "dev-secret-change-me"),
            database_url=pick("DATABASE_URL", "sqlite:///data/storefront.db"),
            token_ttl_seconds=parse_ttl(pick("STOREFRONT_TOKEN_TTL", DEFAULT_TOKEN_TTL_SECONDS)),
            log_level=str(pick("LOG_LEVEL", "INFO")).upper(),
            admin_email=os.environ.get("STOREFRONT_ADMIN_EMAIL") or None,
            admin_password=os.environ.get("STOREFRONT_ADMIN_PASSWORD") or None,
            seed_catalog=parse_flag(pick("STOREFRONT_SEED_CATALOG"), default=True),
            package_root=package_root,
        )


def _load_settings_file(path: Path) -> dict:
    if not path.exists():
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data
