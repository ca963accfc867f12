import os
import unittest
from unittest import mock

from storefront.config import StorefrontConfig, parse_flag, parse_ttl


class ConfigTestCase(unittest.TestCase):
    def test_load_reads_environment(self):
        env = {
            "STOREFRONT_SECRET_KEY": "s3cret",
            "STOREFRONT_TOKEN_TTL": "120",
            "DATABASE_URL": "sqlite:///:memory:",
            "LOG_LEVEL": "debug",
            "STOREFRONT_ADMIN_EMAIL": "root@example.com",
            "STOREFRONT_ADMIN_PASSWORD": "rootroot",
            "STOREFRONT_SEED_CATALOG": "false",
        }
        with mock.patch.dict(os.environ, env, clear=False):
            cfg = StorefrontConfig.load()
        self.assertEqual(cfg.secret_key, "s3cret")
        self.assertEqual(cfg.token_ttl_seconds, 120)
        self.assertEqual(cfg.log_level, "DEBUG")
        self.assertEqual(cfg.admin_email, "root@example.com")
        self.assertFalse(cfg.seed_catalog)
        self.assertTrue(cfg.seed_products_file.exists())

    def test_ttl_must_be_positive_integer(self):
        self.assertEqual(parse_ttl("60"), 60)
        for bad in ("0", "-5", "soon", None):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    parse_ttl(bad)

    def test_parse_flag(self):
        self.assertTrue(parse_flag(None))
        self.assertFalse(parse_flag(None, default=False))
        self.assertTrue(parse_flag("Yes"))
        self.assertFalse(parse_flag("0"))
