import unittest

from storefront.app import create_app

from tests.support import make_config


ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.app = create_app(make_config(admin_email=ADMIN_EMAIL, admin_password=ADMIN_PASSWORD))
        self.client = self.app.test_client()

    def tearDown(self):
        self.app.extensions["storefront_components"]["engine"].dispose()

    def _register(self, email="ana@example.com", password="password123"):
        return self.client.post("/auth/register", json={"email": email, "password": password, "firstName": "Ana"})

    def _token(self, email="ana@example.com", password="password123"):
        resp = self.client.post("/auth/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.get_json())
        return resp.get_json()["accessToken"]

    @staticmethod
    def _bearer(token):
        return {"Authorization": f"Bearer {token}"}

    # ---------- auth ----------

    def test_register_returns_token_and_user_without_password(self):
        resp = self._register()
        self.assertEqual(resp.status_code, 201)
        body = resp.get_json()
        self.assertIn("accessToken", body)
        self.assertEqual(body["user"]["email"], "ana@example.com")
        self.assertEqual(body["user"]["roles"], ["user"])
        self.assertNotIn("password", body["user"])
        self.assertNotIn("password_hash", body["user"])

    def test_duplicate_registration_conflicts(self):
        self._register()
        resp = self._register(email="ANA@example.com ")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json()["error"], "conflict")

    def test_register_validation(self):
        self.assertEqual(self._register(email="not-an-email").status_code, 400)
        self.assertEqual(self._register(password="short").status_code, 400)
        self.assertEqual(self.client.post("/auth/register", data="x").status_code, 400)

    def test_login_failures_are_indistinguishable(self):
        self._register()
        wrong_password = self.client.post("/auth/login", json={"email": "ana@example.com", "password": "nope-nope"})
        unknown_user = self.client.post("/auth/login", json={"email": "ghost@example.com", "password": "password123"})
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_user.status_code, 401)
        self.assertEqual(wrong_password.get_json(), unknown_user.get_json())

    def test_profile(self):
        self._register()
        resp = self.client.get("/auth/profile", headers=self._bearer(self._token()))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["firstName"], "Ana")

    def test_bad_tokens_are_unauthenticated(self):
        for headers in ({}, {"Authorization": "Token abc"}, {"Authorization": "Bearer abc.def.ghi"}):
            with self.subTest(headers=headers):
                resp = self.client.get("/cart", headers=headers)
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.get_json()["error"], "unauthenticated")

    # ---------- cart & orders ----------

    def test_cart_and_checkout_flow(self):
        self._register()
        headers = self._bearer(self._token())

        resp = self.client.get("/cart", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["items"], [])

        resp = self.client.post("/cart/items", json={"productId": "gpu-rx7800xt"}, headers=headers)
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post("/cart/items", json={"productId": "cpu-r5-7600x", "quantity": 2}, headers=headers)
        cart = resp.get_json()
        self.assertEqual(len(cart["items"]), 2)
        self.assertEqual(cart["totalAmount"], 957.99)

        resp = self.client.post("/orders", headers=headers)
        self.assertEqual(resp.status_code, 201)
        order = resp.get_json()
        self.assertEqual(order["totalAmount"], 957.99)
        self.assertEqual(len(order["items"]), 2)

        self.assertEqual(self.client.get("/cart", headers=headers).get_json()["items"], [])
        listed = self.client.get("/orders", headers=headers).get_json()
        self.assertEqual([o["id"] for o in listed], [order["id"]])
        fetched = self.client.get(f"/orders/{order['id']}", headers=headers)
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.get_json(), order)

    def test_cart_item_update_remove_and_clear(self):
        self._register()
        headers = self._bearer(self._token())
        cart = self.client.post("/cart/items", json={"productId": "gpu-rx7800xt"}, headers=headers).get_json()
        item_id = cart["items"][0]["id"]

        resp = self.client.patch(f"/cart/items/{item_id}", json={"quantity": 3}, headers=headers)
        self.assertEqual(resp.get_json()["items"][0]["quantity"], 3)
        self.assertEqual(self.client.patch(f"/cart/items/{item_id}", json={}, headers=headers).status_code, 400)

        resp = self.client.delete(f"/cart/items/{item_id}", headers=headers)
        self.assertEqual(resp.get_json()["items"], [])
        self.assertEqual(self.client.delete(f"/cart/items/{item_id}", headers=headers).status_code, 404)

        self.client.post("/cart/items", json={"productId": "cpu-r5-7600x"}, headers=headers)
        resp = self.client.delete("/cart", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["items"], [])

    def test_add_unknown_product_is_404(self):
        self._register()
        headers = self._bearer(self._token())
        resp = self.client.post("/cart/items", json={"productId": "nope"}, headers=headers)
        self.assertEqual(resp.status_code, 404)

    def test_oversized_quantity_is_a_validation_error(self):
        self._register()
        headers = self._bearer(self._token())
        for qty in (1e300, 10**20):
            with self.subTest(qty=qty):
                resp = self.client.post("/cart/items", json={"productId": "gpu-rx7800xt", "quantity": qty}, headers=headers)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.get_json()["error"], "validation_failed")

    def test_checkout_empty_cart(self):
        self._register()
        resp = self.client.post("/orders", headers=self._bearer(self._token()))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "empty_cart")

    def test_cross_user_isolation(self):
        self._register()
        self._register(email="bob@example.com")
        ana = self._bearer(self._token())
        bob = self._bearer(self._token(email="bob@example.com"))

        cart = self.client.post("/cart/items", json={"productId": "gpu-rx7800xt"}, headers=ana).get_json()
        item_id = cart["items"][0]["id"]
        self.assertEqual(self.client.patch(f"/cart/items/{item_id}", json={"quantity": 9}, headers=bob).status_code, 404)
        self.assertEqual(self.client.delete(f"/cart/items/{item_id}", headers=bob).status_code, 404)

        order = self.client.post("/orders", headers=ana).get_json()
        self.assertEqual(self.client.get(f"/orders/{order['id']}", headers=bob).status_code, 404)
        self.assertEqual(self.client.get("/orders/does-not-exist", headers=bob).status_code, 404)

    # ---------- catalog ----------

    def test_public_catalog_reads(self):
        products = self.client.get("/products").get_json()
        self.assertEqual(len(products), 6)
        resp = self.client.get("/products/gpu-rx7800xt")
        self.assertEqual(resp.get_json()["price"], 499.99)
        self.assertEqual(self.client.get("/products/unknown").status_code, 404)

    def test_admin_only_delete(self):
        self._register()
        user_headers = self._bearer(self._token())
        self.assertEqual(self.client.delete("/products/gpu-rx7800xt").status_code, 401)
        resp = self.client.delete("/products/gpu-rx7800xt", headers=user_headers)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.get_json()["error"], "forbidden")

        admin_headers = self._bearer(self._token(ADMIN_EMAIL, ADMIN_PASSWORD))
        self.assertEqual(self.client.delete("/products/gpu-rx7800xt", headers=admin_headers).status_code, 204)
        self.assertEqual(self.client.get("/products/gpu-rx7800xt").status_code, 404)

    def test_admin_create_and_update_product(self):
        headers = self._bearer(self._token(ADMIN_EMAIL, ADMIN_PASSWORD))
        payload = {
            "id": "gpu-rx7600",
            "name": "Radeon RX 7600",
            "type": "GPU",
            "price": 269.99,
            "specs": ["8GB GDDR6"],
            "imageUrl": "https://example.com/rx7600.png",
        }
        resp = self.client.post("/products", json=payload, headers=headers)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.client.post("/products", json=payload, headers=headers).status_code, 409)

        resp = self.client.patch("/products/gpu-rx7600", json={"price": 249.5}, headers=headers)
        self.assertEqual(resp.get_json()["price"], 249.5)
        self.assertEqual(resp.get_json()["name"], "Radeon RX 7600")

    def test_admin_product_validation(self):
        headers = self._bearer(self._token(ADMIN_EMAIL, ADMIN_PASSWORD))
        base = {"id": "cpu-x", "name": "X", "type": "CPU", "price": 10, "specs": ["a"]}
        bad = [
            dict(base, price=0),
            dict(base, price=1.234),
            dict(base, price="abc"),
            dict(base, specs=[]),
            dict(base, type="APU"),
            dict(base, name=""),
            dict(base, imageUrl="not a url"),
        ]
        for body in bad:
            with self.subTest(body=body):
                resp = self.client.post("/products", json=body, headers=headers)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.get_json()["error"], "validation_failed")
        resp = self.client.patch("/products/cpu-r5-7600x", json={"id": "other"}, headers=headers)
        self.assertEqual(resp.status_code, 400)

    def test_unknown_route_renders_json(self):
        resp = self.client.get("/nowhere")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"], "not_found")
