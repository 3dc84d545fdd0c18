#   Copyright 2026 Storefront Authors
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.

"""Integration tests for accounts, the catalog and admin stats."""

from typing import Any, Dict

from absl.testing import absltest
from storefront import db
from storefront import test_utils


class AccountsTest(test_utils.StorefrontTestCase):

  def _register(self, **overrides: Any):
    body = {
        "name": "Jane Doe",
        "email": "Jane@Storefront.io",
        "password": "correct-horse",
    }
    body.update(overrides)
    return self.client.post("/auth/register", json=body)

  def _login(self, email: str, password: str) -> Dict[str, str]:
    response = self.client.post(
        "/auth/login", json={"email": email, "password": password}
    )
    self.assertEqual(response.status_code, 200, response.text)
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}

  def test_register(self):
    response = self._register()

    self.assertEqual(response.status_code, 201, response.text)
    data = response.json()
    self.assertTrue(data["success"])
    self.assertEqual(data["user"]["email"], "jane@storefront.io")
    self.assertEqual(data["user"]["name"], "Jane Doe")
    user = self.run_query(db.get_user_by_email, "jane@storefront.io")
    self.assertEqual(user.role, "user")
    self.assertEqual(user.provider, "local")
    self.assertNotEqual(user.password_hash, "correct-horse")

  def test_register_duplicate_email(self):
    self._register()

    response = self._register(email="jane@storefront.io")

    self.assertEqual(response.status_code, 409)
    self.assertEqual(response.json()["detail"], "Email already in use")

  def test_register_short_password(self):
    response = self._register(password="short")
    self.assertEqual(response.status_code, 400)

  def test_register_invalid_email(self):
    response = self._register(email="nope")
    self.assertEqual(response.status_code, 400)
    self.assertEqual(response.json()["code"], "INVALID_INPUT")

  def test_login_and_read_profile(self):
    self._register()
    headers = self._login("jane@storefront.io", "correct-horse")

    response = self.client.get("/users/me", headers=headers)

    self.assertEqual(response.status_code, 200, response.text)
    profile = response.json()
    self.assertEqual(profile["email"], "jane@storefront.io")
    self.assertEqual(profile["firstName"], "Jane")
    self.assertEqual(profile["lastName"], "Doe")
    self.assertEqual(profile["wishlist"], [])

  def test_login_wrong_password(self):
    self._register()

    response = self.client.post(
        "/auth/login",
        json={"email": "jane@storefront.io", "password": "wrong-horse"},
    )

    self.assertEqual(response.status_code, 401)
    self.assertEqual(response.json()["detail"], "Invalid email or password")

  def test_login_unknown_user(self):
    response = self.client.post(
        "/auth/login",
        json={"email": "ghost@storefront.io", "password": "whatever1"},
    )
    self.assertEqual(response.status_code, 401)

  def test_profile_requires_auth(self):
    response = self.client.get("/users/me")
    self.assertEqual(response.status_code, 401)

  def test_update_profile(self):
    headers = self.auth_headers(self.create_user())

    response = self.client.patch(
        "/users/me",
        json={
            "firstName": "Janet",
            "address": {"city": "Springfield", "postalCode": "62701"},
            "wishlist": ["p1", "p2"],
        },
        headers=headers,
    )

    self.assertEqual(response.status_code, 200, response.text)
    data = response.json()
    self.assertEqual(data["message"], "Profile updated successfully")
    user = data["user"]
    self.assertEqual(user["firstName"], "Janet")
    self.assertEqual(user["name"], "Janet")
    self.assertEqual(user["wishlist"], ["p1", "p2"])
    self.assertEqual(user["address"]["city"], "Springfield")

  def test_address_update_is_merged(self):
    headers = self.auth_headers(self.create_user())
    self.client.patch(
        "/users/me",
        json={"address": {"city": "Springfield"}},
        headers=headers,
    )

    response = self.client.patch(
        "/users/me", json={"address": {"state": "IL"}}, headers=headers
    )

    address = response.json()["user"]["address"]
    self.assertEqual(address["city"], "Springfield")
    self.assertEqual(address["state"], "IL")

  def test_email_change_conflict(self):
    self.create_user(email="taken@storefront.io")
    headers = self.auth_headers(self.create_user())

    response = self.client.patch(
        "/users/me", json={"email": "taken@storefront.io"}, headers=headers
    )

    self.assertEqual(response.status_code, 409)

  def test_password_change(self):
    self._register()
    headers = self._login("jane@storefront.io", "correct-horse")

    wrong = self.client.patch(
        "/users/me",
        json={"currentPassword": "nope-nope", "newPassword": "battery"},
        headers=headers,
    )
    self.assertEqual(wrong.status_code, 400)
    self.assertEqual(wrong.json()["detail"], "Current password is incorrect")

    response = self.client.patch(
        "/users/me",
        json={"currentPassword": "correct-horse", "newPassword": "battery"},
        headers=headers,
    )
    self.assertEqual(response.status_code, 200, response.text)
    self._login("jane@storefront.io", "battery")

  def test_profile_of_deleted_user(self):
    headers = self.auth_headers("no-such-user")
    response = self.client.get("/users/me", headers=headers)
    self.assertEqual(response.status_code, 404)


PRODUCT = {
    "name": "Floral Summer Dress",
    "description": "Lightweight cotton dress",
    "price": 49.99,
    "images": ["/images/dress.jpg"],
    "category": "Dresses",
    "brand": "Bloom",
    "countInStock": 25,
    "discount": 10,
}


class CatalogTest(test_utils.StorefrontTestCase):

  def setUp(self) -> None:
    super().setUp()
    self.admin = self.admin_headers()

  def _create(self, **overrides: Any) -> Dict[str, Any]:
    response = self.client.post(
        "/products", json=dict(PRODUCT, **overrides), headers=self.admin
    )
    self.assertEqual(response.status_code, 201, response.text)
    return response.json()["data"]

  def test_create_product(self):
    product = self._create()

    self.assertEqual(product["slug"], "floral-summer-dress")
    self.assertEqual(product["price"], 49.99)
    self.assertEqual(product["priceAfterDiscount"], 45.0)
    self.assertEqual(product["countInStock"], 25)
    self.assertEqual(product["category"], "Dresses")

  def test_create_product_requires_admin(self):
    headers = self.auth_headers(self.create_user())

    response = self.client.post("/products", json=PRODUCT, headers=headers)

    self.assertEqual(response.status_code, 403)
    self.assertEqual(response.json()["code"], "FORBIDDEN")
    self.assertEqual(self.run_query(db.count_products), 0)

  def test_create_product_requires_auth(self):
    response = self.client.post("/products", json=PRODUCT)
    self.assertEqual(response.status_code, 401)

  def test_create_product_duplicate_slug(self):
    self._create()

    response = self.client.post(
        "/products", json=PRODUCT, headers=self.admin
    )

    self.assertEqual(response.status_code, 409)

  def test_create_product_unknown_category(self):
    response = self.client.post(
        "/products", json=dict(PRODUCT, category="Boats"), headers=self.admin
    )
    self.assertEqual(response.status_code, 400)

  def test_get_product_by_id_and_slug(self):
    product = self._create()

    by_id = self.client.get(f"/products/{product['id']}")
    by_slug = self.client.get("/products/floral-summer-dress")

    self.assertEqual(by_id.status_code, 200)
    self.assertEqual(by_slug.json()["data"]["id"], product["id"])

  def test_get_unknown_product(self):
    response = self.client.get("/products/missing")
    self.assertEqual(response.status_code, 404)

  def test_list_products(self):
    self._create(name="Dress A")
    self._create(name="Dress B")
    self._create(name="Phone", category="Mobiles", price=699.00)

    response = self.client.get("/products", params={"limit": 2})

    self.assertEqual(response.status_code, 200)
    data = response.json()
    self.assertTrue(data["success"])
    self.assertEqual([p["name"] for p in data["data"]], ["Phone", "Dress B"])
    self.assertEqual(
        data["pagination"], {"page": 1, "limit": 2, "total": 3, "pages": 2}
    )

  def test_list_products_filters(self):
    self._create(name="Dress A", price=20.00)
    self._create(name="Dress B", price=80.00)
    self._create(name="Phone", category="Mobiles", price=699.00)

    by_category = self.client.get(
        "/products", params={"category": "Dresses"}
    ).json()
    by_price = self.client.get(
        "/products", params={"minPrice": 50, "maxPrice": 100}
    ).json()

    self.assertEqual(by_category["pagination"]["total"], 2)
    self.assertEqual([p["name"] for p in by_price["data"]], ["Dress B"])

  def test_update_product(self):
    product = self._create()

    response = self.client.put(
        f"/products/{product['id']}",
        json={"name": "Floral Maxi Dress", "price": 59.99},
        headers=self.admin,
    )

    self.assertEqual(response.status_code, 200, response.text)
    updated = response.json()["data"]
    self.assertEqual(updated["slug"], "floral-maxi-dress")
    self.assertEqual(updated["price"], 59.99)
    self.assertEqual(updated["brand"], "Bloom")

  def test_delete_product(self):
    product = self._create()

    response = self.client.delete(
        f"/products/{product['id']}", headers=self.admin
    )

    self.assertEqual(response.status_code, 200)
    self.assertEqual(
        self.client.get(f"/products/{product['id']}").status_code, 404
    )


class AdminStatsTest(test_utils.StorefrontTestCase):

  def test_admin_stats(self):
    admin = self.admin_headers()
    self.client.post("/products", json=PRODUCT, headers=admin)
    shopper = self.auth_headers(self.create_user())
    self.client.post(
        "/orders",
        json={
            "items": [{"name": "Dress", "unitPrice": 50.00, "quantity": 1}],
            "shippingInfo": test_utils.SHIPPING_INFO,
            "paymentMethod": "cod",
        },
        headers=shopper,
    )

    response = self.client.get("/admin/stats", headers=admin)

    self.assertEqual(response.status_code, 200, response.text)
    self.assertEqual(
        response.json(),
        {
            "success": True,
            "data": {
                "totalProducts": 1,
                "totalOrders": 1,
                "totalRevenue": 63.99,
            },
        },
    )

  def test_admin_stats_forbidden_for_shoppers(self):
    headers = self.auth_headers(self.create_user())

    response = self.client.get("/admin/stats", headers=headers)

    self.assertEqual(response.status_code, 403)


if __name__ == "__main__":
  absltest.main()
