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

"""Tests for password hashing and access tokens."""

from absl.testing import absltest
from jose import jwt
from storefront import auth
from storefront.enums import UserRole
from storefront.exceptions import UnauthorizedError

SECRET = "unit-test-secret"


class AccessTokenTest(absltest.TestCase):

  def test_round_trip_carries_identity(self):
    token = auth.create_access_token("user-1", UserRole.ADMIN, SECRET)

    caller = auth.decode_access_token(token, SECRET)

    self.assertEqual(caller.user_id, "user-1")
    self.assertTrue(caller.is_admin)

  def test_wrong_secret(self):
    token = auth.create_access_token("user-1", UserRole.USER, SECRET)
    with self.assertRaises(UnauthorizedError):
      auth.decode_access_token(token, "other-secret")

  def test_expired(self):
    token = auth.create_access_token(
        "user-1", UserRole.USER, SECRET, expiry_days=-1
    )
    with self.assertRaises(UnauthorizedError):
      auth.decode_access_token(token, SECRET)

  def test_missing_subject(self):
    token = jwt.encode({"role": "user"}, SECRET, algorithm=auth.JWT_ALGORITHM)
    with self.assertRaises(UnauthorizedError):
      auth.decode_access_token(token, SECRET)

  def test_unknown_role(self):
    token = jwt.encode(
        {"sub": "user-1", "role": "owner"}, SECRET, algorithm=auth.JWT_ALGORITHM
    )
    with self.assertRaises(UnauthorizedError):
      auth.decode_access_token(token, SECRET)


class PasswordTest(absltest.TestCase):

  def test_hash_and_verify(self):
    password_hash = auth.hash_password("correct-horse")

    self.assertNotEqual(password_hash, "correct-horse")
    self.assertTrue(auth.verify_password("correct-horse", password_hash))
    self.assertFalse(auth.verify_password("wrong-horse", password_hash))

  def test_accounts_without_password_never_verify(self):
    self.assertFalse(auth.verify_password("anything", None))


if __name__ == "__main__":
  absltest.main()
