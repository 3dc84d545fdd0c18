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

"""Shared fixtures for the storefront server tests."""

import asyncio
import hashlib
import hmac
import json
import os
import shutil
import tempfile
import time
from typing import Any, AsyncGenerator, Dict, Optional
import uuid

from absl import flags
from absl.testing import absltest
from absl.testing import flagsaver
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from storefront import auth
from storefront import db
from storefront import dependencies
from storefront.enums import UserRole
from storefront.server import app

FLAGS = flags.FLAGS

JWT_SECRET = "test-jwt-secret"
WEBHOOK_SECRET = "whsec_test_secret"
BASE_URL = "https://shop.example.com"

SHIPPING_INFO = {
    "fullName": "Jane Doe",
    "email": "jane@storefront.io",
    "phone": "+1 555 0100",
    "addressLine": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "postalCode": "62701",
    "country": "US",
}


def sign_payload(
    payload: str, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None
) -> str:
  """Builds a `Stripe-Signature` header value for a payload."""
  if timestamp is None:
    timestamp = int(time.time())
  signature = hmac.new(
      secret.encode("utf-8"),
      f"{timestamp}.{payload}".encode("utf-8"),
      hashlib.sha256,
  ).hexdigest()
  return f"t={timestamp},v1={signature}"


def completed_event(
    session_id: str,
    metadata: Optional[Dict[str, str]],
    payment_intent: str = "pi_test_1",
) -> str:
  """Serializes a `checkout.session.completed` event."""
  return json.dumps({
      "id": f"evt_{uuid.uuid4().hex}",
      "object": "event",
      "type": "checkout.session.completed",
      "data": {
          "object": {
              "id": session_id,
              "object": "checkout.session",
              "payment_intent": payment_intent,
              "metadata": metadata,
          }
      },
  })


class StorefrontTestCase(absltest.TestCase):
  """Runs the app against a throwaway database with test secrets."""

  def setUp(self) -> None:
    super().setUp()
    if not FLAGS.is_parsed():
      FLAGS.mark_as_parsed()

    self.test_dir = tempfile.mkdtemp()
    db_path = os.path.join(self.test_dir, "test_storefront.db")

    self.enter_context(
        flagsaver.flagsaver(
            db_path=db_path,
            base_url=BASE_URL,
            jwt_secret=JWT_SECRET,
            stripe_secret_key="sk_test_key",
            stripe_webhook_secret=WEBHOOK_SECRET,
        )
    )

    # Each request and each seed runs on its own event loop; pooled
    # connections must not outlive the loop that opened them.
    self.engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}", echo=False, poolclass=NullPool
    )
    self.session_factory = sessionmaker(
        self.engine, expire_on_commit=False, class_=AsyncSession
    )

    async def init_schema() -> None:
      async with self.engine.begin() as conn:
        await conn.run_sync(db.Base.metadata.create_all)

    asyncio.run(init_schema())

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
      async with self.session_factory() as session:
        yield session

    app.dependency_overrides[dependencies.get_db_session] = (
        override_get_db_session
    )
    self.client = TestClient(app)

  def tearDown(self) -> None:
    app.dependency_overrides.clear()
    asyncio.run(self.engine.dispose())
    shutil.rmtree(self.test_dir)
    super().tearDown()

  def run_query(self, fn, *args, **kwargs) -> Any:
    """Runs an async `db` helper in a fresh session and returns its result."""

    async def _run():
      async with self.session_factory() as session:
        return await fn(session, *args, **kwargs)

    return asyncio.run(_run())

  def create_user(
      self,
      email: str = "jane@storefront.io",
      name: str = "Jane Doe",
      role: UserRole = UserRole.USER,
      password: Optional[str] = None,
  ) -> str:
    """Inserts a user directly and returns its id."""
    user_id = str(uuid.uuid4())

    async def _insert():
      async with self.session_factory() as session:
        session.add(
            db.User(
                id=user_id,
                name=name,
                email=email,
                password_hash=(
                    auth.hash_password(password) if password else None
                ),
                role=role.value,
                address={},
                wishlist=[],
            )
        )
        await session.commit()

    asyncio.run(_insert())
    return user_id

  def auth_headers(
      self, user_id: str, role: UserRole = UserRole.USER
  ) -> Dict[str, str]:
    token = auth.create_access_token(user_id, role, JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}

  def admin_headers(self) -> Dict[str, str]:
    admin_id = self.create_user(
        email=f"admin-{uuid.uuid4().hex[:8]}@storefront.io",
        name="Store Admin",
        role=UserRole.ADMIN,
    )
    return self.auth_headers(admin_id, UserRole.ADMIN)

  def post_webhook(self, payload: str, signature: Optional[str] = None):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
      headers["Stripe-Signature"] = signature
    return self.client.post(
        "/checkout/webhook", content=payload, headers=headers
    )
