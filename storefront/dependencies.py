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

"""FastAPI dependencies for the storefront server.

This module contains dependency injection logic for FastAPI endpoints,
including:
- Database session management.
- Caller resolution from the bearer access token, and the admin gate.
- Service instantiation (orders, checkout, users, products).
- The Stripe gateway, configured from flags.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession
from storefront import auth
from storefront import config
from storefront import db
from storefront.exceptions import ForbiddenError
from storefront.exceptions import UnauthorizedError
from storefront.models import Caller
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import StripeGateway
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
  """Dependency provider for a database session."""
  async with db.manager.session_factory() as session:
    yield session


def get_jwt_secret() -> str:
  return config.FLAGS.jwt_secret


async def get_caller(
    authorization: Optional[str] = Header(None),
    jwt_secret: str = Depends(get_jwt_secret),
) -> Caller:
  """Resolves the authenticated caller from the bearer token."""
  if not authorization:
    raise UnauthorizedError("Missing Authorization header")
  scheme, _, token = authorization.partition(" ")
  if scheme.lower() != "bearer" or not token.strip():
    raise UnauthorizedError("Invalid Authorization header")
  return auth.decode_access_token(token.strip(), jwt_secret)


async def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
  if not caller.is_admin:
    raise ForbiddenError("Admin only")
  return caller


def get_payment_gateway() -> StripeGateway:
  """Dependency provider for the Stripe gateway."""
  return StripeGateway(
      api_key=config.FLAGS.stripe_secret_key,
      webhook_secret=config.FLAGS.stripe_webhook_secret,
      base_url=config.FLAGS.base_url,
  )


def get_order_service(
    session: AsyncSession = Depends(get_db_session),
) -> OrderService:
  return OrderService(session)


def get_checkout_service(
    session: AsyncSession = Depends(get_db_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> CheckoutService:
  """Dependency provider for CheckoutService."""
  return CheckoutService(
      OrderService(session),
      gateway,
      session,
      currency=config.FLAGS.currency,
  )


def get_user_service(
    session: AsyncSession = Depends(get_db_session),
    jwt_secret: str = Depends(get_jwt_secret),
) -> UserService:
  return UserService(
      session, jwt_secret, jwt_expiry_days=config.FLAGS.jwt_expiry_days
  )


def get_product_service(
    session: AsyncSession = Depends(get_db_session),
) -> ProductService:
  return ProductService(session)
