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

"""Database management and persistence layer for the storefront server.

This module provides the schema definitions, database session management, and
asynchronous data access helpers used by the server. It utilizes SQLAlchemy with
SQLite (via aiosqlite).

Key features include:
- `DatabaseManager`: Handles asynchronous engine initialization and session
  factory setup.
- WAL Mode: Automatically enables SQLite Write-Ahead Logging so webhook
  deliveries and shopper requests can write concurrently.
- Declarative Models: Defines tables for users, products and orders. Orders
  carry a unique checkout session reference, which is what makes webhook
  redelivery harmless.
- Data Access Helpers: A suite of asynchronous functions for CRUD operations on
  the database models.

All money columns hold integer amounts in cents.
"""

import datetime
import logging
from typing import List
from typing import Optional
from typing import Tuple

from sqlalchemy import Boolean
from sqlalchemy import Column
from sqlalchemy import Float
from sqlalchemy import func
from sqlalchemy import Index
from sqlalchemy import Integer
from sqlalchemy import JSON
from sqlalchemy import select
from sqlalchemy import String
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow_iso() -> str:
  return datetime.datetime.now(datetime.timezone.utc).isoformat()


class DatabaseManager:
  """Manages the database engine and sessions without using global variables."""

  def __init__(self) -> None:
    self.engine: Optional[AsyncEngine] = None
    self.session_factory: Optional[sessionmaker] = None

  async def init_db(self, path: str) -> None:
    """Initializes the database engine and creates tables."""
    url = f"sqlite+aiosqlite:///{path}"
    self.engine = create_async_engine(url, echo=False)

    async with self.engine.connect() as conn:
      await conn.execute(text("PRAGMA journal_mode=WAL"))

    self.session_factory = sessionmaker(
        self.engine, expire_on_commit=False, class_=AsyncSession
    )

    async with self.engine.begin() as conn:
      await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready at %s", path)

  async def close(self) -> None:
    """Closes the database engine."""
    if self.engine:
      await self.engine.dispose()


# Global manager instance (to be initialized via lifespan)
manager = DatabaseManager()


class User(Base):
  __tablename__ = "users"

  id = Column(String, primary_key=True)
  name = Column(String)
  first_name = Column(String, nullable=True)
  last_name = Column(String, nullable=True)
  email = Column(String, unique=True, index=True)
  password_hash = Column(String, nullable=True)
  image = Column(String, default="")
  email_verified = Column(Boolean, default=False)
  provider = Column(String, default="local")  # 'local' or 'google'
  role = Column(String, default="user")  # 'user' or 'admin'
  address = Column(JSON, default=dict)
  wishlist = Column(JSON, default=list)  # List of product IDs
  created_at = Column(String, default=utcnow_iso)
  updated_at = Column(String, default=utcnow_iso, onupdate=utcnow_iso)


class Product(Base):
  __tablename__ = "products"

  id = Column(String, primary_key=True)
  name = Column(String)
  slug = Column(String, unique=True, index=True)
  description = Column(String, default="")
  price = Column(Integer)  # Price in cents
  images = Column(JSON, default=list)
  category = Column(String, index=True)
  brand = Column(String, nullable=True)
  rating = Column(Float, default=0.0)
  num_reviews = Column(Integer, default=0)
  count_in_stock = Column(Integer, default=0)
  is_featured = Column(Boolean, default=False)
  discount = Column(Integer, default=0)  # Percentage
  attributes = Column(JSON, default=dict)
  created_at = Column(String, default=utcnow_iso)
  updated_at = Column(String, default=utcnow_iso, onupdate=utcnow_iso)


class Order(Base):
  """A placed order. Rows are inserted once and never repriced."""

  __tablename__ = "orders"
  __table_args__ = (Index("ix_orders_user_created", "user_id", "created_at"),)

  id = Column(String, primary_key=True)
  user_id = Column(String, nullable=False)
  # Snapshots, decoupled from the live catalog
  items = Column(JSON, nullable=False)
  shipping_address = Column(JSON, nullable=False)
  payment_method = Column(String, nullable=False)
  payment_status = Column(String, nullable=False)
  payment_intent_id = Column(String, nullable=True)
  # Unique so a redelivered webhook cannot insert a second order
  checkout_session_id = Column(String, nullable=True, unique=True)
  items_price = Column(Integer, nullable=False)  # In cents
  tax_price = Column(Integer, nullable=False)  # In cents
  shipping_price = Column(Integer, nullable=False)  # In cents
  total_price = Column(Integer, nullable=False)  # In cents
  status = Column(String, nullable=False)
  created_at = Column(String, default=utcnow_iso)
  updated_at = Column(String, default=utcnow_iso, onupdate=utcnow_iso)


# --- Data Access Helpers ---


async def insert_order(session: AsyncSession, order: Order) -> None:
  """Inserts a new order and flushes it.

  Args:
    session: The database session to use.
    order: The order row to insert.

  Raises:
    sqlalchemy.exc.IntegrityError: If an order already carries the same
      checkout session reference.
  """
  session.add(order)
  await session.flush()


async def list_orders_for_user(
    session: AsyncSession, user_id: str, limit: int = 50
) -> List[Order]:
  """Retrieves a user's most recent orders, newest first."""
  result = await session.execute(
      select(Order)
      .where(Order.user_id == user_id)
      .order_by(Order.created_at.desc())
      .limit(limit)
  )
  return list(result.scalars().all())


async def get_order(session: AsyncSession, order_id: str) -> Optional[Order]:
  """Retrieves an order by ID."""
  return await session.get(Order, order_id)


async def get_order_by_checkout_session(
    session: AsyncSession, checkout_session_id: str
) -> Optional[Order]:
  """Retrieves the order created for a hosted checkout session, if any."""
  result = await session.execute(
      select(Order).where(Order.checkout_session_id == checkout_session_id)
  )
  return result.scalar_one_or_none()


async def count_orders(session: AsyncSession) -> int:
  result = await session.execute(select(func.count()).select_from(Order))
  return result.scalar_one()


async def sum_order_revenue(session: AsyncSession) -> int:
  """Returns the sum of all order totals in cents."""
  result = await session.execute(select(func.sum(Order.total_price)))
  return result.scalar_one() or 0


async def get_user(session: AsyncSession, user_id: str) -> Optional[User]:
  """Retrieves a user by ID."""
  return await session.get(User, user_id)


async def get_user_by_email(
    session: AsyncSession, email: str
) -> Optional[User]:
  """Retrieves a user by email."""
  result = await session.execute(select(User).where(User.email == email))
  return result.scalar_one_or_none()


async def get_product(
    session: AsyncSession, product_id: str
) -> Optional[Product]:
  """Retrieves a product by ID."""
  return await session.get(Product, product_id)


async def get_product_by_slug(
    session: AsyncSession, slug: str
) -> Optional[Product]:
  """Retrieves a product by slug."""
  result = await session.execute(select(Product).where(Product.slug == slug))
  return result.scalar_one_or_none()


async def list_products(
    session: AsyncSession,
    category: Optional[str] = None,
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    offset: int = 0,
    limit: int = 10,
) -> Tuple[List[Product], int]:
  """Retrieves a page of products, newest first.

  Args:
    session: The database session to use.
    category: Optional category to filter on.
    min_price: Optional inclusive lower price bound in cents.
    max_price: Optional inclusive upper price bound in cents.
    offset: Number of matching products to skip.
    limit: Maximum number of products to return.

  Returns:
    A tuple of the page of products and the total number of matches.
  """
  conditions = []
  if category:
    conditions.append(Product.category == category)
  if min_price is not None:
    conditions.append(Product.price >= min_price)
  if max_price is not None:
    conditions.append(Product.price <= max_price)

  result = await session.execute(
      select(Product)
      .where(*conditions)
      .order_by(Product.created_at.desc())
      .offset(offset)
      .limit(limit)
  )
  total = await session.execute(
      select(func.count()).select_from(Product).where(*conditions)
  )
  return list(result.scalars().all()), total.scalar_one()


async def count_products(session: AsyncSession) -> int:
  result = await session.execute(select(func.count()).select_from(Product))
  return result.scalar_one()
