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

"""Utility script to dump stored orders.

This script reads from the configured SQLite database and prints a summary of
all stored orders, including their payment state and line items. It is useful
for debugging webhook reconciliation.

Usage:
  python -m storefront.dump_orders --db_path=...
"""

import asyncio
import sys
from absl import app as absl_app
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from storefront import config
from storefront.db import Order
from storefront.services.pricing_service import from_cents


async def dump_orders():
  """Queries the database and prints all orders."""
  if not config.FLAGS.db_path:
    print("Error: --db_path is required.")
    sys.exit(1)

  db_url = f"sqlite+aiosqlite:///{config.FLAGS.db_path}"
  engine = create_async_engine(db_url, echo=False)
  session_factory = sessionmaker(
      engine, expire_on_commit=False, class_=AsyncSession
  )

  try:
    async with session_factory() as session:
      result = await session.execute(
          select(Order).order_by(Order.created_at)
      )
      orders = result.scalars().all()

      if not orders:
        print("No orders found.")
        return

      for order in orders:
        print(
            f"Order: {order.id} [{order.status}] user={order.user_id}"
            f" {order.payment_method}/{order.payment_status}"
        )
        if order.checkout_session_id:
          print(f"  checkout session: {order.checkout_session_id}")
        for line in order.items or []:
          price = from_cents(line.get("unit_price", 0))
          qty = line.get("quantity", 0)
          print(
              f"  - {line.get('name') or 'Unknown Item'}"
              f" (ID: {line.get('product_id') or 'N/A'}) x{qty}"
              f" @ ${price:.2f} = ${price * qty:.2f}"
          )
        print(
            f"  items ${from_cents(order.items_price):.2f}"
            f" + tax ${from_cents(order.tax_price):.2f}"
            f" + shipping ${from_cents(order.shipping_price):.2f}"
            f" = ${from_cents(order.total_price):.2f}"
        )
        print("-" * 60)
  finally:
    await engine.dispose()


def main(argv):
  """Main entry point for the order dump script."""
  del argv
  asyncio.run(dump_orders())


if __name__ == "__main__":
  absl_app.run(main)
