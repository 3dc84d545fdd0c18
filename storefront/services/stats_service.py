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

"""Store-wide figures for the admin dashboard."""

from sqlalchemy.ext.asyncio import AsyncSession
from storefront import db
from storefront.models import AdminStats
from storefront.services.pricing_service import from_cents


async def get_admin_stats(session: AsyncSession) -> AdminStats:
  """Counts products and orders and sums revenue over all orders."""
  total_products = await db.count_products(session)
  total_orders = await db.count_orders(session)
  revenue = await db.sum_order_revenue(session)
  return AdminStats(
      total_products=total_products,
      total_orders=total_orders,
      total_revenue=from_cents(revenue),
  )
