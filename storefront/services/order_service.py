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

"""Order service for creating and reading order records.

This module provides the `OrderService` class, which owns every write of an
order record: the direct cash-on-delivery path writes one synchronously, and
the payment webhook writes the paid card orders through `create_paid_order`.
Both paths price the cart through the pricing service and snapshot the cart
and shipping details so later catalog edits never alter a placed order.
"""

import logging
from typing import List, Optional, Sequence
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from storefront import db
from storefront.enums import OrderStatus
from storefront.enums import PaymentMethod
from storefront.enums import PaymentStatus
from storefront.exceptions import InvalidInputError
from storefront.exceptions import ResourceNotFoundError
from storefront.models import Caller
from storefront.models import CartItem
from storefront.models import OrderCreateRequest
from storefront.models import OrderCreatedResponse
from storefront.models import OrderResponse
from storefront.models import ShippingInfo
from storefront.services.pricing_service import calculate_totals
from storefront.services.pricing_service import to_cents
from storefront.services.pricing_service import Totals

logger = logging.getLogger(__name__)

RECENT_ORDERS_LIMIT = 50


def validate_cart(
    items: Sequence[CartItem], shipping_info: Optional[ShippingInfo]
) -> ShippingInfo:
  """Checks the inputs shared by both order paths and returns the address."""
  if not items:
    raise InvalidInputError("Cart items are required")
  if shipping_info is None:
    raise InvalidInputError("Shipping info is required")
  return shipping_info


def snapshot_items(items: Sequence[CartItem]) -> List[dict]:
  return [
      {
          "product_id": item.product_id,
          "name": item.name,
          "unit_price": to_cents(item.unit_price),
          "quantity": item.quantity,
          "image_ref": item.image_ref,
      }
      for item in items
  ]


class OrderService:
  """Service for placing and listing orders."""

  def __init__(self, session: AsyncSession):
    self.session = session

  async def create_order(
      self, caller: Caller, order_req: OrderCreateRequest
  ) -> OrderCreatedResponse:
    """Places a cash-on-delivery order.

    Totals sent by the client are ignored; the cart is repriced here.

    Args:
      caller: The authenticated shopper; becomes the order owner.
      order_req: The cart, shipping details and payment method.

    Returns:
      The new order id and the stored order.

    Raises:
      InvalidInputError: If the cart is empty, shipping details or payment
        method are missing, or a card payment is attempted on this path.
    """
    shipping_info = validate_cart(order_req.items, order_req.shipping_info)
    if order_req.payment_method is None:
      raise InvalidInputError("Payment method is required")
    if order_req.payment_method != PaymentMethod.CASH_ON_DELIVERY:
      raise InvalidInputError("Card payments must go through hosted checkout")

    totals = calculate_totals(order_req.items)
    order = self._build_order(
        user_id=caller.user_id,
        items=order_req.items,
        shipping_info=shipping_info,
        totals=totals,
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
        payment_status=PaymentStatus.PENDING,
        status=OrderStatus.PENDING,
    )

    try:
      await db.insert_order(self.session, order)
      await self.session.commit()
    except Exception:
      await self.session.rollback()
      raise

    logger.info(
        "Created order %s for user %s (total %s)",
        order.id,
        caller.user_id,
        totals.total,
    )
    return OrderCreatedResponse(
        order_id=order.id, order=OrderResponse.from_record(order)
    )

  async def create_paid_order(
      self,
      user_id: str,
      items: Sequence[CartItem],
      shipping_info: ShippingInfo,
      totals: Totals,
      checkout_session_id: str,
      payment_intent_id: Optional[str],
  ) -> db.Order:
    """Inserts a paid card order for a completed hosted checkout.

    The totals are the ones captured when the checkout was initiated; they
    are stored as-is rather than recomputed. The caller owns the transaction.

    Raises:
      sqlalchemy.exc.IntegrityError: If an order already exists for the
        checkout session.
    """
    order = self._build_order(
        user_id=user_id,
        items=items,
        shipping_info=shipping_info,
        totals=totals,
        payment_method=PaymentMethod.CARD,
        payment_status=PaymentStatus.PAID,
        status=OrderStatus.PROCESSING,
    )
    order.checkout_session_id = checkout_session_id
    order.payment_intent_id = payment_intent_id
    await db.insert_order(self.session, order)
    return order

  async def list_orders(self, caller: Caller) -> List[OrderResponse]:
    """Returns the caller's most recent orders, newest first."""
    orders = await db.list_orders_for_user(
        self.session, caller.user_id, limit=RECENT_ORDERS_LIMIT
    )
    return [OrderResponse.from_record(o) for o in orders]

  async def get_order(self, caller: Caller, order_id: str) -> OrderResponse:
    """Returns one order; shoppers only see their own, admins see all."""
    order = await db.get_order(self.session, order_id)
    if not order or (order.user_id != caller.user_id and not caller.is_admin):
      raise ResourceNotFoundError("Order not found")
    return OrderResponse.from_record(order)

  def _build_order(
      self,
      user_id: str,
      items: Sequence[CartItem],
      shipping_info: ShippingInfo,
      totals: Totals,
      payment_method: PaymentMethod,
      payment_status: PaymentStatus,
      status: OrderStatus,
  ) -> db.Order:
    now = db.utcnow_iso()
    return db.Order(
        id=str(uuid.uuid4()),
        user_id=user_id,
        items=snapshot_items(items),
        shipping_address=shipping_info.model_dump(mode="json"),
        payment_method=payment_method.value,
        payment_status=payment_status.value,
        items_price=to_cents(totals.subtotal),
        tax_price=to_cents(totals.tax),
        shipping_price=to_cents(totals.shipping),
        total_price=to_cents(totals.total),
        status=status.value,
        created_at=now,
        updated_at=now,
    )
