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

"""Checkout service for hosted card payments.

This module provides the `CheckoutService` class, which covers both halves of a
card purchase:

- Initiation: the cart is priced, converted into Stripe line items, and the
  whole order state is attached to the hosted session as metadata. Nothing is
  written to the order store at this point.
- Reconciliation: when Stripe reports `checkout.session.completed`, the order
  is rebuilt from that metadata and stored as paid.

Stripe retries deliveries until it gets a 2xx, so the same completed session
can arrive more than once, possibly concurrently. The orders table carries a
unique constraint on the checkout session id; a second insert fails there and
is answered as a success without creating anything.
"""

import logging
from typing import Any, Dict, List, Optional

import pydantic
from pydantic import TypeAdapter
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from storefront import db
from storefront.exceptions import InvalidInputError
from storefront.exceptions import MalformedEventError
from storefront.models import Caller
from storefront.models import CartItem
from storefront.models import CheckoutMetadata
from storefront.models import CheckoutSessionRequest
from storefront.models import CheckoutSessionResponse
from storefront.models import ITEMS_CHUNK_PREFIX
from storefront.services.order_service import OrderService
from storefront.services.order_service import validate_cart
from storefront.services.payment_gateway import StripeGateway
from storefront.services.pricing_service import calculate_totals
from storefront.services.pricing_service import to_cents
from storefront.services.pricing_service import Totals

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"

_CART_ADAPTER = TypeAdapter(list[CartItem])

# Stripe Checkout limits.
MAX_LINE_ITEMS = 100
METADATA_MAX_KEYS = 50
METADATA_VALUE_LIMIT = 500


def split_metadata_value(prefix: str, value: str) -> Dict[str, str]:
  """Splits a long string across numbered metadata keys."""
  return {
      f"{prefix}{i}": value[start : start + METADATA_VALUE_LIMIT]
      for i, start in enumerate(range(0, len(value), METADATA_VALUE_LIMIT))
  }


def check_checkout_limits(
    line_items: List[Dict[str, Any]], metadata: Dict[str, str]
) -> None:
  """Rejects a checkout the provider would refuse.

  Raises:
    InvalidInputError: If the cart has too many lines or its metadata does
      not fit the provider's key and value limits.
  """
  if len(line_items) > MAX_LINE_ITEMS:
    raise InvalidInputError(
        f"Card checkout supports at most {MAX_LINE_ITEMS} line items"
    )
  if len(metadata) > METADATA_MAX_KEYS:
    raise InvalidInputError("Cart is too large for card checkout")
  for key, value in metadata.items():
    if len(value) > METADATA_VALUE_LIMIT:
      raise InvalidInputError(f"Checkout field {key} is too long")


class CheckoutService:
  """Service for initiating hosted checkouts and reconciling their payments."""

  def __init__(
      self,
      order_service: OrderService,
      gateway: StripeGateway,
      session: AsyncSession,
      currency: str = "usd",
  ):
    self.order_service = order_service
    self.gateway = gateway
    self.session = session
    self.currency = currency

  async def create_session(
      self, caller: Caller, checkout_req: CheckoutSessionRequest
  ) -> CheckoutSessionResponse:
    """Starts a hosted card checkout for the caller's cart.

    Args:
      caller: The authenticated shopper.
      checkout_req: The cart and shipping details.

    Returns:
      The provider session id and redirect URL.

    Raises:
      InvalidInputError: If the cart is empty, shipping details are missing,
        or the cart does not fit the provider's checkout limits.
      PaymentProviderError: If the provider rejects the session.
    """
    shipping_info = validate_cart(
        checkout_req.items, checkout_req.shipping_info
    )
    totals = calculate_totals(checkout_req.items)

    line_items = [
        self.gateway.build_line_item(
            name=item.name or "Item",
            unit_amount=to_cents(item.unit_price),
            quantity=item.quantity,
            currency=self.currency,
            image=item.image_ref,
        )
        for item in checkout_req.items
    ]
    # Synthetic lines so the hosted page charges exactly `totals.total`
    if totals.shipping > 0:
      line_items.append(
          self.gateway.build_line_item(
              "Shipping", to_cents(totals.shipping), 1, self.currency
          )
      )
    if totals.tax > 0:
      line_items.append(
          self.gateway.build_line_item(
              "Tax", to_cents(totals.tax), 1, self.currency
          )
      )

    metadata = {
        "userId": caller.user_id,
        "shippingInfo": shipping_info.model_dump_json(by_alias=True),
        "subtotal": str(totals.subtotal),
        "tax": str(totals.tax),
        "shipping": str(totals.shipping),
        "total": str(totals.total),
    }
    items_json = _CART_ADAPTER.dump_json(
        checkout_req.items, by_alias=True, exclude_none=True
    ).decode("utf-8")
    metadata.update(split_metadata_value(ITEMS_CHUNK_PREFIX, items_json))
    check_checkout_limits(line_items, metadata)

    session_id, url = await self.gateway.create_checkout_session(
        line_items, metadata, customer_email=shipping_info.email
    )
    logger.info(
        "Started checkout session %s for user %s (total %s)",
        session_id,
        caller.user_id,
        totals.total,
    )
    return CheckoutSessionResponse(session_id=session_id, url=url)

  async def handle_webhook(
      self, payload: bytes, signature: Optional[str]
  ) -> Dict[str, Any]:
    """Processes one signed webhook delivery.

    Args:
      payload: The raw request body.
      signature: The `Stripe-Signature` header value.

    Returns:
      The acknowledgement body.

    Raises:
      InvalidSignatureError: If the delivery is not signed by Stripe.
      MalformedEventError: If a completed session lacks usable metadata.
    """
    event = self.gateway.parse_event(payload, signature)
    event_type = event.get("type")
    if event_type != CHECKOUT_COMPLETED:
      logger.info("Ignoring webhook event %s", event_type)
      return {"received": True}

    checkout_session = (event.get("data") or {}).get("object") or {}
    session_id = checkout_session.get("id")
    if not session_id:
      logger.error(
          "Completed checkout event %s has no session id", event.get("id")
      )
      raise MalformedEventError("Checkout session id missing")

    metadata = self._parse_metadata(
        session_id, checkout_session.get("metadata")
    )
    totals = Totals(
        subtotal=metadata.subtotal,
        tax=metadata.tax,
        shipping=metadata.shipping,
        total=metadata.total,
    )

    try:
      order = await self.order_service.create_paid_order(
          user_id=metadata.user_id,
          items=metadata.items,
          shipping_info=metadata.shipping_info,
          totals=totals,
          checkout_session_id=session_id,
          payment_intent_id=checkout_session.get("payment_intent"),
      )
      await self.session.commit()
    except IntegrityError:
      await self.session.rollback()
      existing = await db.get_order_by_checkout_session(
          self.session, session_id
      )
      logger.info(
          "Checkout session %s already reconciled as order %s; ignoring"
          " redelivery",
          session_id,
          existing.id if existing else None,
      )
      return {"received": True}
    except Exception:
      await self.session.rollback()
      raise

    logger.info(
        "Created paid order %s for checkout session %s", order.id, session_id
    )
    return {"received": True}

  def _parse_metadata(
      self, session_id: str, metadata: Optional[Dict[str, Any]]
  ) -> CheckoutMetadata:
    if not metadata:
      logger.error("No metadata found in checkout session %s", session_id)
      raise MalformedEventError("No metadata")
    try:
      parsed = CheckoutMetadata.model_validate(metadata)
    except pydantic.ValidationError as e:
      logger.error(
          "Unusable metadata in checkout session %s: %s", session_id, e
      )
      raise MalformedEventError("Invalid checkout metadata") from e
    if not parsed.items:
      logger.error("Checkout session %s carries an empty cart", session_id)
      raise MalformedEventError("Invalid checkout metadata")
    return parsed
