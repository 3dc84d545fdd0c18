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

"""Stripe integration for hosted checkout and webhook verification.

The gateway is the only module that talks to the Stripe SDK. It converts SDK
errors into storefront exceptions so callers never handle provider types.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from starlette.concurrency import run_in_threadpool
from storefront.exceptions import InvalidSignatureError
from storefront.exceptions import PaymentProviderError
import stripe

logger = logging.getLogger(__name__)

# Maximum age of a signed webhook delivery, in seconds.
SIGNATURE_TOLERANCE = 300


class StripeGateway:
  """Thin wrapper around the Stripe Checkout and webhook APIs."""

  def __init__(
      self,
      api_key: Optional[str],
      webhook_secret: Optional[str],
      base_url: str,
  ):
    self.api_key = api_key
    self.webhook_secret = webhook_secret
    self.base_url = base_url.rstrip("/")

  async def create_checkout_session(
      self,
      line_items: List[Dict[str, Any]],
      metadata: Dict[str, str],
      customer_email: Optional[str] = None,
  ) -> Tuple[str, Optional[str]]:
    """Creates a hosted checkout session.

    Args:
      line_items: Stripe `line_items` entries with inline `price_data`.
      metadata: Flat string metadata attached to the session.
      customer_email: Email prefilled on the hosted page.

    Returns:
      The session id and the URL to redirect the shopper to.

    Raises:
      PaymentProviderError: If Stripe rejects the request.
    """
    try:
      session = await run_in_threadpool(
          stripe.checkout.Session.create,
          api_key=self.api_key,
          payment_method_types=["card"],
          line_items=line_items,
          mode="payment",
          success_url=(
              f"{self.base_url}/orders?success=true"
              "&session_id={CHECKOUT_SESSION_ID}"
          ),
          cancel_url=f"{self.base_url}/checkout?canceled=true",
          customer_email=customer_email,
          metadata=metadata,
      )
    except stripe.StripeError as e:
      logger.error("Stripe rejected checkout session: %s", e)
      raise PaymentProviderError(
          getattr(e, "user_message", None) or str(e) or "Payment provider error"
      ) from e
    return session.id, session.url

  def parse_event(
      self, payload: bytes, signature: Optional[str]
  ) -> Dict[str, Any]:
    """Verifies a webhook delivery and decodes its event.

    Args:
      payload: The raw request body, exactly as received.
      signature: The value of the `Stripe-Signature` header.

    Returns:
      The decoded event as plain JSON data.

    Raises:
      InvalidSignatureError: If the signature is missing, stale or wrong, or
        the body is not JSON.
    """
    if not signature:
      raise InvalidSignatureError("No signature")
    if not self.webhook_secret:
      raise InvalidSignatureError("Webhook secret not configured")

    try:
      event = stripe.Webhook.construct_event(
          payload, signature, self.webhook_secret, SIGNATURE_TOLERANCE
      )
    except stripe.SignatureVerificationError as e:
      logger.warning("Webhook signature verification failed: %s", e)
      raise InvalidSignatureError(f"Webhook Error: {e}") from e
    except ValueError as e:
      # Undecodable or non-JSON body
      logger.warning("Webhook payload could not be decoded: %s", e)
      raise InvalidSignatureError(f"Webhook Error: {e}") from e
    return event.to_dict()

  def build_line_item(
      self,
      name: str,
      unit_amount: int,
      quantity: int,
      currency: str,
      image: Optional[str] = None,
  ) -> Dict[str, Any]:
    """Builds a Stripe line item with inline price data."""
    images = []
    if image:
      images.append(
          image if image.startswith("http") else f"{self.base_url}{image}"
      )
    return {
        "price_data": {
            "currency": currency,
            "product_data": {"name": name, "images": images},
            "unit_amount": unit_amount,
        },
        "quantity": quantity,
    }
