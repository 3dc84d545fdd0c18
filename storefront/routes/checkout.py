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

"""Hosted checkout and payment webhook routes."""

from typing import Any, Optional

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Header
from fastapi import Request
from storefront import dependencies
from storefront.models import Caller
from storefront.models import CheckoutSessionRequest
from storefront.services.checkout_service import CheckoutService

router = APIRouter()


@router.post(
    "/checkout/session",
    response_model=dict[str, Any],
    operation_id="create_checkout_session",
)
async def create_checkout_session(
    checkout_req: CheckoutSessionRequest = Body(...),
    caller: Caller = Depends(dependencies.get_caller),
    checkout_service: CheckoutService = Depends(
        dependencies.get_checkout_service
    ),
) -> dict[str, Any]:
  """Start a hosted card checkout and return where to redirect the shopper."""
  result = await checkout_service.create_session(caller, checkout_req)
  return result.model_dump(mode="json", by_alias=True)


@router.post(
    "/checkout/webhook",
    response_model=dict[str, Any],
    operation_id="payment_webhook",
)
async def payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    checkout_service: CheckoutService = Depends(
        dependencies.get_checkout_service
    ),
) -> dict[str, Any]:
  """Receive a payment provider event.

  Authenticated by the provider's signature over the raw body, not by a user
  session.
  """
  payload = await request.body()
  return await checkout_service.handle_webhook(payload, stripe_signature)
