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

"""Order routes for the storefront server."""

from typing import Any

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Path
from storefront import dependencies
from storefront.models import Caller
from storefront.models import OrderCreateRequest
from storefront.services.order_service import OrderService

router = APIRouter()


@router.post(
    "/orders",
    response_model=dict[str, Any],
    status_code=201,
    operation_id="create_order",
)
async def create_order(
    order_req: OrderCreateRequest = Body(...),
    caller: Caller = Depends(dependencies.get_caller),
    order_service: OrderService = Depends(dependencies.get_order_service),
) -> dict[str, Any]:
  """Place a cash-on-delivery order."""
  result = await order_service.create_order(caller, order_req)
  return result.model_dump(mode="json", by_alias=True)


@router.get(
    "/orders",
    response_model=dict[str, Any],
    operation_id="list_orders",
)
async def list_orders(
    caller: Caller = Depends(dependencies.get_caller),
    order_service: OrderService = Depends(dependencies.get_order_service),
) -> dict[str, Any]:
  """List the caller's most recent orders."""
  orders = await order_service.list_orders(caller)
  return {"data": [o.model_dump(mode="json", by_alias=True) for o in orders]}


@router.get(
    "/orders/{id}",
    response_model=dict[str, Any],
    operation_id="get_order",
)
async def get_order(
    order_id: str = Path(..., alias="id"),
    caller: Caller = Depends(dependencies.get_caller),
    order_service: OrderService = Depends(dependencies.get_order_service),
) -> dict[str, Any]:
  """Get an order by ID."""
  order = await order_service.get_order(caller, order_id)
  return order.model_dump(mode="json", by_alias=True)
