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

"""Catalog routes. Reads are public, writes are admin only."""

from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Path
from fastapi import Query
from storefront import dependencies
from storefront.models import ProductCreateRequest
from storefront.models import ProductUpdateRequest
from storefront.services.product_service import ProductService

router = APIRouter()


@router.get(
    "/products",
    response_model=dict[str, Any],
    operation_id="list_products",
)
async def list_products(
    category: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    product_service: ProductService = Depends(
        dependencies.get_product_service
    ),
) -> dict[str, Any]:
  """List products with pagination."""
  result = await product_service.list_products(
      category=category,
      min_price=min_price,
      max_price=max_price,
      page=page,
      limit=limit,
  )
  return {"success": True, **result.model_dump(mode="json", by_alias=True)}


@router.get(
    "/products/{id}",
    response_model=dict[str, Any],
    operation_id="get_product",
)
async def get_product(
    product_id: str = Path(..., alias="id"),
    product_service: ProductService = Depends(
        dependencies.get_product_service
    ),
) -> dict[str, Any]:
  """Get a product by ID or slug."""
  product = await product_service.get_product(product_id)
  return {
      "success": True,
      "data": product.model_dump(mode="json", by_alias=True),
  }


@router.post(
    "/products",
    response_model=dict[str, Any],
    status_code=201,
    operation_id="create_product",
    dependencies=[Depends(dependencies.require_admin)],
)
async def create_product(
    product_req: ProductCreateRequest = Body(...),
    product_service: ProductService = Depends(
        dependencies.get_product_service
    ),
) -> dict[str, Any]:
  product = await product_service.create_product(product_req)
  return {
      "success": True,
      "data": product.model_dump(mode="json", by_alias=True),
  }


@router.put(
    "/products/{id}",
    response_model=dict[str, Any],
    operation_id="update_product",
    dependencies=[Depends(dependencies.require_admin)],
)
async def update_product(
    product_id: str = Path(..., alias="id"),
    product_req: ProductUpdateRequest = Body(...),
    product_service: ProductService = Depends(
        dependencies.get_product_service
    ),
) -> dict[str, Any]:
  product = await product_service.update_product(product_id, product_req)
  return {
      "success": True,
      "data": product.model_dump(mode="json", by_alias=True),
  }


@router.delete(
    "/products/{id}",
    response_model=dict[str, Any],
    operation_id="delete_product",
    dependencies=[Depends(dependencies.require_admin)],
)
async def delete_product(
    product_id: str = Path(..., alias="id"),
    product_service: ProductService = Depends(
        dependencies.get_product_service
    ),
) -> dict[str, Any]:
  await product_service.delete_product(product_id)
  return {"success": True, "message": "Product deleted successfully"}
