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

"""Catalog reads and admin product maintenance."""

import logging
import math
import re
from typing import Optional
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from storefront import db
from storefront.exceptions import ConflictError
from storefront.exceptions import ResourceNotFoundError
from storefront.models import Pagination
from storefront.models import ProductCreateRequest
from storefront.models import ProductPage
from storefront.models import ProductResponse
from storefront.models import ProductUpdateRequest
from storefront.services.pricing_service import to_cents

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
  """Lowercases and joins alphanumeric runs with dashes."""
  return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class ProductService:
  """Service for the product catalog."""

  def __init__(self, session: AsyncSession):
    self.session = session

  async def list_products(
      self,
      category: Optional[str] = None,
      min_price=None,
      max_price=None,
      page: int = 1,
      limit: int = 10,
  ) -> ProductPage:
    """Returns one page of products, newest first."""
    products, total = await db.list_products(
        self.session,
        category=category,
        min_price=to_cents(min_price) if min_price is not None else None,
        max_price=to_cents(max_price) if max_price is not None else None,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return ProductPage(
        data=[ProductResponse.from_record(p) for p in products],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )

  async def get_product(self, id_or_slug: str) -> ProductResponse:
    product = await self._find(id_or_slug)
    return ProductResponse.from_record(product)

  async def create_product(
      self, product_req: ProductCreateRequest
  ) -> ProductResponse:
    slug = slugify(product_req.name)
    if await db.get_product_by_slug(self.session, slug):
      raise ConflictError(f"A product with slug '{slug}' already exists")

    now = db.utcnow_iso()
    product = db.Product(
        id=str(uuid.uuid4()),
        slug=slug,
        created_at=now,
        updated_at=now,
        **self._columns(product_req.model_dump()),
    )
    self.session.add(product)
    await self.session.commit()
    logger.info("Created product %s (%s)", product.id, slug)
    return ProductResponse.from_record(product)

  async def update_product(
      self, product_id: str, product_req: ProductUpdateRequest
  ) -> ProductResponse:
    product = await db.get_product(self.session, product_id)
    if not product:
      raise ResourceNotFoundError("Product not found")

    changes = self._columns(
        product_req.model_dump(exclude_unset=True, exclude_none=True)
    )
    if "name" in changes:
      slug = slugify(changes["name"])
      existing = await db.get_product_by_slug(self.session, slug)
      if existing and existing.id != product.id:
        raise ConflictError(f"A product with slug '{slug}' already exists")
      changes["slug"] = slug
    for column, value in changes.items():
      setattr(product, column, value)
    product.updated_at = db.utcnow_iso()

    await self.session.commit()
    return ProductResponse.from_record(product)

  async def delete_product(self, product_id: str) -> None:
    product = await db.get_product(self.session, product_id)
    if not product:
      raise ResourceNotFoundError("Product not found")
    await self.session.delete(product)
    await self.session.commit()
    logger.info("Deleted product %s", product_id)

  async def _find(self, id_or_slug: str) -> db.Product:
    product = await db.get_product(self.session, id_or_slug)
    if not product:
      product = await db.get_product_by_slug(self.session, id_or_slug)
    if not product:
      raise ResourceNotFoundError("Product not found")
    return product

  def _columns(self, fields: dict) -> dict:
    """Maps request fields onto column values."""
    if fields.get("price") is not None:
      fields["price"] = to_cents(fields["price"])
    if fields.get("category") is not None:
      fields["category"] = fields["category"].value
    return fields
