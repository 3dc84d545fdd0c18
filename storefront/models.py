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

"""Request and response models for the storefront server.

Wire payloads use camelCase keys; every model also accepts snake_case field
names. Money arrives as decimal dollars and is stored as integer cents (see
`db`), so the response models convert back on the way out.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import EmailStr
from pydantic import Field
from pydantic import field_validator
from pydantic import Json
from pydantic import model_validator
from pydantic.alias_generators import to_camel
from storefront import db
from storefront.enums import OrderStatus
from storefront.enums import PaymentMethod
from storefront.enums import PaymentStatus
from storefront.enums import ProductCategory
from storefront.enums import UserRole
from storefront.services.pricing_service import from_cents

# Metadata keys holding consecutive slices of the cart JSON.
ITEMS_CHUNK_PREFIX = "items_"


class CamelModel(BaseModel):
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Caller(BaseModel):
  """The authenticated identity a request acts on behalf of."""

  user_id: str
  role: UserRole = UserRole.USER

  @property
  def is_admin(self) -> bool:
    return self.role == UserRole.ADMIN


# --- Cart and orders ---


class CartItem(CamelModel):
  """One line of a client-held cart snapshot."""

  product_id: Optional[str] = Field(
      None,
      validation_alias=AliasChoices("productId", "product_id", "id"),
      serialization_alias="productId",
  )
  name: str = ""
  unit_price: Decimal = Field(
      ...,
      ge=0,
      validation_alias=AliasChoices("unitPrice", "unit_price", "price"),
      serialization_alias="unitPrice",
  )
  quantity: int = Field(..., ge=1)
  image_ref: Optional[str] = Field(
      None,
      validation_alias=AliasChoices("imageRef", "image_ref", "image"),
      serialization_alias="imageRef",
  )


class ShippingInfo(CamelModel):
  model_config = ConfigDict(str_strip_whitespace=True, str_min_length=1)

  full_name: str
  email: EmailStr
  phone: str
  address_line: str = Field(
      ...,
      validation_alias=AliasChoices("addressLine", "address_line", "address"),
      serialization_alias="addressLine",
  )
  city: str
  state: str
  postal_code: str = Field(
      ...,
      validation_alias=AliasChoices("postalCode", "postal_code", "zipCode"),
      serialization_alias="postalCode",
  )
  country: str


class OrderCreateRequest(CamelModel):
  """Body of a direct (cash-on-delivery) order.

  The client-computed totals are accepted so existing clients keep working,
  but the server always reprices from `items`.
  """

  items: List[CartItem] = Field(default_factory=list)
  shipping_info: Optional[ShippingInfo] = None
  payment_method: Optional[PaymentMethod] = None
  subtotal: Optional[Decimal] = None
  tax: Optional[Decimal] = None
  shipping: Optional[Decimal] = None
  total: Optional[Decimal] = None

  @field_validator("payment_method", mode="before")
  @classmethod
  def _expand_short_method(cls, value: Any) -> Any:
    if value == "cod":
      return PaymentMethod.CASH_ON_DELIVERY
    return value


class CheckoutSessionRequest(CamelModel):
  items: List[CartItem] = Field(default_factory=list)
  shipping_info: Optional[ShippingInfo] = None
  subtotal: Optional[Decimal] = None
  tax: Optional[Decimal] = None
  shipping: Optional[Decimal] = None
  total: Optional[Decimal] = None


class CheckoutSessionResponse(CamelModel):
  session_id: str
  url: Optional[str] = None


class CheckoutMetadata(CamelModel):
  """Order state carried through the payment provider's session metadata.

  The provider only stores flat string values, so the cart and the shipping
  details travel as JSON strings. The cart JSON may be split across
  `items_0`, `items_1`, ... keys; they are joined back in order.
  """

  user_id: str
  shipping_info: Json[ShippingInfo]
  items: Json[List[CartItem]]
  subtotal: Decimal
  tax: Decimal
  shipping: Decimal
  total: Decimal

  @model_validator(mode="before")
  @classmethod
  def _join_item_chunks(cls, data: Any) -> Any:
    if not isinstance(data, dict) or "items" in data:
      return data
    chunks = sorted(
        (int(key[len(ITEMS_CHUNK_PREFIX) :]), value)
        for key, value in data.items()
        if key.startswith(ITEMS_CHUNK_PREFIX)
        and key[len(ITEMS_CHUNK_PREFIX) :].isdigit()
    )
    if not chunks:
      return data
    return {**data, "items": "".join(str(value) for _, value in chunks)}


class OrderItemResponse(CamelModel):
  product_id: Optional[str] = None
  name: str = ""
  unit_price: float
  quantity: int
  image_ref: Optional[str] = None


class OrderResponse(CamelModel):
  id: str
  user_id: str
  items: List[OrderItemResponse]
  shipping_address: ShippingInfo
  payment_method: PaymentMethod
  payment_status: PaymentStatus
  payment_intent_id: Optional[str] = None
  checkout_session_id: Optional[str] = None
  items_price: float
  tax_price: float
  shipping_price: float
  total_price: float
  status: OrderStatus
  created_at: str
  updated_at: str

  @classmethod
  def from_record(cls, order: db.Order) -> "OrderResponse":
    return cls(
        id=order.id,
        user_id=order.user_id,
        items=[
            OrderItemResponse(
                product_id=item.get("product_id"),
                name=item.get("name", ""),
                unit_price=from_cents(item["unit_price"]),
                quantity=item["quantity"],
                image_ref=item.get("image_ref"),
            )
            for item in order.items
        ],
        shipping_address=ShippingInfo(**order.shipping_address),
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        payment_intent_id=order.payment_intent_id,
        checkout_session_id=order.checkout_session_id,
        items_price=from_cents(order.items_price),
        tax_price=from_cents(order.tax_price),
        shipping_price=from_cents(order.shipping_price),
        total_price=from_cents(order.total_price),
        status=order.status,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


class OrderCreatedResponse(CamelModel):
  message: str = "Order created successfully"
  order_id: str
  order: OrderResponse


# --- Accounts ---


class RegisterRequest(BaseModel):
  name: str = Field(..., min_length=2, max_length=50)
  email: EmailStr
  password: str


class LoginRequest(BaseModel):
  email: EmailStr
  password: str


class TokenResponse(CamelModel):
  access_token: str
  token_type: str = "bearer"


class Address(CamelModel):
  line1: str = ""
  line2: str = ""
  city: str = ""
  state: str = ""
  postal_code: str = ""
  country: str = ""
  phone: str = ""


class ProfileResponse(CamelModel):
  id: str
  first_name: str
  last_name: str
  email: str
  name: str
  image: str = ""
  address: Address = Field(default_factory=Address)
  wishlist: List[str] = Field(default_factory=list)

  @classmethod
  def from_record(cls, user: db.User) -> "ProfileResponse":
    name_parts = (user.name or "").split(" ")
    return cls(
        id=user.id,
        first_name=user.first_name or name_parts[0],
        last_name=user.last_name or " ".join(name_parts[1:]),
        email=user.email,
        name=user.name or "",
        image=user.image or "",
        address=Address(**(user.address or {})),
        wishlist=user.wishlist or [],
    )


class ProfileUpdateRequest(CamelModel):
  first_name: Optional[str] = Field(None, max_length=25)
  last_name: Optional[str] = Field(None, max_length=25)
  email: Optional[EmailStr] = None
  image: Optional[str] = None
  # Partial address; merged into the stored one
  address: Optional[Dict[str, str]] = None
  wishlist: Optional[List[str]] = None
  current_password: Optional[str] = None
  new_password: Optional[str] = None


# --- Catalog ---


class ProductCreateRequest(CamelModel):
  name: str = Field(..., min_length=1)
  description: str = ""
  price: Decimal = Field(..., ge=0)
  images: List[str] = Field(default_factory=list)
  category: ProductCategory
  brand: Optional[str] = None
  count_in_stock: int = Field(0, ge=0)
  is_featured: bool = False
  discount: int = Field(0, ge=0, le=100)
  attributes: Dict[str, Any] = Field(default_factory=dict)


class ProductUpdateRequest(CamelModel):
  name: Optional[str] = Field(None, min_length=1)
  description: Optional[str] = None
  price: Optional[Decimal] = Field(None, ge=0)
  images: Optional[List[str]] = None
  category: Optional[ProductCategory] = None
  brand: Optional[str] = None
  count_in_stock: Optional[int] = Field(None, ge=0)
  is_featured: Optional[bool] = None
  discount: Optional[int] = Field(None, ge=0, le=100)
  attributes: Optional[Dict[str, Any]] = None


class ProductResponse(CamelModel):
  id: str
  name: str
  slug: str
  description: str = ""
  price: float
  price_after_discount: float
  images: List[str] = Field(default_factory=list)
  category: str
  brand: Optional[str] = None
  rating: float = 0.0
  num_reviews: int = 0
  count_in_stock: int = 0
  is_featured: bool = False
  discount: int = 0
  attributes: Dict[str, Any] = Field(default_factory=dict)
  created_at: str
  updated_at: str

  @classmethod
  def from_record(cls, product: db.Product) -> "ProductResponse":
    price_cents = product.price or 0
    discount = product.discount or 0
    return cls(
        id=product.id,
        name=product.name,
        slug=product.slug,
        description=product.description or "",
        price=from_cents(price_cents),
        price_after_discount=from_cents(
            price_cents - price_cents * discount // 100
        ),
        images=product.images or [],
        category=product.category,
        brand=product.brand,
        rating=product.rating or 0.0,
        num_reviews=product.num_reviews or 0,
        count_in_stock=product.count_in_stock or 0,
        is_featured=bool(product.is_featured),
        discount=discount,
        attributes=product.attributes or {},
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


class Pagination(BaseModel):
  page: int
  limit: int
  total: int
  pages: int


class ProductPage(BaseModel):
  data: List[ProductResponse]
  pagination: Pagination


class AdminStats(CamelModel):
  total_products: int
  total_orders: int
  total_revenue: float
