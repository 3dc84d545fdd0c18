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

"""Enumerations for the storefront server.

This module defines standard enums used throughout the server application
to represent payment, order lifecycle and account states.
"""

import enum


class PaymentMethod(str, enum.Enum):
  CARD = "card"
  CASH_ON_DELIVERY = "cash_on_delivery"


class PaymentStatus(str, enum.Enum):
  PENDING = "pending"
  PAID = "paid"


class OrderStatus(str, enum.Enum):
  PENDING = "pending"
  PROCESSING = "processing"
  SHIPPED = "shipped"
  DELIVERED = "delivered"
  CANCELLED = "cancelled"


class UserRole(str, enum.Enum):
  USER = "user"
  ADMIN = "admin"


class AuthProvider(str, enum.Enum):
  LOCAL = "local"
  GOOGLE = "google"


class ProductCategory(str, enum.Enum):
  DRESSES = "Dresses"
  MOBILES = "Mobiles"
  SHOES = "Shoes"
  ACCESSORIES = "Accessories"
