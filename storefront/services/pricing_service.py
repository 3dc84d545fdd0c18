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

"""Order pricing.

Both order creation paths price a cart through `calculate_totals`, so a card
order reconciled from a webhook carries exactly the amounts the shopper saw on
the hosted payment page.
"""

import dataclasses
import decimal
from decimal import Decimal
from typing import Iterable

TAX_RATE = Decimal("0.08")
FREE_SHIPPING_THRESHOLD = Decimal("100.00")
FLAT_SHIPPING_FEE = Decimal("9.99")

_CENT = Decimal("0.01")


def round2(amount: Decimal) -> Decimal:
  """Rounds a dollar amount to cents, half up."""
  return amount.quantize(_CENT, rounding=decimal.ROUND_HALF_UP)


def to_cents(amount: Decimal) -> int:
  """Converts a dollar amount to integer minor units."""
  return int(round2(Decimal(amount)) * 100)


def from_cents(cents: int) -> float:
  return cents / 100


@dataclasses.dataclass(frozen=True)
class Totals:
  """Computed order amounts in dollars."""

  subtotal: Decimal
  tax: Decimal
  shipping: Decimal
  total: Decimal


def calculate_totals(items: Iterable) -> Totals:
  """Prices a cart snapshot.

  Args:
    items: Cart lines exposing `unit_price` (Decimal dollars) and `quantity`.
      Unit prices are rounded to cents before they are multiplied, the same
      way they are charged and stored per line.

  Returns:
    The subtotal, tax, shipping and total. Shipping is free only when the
    subtotal is strictly above the threshold.
  """
  subtotal = round2(
      sum(
          (round2(Decimal(item.unit_price)) * item.quantity for item in items),
          Decimal("0"),
      )
  )
  tax = round2(subtotal * TAX_RATE)
  shipping = (
      Decimal("0.00")
      if subtotal > FREE_SHIPPING_THRESHOLD
      else FLAT_SHIPPING_FEE
  )
  total = round2(subtotal + tax + shipping)
  return Totals(subtotal=subtotal, tax=tax, shipping=shipping, total=total)
