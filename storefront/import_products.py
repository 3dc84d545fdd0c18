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

"""Catalog seeding script for the storefront server.

This script imports products from a CSV file into the configured SQLite
database. It clears any existing products before populating the table.
Prices in the CSV are in dollars; `images` is a `|`-separated list.

Usage:
  python -m storefront.import_products --db_path=... --data_dir=...
"""

import asyncio
import csv
from decimal import Decimal
import logging
import os
import uuid
from absl import app as absl_app
from absl import flags
from sqlalchemy import delete
from storefront import config
from storefront import db
from storefront.services.pricing_service import to_cents
from storefront.services.product_service import slugify

FLAGS = flags.FLAGS
flags.DEFINE_string(
    "data_dir",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "data"),
    "Directory containing products.csv",
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _parse_bool(value: str) -> bool:
  return value.strip().lower() in ("1", "true", "yes")


async def import_products() -> None:
  """Reads products.csv and populates the database."""
  # Ensure tables exist
  await db.manager.init_db(config.FLAGS.db_path)

  try:
    async with db.manager.session_factory() as session:
      logger.info("Clearing existing products...")
      await session.execute(delete(db.Product))

      logger.info("Importing Products from CSV...")
      products = []
      with open(os.path.join(FLAGS.data_dir, "products.csv"), "r") as f:
        reader = csv.DictReader(f)
        for row in reader:
          now = db.utcnow_iso()
          products.append(
              db.Product(
                  id=str(uuid.uuid4()),
                  name=row["name"],
                  slug=slugify(row["name"]),
                  description=row.get("description", ""),
                  price=to_cents(Decimal(row["price"])),
                  images=[i for i in row.get("images", "").split("|") if i],
                  category=row["category"],
                  brand=row.get("brand") or None,
                  count_in_stock=int(row.get("count_in_stock") or 0),
                  is_featured=_parse_bool(row.get("is_featured", "")),
                  discount=int(row.get("discount") or 0),
                  attributes={},
                  created_at=now,
                  updated_at=now,
              )
          )
      session.add_all(products)
      await session.commit()

    logger.info("Imported %d products.", len(products))
  finally:
    await db.manager.close()


def main(argv) -> None:
  """Main entry point for the catalog import script."""
  del argv
  asyncio.run(import_products())


if __name__ == "__main__":
  absl_app.run(main)
