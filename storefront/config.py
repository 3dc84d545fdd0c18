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

"""Shared configuration and startup logic for the storefront server."""

import contextlib
import os
from absl import flags
from dotenv import load_dotenv
from fastapi import FastAPI
from storefront import db

FLAGS = flags.FLAGS

SERVER_VERSION = "1.0.0"

load_dotenv()

# Define flags only if they haven't been defined yet (to avoid duplicates
# during tests or re-imports)
try:
  flags.DEFINE_string(
      "db_path",
      os.environ.get("STOREFRONT_DB_PATH", "storefront.db"),
      "Path to the storefront SQLite database",
  )
  flags.DEFINE_integer(
      "port", int(os.environ.get("PORT", "8182")), "Port to run the server on"
  )
  flags.DEFINE_string(
      "base_url",
      os.environ.get("STOREFRONT_BASE_URL", "http://localhost:3000"),
      "Public URL of the storefront, used for checkout redirects and images",
  )
  flags.DEFINE_string(
      "stripe_secret_key",
      os.environ.get("STRIPE_SECRET_KEY"),
      "Stripe API secret key",
  )
  flags.DEFINE_string(
      "stripe_webhook_secret",
      os.environ.get("STRIPE_WEBHOOK_SECRET"),
      "Signing secret of the Stripe webhook endpoint",
  )
  flags.DEFINE_string(
      "jwt_secret",
      os.environ.get("JWT_SECRET", "dev-secret-change-me"),
      "Secret used to sign access tokens",
  )
  flags.DEFINE_integer(
      "jwt_expiry_days", 7, "Lifetime of issued access tokens in days"
  )
  flags.DEFINE_string("currency", "usd", "ISO currency code for checkout")
except flags.DuplicateFlagError:
  pass


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
  """Shared lifespan manager for initializing the database."""
  del app  # Unused.
  # Flags are unparsed when the app is imported by a test runner; the tests
  # wire their own database in that case.
  if FLAGS.is_parsed() and FLAGS.db_path:
    await db.manager.init_db(FLAGS.db_path)
  yield
  await db.manager.close()
