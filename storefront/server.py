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

"""Storefront Server (Python/FastAPI)."""

import logging
import sys
from typing import Sequence
from absl import app as absl_app
from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from storefront import config
from storefront.exceptions import StorefrontError
from storefront.routes.accounts import router as accounts_router
from storefront.routes.admin import router as admin_router
from storefront.routes.checkout import router as checkout_router
from storefront.routes.orders import router as orders_router
from storefront.routes.products import router as products_router
import uvicorn

# --- App Setup ---

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Storefront Service",
    version=config.SERVER_VERSION,
    description="Orders, hosted checkout and payment reconciliation",
    lifespan=config.lifespan,
)


@app.exception_handler(StorefrontError)
async def storefront_exception_handler(request: Request, exc: StorefrontError):
  """Handles storefront exceptions and converts them to JSON responses."""
  del request  # Unused.
  return JSONResponse(
      status_code=exc.status_code,
      content={"detail": exc.message, "code": exc.code},
  )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
  """Reports malformed request bodies as user-correctable input errors."""
  del request  # Unused.
  errors = exc.errors()
  message = "Invalid request"
  if errors:
    location = ".".join(str(part) for part in errors[0].get("loc", ()))
    message = f"{location}: {errors[0].get('msg', 'invalid value')}"
  return JSONResponse(
      status_code=400,
      content={"detail": message, "code": "INVALID_INPUT"},
  )


app.include_router(orders_router)
app.include_router(checkout_router)
app.include_router(accounts_router)
app.include_router(products_router)
app.include_router(admin_router)


def main(argv: Sequence[str]) -> None:
  """Main entry point for the Storefront Server."""
  del argv  # Unused.

  if not config.FLAGS.db_path or not config.FLAGS.port:
    logger.error("Both --db_path and --port must be provided.")
    print("\nUsage:")
    print(config.FLAGS.main_module_help())
    sys.exit(1)

  if not config.FLAGS.stripe_webhook_secret:
    logger.warning(
        "--stripe_webhook_secret is not set; payment webhooks will be rejected"
    )

  uvicorn.run(app, host="0.0.0.0", port=config.FLAGS.port)


def run() -> None:
  absl_app.run(main)


if __name__ == "__main__":
  run()
