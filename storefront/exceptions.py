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

"""Custom exceptions for the storefront server."""


class StorefrontError(Exception):
  """Base class for all storefront exceptions."""

  def __init__(
      self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500
  ):
    self.message = message
    self.code = code
    self.status_code = status_code
    super().__init__(self.message)


class InvalidInputError(StorefrontError):
  """Raised when the request is invalid (e.g. empty cart, missing fields)."""

  def __init__(self, message: str):
    super().__init__(message, code="INVALID_INPUT", status_code=400)


class UnauthorizedError(StorefrontError):
  """Raised when a request carries no valid credentials."""

  def __init__(self, message: str = "Unauthorized"):
    super().__init__(message, code="UNAUTHORIZED", status_code=401)


class ForbiddenError(StorefrontError):
  """Raised when the caller lacks the role required for an operation."""

  def __init__(self, message: str = "Forbidden"):
    super().__init__(message, code="FORBIDDEN", status_code=403)


class ResourceNotFoundError(StorefrontError):
  """Raised when a requested resource is not found."""

  def __init__(self, message: str):
    super().__init__(message, code="RESOURCE_NOT_FOUND", status_code=404)


class ConflictError(StorefrontError):
  """Raised when a write collides with an existing resource."""

  def __init__(self, message: str):
    super().__init__(message, code="CONFLICT", status_code=409)


class PaymentProviderError(StorefrontError):
  """Raised when the payment provider rejects a request."""

  def __init__(self, message: str):
    super().__init__(message, code="PAYMENT_PROVIDER_ERROR", status_code=500)


class InvalidSignatureError(StorefrontError):
  """Raised when a webhook signature is missing or does not verify."""

  def __init__(self, message: str):
    super().__init__(message, code="INVALID_SIGNATURE", status_code=400)


class MalformedEventError(StorefrontError):
  """Raised when a verified webhook event cannot be turned into an order."""

  def __init__(self, message: str):
    super().__init__(message, code="MALFORMED_EVENT", status_code=400)
