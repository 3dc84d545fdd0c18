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

"""Password hashing and access tokens."""

import datetime
from typing import Optional

from jose import jwt
from jose import JWTError
from passlib.context import CryptContext
from storefront.enums import UserRole
from storefront.exceptions import UnauthorizedError
from storefront.models import Caller

JWT_ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12
)


def hash_password(password: str) -> str:
  return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
  if not password_hash:
    return False
  return pwd_context.verify(password, password_hash)


def create_access_token(
    user_id: str, role: UserRole, secret: str, expiry_days: int = 7
) -> str:
  """Issues a signed access token for a user."""
  payload = {
      "sub": user_id,
      "role": role.value,
      "exp": datetime.datetime.now(datetime.timezone.utc)
      + datetime.timedelta(days=expiry_days),
  }
  return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str) -> Caller:
  """Validates an access token and returns the identity it carries.

  Raises:
    UnauthorizedError: If the token is malformed, expired or not ours.
  """
  try:
    payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
  except JWTError as e:
    raise UnauthorizedError("Invalid token") from e

  user_id = payload.get("sub")
  if not user_id:
    raise UnauthorizedError("Invalid token")
  try:
    role = UserRole(payload.get("role", UserRole.USER.value))
  except ValueError as e:
    raise UnauthorizedError("Invalid token") from e
  return Caller(user_id=user_id, role=role)
