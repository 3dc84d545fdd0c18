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

"""User accounts: registration, sign-in and the profile/wishlist."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from storefront import auth
from storefront import db
from storefront.enums import AuthProvider
from storefront.enums import UserRole
from storefront.exceptions import ConflictError
from storefront.exceptions import InvalidInputError
from storefront.exceptions import ResourceNotFoundError
from storefront.exceptions import UnauthorizedError
from storefront.models import Caller
from storefront.models import LoginRequest
from storefront.models import ProfileResponse
from storefront.models import ProfileUpdateRequest
from storefront.models import RegisterRequest
from storefront.models import TokenResponse

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
MIN_NEW_PASSWORD_LENGTH = 6


class UserService:
  """Service for local-credential accounts."""

  def __init__(
      self, session: AsyncSession, jwt_secret: str, jwt_expiry_days: int = 7
  ):
    self.session = session
    self.jwt_secret = jwt_secret
    self.jwt_expiry_days = jwt_expiry_days

  async def register(self, register_req: RegisterRequest) -> dict:
    """Creates a local account.

    Raises:
      InvalidInputError: If the password is too short.
      ConflictError: If the email is already registered.
    """
    if len(register_req.password) < MIN_PASSWORD_LENGTH:
      raise InvalidInputError(
          f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
      )
    email = register_req.email.lower().strip()
    if await db.get_user_by_email(self.session, email):
      raise ConflictError("Email already in use")

    user = db.User(
        id=str(uuid.uuid4()),
        name=register_req.name.strip(),
        email=email,
        password_hash=auth.hash_password(register_req.password),
        provider=AuthProvider.LOCAL.value,
        email_verified=True,
        role=UserRole.USER.value,
        address={},
        wishlist=[],
    )
    self.session.add(user)
    await self.session.commit()
    logger.info("Registered user %s", user.id)
    return {"id": user.id, "email": user.email, "name": user.name}

  async def login(self, login_req: LoginRequest) -> TokenResponse:
    """Checks credentials and issues an access token."""
    user = await db.get_user_by_email(
        self.session, login_req.email.lower().strip()
    )
    if not user or not auth.verify_password(
        login_req.password, user.password_hash
    ):
      raise UnauthorizedError("Invalid email or password")
    token = auth.create_access_token(
        user.id, UserRole(user.role), self.jwt_secret, self.jwt_expiry_days
    )
    return TokenResponse(access_token=token)

  async def get_profile(self, caller: Caller) -> ProfileResponse:
    user = await self._get_user(caller)
    return ProfileResponse.from_record(user)

  async def update_profile(
      self, caller: Caller, update_req: ProfileUpdateRequest
  ) -> ProfileResponse:
    """Applies a partial profile update.

    Names, email and image replace the stored values, `address` is merged
    into the stored address, and `wishlist` replaces the stored list. A
    password change needs the current password.
    """
    user = await self._get_user(caller)

    if update_req.first_name:
      user.first_name = update_req.first_name
    if update_req.last_name:
      user.last_name = update_req.last_name
    if update_req.first_name or update_req.last_name:
      user.name = f"{user.first_name or ''} {user.last_name or ''}".strip()
    if update_req.email:
      email = update_req.email.lower().strip()
      existing = await db.get_user_by_email(self.session, email)
      if existing and existing.id != user.id:
        raise ConflictError("Email already in use")
      user.email = email
    if update_req.image is not None:
      user.image = update_req.image
    if update_req.address:
      user.address = {**(user.address or {}), **update_req.address}
    if update_req.wishlist is not None:
      user.wishlist = list(update_req.wishlist)

    if update_req.current_password and update_req.new_password:
      if not auth.verify_password(
          update_req.current_password, user.password_hash
      ):
        raise InvalidInputError("Current password is incorrect")
      if len(update_req.new_password) < MIN_NEW_PASSWORD_LENGTH:
        raise InvalidInputError(
            "New password must be at least"
            f" {MIN_NEW_PASSWORD_LENGTH} characters"
        )
      user.password_hash = auth.hash_password(update_req.new_password)

    await self.session.commit()
    return ProfileResponse.from_record(user)

  async def _get_user(self, caller: Caller) -> db.User:
    user = await db.get_user(self.session, caller.user_id)
    if not user:
      raise ResourceNotFoundError("User not found")
    return user
