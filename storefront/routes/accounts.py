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

"""Account routes: registration, sign-in and the caller's profile."""

from typing import Any

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from storefront import dependencies
from storefront.models import Caller
from storefront.models import LoginRequest
from storefront.models import ProfileUpdateRequest
from storefront.models import RegisterRequest
from storefront.services.user_service import UserService

router = APIRouter()


@router.post(
    "/auth/register",
    response_model=dict[str, Any],
    status_code=201,
    operation_id="register",
)
async def register(
    register_req: RegisterRequest = Body(...),
    user_service: UserService = Depends(dependencies.get_user_service),
) -> dict[str, Any]:
  """Create a local account."""
  user = await user_service.register(register_req)
  return {"success": True, "user": user}


@router.post(
    "/auth/login",
    response_model=dict[str, Any],
    operation_id="login",
)
async def login(
    login_req: LoginRequest = Body(...),
    user_service: UserService = Depends(dependencies.get_user_service),
) -> dict[str, Any]:
  """Exchange credentials for an access token."""
  token = await user_service.login(login_req)
  return token.model_dump(mode="json", by_alias=True)


@router.get(
    "/users/me",
    response_model=dict[str, Any],
    operation_id="get_profile",
)
async def get_profile(
    caller: Caller = Depends(dependencies.get_caller),
    user_service: UserService = Depends(dependencies.get_user_service),
) -> dict[str, Any]:
  profile = await user_service.get_profile(caller)
  return profile.model_dump(mode="json", by_alias=True)


@router.patch(
    "/users/me",
    response_model=dict[str, Any],
    operation_id="update_profile",
)
async def update_profile(
    update_req: ProfileUpdateRequest = Body(...),
    caller: Caller = Depends(dependencies.get_caller),
    user_service: UserService = Depends(dependencies.get_user_service),
) -> dict[str, Any]:
  """Update the caller's profile, address, wishlist or password."""
  profile = await user_service.update_profile(caller, update_req)
  return {
      "message": "Profile updated successfully",
      "user": profile.model_dump(mode="json", by_alias=True),
  }
