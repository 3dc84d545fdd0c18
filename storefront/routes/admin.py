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

"""Admin dashboard routes."""

from typing import Any

from fastapi import APIRouter
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from storefront import dependencies
from storefront.services import stats_service

router = APIRouter()


@router.get(
    "/admin/stats",
    response_model=dict[str, Any],
    operation_id="admin_stats",
    dependencies=[Depends(dependencies.require_admin)],
)
async def admin_stats(
    session: AsyncSession = Depends(dependencies.get_db_session),
) -> dict[str, Any]:
  """Totals of products, orders and revenue."""
  stats = await stats_service.get_admin_stats(session)
  return {"success": True, "data": stats.model_dump(mode="json", by_alias=True)}
