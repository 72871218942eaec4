# app/domains/hrm/crud.py

"""
'hrm' 도메인 (작업반/작업자)과 관련된 조회 로직을 담당하는 모듈입니다.

작업반 구성원 변경과 상태 변경은 연쇄 효과가 있으므로 app.services 계층에서 수행합니다.
"""

from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.shared.models import ResourceStatus
from . import models as hrm_models
from . import schemas as hrm_schemas


# =============================================================================
# 1. 작업반 (Team) 조회
# =============================================================================
class CRUDTeam(
    CRUDBase[
        hrm_models.Team,
        hrm_schemas.TeamCreate,
        hrm_schemas.TeamUpdate
    ]
):
    def __init__(self):
        super().__init__(model=hrm_models.Team)

    async def get_by_leader(self, db: AsyncSession, *, leader_id: int) -> Optional[hrm_models.Team]:
        return await self.get_by_attribute(db, attribute="leader_id", value=leader_id)

    async def get_by_station(self, db: AsyncSession, *, station_id: int) -> List[hrm_models.Team]:
        statement = select(self.model).where(self.model.station_id == station_id).order_by(self.model.id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_by_production_line(self, db: AsyncSession, *, production_line_id: int) -> List[hrm_models.Team]:
        statement = (
            select(self.model)
            .where(self.model.production_line_id == production_line_id)
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


team = CRUDTeam()


# =============================================================================
# 2. 작업자 (Staff) 조회
# =============================================================================
class CRUDStaff(
    CRUDBase[
        hrm_models.Staff,
        hrm_schemas.StaffCreate,
        hrm_schemas.StaffUpdate
    ]
):
    def __init__(self):
        super().__init__(model=hrm_models.Staff)

    async def get_members(self, db: AsyncSession, *, team_id: int) -> List[hrm_models.Staff]:
        statement = select(self.model).where(self.model.team_id == team_id).order_by(self.model.id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_available(self, db: AsyncSession, *, team_id: Optional[int] = None) -> List[hrm_models.Staff]:
        """
        작업반에 배정 가능한 작업자를 조회합니다.
        사용 불가 상태가 아니고, 소속 작업반이 없거나 지정한 작업반 소속인 작업자입니다.
        """
        membership = self.model.team_id.is_(None)
        if team_id is not None:
            membership = or_(membership, self.model.team_id == team_id)
        statement = (
            select(self.model)
            .where(self.model.status != ResourceStatus.UNAVAILABLE.value, membership)
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


staff = CRUDStaff()
