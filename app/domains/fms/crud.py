# app/domains/fms/crud.py

"""
'fms' 도메인 (설비 관리)과 관련된 조회 로직을 담당하는 모듈입니다.

설비의 생성/수정/삭제와 정비 기록의 열기/닫기는 상태 전환과 묶여 있으므로
app.services 계층에서 수행하고, 여기서는 조회 헬퍼만 제공합니다.
"""

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from . import models as fms_models
from . import schemas as fms_schemas


# =============================================================================
# 1. 설비 (Device) 조회
# =============================================================================
class CRUDDevice(
    CRUDBase[
        fms_models.Device,
        fms_schemas.DeviceCreate,
        fms_schemas.DeviceUpdate
    ]
):
    def __init__(self):
        super().__init__(model=fms_models.Device)

    async def get_by_station(self, db: AsyncSession, *, station_id: int) -> List[fms_models.Device]:
        statement = select(self.model).where(self.model.station_id == station_id).order_by(self.model.id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_by_production_line(self, db: AsyncSession, *, production_line_id: int) -> List[fms_models.Device]:
        statement = (
            select(self.model)
            .where(self.model.production_line_id == production_line_id)
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


device = CRUDDevice()


# =============================================================================
# 2. 정비 기록 (MaintenanceRecord) 조회
# =============================================================================
class CRUDMaintenanceRecord:
    model = fms_models.MaintenanceRecord

    async def get_by_device(self, db: AsyncSession, *, device_id: int) -> List[fms_models.MaintenanceRecord]:
        """설비의 정비 기록을 최신순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(self.model.device_id == device_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_open(self, db: AsyncSession, *, device_id: int) -> Optional[fms_models.MaintenanceRecord]:
        """진행 중인 정비 기록(최대 1건) 중 가장 최근 것을 조회합니다."""
        statement = (
            select(self.model)
            .where(
                self.model.device_id == device_id,
                self.model.status == fms_models.MaintenanceStatus.IN_PROGRESS.value,
            )
            .order_by(self.model.id.desc())
        )
        result = await db.execute(statement)
        return result.scalars().first()


maintenance_record = CRUDMaintenanceRecord()
