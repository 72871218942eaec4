# app/services/maintenance_service.py

"""
설비 정비 기록 수명 주기(Maintenance Lifecycle) 서비스 모듈입니다.

설비 상태가 '사용 불가'로 바뀌는 순간 정비 기록을 열고, '사용 불가'에서 벗어나는 순간
열린 기록을 닫습니다. 이 서비스는 커밋하지 않습니다. 호출한 바인딩 서비스의 트랜잭션 안에서
상태 변경과 함께 커밋되거나 함께 롤백됩니다.
"""

from datetime import datetime, UTC
from typing import Optional
import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.fms import crud as fms_crud
from app.domains.fms import models as fms_models
from app.domains.shared.models import ResourceStatus

logger = logging.getLogger(__name__)

DOWNTIME_TITLE = "설비 정지"
DOWNTIME_CONTENT = "설비 상태가 '사용 불가'로 변경되었습니다."
INITIAL_DOWNTIME_TITLE = "초기 상태 사용 불가"
INITIAL_DOWNTIME_CONTENT = "설비가 생성 시점부터 사용 불가 상태로 등록되었습니다."
RECOVERY_NOTE = " ({time:%Y-%m-%d %H:%M:%S} 사용 가능 상태로 복구)"


class MaintenanceLifecycle:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def open_record(
        self, device: fms_models.Device, *, initial: bool = False
    ) -> Optional[fms_models.MaintenanceRecord]:
        """
        진행 중인 정비 기록을 엽니다. 이미 열린 기록이 있으면 새로 만들지 않습니다.
        device.id가 필요하므로 신규 설비는 먼저 flush 되어 있어야 합니다.
        """
        if await fms_crud.maintenance_record.get_open(self.db, device_id=device.id) is not None:
            return None
        record = fms_models.MaintenanceRecord(
            device_id=device.id,
            type=fms_models.MaintenanceType.AUTO.value,
            title=INITIAL_DOWNTIME_TITLE if initial else DOWNTIME_TITLE,
            content=INITIAL_DOWNTIME_CONTENT if initial else DOWNTIME_CONTENT,
            status=fms_models.MaintenanceStatus.IN_PROGRESS.value,
            start_time=datetime.now(UTC),
        )
        self.db.add(record)
        logger.info("Maintenance record opened for device %s", device.id)
        return record

    async def close_open_record(self, device: fms_models.Device) -> Optional[fms_models.MaintenanceRecord]:
        """가장 최근의 진행 중 기록을 완료 처리하고, 기존 내용 뒤에 복구 문구를 덧붙입니다."""
        record = await fms_crud.maintenance_record.get_open(self.db, device_id=device.id)
        if record is None:
            return None
        now = datetime.now(UTC)
        record.status = fms_models.MaintenanceStatus.COMPLETED.value
        record.end_time = now
        record.content = (record.content or "") + RECOVERY_NOTE.format(time=now)
        self.db.add(record)
        logger.info("Maintenance record %s closed for device %s", record.id, device.id)
        return record

    async def on_status_change(self, device: fms_models.Device, old_status: int, new_status: int) -> None:
        """상태 전환에 맞춰 정비 기록을 열거나 닫습니다."""
        unavailable = ResourceStatus.UNAVAILABLE.value
        if old_status != unavailable and new_status == unavailable:
            await self.open_record(device)
        elif old_status == unavailable and new_status != unavailable:
            await self.close_open_record(device)
