# tests/services/test_maintenance_service.py

"""
MaintenanceLifecycle의 정비 기록 열기/닫기 동작을 직접 검증합니다.
"""

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.fms import crud as fms_crud
from app.domains.fms import models as fms_models
from app.domains.shared.models import ResourceStatus
from app.services.maintenance_service import (
    DOWNTIME_CONTENT,
    DOWNTIME_TITLE,
    INITIAL_DOWNTIME_TITLE,
    MaintenanceLifecycle,
)


@pytest.mark.asyncio
class TestMaintenanceLifecycle:

    async def test_open_record(self, db_session: AsyncSession, test_device: fms_models.Device):
        """(성공) 진행 중 기록 생성"""
        lifecycle = MaintenanceLifecycle(db_session)
        record = await lifecycle.open_record(test_device)
        await db_session.commit()

        assert record.device_id == test_device.id
        assert record.title == DOWNTIME_TITLE
        assert record.content == DOWNTIME_CONTENT
        assert record.status == fms_models.MaintenanceStatus.IN_PROGRESS.value
        assert record.type == fms_models.MaintenanceType.AUTO.value
        assert record.start_time is not None
        assert record.end_time is None

    async def test_initial_record_title(self, db_session: AsyncSession, test_device: fms_models.Device):
        """(성공) 생성 시점 불가 설비는 초기 상태 제목 사용"""
        record = await MaintenanceLifecycle(db_session).open_record(test_device, initial=True)
        assert record.title == INITIAL_DOWNTIME_TITLE

    async def test_open_record_skips_when_already_open(self, db_session: AsyncSession, test_device: fms_models.Device):
        """(성공) 이미 열린 기록이 있으면 새로 만들지 않음"""
        lifecycle = MaintenanceLifecycle(db_session)
        await lifecycle.open_record(test_device)
        await db_session.commit()

        assert await lifecycle.open_record(test_device) is None
        assert len(await fms_crud.maintenance_record.get_by_device(db_session, device_id=test_device.id)) == 1

    async def test_close_open_record_appends_recovery_note(self, db_session: AsyncSession, test_device: fms_models.Device):
        """(성공) 닫을 때 완료 처리와 복구 문구 추가"""
        lifecycle = MaintenanceLifecycle(db_session)
        await lifecycle.open_record(test_device)
        await db_session.commit()

        record = await lifecycle.close_open_record(test_device)
        await db_session.commit()

        assert record.status == fms_models.MaintenanceStatus.COMPLETED.value
        assert record.end_time is not None
        assert record.content.startswith(DOWNTIME_CONTENT)
        assert record.content.endswith("사용 가능 상태로 복구)")
        assert await fms_crud.maintenance_record.get_open(db_session, device_id=test_device.id) is None

    async def test_close_without_open_record(self, db_session: AsyncSession, test_device: fms_models.Device):
        """(성공) 열린 기록이 없으면 아무것도 하지 않음"""
        assert await MaintenanceLifecycle(db_session).close_open_record(test_device) is None

    async def test_on_status_change_transitions(self, db_session: AsyncSession, test_device: fms_models.Device):
        """(성공) 불가 진입 시 열고, 불가 이탈 시 닫고, 그 외 전환은 무시"""
        lifecycle = MaintenanceLifecycle(db_session)
        available = ResourceStatus.AVAILABLE.value
        unavailable = ResourceStatus.UNAVAILABLE.value
        occupied = ResourceStatus.OCCUPIED.value

        await lifecycle.on_status_change(test_device, available, occupied)
        await db_session.commit()
        assert await fms_crud.maintenance_record.get_by_device(db_session, device_id=test_device.id) == []

        await lifecycle.on_status_change(test_device, occupied, unavailable)
        await db_session.commit()
        assert await fms_crud.maintenance_record.get_open(db_session, device_id=test_device.id) is not None

        await lifecycle.on_status_change(test_device, unavailable, available)
        await db_session.commit()
        records = await fms_crud.maintenance_record.get_by_device(db_session, device_id=test_device.id)
        assert [r.status for r in records] == [fms_models.MaintenanceStatus.COMPLETED.value]
