# tests/domains/test_shared_n.py

"""
'shared' 도메인 API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 변경 알림 로그 (GET /notifications) 기록 및 최신순 조회 검증.
- 자원 종류 공통 직접 상태 변경 (PATCH /resources/{kind}/{id}/status) 검증.
"""

import pytest
from httpx import AsyncClient

from app.core.change_log import ChangeLog
from app.domains.fms import models as fms_models
from app.domains.plant import models as plant_models
from app.domains.shared.models import ResourceStatus


#  =============================================================================
#  1. 변경 알림 로그 테스트
#  =============================================================================
@pytest.mark.asyncio
class TestNotifications:
    """변경 알림 로그 API 테스트 그룹"""

    async def test_create_is_recorded(self, client: AsyncClient, change_log: ChangeLog):
        """(성공) 설비 생성이 create 항목으로 기록됨"""
        change_log.clear()
        await client.post("/api/v1/fms/devices", json={"code": "D-LOG", "name": "로그 설비"})

        response = await client.get("/api/v1/shared/notifications")
        assert response.status_code == 200
        entries = response.json()
        assert len(entries) == 1
        assert entries[0]["action"] == "create"
        assert entries[0]["resource_kind"] == "Device"
        assert entries[0]["details"] == "로그 설비"

    async def test_entries_are_newest_first(self, client: AsyncClient, change_log: ChangeLog):
        """(성공) 가장 최근 변경이 먼저 반환됨"""
        change_log.clear()
        await client.post("/api/v1/plant/factories", json={"name": "첫 번째 공장"})
        await client.post("/api/v1/plant/factories", json={"name": "두 번째 공장"})

        entries = (await client.get("/api/v1/shared/notifications")).json()
        assert [e["details"] for e in entries] == ["두 번째 공장", "첫 번째 공장"]
        assert entries[0]["id"] > entries[1]["id"]

        limited = (await client.get("/api/v1/shared/notifications", params={"limit": 1})).json()
        assert [e["details"] for e in limited] == ["두 번째 공장"]

    async def test_bulk_bind_is_summarized(
        self, client: AsyncClient, change_log: ChangeLog, test_station: plant_models.Station, device_factory
    ):
        """(성공) 여러 행의 변경은 '*_many' 항목 하나로 요약"""
        d1 = await device_factory("D-M1")
        d2 = await device_factory("D-M2")
        change_log.clear()

        await client.post(
            f"/api/v1/plant/stations/{test_station.id}/devices/bind", json={"resource_ids": [d1.id, d2.id]}
        )
        entries = (await client.get("/api/v1/shared/notifications")).json()
        assert len(entries) == 1
        assert entries[0]["action"] == "update_many"
        assert entries[0]["resource_kind"] == "Device"
        assert entries[0]["details"] == "2 records"

    async def test_failed_operation_is_not_recorded(
        self, client: AsyncClient, change_log: ChangeLog, test_device: fms_models.Device
    ):
        """(성공) 실패한 작업은 기록되지 않음"""
        change_log.clear()
        response = await client.post("/api/v1/fms/devices", json={"code": test_device.code, "name": "중복"})
        assert response.status_code == 409

        assert (await client.get("/api/v1/shared/notifications")).json() == []

    async def test_invalid_limit(self, client: AsyncClient):
        """(실패) limit은 1 이상"""
        response = await client.get("/api/v1/shared/notifications", params={"limit": 0})
        assert response.status_code == 422


#  =============================================================================
#  2. 직접 상태 변경 테스트
#  =============================================================================
@pytest.mark.asyncio
class TestStatusChange:
    """자원 상태 직접 변경 API 테스트 그룹"""

    async def test_factory_status_set_directly(self, client: AsyncClient, test_factory: plant_models.Factory):
        """(성공) 공장은 점유 상태를 직접 지정할 수 있음"""
        response = await client.patch(f"/api/v1/shared/resources/Factory/{test_factory.id}/status", json={"status": 2})
        assert response.status_code == 200
        assert response.json()["status"] == ResourceStatus.OCCUPIED

    async def test_production_line_status_set_directly(
        self, client: AsyncClient, test_production_line: plant_models.ProductionLine
    ):
        """(성공) 생산라인은 불가 상태를 직접 지정할 수 있음"""
        response = await client.patch(
            f"/api/v1/shared/resources/ProductionLine/{test_production_line.id}/status", json={"status": 1}
        )
        assert response.status_code == 200
        assert response.json()["status"] == ResourceStatus.UNAVAILABLE

    async def test_occupied_without_binding_fails(self, client: AsyncClient, test_device: fms_models.Device):
        """(실패) 바인딩 없는 설비를 점유로 변경 시 400"""
        response = await client.patch(f"/api/v1/shared/resources/Device/{test_device.id}/status", json={"status": 2})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

    async def test_confirm_round_trip(
        self, client: AsyncClient, test_station: plant_models.Station, bound_device: fms_models.Device
    ):
        """(확인 필요) 첫 요청은 428, force_unbind=true 재요청은 바인딩 해제 후 가용"""
        url = f"/api/v1/shared/resources/Device/{bound_device.id}/status"
        first = await client.patch(url, json={"status": 0})
        assert first.status_code == 428
        assert first.json()["slot_name"] == test_station.name

        second = await client.patch(url, json={"status": 0, "force_unbind": True})
        assert second.status_code == 200
        assert second.json()["status"] == ResourceStatus.AVAILABLE
        assert second.json()["station_id"] is None

    async def test_unknown_resource_kind(self, client: AsyncClient):
        """(실패) 알 수 없는 자원 종류는 422"""
        response = await client.patch("/api/v1/shared/resources/Robot/1/status", json={"status": 0})
        assert response.status_code == 422

    async def test_missing_resource(self, client: AsyncClient):
        """(실패) 존재하지 않는 자원은 404"""
        response = await client.patch("/api/v1/shared/resources/Team/99999/status", json={"status": 1})
        assert response.status_code == 404
