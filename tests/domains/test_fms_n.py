# tests/domains/test_fms_n.py

"""
'fms' 도메인 (설비 관리) API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 설비 생성/조회/수정/삭제와 코드 고유성 검증.
- 바인딩된 설비의 가용 전환 확인(428) 흐름 검증.
- 사용 불가 전환에 따른 정비 기록 열기/닫기 검증.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.fms import models as fms_models
from app.domains.plant import models as plant_models
from app.domains.shared.models import ResourceStatus
from app.services.maintenance_service import INITIAL_DOWNTIME_TITLE, DOWNTIME_TITLE


#  =============================================================================
#  1. 설비 (devices) CRUD 테스트
#  =============================================================================
@pytest.mark.asyncio
class TestDeviceCrud:
    """설비 생성/조회/수정/삭제 테스트 그룹"""

    async def test_create_device(self, client: AsyncClient):
        """(성공) 기본 가용 상태로 새 설비 생성"""
        response = await client.post(
            "/api/v1/fms/devices",
            json={"code": "D-NEW", "name": "CNC 선반", "type": 0, "model": "CNC-200"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "D-NEW"
        assert data["status"] == ResourceStatus.AVAILABLE
        assert data["station_id"] is None
        assert data["production_line_id"] is None

    async def test_create_unavailable_device_opens_initial_record(self, client: AsyncClient):
        """(성공) 불가 상태로 생성하면 초기 정비 기록이 열림"""
        response = await client.post("/api/v1/fms/devices", json={"code": "D-DOWN", "name": "고장 설비", "status": 1})
        assert response.status_code == 201
        device_id = response.json()["id"]

        records = await client.get(f"/api/v1/fms/devices/{device_id}/maintenance_records")
        assert records.status_code == 200
        assert len(records.json()) == 1
        record = records.json()[0]
        assert record["title"] == INITIAL_DOWNTIME_TITLE
        assert record["status"] == fms_models.MaintenanceStatus.IN_PROGRESS.value
        assert record["type"] == fms_models.MaintenanceType.AUTO.value
        assert record["start_time"] is not None
        assert record["end_time"] is None

    async def test_create_occupied_device_fails(self, client: AsyncClient):
        """(실패) 점유 상태로 생성 시 400"""
        response = await client.post("/api/v1/fms/devices", json={"code": "D-OCC", "name": "잘못된", "status": 2})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

    async def test_create_duplicate_device_code_fails(self, client: AsyncClient, test_device: fms_models.Device):
        """(실패) 중복된 설비 코드로 생성 시 409"""
        response = await client.post("/api/v1/fms/devices", json={"code": test_device.code, "name": "중복 설비"})
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "CONFLICT"

    async def test_read_devices_with_status_filter(self, client: AsyncClient, test_device: fms_models.Device, bound_device: fms_models.Device):
        """(성공) 상태로 필터링하여 목록 조회"""
        response = await client.get("/api/v1/fms/devices", params={"status": 2})
        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == [bound_device.id]

    async def test_read_device_not_found(self, client: AsyncClient):
        """(실패) 존재하지 않는 설비 조회 시 404"""
        response = await client.get("/api/v1/fms/devices/99999")
        assert response.status_code == 404

    async def test_update_device_fields(self, client: AsyncClient, test_device: fms_models.Device):
        """(성공) 상태 변경 없이 일반 정보 수정"""
        response = await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"name": "프레스 1호기(개조)", "type": 3})
        assert response.status_code == 200
        assert response.json()["name"] == "프레스 1호기(개조)"
        assert response.json()["type"] == 3
        assert response.json()["status"] == ResourceStatus.AVAILABLE

    async def test_update_device_duplicate_code_fails(self, client: AsyncClient, test_device: fms_models.Device, device_factory):
        """(실패) 다른 설비의 코드로 수정 시 409"""
        other = await device_factory("D-OTHER")
        response = await client.put(f"/api/v1/fms/devices/{other.id}", json={"code": test_device.code})
        assert response.status_code == 409

    async def test_update_unbound_device_to_occupied_fails(self, client: AsyncClient, test_device: fms_models.Device):
        """(실패) 바인딩 없는 설비를 점유로 직접 변경 시 400"""
        response = await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"status": 2})
        assert response.status_code == 400

    async def test_delete_device_with_records(self, client: AsyncClient):
        """(성공) 정비 기록이 있는 설비도 기록과 함께 삭제"""
        created = await client.post("/api/v1/fms/devices", json={"code": "D-DEL", "name": "삭제 설비", "status": 1})
        device_id = created.json()["id"]

        response = await client.delete(f"/api/v1/fms/devices/{device_id}")
        assert response.status_code == 204
        assert (await client.get(f"/api/v1/fms/devices/{device_id}")).status_code == 404

    async def test_delete_device_not_found(self, client: AsyncClient):
        """(실패) 존재하지 않는 설비 삭제 시 404"""
        response = await client.delete("/api/v1/fms/devices/99999")
        assert response.status_code == 404


#  =============================================================================
#  2. 바인딩 / 확인 필요 흐름 테스트
#  =============================================================================
@pytest.mark.asyncio
class TestDeviceBinding:
    """바인딩된 설비의 상태 변경 테스트 그룹"""

    async def test_available_on_bound_device_requires_confirm(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_station: plant_models.Station,
        bound_device: fms_models.Device,
    ):
        """(확인 필요) 가용 전환 요청은 428과 슬롯 이름을 반환하고 아무것도 바꾸지 않음"""
        response = await client.put(f"/api/v1/fms/devices/{bound_device.id}", json={"status": 0})
        assert response.status_code == 428
        body = response.json()
        assert body["status"] == "confirm_required"
        assert body["slot_kind"] == "Station"
        assert body["slot_name"] == test_station.name

        await db_session.refresh(bound_device)
        assert bound_device.station_id == test_station.id
        assert bound_device.status == ResourceStatus.OCCUPIED

    async def test_force_unbind_makes_device_available(self, client: AsyncClient, bound_device: fms_models.Device):
        """(성공) force_unbind=true 재요청 시 바인딩 해제 후 가용"""
        response = await client.put(
            f"/api/v1/fms/devices/{bound_device.id}", json={"status": 0, "force_unbind": True}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == ResourceStatus.AVAILABLE
        assert data["station_id"] is None
        assert data["production_line_id"] is None

    async def test_unavailable_keeps_binding(
        self, client: AsyncClient, test_station: plant_models.Station, bound_device: fms_models.Device
    ):
        """(성공) 바인딩된 설비를 불가로 바꾸면 바인딩은 유지되고 정비 기록이 열림"""
        response = await client.put(f"/api/v1/fms/devices/{bound_device.id}", json={"status": 1})
        assert response.status_code == 200
        assert response.json()["status"] == ResourceStatus.UNAVAILABLE
        assert response.json()["station_id"] == test_station.id

        records = await client.get(f"/api/v1/fms/devices/{bound_device.id}/maintenance_records")
        assert len(records.json()) == 1
        assert records.json()[0]["title"] == DOWNTIME_TITLE

    async def test_bound_unavailable_device_rejects_direct_occupied(
        self, client: AsyncClient, db_session: AsyncSession, bound_device: fms_models.Device
    ):
        """(실패) 바인딩된 불가 설비라도 점유 직접 지정은 400, 상태와 정비 기록은 그대로"""
        await client.put(f"/api/v1/fms/devices/{bound_device.id}", json={"status": 1})
        response = await client.put(f"/api/v1/fms/devices/{bound_device.id}", json={"status": 2})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

        await db_session.refresh(bound_device)
        assert bound_device.status == ResourceStatus.UNAVAILABLE
        records = await client.get(f"/api/v1/fms/devices/{bound_device.id}/maintenance_records")
        assert records.json()[0]["status"] == fms_models.MaintenanceStatus.IN_PROGRESS.value

    async def test_rebind_unavailable_device_returns_to_occupied(
        self, client: AsyncClient, test_station: plant_models.Station, bound_device: fms_models.Device
    ):
        """(성공) 불가 설비는 다시 바인딩하면 점유로 복귀하고 정비 기록이 닫힘"""
        await client.put(f"/api/v1/fms/devices/{bound_device.id}", json={"status": 1})
        response = await client.post(
            f"/api/v1/plant/stations/{test_station.id}/devices/bind", json={"resource_ids": [bound_device.id]}
        )
        assert response.status_code == 200

        device = (await client.get(f"/api/v1/fms/devices/{bound_device.id}")).json()
        assert device["status"] == ResourceStatus.OCCUPIED
        assert device["station_id"] == test_station.id

        records = await client.get(f"/api/v1/fms/devices/{bound_device.id}/maintenance_records")
        assert records.json()[0]["status"] == fms_models.MaintenanceStatus.COMPLETED.value

    async def test_unbind_device(self, client: AsyncClient, bound_device: fms_models.Device):
        """(성공) 설비 바인딩 해제"""
        response = await client.post(f"/api/v1/fms/devices/{bound_device.id}/unbind")
        assert response.status_code == 200
        assert response.json()["station_id"] is None
        assert response.json()["status"] == ResourceStatus.AVAILABLE

    async def test_unbind_unbound_device_is_noop(self, client: AsyncClient, test_device: fms_models.Device):
        """(성공) 바인딩 없는 설비 해제는 변경 없이 성공"""
        response = await client.post(f"/api/v1/fms/devices/{test_device.id}/unbind")
        assert response.status_code == 200
        assert response.json()["status"] == ResourceStatus.AVAILABLE

    async def test_unbind_unavailable_device_becomes_available(
        self, client: AsyncClient, bound_device: fms_models.Device
    ):
        """(성공) 불가 상태의 설비도 해제하면 가용이 되고 진행 중 정비 기록이 닫힘"""
        await client.put(f"/api/v1/fms/devices/{bound_device.id}", json={"status": 1})
        response = await client.post(f"/api/v1/fms/devices/{bound_device.id}/unbind")
        assert response.status_code == 200
        assert response.json()["station_id"] is None
        assert response.json()["status"] == ResourceStatus.AVAILABLE

        records = (await client.get(f"/api/v1/fms/devices/{bound_device.id}/maintenance_records")).json()
        assert len(records) == 1
        assert records[0]["status"] == fms_models.MaintenanceStatus.COMPLETED.value
        assert records[0]["end_time"] is not None


#  =============================================================================
#  3. 정비 기록 수명 주기 테스트
#  =============================================================================
@pytest.mark.asyncio
class TestMaintenanceRecords:
    """사용 불가 전환과 정비 기록의 짝 맞춤 테스트 그룹"""

    async def test_downtime_cycle_produces_one_closed_record(self, client: AsyncClient, test_device: fms_models.Device):
        """(성공) 가용 → 불가 → 가용 전환 시 시작/종료 시각이 있는 완료 기록 1건"""
        down = await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"status": 1})
        assert down.status_code == 200
        up = await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"status": 0})
        assert up.status_code == 200

        records = (await client.get(f"/api/v1/fms/devices/{test_device.id}/maintenance_records")).json()
        assert len(records) == 1
        record = records[0]
        assert record["status"] == fms_models.MaintenanceStatus.COMPLETED.value
        assert record["start_time"] is not None
        assert record["end_time"] is not None
        assert "사용 가능 상태로 복구" in record["content"]

    async def test_repeated_unavailable_does_not_open_second_record(self, client: AsyncClient, test_device: fms_models.Device):
        """(성공) 이미 불가인 설비를 다시 불가로 바꿔도 기록은 1건"""
        await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"status": 1})
        await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"status": 1})

        records = (await client.get(f"/api/v1/fms/devices/{test_device.id}/maintenance_records")).json()
        assert len(records) == 1
        assert records[0]["status"] == fms_models.MaintenanceStatus.IN_PROGRESS.value

    async def test_two_cycles_produce_two_records(self, client: AsyncClient, test_device: fms_models.Device):
        """(성공) 두 번의 정지/복구는 완료 기록 2건, 최신순 정렬"""
        for _ in range(2):
            await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"status": 1})
            await client.put(f"/api/v1/fms/devices/{test_device.id}", json={"status": 0})

        records = (await client.get(f"/api/v1/fms/devices/{test_device.id}/maintenance_records")).json()
        assert len(records) == 2
        assert all(r["status"] == fms_models.MaintenanceStatus.COMPLETED.value for r in records)
        assert records[0]["id"] > records[1]["id"]

    async def test_records_for_missing_device(self, client: AsyncClient):
        """(실패) 존재하지 않는 설비의 정비 기록 조회 시 404"""
        response = await client.get("/api/v1/fms/devices/99999/maintenance_records")
        assert response.status_code == 404
