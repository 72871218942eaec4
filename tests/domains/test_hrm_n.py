# tests/domains/test_hrm_n.py

"""
'hrm' 도메인 (작업반/작업자) API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 작업반 생성/수정 시 바인딩 우선 규칙과 구성원 연쇄 반영 검증.
- 작업반장 유일성(409) 검증.
- 작업반 삭제 시 구성원 해제 검증.
- 작업자 상태 변경과 작업반 탈퇴 확인(428) 흐름 검증.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.hrm import models as hrm_models
from app.domains.plant import models as plant_models
from app.domains.shared.models import ResourceStatus


#  =============================================================================
#  1. 작업반 (teams) 테스트
#  =============================================================================
@pytest.mark.asyncio
class TestTeam:
    """작업반 API 테스트 그룹"""

    async def test_team_lifecycle_with_members(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_production_line: plant_models.ProductionLine,
        staff_factory,
    ):
        """(성공) 구성원 추가 → 생산라인 바인딩(status 무시) → 삭제 시 구성원 해제"""
        s1 = await staff_factory("E-001", "김철수")
        s2 = await staff_factory("E-002", "이영희")

        created = await client.post("/api/v1/hrm/teams", json={"code": "T-NEW", "name": "조립반"})
        assert created.status_code == 201
        team_id = created.json()["id"]
        assert created.json()["status"] == ResourceStatus.AVAILABLE

        members = await client.put(f"/api/v1/hrm/teams/{team_id}/members", json={"member_ids": [s1.id, s2.id]})
        assert members.status_code == 200
        assert all(m["status"] == ResourceStatus.OCCUPIED for m in members.json())
        assert all(m["team_id"] == team_id for m in members.json())

        updated = await client.put(
            f"/api/v1/hrm/teams/{team_id}",
            json={"production_line_id": test_production_line.id, "status": 0},
        )
        assert updated.status_code == 200
        assert updated.json()["status"] == ResourceStatus.OCCUPIED
        assert updated.json()["production_line_id"] == test_production_line.id

        deleted = await client.delete(f"/api/v1/hrm/teams/{team_id}")
        assert deleted.status_code == 204

        for staff in (s1, s2):
            await db_session.refresh(staff)
            assert staff.team_id is None
            assert staff.status == ResourceStatus.AVAILABLE

    async def test_create_team_bound_with_members(
        self, client: AsyncClient, test_station: plant_models.Station, staff_factory
    ):
        """(성공) 스테이션과 구성원을 지정해 생성하면 작업반/구성원 모두 점유"""
        staff = await staff_factory("E-010")
        response = await client.post(
            "/api/v1/hrm/teams",
            json={"code": "T-ST", "name": "용접반", "station_id": test_station.id, "member_ids": [staff.id]},
        )
        assert response.status_code == 201
        team = response.json()
        assert team["status"] == ResourceStatus.OCCUPIED
        assert team["station_id"] == test_station.id

        members = await client.get(f"/api/v1/hrm/teams/{team['id']}/members")
        assert [m["id"] for m in members.json()] == [staff.id]
        assert members.json()[0]["status"] == ResourceStatus.OCCUPIED

    async def test_create_team_with_both_slots_fails(
        self, client: AsyncClient, test_station: plant_models.Station, test_production_line: plant_models.ProductionLine
    ):
        """(실패) 스테이션과 생산라인을 동시에 지정하면 400"""
        response = await client.post(
            "/api/v1/hrm/teams",
            json={
                "code": "T-BOTH", "name": "이중 바인딩",
                "station_id": test_station.id, "production_line_id": test_production_line.id,
            },
        )
        assert response.status_code == 400

    async def test_create_team_with_missing_member_fails(self, client: AsyncClient, staff_factory):
        """(실패) 없는 구성원이 있으면 404와 실패 목록, 작업반도 생성되지 않음"""
        staff = await staff_factory("E-020")
        response = await client.post(
            "/api/v1/hrm/teams", json={"code": "T-MISS", "name": "누락반", "member_ids": [staff.id, 99999]}
        )
        assert response.status_code == 404
        assert response.json()["detail"]["failures"] == [{"id": 99999, "reason": "not found"}]

        teams = await client.get("/api/v1/hrm/teams")
        assert teams.json() == []

    async def test_create_duplicate_team_code_fails(self, client: AsyncClient, test_team: hrm_models.Team):
        """(실패) 중복된 작업반 코드로 생성 시 409"""
        response = await client.post("/api/v1/hrm/teams", json={"code": test_team.code, "name": "중복반"})
        assert response.status_code == 409

    async def test_leader_can_lead_only_one_team(self, client: AsyncClient, test_team: hrm_models.Team, staff_factory):
        """(실패) 이미 다른 작업반을 맡은 작업자를 작업반장으로 지정 시 409"""
        leader = await staff_factory("E-100", "박반장")
        first = await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"leader_id": leader.id})
        assert first.status_code == 200
        assert first.json()["leader_id"] == leader.id

        response = await client.post(
            "/api/v1/hrm/teams", json={"code": "T-02", "name": "2반", "leader_id": leader.id}
        )
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "CONFLICT"

    async def test_missing_leader_fails(self, client: AsyncClient):
        """(실패) 존재하지 않는 작업반장 지정 시 404"""
        response = await client.post("/api/v1/hrm/teams", json={"code": "T-L", "name": "반", "leader_id": 99999})
        assert response.status_code == 404

    async def test_clearing_binding_without_status_makes_team_available(
        self, client: AsyncClient, test_production_line: plant_models.ProductionLine, test_team: hrm_models.Team
    ):
        """(성공) 현재 바인딩 필드를 null로 주면 확인 없이 해제되고 가용"""
        await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"production_line_id": test_production_line.id})

        response = await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"production_line_id": None})
        assert response.status_code == 200
        assert response.json()["production_line_id"] is None
        assert response.json()["status"] == ResourceStatus.AVAILABLE

    async def test_clearing_binding_with_occupied_status_fails(
        self, client: AsyncClient, test_production_line: plant_models.ProductionLine, test_team: hrm_models.Team
    ):
        """(실패) 바인딩을 해제하면서 점유 상태를 요구하면 400"""
        await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"production_line_id": test_production_line.id})

        response = await client.put(
            f"/api/v1/hrm/teams/{test_team.id}", json={"production_line_id": None, "status": 2}
        )
        assert response.status_code == 400

    async def test_available_on_bound_team_requires_confirm(
        self, client: AsyncClient, test_production_line: plant_models.ProductionLine, test_team: hrm_models.Team
    ):
        """(확인 필요) 바인딩을 유지한 채 가용 요청 시 428, force_unbind로 해제"""
        await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"production_line_id": test_production_line.id})

        response = await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"status": 0})
        assert response.status_code == 428
        assert response.json()["slot_kind"] == "ProductionLine"
        assert response.json()["slot_name"] == test_production_line.name

        confirmed = await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"status": 0, "force_unbind": True})
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == ResourceStatus.AVAILABLE
        assert confirmed.json()["production_line_id"] is None

    async def test_rebinding_team_moves_slot(
        self,
        client: AsyncClient,
        test_production_line: plant_models.ProductionLine,
        test_station: plant_models.Station,
        test_team: hrm_models.Team,
    ):
        """(성공) 생산라인에 바인딩된 작업반을 스테이션으로 옮기면 생산라인 바인딩은 해제"""
        await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"production_line_id": test_production_line.id})
        response = await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"station_id": test_station.id})
        assert response.status_code == 200
        assert response.json()["station_id"] == test_station.id
        assert response.json()["production_line_id"] is None
        assert response.json()["status"] == ResourceStatus.OCCUPIED

    async def test_replace_members_releases_removed_staff(
        self, client: AsyncClient, db_session: AsyncSession, test_team: hrm_models.Team, staff_factory
    ):
        """(성공) 구성원 교체 시 빠진 작업자는 해제되고 새 작업자는 점유"""
        s1 = await staff_factory("E-201")
        s2 = await staff_factory("E-202")
        await client.put(f"/api/v1/hrm/teams/{test_team.id}/members", json={"member_ids": [s1.id]})

        response = await client.put(f"/api/v1/hrm/teams/{test_team.id}/members", json={"member_ids": [s2.id]})
        assert response.status_code == 200
        assert [m["id"] for m in response.json()] == [s2.id]

        await db_session.refresh(s1)
        assert s1.team_id is None
        assert s1.status == ResourceStatus.AVAILABLE

    async def test_bind_members_keeps_existing(self, client: AsyncClient, test_team: hrm_models.Team, staff_factory):
        """(성공) 구성원 추가는 기존 구성원을 유지"""
        s1 = await staff_factory("E-301")
        s2 = await staff_factory("E-302")
        await client.post(f"/api/v1/hrm/teams/{test_team.id}/members/bind", json={"resource_ids": [s1.id]})
        await client.post(f"/api/v1/hrm/teams/{test_team.id}/members/bind", json={"resource_ids": [s2.id]})

        members = await client.get(f"/api/v1/hrm/teams/{test_team.id}/members")
        assert {m["id"] for m in members.json()} == {s1.id, s2.id}

    async def test_members_of_missing_team(self, client: AsyncClient):
        """(실패) 존재하지 않는 작업반 구성원 조회 시 404"""
        response = await client.get("/api/v1/hrm/teams/99999/members")
        assert response.status_code == 404


#  =============================================================================
#  2. 작업자 (staffs) 테스트
#  =============================================================================
@pytest.mark.asyncio
class TestStaff:
    """작업자 API 테스트 그룹"""

    async def test_create_staff(self, client: AsyncClient):
        """(성공) 새 작업자 생성"""
        response = await client.post("/api/v1/hrm/staffs", json={"code": "E-NEW", "name": "최신입", "level": 1})
        assert response.status_code == 201
        assert response.json()["status"] == ResourceStatus.AVAILABLE
        assert response.json()["team_id"] is None

    async def test_create_occupied_staff_fails(self, client: AsyncClient):
        """(실패) 점유 상태로 생성 시 400"""
        response = await client.post("/api/v1/hrm/staffs", json={"code": "E-OCC", "name": "점유", "status": 2})
        assert response.status_code == 400

    async def test_create_duplicate_staff_code_fails(self, client: AsyncClient, staff_factory):
        """(실패) 중복된 사번으로 생성 시 409"""
        await staff_factory("E-DUP")
        response = await client.post("/api/v1/hrm/staffs", json={"code": "E-DUP", "name": "중복"})
        assert response.status_code == 409

    async def test_available_on_team_member_requires_confirm(
        self, client: AsyncClient, test_team: hrm_models.Team, staff_factory
    ):
        """(확인 필요) 소속 작업자를 가용으로 바꾸면 428, force_unbind로 탈퇴"""
        staff = await staff_factory("E-400")
        await client.put(f"/api/v1/hrm/teams/{test_team.id}/members", json={"member_ids": [staff.id]})

        response = await client.put(f"/api/v1/hrm/staffs/{staff.id}", json={"status": 0})
        assert response.status_code == 428
        assert response.json()["slot_kind"] == "Team"
        assert response.json()["slot_name"] == test_team.name

        confirmed = await client.put(f"/api/v1/hrm/staffs/{staff.id}", json={"status": 0, "force_unbind": True})
        assert confirmed.status_code == 200
        assert confirmed.json()["team_id"] is None
        assert confirmed.json()["status"] == ResourceStatus.AVAILABLE

    async def test_unavailable_member_stays_in_team(self, client: AsyncClient, test_team: hrm_models.Team, staff_factory):
        """(성공) 소속 작업자를 불가로 바꿔도 소속은 유지"""
        staff = await staff_factory("E-401")
        await client.put(f"/api/v1/hrm/teams/{test_team.id}/members", json={"member_ids": [staff.id]})

        response = await client.put(f"/api/v1/hrm/staffs/{staff.id}", json={"status": 1})
        assert response.status_code == 200
        assert response.json()["status"] == ResourceStatus.UNAVAILABLE
        assert response.json()["team_id"] == test_team.id

    async def test_unbind_staff(self, client: AsyncClient, test_team: hrm_models.Team, staff_factory):
        """(성공) 작업반 탈퇴"""
        staff = await staff_factory("E-402")
        await client.put(f"/api/v1/hrm/teams/{test_team.id}/members", json={"member_ids": [staff.id]})

        response = await client.post(f"/api/v1/hrm/staffs/{staff.id}/unbind")
        assert response.status_code == 200
        assert response.json()["team_id"] is None
        assert response.json()["status"] == ResourceStatus.AVAILABLE

    async def test_read_available_staffs(self, client: AsyncClient, test_team: hrm_models.Team, staff_factory):
        """(성공) 배정 가능한 작업자: 불가 제외, 무소속 또는 지정 작업반 소속"""
        free = await staff_factory("E-501")
        await staff_factory("E-502", status=ResourceStatus.UNAVAILABLE.value)
        member = await staff_factory("E-503")
        await client.put(f"/api/v1/hrm/teams/{test_team.id}/members", json={"member_ids": [member.id]})

        unassigned = await client.get("/api/v1/hrm/staffs/available")
        assert [s["id"] for s in unassigned.json()] == [free.id]

        with_team = await client.get("/api/v1/hrm/staffs/available", params={"team_id": test_team.id})
        assert [s["id"] for s in with_team.json()] == [free.id, member.id]

    async def test_delete_leader_clears_team_leader(
        self, client: AsyncClient, db_session: AsyncSession, test_team: hrm_models.Team, staff_factory
    ):
        """(성공) 작업반장을 삭제하면 작업반의 leader_id가 비워짐"""
        leader = await staff_factory("E-600")
        await client.put(f"/api/v1/hrm/teams/{test_team.id}", json={"leader_id": leader.id})

        response = await client.delete(f"/api/v1/hrm/staffs/{leader.id}")
        assert response.status_code == 204

        await db_session.refresh(test_team)
        assert test_team.leader_id is None

    async def test_read_staff_not_found(self, client: AsyncClient):
        """(실패) 존재하지 않는 작업자 조회 시 404"""
        response = await client.get("/api/v1/hrm/staffs/99999")
        assert response.status_code == 404
