# app/domains/hrm/routers.py

"""
'hrm' 도메인 (작업반/작업자)의 API 엔드포인트를 정의하는 모듈입니다.

작업반의 바인딩/구성원 변경과 작업자의 상태 변경은 자원 바인딩 엔진을 거칩니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.results import ErrorKind, http_error, resolve_result
from app.domains.shared.models import ResourceStatus
from app.domains.shared.schemas import BindRequest
from app.services.binding_service import ResourceBindingService

from . import crud as hrm_crud
from . import schemas as hrm_schemas


router = APIRouter(
    tags=["Human Resources (작업반/작업자 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 작업반 (Team) 엔드포인트
# =============================================================================
@router.post("/teams", response_model=hrm_schemas.TeamResponse, status_code=status.HTTP_201_CREATED, summary="새 작업반 생성")
async def create_team(
    team_create: hrm_schemas.TeamCreate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    새로운 작업반을 생성합니다.
    - `station_id` / `production_line_id`: 둘 중 하나만 지정 가능. 지정하면 점유(2) 상태가 됩니다.
    - `member_ids`: 구성원. 지정한 작업자는 이 작업반 소속 및 점유 상태가 됩니다.
    - `leader_id`: 다른 작업반을 이미 맡은 작업자면 409.
    """
    return resolve_result(await service.create_team(team_create))


@router.get("/teams", response_model=List[hrm_schemas.TeamResponse], summary="작업반 목록 조회")
async def read_teams(
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[ResourceStatus] = Query(None, alias="status"),
    station_id: Optional[int] = None,
    production_line_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await hrm_crud.team.get_multi(
        db, skip=skip, limit=limit,
        status=status_filter, station_id=station_id, production_line_id=production_line_id,
    )


@router.get("/teams/{team_id}", response_model=hrm_schemas.TeamResponse, summary="특정 작업반 조회")
async def read_team(team_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_team = await hrm_crud.team.get(db, team_id)
    if db_team is None:
        raise http_error(ErrorKind.NOT_FOUND, "Team not found")
    return db_team


@router.put("/teams/{team_id}", response_model=hrm_schemas.TeamResponse, summary="작업반 정보 수정")
async def update_team(
    team_id: int,
    team_update: hrm_schemas.TeamUpdate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    작업반 정보를 수정합니다.
    - `production_line_id`/`station_id`에 값을 주면 `status`와 무관하게 점유(2)가 됩니다.
    - 현재 바인딩 필드를 `null`로 주면 바인딩이 해제되고, `status`를 주지 않으면 가용(0)이 됩니다.
    - 바인딩을 유지한 채 `status=0`을 주면 428 confirm_required 응답이 반환됩니다.
    """
    return resolve_result(await service.update_team(team_id, team_update))


@router.delete("/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT, summary="작업반 삭제")
async def delete_team(
    team_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """구성원을 모두 해제(소속 없음, 가용)한 뒤 작업반을 삭제합니다."""
    resolve_result(await service.delete_team(team_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/teams/{team_id}/unbind", response_model=hrm_schemas.TeamResponse, summary="작업반 바인딩 해제")
async def unbind_team(
    team_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.unbind_team(team_id))


@router.get("/teams/{team_id}/members", response_model=List[hrm_schemas.StaffResponse], summary="작업반 구성원 조회")
async def read_team_members(team_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if await hrm_crud.team.get(db, team_id) is None:
        raise http_error(ErrorKind.NOT_FOUND, "Team not found")
    return await hrm_crud.staff.get_members(db, team_id=team_id)


@router.put("/teams/{team_id}/members", response_model=List[hrm_schemas.StaffResponse], summary="작업반 구성원 교체")
async def replace_team_members(
    team_id: int,
    members_update: hrm_schemas.TeamMembersUpdate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    구성원을 교체합니다. 빠진 작업자는 소속 없음/가용, 새 작업자는 소속/점유가 됩니다.
    존재하지 않는 작업자 ID가 하나라도 있으면 아무것도 변경되지 않습니다.
    """
    return resolve_result(await service.assign_team_members(team_id, members_update.member_ids))


@router.post("/teams/{team_id}/members/bind", response_model=List[hrm_schemas.StaffResponse], summary="작업반 구성원 추가")
async def bind_team_members(
    team_id: int,
    bind_request: BindRequest,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """기존 구성원을 유지한 채 작업자를 추가합니다. (전부 성공 또는 전부 실패)"""
    return resolve_result(await service.bind_staffs_to_team(team_id, bind_request.resource_ids))


# =============================================================================
# 2. 작업자 (Staff) 엔드포인트
# =============================================================================
@router.post("/staffs", response_model=hrm_schemas.StaffResponse, status_code=status.HTTP_201_CREATED, summary="새 작업자 생성")
async def create_staff(
    staff_create: hrm_schemas.StaffCreate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.create_staff(staff_create))


@router.get("/staffs", response_model=List[hrm_schemas.StaffResponse], summary="작업자 목록 조회")
async def read_staffs(
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[ResourceStatus] = Query(None, alias="status"),
    team_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await hrm_crud.staff.get_multi(db, skip=skip, limit=limit, status=status_filter, team_id=team_id)


@router.get("/staffs/available", response_model=List[hrm_schemas.StaffResponse], summary="배정 가능한 작업자 조회")
async def read_available_staffs(
    team_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    작업반에 배정 가능한 작업자를 조회합니다.
    사용 불가가 아니고, 소속이 없거나 `team_id` 작업반 소속인 작업자입니다.
    """
    return await hrm_crud.staff.get_available(db, team_id=team_id)


@router.get("/staffs/{staff_id}", response_model=hrm_schemas.StaffResponse, summary="특정 작업자 조회")
async def read_staff(staff_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_staff = await hrm_crud.staff.get(db, staff_id)
    if db_staff is None:
        raise http_error(ErrorKind.NOT_FOUND, "Staff not found")
    return db_staff


@router.put("/staffs/{staff_id}", response_model=hrm_schemas.StaffResponse, summary="작업자 정보 수정")
async def update_staff(
    staff_id: int,
    staff_update: hrm_schemas.StaffUpdate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    작업자 정보를 수정합니다.
    작업반 소속 작업자를 `status=0`(가용)으로 바꾸면 428 confirm_required 응답이 반환되며,
    `force_unbind=true`로 재요청하면 작업반에서 탈퇴합니다.
    """
    return resolve_result(await service.update_staff(staff_id, staff_update))


@router.delete("/staffs/{staff_id}", status_code=status.HTTP_204_NO_CONTENT, summary="작업자 삭제")
async def delete_staff(
    staff_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """작업반장이었다면 해당 작업반의 작업반장을 비운 뒤 삭제합니다."""
    resolve_result(await service.delete_staff(staff_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/staffs/{staff_id}/unbind", response_model=hrm_schemas.StaffResponse, summary="작업반 탈퇴")
async def unbind_staff(
    staff_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.unbind_staff(staff_id))
