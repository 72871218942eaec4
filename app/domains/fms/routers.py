# app/domains/fms/routers.py

"""
'fms' 도메인 (설비 관리)의 API 엔드포인트를 정의하는 모듈입니다.

설비의 생성/수정/삭제와 바인딩 해제는 자원 바인딩 엔진(ResourceBindingService)을 거치며,
엔진 결과(Ok / ConfirmRequired / Err)는 resolve_result()로 HTTP 응답에 매핑됩니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.results import ErrorKind, http_error, resolve_result
from app.domains.shared.models import ResourceStatus
from app.services.binding_service import ResourceBindingService

from . import crud as fms_crud
from . import schemas as fms_schemas


router = APIRouter(
    tags=["Facility Management (설비 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 설비 (Device) 엔드포인트
# =============================================================================
@router.post("/devices", response_model=fms_schemas.DeviceResponse, status_code=status.HTTP_201_CREATED, summary="새 설비 생성")
async def create_device(
    device_create: fms_schemas.DeviceCreate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    새로운 설비를 생성합니다.
    - `status`: 0(가용) 또는 1(불가). 1로 생성하면 초기 정비 기록이 함께 열립니다.
    """
    return resolve_result(await service.create_device(device_create))


@router.get("/devices", response_model=List[fms_schemas.DeviceResponse], summary="설비 목록 조회")
async def read_devices(
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[ResourceStatus] = Query(None, alias="status"),
    station_id: Optional[int] = None,
    production_line_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await fms_crud.device.get_multi(
        db, skip=skip, limit=limit,
        status=status_filter, station_id=station_id, production_line_id=production_line_id,
    )


@router.get("/devices/{device_id}", response_model=fms_schemas.DeviceResponse, summary="특정 설비 조회")
async def read_device(device_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_device = await fms_crud.device.get(db, device_id)
    if db_device is None:
        raise http_error(ErrorKind.NOT_FOUND, "Device not found")
    return db_device


@router.put("/devices/{device_id}", response_model=fms_schemas.DeviceResponse, summary="설비 정보 수정")
async def update_device(
    device_id: int,
    device_update: fms_schemas.DeviceUpdate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    설비 정보를 수정합니다.
    - 바인딩된 설비를 `status=0`(가용)으로 바꾸면 428 confirm_required 응답이 반환됩니다.
      `force_unbind=true`로 재요청하면 바인딩이 해제되고 가용 상태가 됩니다.
    - `status=1`(불가)은 바인딩과 무관하게 허용되며 정비 기록이 열립니다.
    """
    return resolve_result(await service.update_device(device_id, device_update))


@router.delete("/devices/{device_id}", status_code=status.HTTP_204_NO_CONTENT, summary="설비 삭제")
async def delete_device(
    device_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """설비와 설비의 정비 기록을 함께 삭제합니다."""
    resolve_result(await service.delete_device(device_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/devices/{device_id}/unbind", response_model=fms_schemas.DeviceResponse, summary="설비 바인딩 해제")
async def unbind_device(
    device_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """설비를 스테이션/생산라인에서 해제하고 가용 상태로 되돌립니다."""
    return resolve_result(await service.unbind_device(device_id))


# =============================================================================
# 2. 정비 기록 (MaintenanceRecord) 엔드포인트
# =============================================================================
@router.get(
    "/devices/{device_id}/maintenance_records",
    response_model=List[fms_schemas.MaintenanceRecordResponse],
    summary="설비 정비 기록 조회",
)
async def read_maintenance_records(device_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """설비의 정비 기록을 최신순으로 조회합니다."""
    if await fms_crud.device.get(db, device_id) is None:
        raise http_error(ErrorKind.NOT_FOUND, "Device not found")
    return await fms_crud.maintenance_record.get_by_device(db, device_id=device_id)
