# app/domains/plant/routers.py

"""
'plant' 도메인 (공장 구조)의 API 엔드포인트를 정의하는 모듈입니다.

- 공장/생산라인의 생성·수정은 일반 CRUD이며, 삭제는 바인딩 해제가 연쇄되므로 엔진을 거칩니다.
- 스테이션의 생성·수정·삭제와 슬롯(스테이션/생산라인)으로의 일괄 바인딩은 엔진을 거칩니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.results import ErrorKind, http_error, resolve_result
from app.domains.fms import crud as fms_crud
from app.domains.fms import schemas as fms_schemas
from app.domains.hrm import crud as hrm_crud
from app.domains.hrm import schemas as hrm_schemas
from app.domains.shared.models import ResourceStatus
from app.domains.shared.schemas import BindRequest
from app.services.binding_service import ResourceBindingService

from . import crud as plant_crud
from . import schemas as plant_schemas


router = APIRouter(
    tags=["Plant Structure (공장 구조 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 공장 (Factory) 엔드포인트
# =============================================================================
@router.post("/factories", response_model=plant_schemas.FactoryResponse, status_code=status.HTTP_201_CREATED, summary="새 공장 생성")
async def create_factory(
    factory_create: plant_schemas.FactoryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 공장을 생성합니다.
    - `code`: 공장 코드 (선택, 고유)
    - `status`: 0(가용), 1(불가), 2(가동 중) 모두 직접 지정 가능
    """
    return await plant_crud.factory.create(db=db, obj_in=factory_create)


@router.get("/factories", response_model=List[plant_schemas.FactoryResponse], summary="공장 목록 조회")
async def read_factories(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await plant_crud.factory.get_multi(db, skip=skip, limit=limit)


@router.get("/factories/{factory_id}", response_model=plant_schemas.FactoryResponse, summary="특정 공장 조회")
async def read_factory(factory_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_factory = await plant_crud.factory.get(db, factory_id)
    if db_factory is None:
        raise http_error(ErrorKind.NOT_FOUND, "Factory not found")
    return db_factory


@router.put("/factories/{factory_id}", response_model=plant_schemas.FactoryResponse, summary="공장 정보 수정")
async def update_factory(
    factory_id: int,
    factory_update: plant_schemas.FactoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_factory = await plant_crud.factory.get(db, factory_id)
    if db_factory is None:
        raise http_error(ErrorKind.NOT_FOUND, "Factory not found")
    return await plant_crud.factory.update(db=db, db_obj=db_factory, obj_in=factory_update)


@router.delete("/factories/{factory_id}", response_model=plant_schemas.DeletedFactoryResponse, summary="공장 삭제")
async def delete_factory(
    factory_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """
    공장을 삭제합니다. 소속 생산라인도 모두 삭제되며,
    각 생산라인에 바인딩된 스테이션/설비/작업반은 해제됩니다.
    """
    return resolve_result(await service.delete_factory(factory_id))


# =============================================================================
# 2. 생산라인 (ProductionLine) 엔드포인트
# =============================================================================
@router.post("/production_lines", response_model=plant_schemas.ProductionLineResponse, status_code=status.HTTP_201_CREATED, summary="새 생산라인 생성")
async def create_production_line(
    line_create: plant_schemas.ProductionLineCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await plant_crud.production_line.create(db=db, obj_in=line_create)


@router.get("/production_lines", response_model=List[plant_schemas.ProductionLineResponse], summary="생산라인 목록 조회")
async def read_production_lines(
    skip: int = 0,
    limit: int = 100,
    factory_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await plant_crud.production_line.get_multi(db, skip=skip, limit=limit, factory_id=factory_id)


@router.get("/production_lines/{production_line_id}", response_model=plant_schemas.ProductionLineResponse, summary="특정 생산라인 조회")
async def read_production_line(production_line_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_line = await plant_crud.production_line.get(db, production_line_id)
    if db_line is None:
        raise http_error(ErrorKind.NOT_FOUND, "Production line not found")
    return db_line


@router.put("/production_lines/{production_line_id}", response_model=plant_schemas.ProductionLineResponse, summary="생산라인 정보 수정")
async def update_production_line(
    production_line_id: int,
    line_update: plant_schemas.ProductionLineUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_line = await plant_crud.production_line.get(db, production_line_id)
    if db_line is None:
        raise http_error(ErrorKind.NOT_FOUND, "Production line not found")
    return await plant_crud.production_line.update(db=db, db_obj=db_line, obj_in=line_update)


@router.delete("/production_lines/{production_line_id}", status_code=status.HTTP_204_NO_CONTENT, summary="생산라인 삭제")
async def delete_production_line(
    production_line_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """바인딩된 스테이션/설비/작업반을 해제하고, 생산라인 전용 달력 이벤트와 함께 삭제합니다."""
    resolve_result(await service.delete_production_line(production_line_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/production_lines/{production_line_id}/resources",
    response_model=plant_schemas.ProductionLineResourcesResponse,
    summary="생산라인에 바인딩된 자원 조회",
)
async def read_production_line_resources(production_line_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_line = await plant_crud.production_line.get(db, production_line_id)
    if db_line is None:
        raise http_error(ErrorKind.NOT_FOUND, "Production line not found")
    return plant_schemas.ProductionLineResourcesResponse(
        production_line=db_line,
        stations=await plant_crud.station.get_by_production_line(db, production_line_id=production_line_id),
        devices=await fms_crud.device.get_by_production_line(db, production_line_id=production_line_id),
        teams=await hrm_crud.team.get_by_production_line(db, production_line_id=production_line_id),
    )


@router.post(
    "/production_lines/{production_line_id}/stations/bind",
    response_model=List[plant_schemas.StationResponse],
    summary="생산라인에 스테이션 일괄 바인딩",
)
async def bind_stations_to_line(
    production_line_id: int,
    bind_request: BindRequest,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """모두 성공하거나 모두 실패합니다. 없는 ID가 있으면 404와 항목별 실패 목록을 반환합니다."""
    return resolve_result(await service.bind_stations_to_line(production_line_id, bind_request.resource_ids))


@router.post(
    "/production_lines/{production_line_id}/devices/bind",
    response_model=List[fms_schemas.DeviceResponse],
    summary="생산라인에 설비 일괄 바인딩",
)
async def bind_devices_to_line(
    production_line_id: int,
    bind_request: BindRequest,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.bind_devices_to_line(production_line_id, bind_request.resource_ids))


@router.post(
    "/production_lines/{production_line_id}/teams/bind",
    response_model=List[hrm_schemas.TeamResponse],
    summary="생산라인에 작업반 일괄 바인딩",
)
async def bind_teams_to_line(
    production_line_id: int,
    bind_request: BindRequest,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.bind_teams_to_line(production_line_id, bind_request.resource_ids))


# =============================================================================
# 3. 스테이션 (Station) 엔드포인트
# =============================================================================
@router.post("/stations", response_model=plant_schemas.StationResponse, status_code=status.HTTP_201_CREATED, summary="새 스테이션 생성")
async def create_station(
    station_create: plant_schemas.StationCreate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """`production_line_id`를 지정하면 해당 생산라인에 바인딩되어 점유(2) 상태로 생성됩니다."""
    return resolve_result(await service.create_station(station_create))


@router.get("/stations", response_model=List[plant_schemas.StationResponse], summary="스테이션 목록 조회")
async def read_stations(
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[ResourceStatus] = Query(None, alias="status"),
    production_line_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await plant_crud.station.get_multi(
        db, skip=skip, limit=limit, status=status_filter, production_line_id=production_line_id
    )


@router.get("/stations/{station_id}", response_model=plant_schemas.StationResponse, summary="특정 스테이션 조회")
async def read_station(station_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_station = await plant_crud.station.get(db, station_id)
    if db_station is None:
        raise http_error(ErrorKind.NOT_FOUND, "Station not found")
    return db_station


@router.put("/stations/{station_id}", response_model=plant_schemas.StationResponse, summary="스테이션 정보 수정")
async def update_station(
    station_id: int,
    station_update: plant_schemas.StationUpdate,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """바인딩된 스테이션을 `status=0`(가용)으로 바꾸면 428 confirm_required 응답이 반환됩니다."""
    return resolve_result(await service.update_station(station_id, station_update))


@router.delete("/stations/{station_id}", status_code=status.HTTP_204_NO_CONTENT, summary="스테이션 삭제")
async def delete_station(
    station_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    """바인딩된 설비와 작업반을 해제한 뒤 스테이션을 삭제합니다."""
    resolve_result(await service.delete_station(station_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/stations/{station_id}/unbind", response_model=plant_schemas.StationResponse, summary="스테이션 바인딩 해제")
async def unbind_station(
    station_id: int,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.unbind_station(station_id))


@router.get(
    "/stations/{station_id}/resources",
    response_model=plant_schemas.StationResourcesResponse,
    summary="스테이션에 바인딩된 자원 조회",
)
async def read_station_resources(station_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_station = await plant_crud.station.get(db, station_id)
    if db_station is None:
        raise http_error(ErrorKind.NOT_FOUND, "Station not found")
    return plant_schemas.StationResourcesResponse(
        station=db_station,
        devices=await fms_crud.device.get_by_station(db, station_id=station_id),
        teams=await hrm_crud.team.get_by_station(db, station_id=station_id),
    )


@router.post(
    "/stations/{station_id}/devices/bind",
    response_model=List[fms_schemas.DeviceResponse],
    summary="스테이션에 설비 일괄 바인딩",
)
async def bind_devices_to_station(
    station_id: int,
    bind_request: BindRequest,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.bind_devices_to_station(station_id, bind_request.resource_ids))


@router.post(
    "/stations/{station_id}/teams/bind",
    response_model=List[hrm_schemas.TeamResponse],
    summary="스테이션에 작업반 일괄 바인딩",
)
async def bind_teams_to_station(
    station_id: int,
    bind_request: BindRequest,
    service: ResourceBindingService = Depends(deps.get_binding_service),
):
    return resolve_result(await service.bind_teams_to_station(station_id, bind_request.resource_ids))
