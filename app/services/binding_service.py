# app/services/binding_service.py

"""
자원 바인딩 상태 기계(Resource Binding State Machine) 서비스 모듈입니다.

설비, 스테이션, 작업반, 작업자의 3상태(가용/불가/점유)를 상위 슬롯(스테이션, 생산라인, 작업반)
바인딩과 일관되게 유지합니다.

- 점유(OCCUPIED)는 바인딩이 있을 때만 가질 수 있으며, bind로만 진입합니다.
- 가용(AVAILABLE)은 바인딩이 없을 때만 가질 수 있습니다. 바인딩된 자원을 가용으로 바꾸려면
  ConfirmRequired로 한 번 되묻고, force_unbind=true 재요청 시 같은 트랜잭션에서 바인딩을 해제합니다.
- 불가(UNAVAILABLE)는 바인딩과 무관하게 언제든 지정할 수 있으며, 설비는 정비 기록이 함께 열립니다.
- 작업반 구성원 변경은 작업자의 team_id와 상태에 연쇄 반영됩니다.

각 공개 메서드는 하나의 원자적 작업입니다. 검증(VALIDATION_ERROR, NOT_FOUND, CONFLICT 사전 확인,
CONFIRM_REQUIRED)은 ORM 객체를 변경하기 전에 끝나며, 커밋 실패 시 전체가 롤백됩니다.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.results import ConfirmRequired, Err, ErrorKind, Ok, Result, not_found
from app.domains.cal import crud as cal_crud
from app.domains.fms import crud as fms_crud
from app.domains.fms import models as fms_models
from app.domains.fms import schemas as fms_schemas
from app.domains.hrm import crud as hrm_crud
from app.domains.hrm import models as hrm_models
from app.domains.hrm import schemas as hrm_schemas
from app.domains.plant import crud as plant_crud
from app.domains.plant import models as plant_models
from app.domains.plant import schemas as plant_schemas
from app.domains.shared.models import ResourceKind, ResourceStatus
from app.services.maintenance_service import MaintenanceLifecycle

logger = logging.getLogger(__name__)


# 바인딩 가능한 자원 종류별 바인딩 필드 (여러 개면 상호 배타)
BINDING_FIELDS: Dict[ResourceKind, Tuple[str, ...]] = {
    ResourceKind.DEVICE: ("station_id", "production_line_id"),
    ResourceKind.TEAM: ("station_id", "production_line_id"),
    ResourceKind.STATION: ("production_line_id",),
    ResourceKind.STAFF: ("team_id",),
}

SLOT_KINDS: Dict[str, ResourceKind] = {
    "station_id": ResourceKind.STATION,
    "production_line_id": ResourceKind.PRODUCTION_LINE,
    "team_id": ResourceKind.TEAM,
}

RESOURCE_CRUD = {
    ResourceKind.DEVICE: fms_crud.device,
    ResourceKind.STATION: plant_crud.station,
    ResourceKind.TEAM: hrm_crud.team,
    ResourceKind.STAFF: hrm_crud.staff,
    ResourceKind.PRODUCTION_LINE: plant_crud.production_line,
    ResourceKind.FACTORY: plant_crud.factory,
}

# 슬롯 소유자: 바인딩되지 않으므로 3상태를 직접 지정합니다.
DIRECT_STATUS_KINDS = (ResourceKind.FACTORY, ResourceKind.PRODUCTION_LINE)

# 수정 요청에서 null로 덮어쓸 수 없는 컬럼
REQUIRED_FIELDS: Dict[ResourceKind, Tuple[str, ...]] = {
    ResourceKind.DEVICE: ("code", "name", "type"),
    ResourceKind.STATION: ("code", "name"),
    ResourceKind.TEAM: ("code", "name", "shift_type"),
    ResourceKind.STAFF: ("code", "name"),
}


def bound_slot(resource: SQLModel, kind: ResourceKind) -> Optional[Tuple[str, int]]:
    """현재 바인딩된 (필드명, 슬롯 ID)를 반환합니다. 바인딩이 없으면 None."""
    for field in BINDING_FIELDS.get(kind, ()):
        value = getattr(resource, field)
        if value is not None:
            return field, value
    return None


def column_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """스키마 Enum 값을 DB 컬럼 값으로 변환합니다."""
    return {key: value.value if isinstance(value, Enum) else value for key, value in data.items()}


def unique_ids(ids: Iterable[int]) -> List[int]:
    return list(dict.fromkeys(ids))


class ResourceBindingService:
    """
    자원 바인딩 엔진. 요청마다 세션을 주입받아 생성합니다.
    모든 공개 메서드는 Ok / ConfirmRequired / Err 중 하나를 반환합니다.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.maintenance = MaintenanceLifecycle(db)

    # =========================================================================
    # 트랜잭션 헬퍼
    # =========================================================================
    async def _guard(self, operation: str, step: Callable[[], Awaitable[None]]) -> Optional[Err]:
        try:
            await step()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("%s: 제약 조건 위반으로 롤백되었습니다 (%s)", operation, e.orig)
            return Err(ErrorKind.CONFLICT, "The change conflicts with an existing record (duplicate code or reference).")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("%s: 데이터베이스 오류로 롤백되었습니다", operation)
            return Err(ErrorKind.INTERNAL, f"{operation} failed due to a database error.")
        return None

    async def _flush(self, operation: str) -> Optional[Err]:
        return await self._guard(operation, self.db.flush)

    async def _commit(self, operation: str, *instances: SQLModel) -> Optional[Err]:
        err = await self._guard(operation, self.db.commit)
        if err is not None:
            return err
        # updated_at 등 서버 생성 값은 커밋 후 다시 읽어야 합니다.
        for instance in instances:
            await self.db.refresh(instance)
        return None

    # =========================================================================
    # 조회/검증 헬퍼 (ORM 객체를 변경하지 않음)
    # =========================================================================
    async def _get(self, kind: ResourceKind, resource_id: int) -> Optional[SQLModel]:
        return await RESOURCE_CRUD[kind].get(self.db, resource_id)

    async def _load_all(self, kind: ResourceKind, ids: Iterable[int]) -> Tuple[List[SQLModel], Optional[Err]]:
        """ID 목록의 자원을 요청 순서대로 조회합니다. 하나라도 없으면 항목별 실패 목록과 함께 NOT_FOUND."""
        ids = unique_ids(ids)
        found = {resource.id: resource for resource in await RESOURCE_CRUD[kind].get_many(self.db, ids)}
        failures = [{"id": resource_id, "reason": "not found"} for resource_id in ids if resource_id not in found]
        if failures:
            return [], Err(
                ErrorKind.NOT_FOUND,
                f"{len(failures)} of {len(ids)} {kind.value} resources not found",
                failures,
            )
        return [found[resource_id] for resource_id in ids], None

    async def _check_code(self, kind: ResourceKind, code: Optional[str], exclude_id: Optional[int] = None) -> Optional[Err]:
        if not code:
            return None
        existing = await RESOURCE_CRUD[kind].get_by_code(self.db, code=code)
        if existing is not None and existing.id != exclude_id:
            logger.warning("%s 코드 중복: %s", kind.value, code)
            return Err(ErrorKind.CONFLICT, f"{kind.value} with code '{code}' already exists.")
        return None

    async def _check_slot(self, field: str, slot_id: int) -> Optional[Err]:
        slot_kind = SLOT_KINDS[field]
        if await self._get(slot_kind, slot_id) is None:
            return not_found(slot_kind.value, slot_id)
        return None

    async def _check_leader(self, leader_id: Optional[int], team_id: Optional[int] = None) -> Optional[Err]:
        """작업반장은 존재하는 작업자여야 하며, 다른 작업반을 이미 맡고 있으면 안 됩니다."""
        if leader_id is None:
            return None
        if await hrm_crud.staff.get(self.db, leader_id) is None:
            return not_found(ResourceKind.STAFF.value, leader_id)
        led_team = await hrm_crud.team.get_by_leader(self.db, leader_id=leader_id)
        if led_team is not None and led_team.id != team_id:
            return Err(ErrorKind.CONFLICT, f"Staff {leader_id} already leads team '{led_team.name}'.")
        return None

    async def _check_status_change(
        self,
        kind: ResourceKind,
        resource: SQLModel,
        target: Optional[ResourceStatus],
        force_unbind: bool = False,
    ) -> Optional[Result[Any]]:
        """
        직접 상태 변경 요청을 검사합니다. 허용되면 None을 반환합니다.
        - OCCUPIED: 항상 거부 (bind로만 진입)
        - AVAILABLE: 바인딩이 있으면 force_unbind 없이는 ConfirmRequired
        - UNAVAILABLE: 항상 허용
        """
        if target is None or kind in DIRECT_STATUS_KINDS:
            return None
        slot = bound_slot(resource, kind)
        if target == ResourceStatus.OCCUPIED:
            return Err(
                ErrorKind.VALIDATION_ERROR,
                f"{kind.value} can only become OCCUPIED by binding it to a slot.",
            )
        if target == ResourceStatus.AVAILABLE and slot is not None and not force_unbind:
            field, slot_id = slot
            slot_kind = SLOT_KINDS[field]
            slot_obj = await self._get(slot_kind, slot_id)
            slot_name = slot_obj.name if slot_obj is not None else f"ID: {slot_id}"
            logger.info("%s %s 가용 전환 확인 필요 (바인딩: %s '%s')", kind.value, resource.id, slot_kind.value, slot_name)
            return ConfirmRequired(
                slot_kind=slot_kind.value,
                slot_name=slot_name,
                message=(
                    f"{kind.value} is bound to {slot_kind.value} '{slot_name}'. "
                    "Retry with force_unbind=true to unbind it and make it available."
                ),
            )
        return None

    # =========================================================================
    # 상태 전이 헬퍼 (검증이 끝난 뒤에만 호출)
    # =========================================================================
    async def _apply_status(self, kind: ResourceKind, resource: SQLModel, target: int) -> None:
        old_status = resource.status
        resource.status = int(target)
        self.db.add(resource)
        if kind == ResourceKind.DEVICE and old_status != resource.status:
            await self.maintenance.on_status_change(resource, old_status, resource.status)

    def _detach(self, kind: ResourceKind, resource: SQLModel) -> None:
        for field in BINDING_FIELDS[kind]:
            setattr(resource, field, None)
        self.db.add(resource)

    async def _attach(self, kind: ResourceKind, resource: SQLModel, field: str, slot_id: int) -> None:
        """바인딩 필드를 설정하고(다른 바인딩 필드는 해제) 점유 상태로 전환합니다."""
        for other in BINDING_FIELDS[kind]:
            setattr(resource, other, slot_id if other == field else None)
        await self._apply_status(kind, resource, ResourceStatus.OCCUPIED)

    async def _release(self, kind: ResourceKind, resource: SQLModel) -> None:
        """바인딩을 해제하고 가용 상태로 되돌립니다. 설비의 진행 중 정비 기록은 함께 닫힙니다."""
        self._detach(kind, resource)
        await self._apply_status(kind, resource, ResourceStatus.AVAILABLE)

    async def _change_status(self, kind: ResourceKind, resource: SQLModel, target: Optional[ResourceStatus]) -> None:
        """_check_status_change를 통과한 직접 상태 변경을 적용합니다."""
        if target is None:
            return
        if target == ResourceStatus.AVAILABLE and bound_slot(resource, kind) is not None:
            self._detach(kind, resource)
        await self._apply_status(kind, resource, target)

    def _assign(self, kind: ResourceKind, resource: SQLModel, data: Dict[str, Any]) -> None:
        required = REQUIRED_FIELDS.get(kind, ())
        for key, value in column_values(data).items():
            if value is None and key in required:
                continue
            setattr(resource, key, value)
        self.db.add(resource)

    async def _replace_members(self, team: hrm_models.Team, members: List[hrm_models.Staff]) -> None:
        """구성원을 교체합니다. 빠진 작업자는 해제, 새 작업자는 소속 및 점유 처리합니다."""
        keep_ids = {staff.id for staff in members}
        for staff in await hrm_crud.staff.get_members(self.db, team_id=team.id):
            if staff.id not in keep_ids:
                await self._release(ResourceKind.STAFF, staff)
        for staff in members:
            if staff.team_id != team.id:
                await self._attach(ResourceKind.STAFF, staff, "team_id", team.id)

    # =========================================================================
    # 1. 바인딩 / 해제
    # =========================================================================
    async def bind_resources(
        self, kind: ResourceKind, resource_ids: Iterable[int], field: str, slot_id: int
    ) -> Result[List[SQLModel]]:
        """
        여러 자원을 하나의 슬롯에 바인딩합니다. (전부 성공 또는 전부 실패)
        사후 조건: 모든 대상의 바인딩 필드 = slot_id, 상태 = OCCUPIED.
        """
        if field not in BINDING_FIELDS.get(kind, ()):
            return Err(ErrorKind.VALIDATION_ERROR, f"{kind.value} cannot be bound through '{field}'.")
        slot_err = await self._check_slot(field, slot_id)
        if slot_err is not None:
            return slot_err
        resources, err = await self._load_all(kind, resource_ids)
        if err is not None:
            logger.warning("일괄 바인딩 실패 (%s -> %s %s): %s", kind.value, SLOT_KINDS[field].value, slot_id, err.failures)
            return err

        for resource in resources:
            await self._attach(kind, resource, field, slot_id)
        err = await self._commit(f"bind {kind.value}", *resources)
        if err is not None:
            return err
        logger.info("%s %d건을 %s %s에 바인딩했습니다", kind.value, len(resources), SLOT_KINDS[field].value, slot_id)
        return Ok(resources)

    async def bind_devices_to_station(self, station_id: int, device_ids: Iterable[int]) -> Result[List[fms_models.Device]]:
        return await self.bind_resources(ResourceKind.DEVICE, device_ids, "station_id", station_id)

    async def bind_devices_to_line(self, production_line_id: int, device_ids: Iterable[int]) -> Result[List[fms_models.Device]]:
        return await self.bind_resources(ResourceKind.DEVICE, device_ids, "production_line_id", production_line_id)

    async def bind_teams_to_station(self, station_id: int, team_ids: Iterable[int]) -> Result[List[hrm_models.Team]]:
        return await self.bind_resources(ResourceKind.TEAM, team_ids, "station_id", station_id)

    async def bind_teams_to_line(self, production_line_id: int, team_ids: Iterable[int]) -> Result[List[hrm_models.Team]]:
        return await self.bind_resources(ResourceKind.TEAM, team_ids, "production_line_id", production_line_id)

    async def bind_stations_to_line(self, production_line_id: int, station_ids: Iterable[int]) -> Result[List[plant_models.Station]]:
        return await self.bind_resources(ResourceKind.STATION, station_ids, "production_line_id", production_line_id)

    async def bind_staffs_to_team(self, team_id: int, staff_ids: Iterable[int]) -> Result[List[hrm_models.Staff]]:
        """기존 구성원은 유지한 채 작업자를 추가합니다."""
        return await self.bind_resources(ResourceKind.STAFF, staff_ids, "team_id", team_id)

    async def unbind(self, kind: ResourceKind, resource_id: int) -> Result[SQLModel]:
        """
        바인딩을 해제하고 가용 상태로 되돌립니다. 바인딩이 없으면 아무것도 하지 않습니다.
        """
        if kind not in BINDING_FIELDS:
            return Err(ErrorKind.VALIDATION_ERROR, f"{kind.value} has no binding to release.")
        resource = await self._get(kind, resource_id)
        if resource is None:
            return not_found(kind.value, resource_id)
        if bound_slot(resource, kind) is None:
            return Ok(resource)

        await self._release(kind, resource)
        err = await self._commit(f"unbind {kind.value}", resource)
        if err is not None:
            return err
        logger.info("%s %s 바인딩 해제", kind.value, resource_id)
        return Ok(resource)

    async def unbind_device(self, device_id: int) -> Result[fms_models.Device]:
        return await self.unbind(ResourceKind.DEVICE, device_id)

    async def unbind_team(self, team_id: int) -> Result[hrm_models.Team]:
        return await self.unbind(ResourceKind.TEAM, team_id)

    async def unbind_station(self, station_id: int) -> Result[plant_models.Station]:
        return await self.unbind(ResourceKind.STATION, station_id)

    async def unbind_staff(self, staff_id: int) -> Result[hrm_models.Staff]:
        """작업자를 소속 작업반에서 탈퇴시킵니다."""
        return await self.unbind(ResourceKind.STAFF, staff_id)

    # =========================================================================
    # 2. 직접 상태 변경
    # =========================================================================
    async def set_status(
        self, kind: ResourceKind, resource_id: int, target: ResourceStatus, force_unbind: bool = False
    ) -> Result[SQLModel]:
        resource = await self._get(kind, resource_id)
        if resource is None:
            return not_found(kind.value, resource_id)
        blocked = await self._check_status_change(kind, resource, target, force_unbind)
        if blocked is not None:
            return blocked

        if kind in DIRECT_STATUS_KINDS:
            await self._apply_status(kind, resource, target)
        else:
            await self._change_status(kind, resource, target)
        err = await self._commit(f"set_status {kind.value}", resource)
        if err is not None:
            return err
        logger.info("%s %s 상태 변경 -> %s", kind.value, resource_id, target.name)
        return Ok(resource)

    # =========================================================================
    # 3. 설비 (Device)
    # =========================================================================
    async def create_device(self, obj_in: fms_schemas.DeviceCreate) -> Result[fms_models.Device]:
        """불가 상태로 생성하면 초기 정비 기록이 함께 열립니다."""
        if obj_in.status == ResourceStatus.OCCUPIED:
            return Err(ErrorKind.VALIDATION_ERROR, "A new device can only be AVAILABLE or UNAVAILABLE.")
        conflict = await self._check_code(ResourceKind.DEVICE, obj_in.code)
        if conflict is not None:
            return conflict

        device = fms_models.Device(
            **column_values(obj_in.model_dump(exclude={"status"})),
            status=int(obj_in.status),
        )
        self.db.add(device)
        if device.status == ResourceStatus.UNAVAILABLE:
            err = await self._flush("create_device")
            if err is not None:
                return err
            await self.maintenance.open_record(device, initial=True)
        err = await self._commit("create_device", device)
        if err is not None:
            return err
        logger.info("설비 생성: %s (ID: %s)", device.code, device.id)
        return Ok(device)

    async def update_device(self, device_id: int, obj_in: fms_schemas.DeviceUpdate) -> Result[fms_models.Device]:
        return await self._update_resource(ResourceKind.DEVICE, device_id, obj_in)

    async def delete_device(self, device_id: int) -> Result[None]:
        device = await fms_crud.device.get(self.db, device_id)
        if device is None:
            return not_found(ResourceKind.DEVICE.value, device_id)
        for record in await fms_crud.maintenance_record.get_by_device(self.db, device_id=device_id):
            await self.db.delete(record)
        err = await self._flush("delete_device")
        if err is not None:
            return err
        await self.db.delete(device)
        err = await self._commit("delete_device")
        if err is not None:
            return err
        logger.info("설비 삭제 (ID: %s)", device_id)
        return Ok(None)

    # =========================================================================
    # 4. 스테이션 (Station)
    # =========================================================================
    async def create_station(self, obj_in: plant_schemas.StationCreate) -> Result[plant_models.Station]:
        """production_line_id를 지정하면 바인딩되어 점유 상태로 생성됩니다."""
        line_id = obj_in.production_line_id
        if obj_in.status == ResourceStatus.OCCUPIED and line_id is None:
            return Err(ErrorKind.VALIDATION_ERROR, "Station can only become OCCUPIED by binding it to a production line.")
        conflict = await self._check_code(ResourceKind.STATION, obj_in.code)
        if conflict is not None:
            return conflict
        if line_id is not None:
            slot_err = await self._check_slot("production_line_id", line_id)
            if slot_err is not None:
                return slot_err

        station = plant_models.Station(
            **column_values(obj_in.model_dump(exclude={"status", "production_line_id"})),
            status=int(obj_in.status),
        )
        if line_id is not None:
            await self._attach(ResourceKind.STATION, station, "production_line_id", line_id)
        self.db.add(station)
        err = await self._commit("create_station", station)
        if err is not None:
            return err
        logger.info("스테이션 생성: %s (ID: %s)", station.code, station.id)
        return Ok(station)

    async def update_station(self, station_id: int, obj_in: plant_schemas.StationUpdate) -> Result[plant_models.Station]:
        return await self._update_resource(ResourceKind.STATION, station_id, obj_in)

    async def delete_station(self, station_id: int) -> Result[None]:
        """스테이션에 바인딩된 설비와 작업반을 해제한 뒤 삭제합니다."""
        station = await plant_crud.station.get(self.db, station_id)
        if station is None:
            return not_found(ResourceKind.STATION.value, station_id)
        for device in await fms_crud.device.get_by_station(self.db, station_id=station_id):
            await self._release(ResourceKind.DEVICE, device)
        for team in await hrm_crud.team.get_by_station(self.db, station_id=station_id):
            await self._release(ResourceKind.TEAM, team)
        err = await self._flush("delete_station")
        if err is not None:
            return err
        await self.db.delete(station)
        err = await self._commit("delete_station")
        if err is not None:
            return err
        logger.info("스테이션 삭제 (ID: %s)", station_id)
        return Ok(None)

    # =========================================================================
    # 5. 생산라인 / 공장 삭제
    # =========================================================================
    async def _delete_production_line_rows(self, line: plant_models.ProductionLine) -> Optional[Err]:
        """바인딩된 스테이션/설비/작업반을 해제하고 달력 이벤트와 함께 생산라인을 삭제합니다. (커밋 없음)"""
        for station in await plant_crud.station.get_by_production_line(self.db, production_line_id=line.id):
            await self._release(ResourceKind.STATION, station)
        for device in await fms_crud.device.get_by_production_line(self.db, production_line_id=line.id):
            await self._release(ResourceKind.DEVICE, device)
        for team in await hrm_crud.team.get_by_production_line(self.db, production_line_id=line.id):
            await self._release(ResourceKind.TEAM, team)
        for event in await cal_crud.calendar_event.get_by_production_line(self.db, production_line_id=line.id):
            await self.db.delete(event)
        err = await self._flush("delete_production_line")
        if err is not None:
            return err
        await self.db.delete(line)
        return await self._flush("delete_production_line")

    async def delete_production_line(self, production_line_id: int) -> Result[None]:
        line = await plant_crud.production_line.get(self.db, production_line_id)
        if line is None:
            return not_found(ResourceKind.PRODUCTION_LINE.value, production_line_id)
        err = await self._delete_production_line_rows(line)
        if err is None:
            err = await self._commit("delete_production_line")
        if err is not None:
            return err
        logger.info("생산라인 삭제 (ID: %s)", production_line_id)
        return Ok(None)

    async def delete_factory(self, factory_id: int) -> Result[plant_schemas.DeletedFactoryResponse]:
        """공장의 모든 생산라인을 생산라인 삭제 규칙대로 정리한 뒤 공장을 삭제합니다."""
        factory = await plant_crud.factory.get(self.db, factory_id)
        if factory is None:
            return not_found(ResourceKind.FACTORY.value, factory_id)
        lines = await plant_crud.production_line.get_by_factory(self.db, factory_id=factory_id)
        for line in lines:
            err = await self._delete_production_line_rows(line)
            if err is not None:
                return err
        await self.db.delete(factory)
        err = await self._commit("delete_factory")
        if err is not None:
            return err
        logger.info("공장 삭제 (ID: %s, 생산라인 %d건)", factory_id, len(lines))
        return Ok(plant_schemas.DeletedFactoryResponse(id=factory_id, deleted_production_lines_count=len(lines)))

    # =========================================================================
    # 6. 작업반 (Team)
    # =========================================================================
    async def create_team(self, obj_in: hrm_schemas.TeamCreate) -> Result[hrm_models.Team]:
        """
        바인딩(station_id 또는 production_line_id)을 주면 status와 무관하게 점유 상태가 됩니다.
        member_ids의 작업자는 소속 및 점유 처리됩니다.
        """
        if obj_in.station_id is not None and obj_in.production_line_id is not None:
            return Err(ErrorKind.VALIDATION_ERROR, "A team can be bound to a station or a production line, not both.")
        slot: Optional[Tuple[str, int]] = None
        if obj_in.production_line_id is not None:
            slot = ("production_line_id", obj_in.production_line_id)
        elif obj_in.station_id is not None:
            slot = ("station_id", obj_in.station_id)
        if slot is None and obj_in.status == ResourceStatus.OCCUPIED:
            return Err(ErrorKind.VALIDATION_ERROR, "Team can only become OCCUPIED by binding it to a slot.")

        conflict = await self._check_code(ResourceKind.TEAM, obj_in.code)
        if conflict is not None:
            return conflict
        if slot is not None:
            slot_err = await self._check_slot(*slot)
            if slot_err is not None:
                return slot_err
        leader_err = await self._check_leader(obj_in.leader_id)
        if leader_err is not None:
            return leader_err
        members, err = await self._load_all(ResourceKind.STAFF, obj_in.member_ids)
        if err is not None:
            return err

        team = hrm_models.Team(
            **column_values(obj_in.model_dump(include={"code", "name", "leader_id", "shift_type"})),
            status=int(obj_in.status),
        )
        if slot is not None:
            await self._attach(ResourceKind.TEAM, team, *slot)
        self.db.add(team)
        err = await self._flush("create_team")
        if err is not None:
            return err
        await self._replace_members(team, members)
        err = await self._commit("create_team", team, *members)
        if err is not None:
            return err
        logger.info("작업반 생성: %s (ID: %s, 구성원 %d명)", team.code, team.id, len(members))
        return Ok(team)

    async def update_team(self, team_id: int, obj_in: hrm_schemas.TeamUpdate) -> Result[hrm_models.Team]:
        """
        - production_line_id/station_id 값 지정: 바인딩 우선, status 값과 무관하게 점유
        - 현재 바인딩 필드를 null로 지정: 바인딩 해제, status 미지정 시 가용 (확인 불필요)
        - 그 외 status=AVAILABLE: 바인딩되어 있으면 확인 필요 경로
        """
        team = await hrm_crud.team.get(self.db, team_id)
        if team is None:
            return not_found(ResourceKind.TEAM.value, team_id)
        fields_set = obj_in.model_fields_set

        bind_to: Optional[Tuple[str, int]] = None
        if "production_line_id" in fields_set and obj_in.production_line_id is not None:
            bind_to = ("production_line_id", obj_in.production_line_id)
        if "station_id" in fields_set and obj_in.station_id is not None:
            if bind_to is not None:
                return Err(ErrorKind.VALIDATION_ERROR, "A team can be bound to a station or a production line, not both.")
            bind_to = ("station_id", obj_in.station_id)

        current = bound_slot(team, ResourceKind.TEAM)
        clears_binding = (
            bind_to is None
            and current is not None
            and current[0] in fields_set
            and getattr(obj_in, current[0]) is None
        )

        data = obj_in.model_dump(exclude_unset=True, include={"code", "name", "leader_id", "shift_type"})
        conflict = await self._check_code(ResourceKind.TEAM, data.get("code"), exclude_id=team.id)
        if conflict is not None:
            return conflict
        if bind_to is not None:
            slot_err = await self._check_slot(*bind_to)
            if slot_err is not None:
                return slot_err
        if data.get("leader_id") is not None:
            leader_err = await self._check_leader(data["leader_id"], team_id=team.id)
            if leader_err is not None:
                return leader_err
        members: List[hrm_models.Staff] = []
        if obj_in.member_ids is not None:
            members, err = await self._load_all(ResourceKind.STAFF, obj_in.member_ids)
            if err is not None:
                return err
        if clears_binding:
            if obj_in.status == ResourceStatus.OCCUPIED:
                return Err(ErrorKind.VALIDATION_ERROR, "Team can only become OCCUPIED by binding it to a slot.")
        elif bind_to is None:
            blocked = await self._check_status_change(ResourceKind.TEAM, team, obj_in.status, obj_in.force_unbind)
            if blocked is not None:
                return blocked

        self._assign(ResourceKind.TEAM, team, data)
        if bind_to is not None:
            await self._attach(ResourceKind.TEAM, team, *bind_to)
        elif clears_binding:
            self._detach(ResourceKind.TEAM, team)
            await self._apply_status(ResourceKind.TEAM, team, obj_in.status if obj_in.status is not None else ResourceStatus.AVAILABLE)
        else:
            await self._change_status(ResourceKind.TEAM, team, obj_in.status)
        if obj_in.member_ids is not None:
            await self._replace_members(team, members)

        err = await self._commit("update_team", team, *members)
        if err is not None:
            return err
        logger.info("작업반 수정 (ID: %s)", team_id)
        return Ok(team)

    async def assign_team_members(self, team_id: int, member_ids: Iterable[int]) -> Result[List[hrm_models.Staff]]:
        """작업반 구성원을 교체합니다. 빈 목록이면 전원 해제합니다."""
        team = await hrm_crud.team.get(self.db, team_id)
        if team is None:
            return not_found(ResourceKind.TEAM.value, team_id)
        members, err = await self._load_all(ResourceKind.STAFF, member_ids)
        if err is not None:
            return err

        await self._replace_members(team, members)
        err = await self._commit("assign_team_members", *members)
        if err is not None:
            return err
        logger.info("작업반 %s 구성원 교체 (%d명)", team_id, len(members))
        return Ok(members)

    async def release_team_members(self, team_id: int) -> Result[int]:
        """작업반의 모든 구성원을 해제하고 해제된 인원 수를 반환합니다."""
        team = await hrm_crud.team.get(self.db, team_id)
        if team is None:
            return not_found(ResourceKind.TEAM.value, team_id)
        released = await hrm_crud.staff.get_members(self.db, team_id=team_id)
        for staff in released:
            await self._release(ResourceKind.STAFF, staff)
        err = await self._commit("release_team_members")
        if err is not None:
            return err
        return Ok(len(released))

    async def delete_team(self, team_id: int) -> Result[None]:
        """구성원을 먼저 해제한 뒤 같은 트랜잭션에서 작업반을 삭제합니다."""
        team = await hrm_crud.team.get(self.db, team_id)
        if team is None:
            return not_found(ResourceKind.TEAM.value, team_id)
        members = await hrm_crud.staff.get_members(self.db, team_id=team_id)
        for staff in members:
            await self._release(ResourceKind.STAFF, staff)
        err = await self._flush("delete_team")
        if err is not None:
            return err
        await self.db.delete(team)
        err = await self._commit("delete_team")
        if err is not None:
            return err
        logger.info("작업반 삭제 (ID: %s, 해제된 구성원 %d명)", team_id, len(members))
        return Ok(None)

    # =========================================================================
    # 7. 작업자 (Staff)
    # =========================================================================
    async def create_staff(self, obj_in: hrm_schemas.StaffCreate) -> Result[hrm_models.Staff]:
        if obj_in.status == ResourceStatus.OCCUPIED:
            return Err(ErrorKind.VALIDATION_ERROR, "Staff can only become OCCUPIED by joining a team.")
        conflict = await self._check_code(ResourceKind.STAFF, obj_in.code)
        if conflict is not None:
            return conflict

        staff = hrm_models.Staff(
            **column_values(obj_in.model_dump(exclude={"status"})),
            status=int(obj_in.status),
        )
        self.db.add(staff)
        err = await self._commit("create_staff", staff)
        if err is not None:
            return err
        logger.info("작업자 생성: %s (ID: %s)", staff.code, staff.id)
        return Ok(staff)

    async def update_staff(self, staff_id: int, obj_in: hrm_schemas.StaffUpdate) -> Result[hrm_models.Staff]:
        return await self._update_resource(ResourceKind.STAFF, staff_id, obj_in)

    async def delete_staff(self, staff_id: int) -> Result[None]:
        """작업반장인 작업자를 삭제하면 해당 작업반의 leader_id를 비웁니다."""
        staff = await hrm_crud.staff.get(self.db, staff_id)
        if staff is None:
            return not_found(ResourceKind.STAFF.value, staff_id)
        led_team = await hrm_crud.team.get_by_leader(self.db, leader_id=staff_id)
        if led_team is not None:
            led_team.leader_id = None
            self.db.add(led_team)
            err = await self._flush("delete_staff")
            if err is not None:
                return err
        await self.db.delete(staff)
        err = await self._commit("delete_staff")
        if err is not None:
            return err
        logger.info("작업자 삭제 (ID: %s)", staff_id)
        return Ok(None)

    # =========================================================================
    # 공통 수정 (설비/스테이션/작업자)
    # =========================================================================
    async def _update_resource(self, kind: ResourceKind, resource_id: int, obj_in: SQLModel) -> Result[SQLModel]:
        resource = await self._get(kind, resource_id)
        if resource is None:
            return not_found(kind.value, resource_id)
        data = obj_in.model_dump(exclude_unset=True, exclude={"status", "force_unbind"})
        conflict = await self._check_code(kind, data.get("code"), exclude_id=resource.id)
        if conflict is not None:
            return conflict
        blocked = await self._check_status_change(kind, resource, obj_in.status, obj_in.force_unbind)
        if blocked is not None:
            return blocked

        self._assign(kind, resource, data)
        await self._change_status(kind, resource, obj_in.status)
        err = await self._commit(f"update {kind.value}", resource)
        if err is not None:
            return err
        logger.info("%s 수정 (ID: %s)", kind.value, resource_id)
        return Ok(resource)

    # =========================================================================
    # 8. 일관성 점검
    # =========================================================================
    async def find_binding_inconsistencies(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        바인딩/상태 대응과 정비 기록 유일성을 위반한 행을 찾습니다. (읽기 전용)
        """
        findings: Dict[str, List[Dict[str, Any]]] = {"binding": [], "maintenance": []}

        for kind, fields in BINDING_FIELDS.items():
            model = RESOURCE_CRUD[kind].model
            result = await self.db.execute(select(model).order_by(model.id))
            for resource in result.scalars().all():
                slot = bound_slot(resource, kind)
                issue = None
                if resource.status == ResourceStatus.OCCUPIED and slot is None:
                    issue = "occupied without binding"
                elif resource.status == ResourceStatus.AVAILABLE and slot is not None:
                    issue = "available while bound"
                elif sum(getattr(resource, field) is not None for field in fields) > 1:
                    issue = "bound to more than one slot"
                if issue is not None:
                    findings["binding"].append(
                        {"resource_kind": kind.value, "id": resource.id, "status": resource.status, "issue": issue}
                    )

        open_records = await self.db.execute(
            select(fms_models.MaintenanceRecord).where(
                fms_models.MaintenanceRecord.status == fms_models.MaintenanceStatus.IN_PROGRESS.value
            )
        )
        open_counts: Dict[int, int] = {}
        for record in open_records.scalars().all():
            open_counts[record.device_id] = open_counts.get(record.device_id, 0) + 1

        devices = await self.db.execute(select(fms_models.Device).order_by(fms_models.Device.id))
        for device in devices.scalars().all():
            count = open_counts.get(device.id, 0)
            issue = None
            if count > 1:
                issue = "multiple open maintenance records"
            elif count == 1 and device.status != ResourceStatus.UNAVAILABLE:
                issue = "open maintenance record while not unavailable"
            elif count == 0 and device.status == ResourceStatus.UNAVAILABLE:
                issue = "unavailable without open maintenance record"
            if issue is not None:
                findings["maintenance"].append(
                    {"device_id": device.id, "status": device.status, "open_records": count, "issue": issue}
                )

        return findings
