# app/domains/plant/crud.py

"""
'plant' 도메인 (공장 구조)과 관련된 CRUD 로직을 담당하는 모듈입니다.

공장과 생산라인의 생성/수정은 바인딩 상태와 무관한 일반 CRUD이므로 여기서 처리합니다.
스테이션의 생성/수정과 모든 삭제는 바인딩 연쇄 효과가 있으므로
app.services.binding_service.ResourceBindingService를 통해서만 수행됩니다.
"""

from typing import List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.results import ErrorKind, http_error
from . import models as plant_models
from . import schemas as plant_schemas


# =============================================================================
# 1. 공장 (Factory) CRUD
# =============================================================================
class CRUDFactory(
    CRUDBase[
        plant_models.Factory,
        plant_schemas.FactoryCreate,
        plant_schemas.FactoryUpdate
    ]
):
    def __init__(self):
        super().__init__(model=plant_models.Factory)

    async def create(self, db: AsyncSession, *, obj_in: plant_schemas.FactoryCreate) -> plant_models.Factory:
        """코드 중복을 확인하고 생성합니다."""
        if obj_in.code and await self.get_by_code(db, code=obj_in.code):
            raise http_error(ErrorKind.CONFLICT, "Factory with this code already exists.")
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: plant_models.Factory, obj_in: plant_schemas.FactoryUpdate
    ) -> plant_models.Factory:
        """코드 변경 시 중복을 확인하고 수정합니다."""
        if obj_in.code and obj_in.code != db_obj.code:
            existing = await self.get_by_code(db, code=obj_in.code)
            if existing and existing.id != db_obj.id:
                raise http_error(ErrorKind.CONFLICT, "Factory with this code already exists.")
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)


factory = CRUDFactory()


# =============================================================================
# 2. 생산라인 (ProductionLine) CRUD
# =============================================================================
class CRUDProductionLine(
    CRUDBase[
        plant_models.ProductionLine,
        plant_schemas.ProductionLineCreate,
        plant_schemas.ProductionLineUpdate
    ]
):
    def __init__(self):
        super().__init__(model=plant_models.ProductionLine)

    async def get_by_factory(self, db: AsyncSession, *, factory_id: int) -> List[plant_models.ProductionLine]:
        statement = select(self.model).where(self.model.factory_id == factory_id).order_by(self.model.id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: plant_schemas.ProductionLineCreate) -> plant_models.ProductionLine:
        """소속 공장 존재 여부와 코드 중복을 확인하고 생성합니다."""
        if await factory.get(db, obj_in.factory_id) is None:
            raise http_error(ErrorKind.NOT_FOUND, "Factory not found")
        if await self.get_by_code(db, code=obj_in.code):
            raise http_error(ErrorKind.CONFLICT, "Production line with this code already exists.")
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: plant_models.ProductionLine, obj_in: plant_schemas.ProductionLineUpdate
    ) -> plant_models.ProductionLine:
        if obj_in.factory_id is not None and obj_in.factory_id != db_obj.factory_id:
            if await factory.get(db, obj_in.factory_id) is None:
                raise http_error(ErrorKind.NOT_FOUND, "Factory not found")
        if obj_in.code and obj_in.code != db_obj.code:
            existing = await self.get_by_code(db, code=obj_in.code)
            if existing and existing.id != db_obj.id:
                raise http_error(ErrorKind.CONFLICT, "Production line with this code already exists.")
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)


production_line = CRUDProductionLine()


# =============================================================================
# 3. 스테이션 (Station) 조회
# =============================================================================
class CRUDStation(
    CRUDBase[
        plant_models.Station,
        plant_schemas.StationCreate,
        plant_schemas.StationUpdate
    ]
):
    def __init__(self):
        super().__init__(model=plant_models.Station)

    async def get_by_production_line(self, db: AsyncSession, *, production_line_id: int) -> List[plant_models.Station]:
        statement = (
            select(self.model)
            .where(self.model.production_line_id == production_line_id)
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


station = CRUDStation()
