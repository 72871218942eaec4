# app/domains/plant/schemas.py

"""
'plant' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.

공장, 생산라인, 스테이션에 대한 API 요청(생성, 업데이트) 및 응답(조회)에 사용되는
데이터 유효성 검사 및 직렬화를 위한 모델을 포함합니다.
"""

from typing import Optional, List
from datetime import datetime

from sqlmodel import SQLModel
from pydantic import Field

from app.domains.shared.models import ResourceStatus
from app.domains.fms.schemas import DeviceResponse
from app.domains.hrm.schemas import TeamResponse


# =============================================================================
# 1. factories 테이블 스키마
# =============================================================================
class FactoryBase(SQLModel):
    code: Optional[str] = Field(None, max_length=50, description="공장 코드 (고유)")
    name: str = Field(..., max_length=100, description="공장 이름")
    location: Optional[str] = Field(None, max_length=255, description="소재지")
    description: Optional[str] = Field(None, description="설명")
    status: ResourceStatus = Field(ResourceStatus.AVAILABLE, description="상태 (0: 가용, 1: 불가, 2: 가동 중)")


class FactoryCreate(FactoryBase):
    pass


class FactoryUpdate(FactoryBase):
    """모든 필드는 선택 사항입니다 (부분 업데이트 가능)."""
    name: Optional[str] = Field(None, max_length=100)
    status: Optional[ResourceStatus] = Field(None)


class FactoryResponse(FactoryBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# 2. production_lines 테이블 스키마
# =============================================================================
class ProductionLineBase(SQLModel):
    factory_id: int = Field(..., description="소속 공장 ID")
    code: str = Field(..., max_length=50, description="생산라인 코드 (고유)")
    name: str = Field(..., max_length=100, description="생산라인 이름")
    type: Optional[str] = Field(None, max_length=50, description="생산라인 유형")
    capacity: int = Field(100, ge=0, description="생산 능력")
    status: ResourceStatus = Field(ResourceStatus.AVAILABLE, description="상태")


class ProductionLineCreate(ProductionLineBase):
    pass


class ProductionLineUpdate(ProductionLineBase):
    factory_id: Optional[int] = Field(None)
    code: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    capacity: Optional[int] = Field(None, ge=0)
    status: Optional[ResourceStatus] = Field(None)


class ProductionLineResponse(ProductionLineBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# 3. stations 테이블 스키마
# =============================================================================
class StationBase(SQLModel):
    code: str = Field(..., max_length=50, description="스테이션 코드 (고유)")
    name: str = Field(..., max_length=100, description="스테이션 이름")
    type: Optional[str] = Field(None, max_length=50, description="스테이션 유형")
    description: Optional[str] = Field(None, description="설명")


class StationCreate(StationBase):
    """
    production_line_id를 지정하면 생성과 동시에 바인딩되어 점유(OCCUPIED) 상태가 됩니다.
    직접 지정 가능한 상태는 가용/불가뿐입니다.
    """
    status: ResourceStatus = Field(ResourceStatus.AVAILABLE, description="초기 상태")
    production_line_id: Optional[int] = Field(None, description="바인딩할 생산라인 ID")


class StationUpdate(SQLModel):
    code: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None)
    status: Optional[ResourceStatus] = Field(None, description="변경할 상태")
    force_unbind: bool = Field(False, description="바인딩된 자원을 가용으로 바꿀 때 바인딩 해제를 확인했는지 여부")


class StationResponse(StationBase):
    id: int
    status: ResourceStatus
    production_line_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# 4. 슬롯 자원 조회 스키마
# =============================================================================
class StationResourcesResponse(SQLModel):
    station: StationResponse
    devices: List[DeviceResponse] = []
    teams: List[TeamResponse] = []


class ProductionLineResourcesResponse(SQLModel):
    production_line: ProductionLineResponse
    stations: List[StationResponse] = []
    devices: List[DeviceResponse] = []
    teams: List[TeamResponse] = []


class DeletedFactoryResponse(SQLModel):
    id: int
    deleted_production_lines_count: int
