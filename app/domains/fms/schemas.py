# app/domains/fms/schemas.py

"""
'fms' 도메인 (설비 관리)의 Pydantic 스키마를 정의하는 모듈입니다.

설비와 정비 이력에 대한 API 요청(생성, 업데이트) 및 응답(조회)에 사용되는
데이터 유효성 검사 및 직렬화를 위한 모델을 포함합니다.
"""

from typing import Optional
from datetime import datetime, date

from sqlmodel import SQLModel
from pydantic import Field

from app.domains.shared.models import ResourceStatus
from .models import DeviceType


# =============================================================================
# 1. devices 테이블 스키마
# =============================================================================
class DeviceBase(SQLModel):
    code: str = Field(..., max_length=50, description="설비 코드 (고유)")
    name: str = Field(..., max_length=100, description="설비 이름")
    type: DeviceType = Field(DeviceType.PRODUCTION, description="설비 유형 (0-5)")
    model: Optional[str] = Field(None, max_length=100, description="모델명")
    serial_number: Optional[str] = Field(None, max_length=100, description="일련번호")
    purchase_date: Optional[date] = Field(None, description="구매일")


class DeviceCreate(DeviceBase):
    """
    새 설비를 생성합니다. 초기 상태는 가용(0) 또는 불가(1)만 허용되며,
    불가(1)로 생성하면 정비 기록이 함께 열립니다.
    """
    status: ResourceStatus = Field(ResourceStatus.AVAILABLE, description="초기 상태")


class DeviceUpdate(SQLModel):
    """
    설비 정보를 수정합니다. 모든 필드는 선택 사항입니다.
    바인딩된 설비를 가용(0)으로 바꾸려면 force_unbind=true로 재요청해야 합니다.
    """
    code: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    type: Optional[DeviceType] = Field(None)
    model: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_date: Optional[date] = Field(None)
    status: Optional[ResourceStatus] = Field(None, description="변경할 상태")
    force_unbind: bool = Field(False, description="바인딩 해제 확인 여부")


class DeviceResponse(DeviceBase):
    id: int
    status: ResourceStatus
    station_id: Optional[int] = None
    production_line_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# 2. maintenance_records 테이블 스키마
# =============================================================================
class MaintenanceRecordResponse(SQLModel):
    id: int
    device_id: int
    type: str
    title: str
    content: Optional[str] = None
    status: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
