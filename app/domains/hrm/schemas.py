# app/domains/hrm/schemas.py

"""
'hrm' 도메인 (작업반/작업자)의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime

from sqlmodel import SQLModel
from pydantic import Field

from app.domains.shared.models import ResourceStatus
from .models import ShiftType


# =============================================================================
# 1. teams 테이블 스키마
# =============================================================================
class TeamBase(SQLModel):
    code: str = Field(..., max_length=50, description="작업반 코드 (고유)")
    name: str = Field(..., max_length=100, description="작업반 이름")
    leader_id: Optional[int] = Field(None, description="작업반장 작업자 ID (한 작업반만 맡을 수 있음)")
    shift_type: ShiftType = Field(ShiftType.DAY, description="근무 형태")


class TeamCreate(TeamBase):
    """
    production_line_id 또는 station_id를 지정하면 생성과 동시에 바인딩되어
    status 값과 무관하게 점유(OCCUPIED) 상태가 됩니다.
    member_ids의 작업자는 이 작업반에 소속되어 점유 상태가 됩니다.
    """
    status: ResourceStatus = Field(ResourceStatus.AVAILABLE, description="초기 상태")
    station_id: Optional[int] = Field(None, description="바인딩할 스테이션 ID")
    production_line_id: Optional[int] = Field(None, description="바인딩할 생산라인 ID")
    member_ids: List[int] = Field(default_factory=list, description="구성원 작업자 ID 목록")


class TeamUpdate(SQLModel):
    """
    - production_line_id/station_id에 값을 주면 항상 점유(OCCUPIED)가 됩니다.
    - null을 명시적으로 주면 바인딩을 해제하며, status를 함께 주지 않으면 가용(AVAILABLE)이 됩니다.
    - member_ids를 주면 구성원을 교체합니다.
    """
    code: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    leader_id: Optional[int] = Field(None)
    shift_type: Optional[ShiftType] = Field(None)
    status: Optional[ResourceStatus] = Field(None)
    station_id: Optional[int] = Field(None)
    production_line_id: Optional[int] = Field(None)
    member_ids: Optional[List[int]] = Field(None)
    force_unbind: bool = Field(False, description="바인딩 해제 확인 여부")


class TeamResponse(TeamBase):
    id: int
    status: ResourceStatus
    station_id: Optional[int] = None
    production_line_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TeamMembersUpdate(SQLModel):
    member_ids: List[int] = Field(default_factory=list, description="새 구성원 작업자 ID 목록 (빈 목록이면 전원 해제)")


# =============================================================================
# 2. staffs 테이블 스키마
# =============================================================================
class StaffBase(SQLModel):
    code: str = Field(..., max_length=50, description="사번 (고유)")
    name: str = Field(..., max_length=100, description="이름")
    major: Optional[int] = Field(None, description="직무 분야 코드")
    level: Optional[int] = Field(None, description="숙련 등급")


class StaffCreate(StaffBase):
    status: ResourceStatus = Field(ResourceStatus.AVAILABLE, description="초기 상태 (0: 가용, 1: 불가)")


class StaffUpdate(SQLModel):
    code: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    major: Optional[int] = Field(None)
    level: Optional[int] = Field(None)
    status: Optional[ResourceStatus] = Field(None)
    force_unbind: bool = Field(False, description="작업반 탈퇴 확인 여부")


class StaffResponse(StaffBase):
    id: int
    status: ResourceStatus
    team_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
