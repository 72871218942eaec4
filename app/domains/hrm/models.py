# app/domains/hrm/models.py

"""
'hrm' 도메인 (작업반/작업자)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- teams: 작업반. 스테이션 또는 생산라인 중 한 곳에 바인딩될 수 있습니다.
- staffs: 작업자. 작업반에 소속(바인딩)되면 점유 상태가 됩니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import IntEnum

from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel

from app.domains.shared.models import ResourceStatus


class ShiftType(IntEnum):
    DAY = 0         # 주간
    NIGHT = 1       # 야간
    ROTATING = 2    # 교대


# =============================================================================
# 1. teams 테이블 모델
# =============================================================================
class TeamBase(SQLModel):
    code: str = Field(max_length=50, unique=True, description="작업반 코드")
    name: str = Field(max_length=100, description="작업반 이름")
    shift_type: int = Field(default=ShiftType.DAY.value, description="근무 형태 (0: 주간, 1: 야간, 2: 교대)")
    status: int = Field(default=ResourceStatus.AVAILABLE.value, description="상태 (0: 가용, 1: 불가, 2: 점유)")
    # 바인딩: 스테이션 또는 생산라인 (동시에 둘 다 가질 수 없음)
    station_id: Optional[int] = Field(default=None, foreign_key="stations.id", index=True)
    production_line_id: Optional[int] = Field(default=None, foreign_key="production_lines.id", index=True)


class Team(TeamBase, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    # 작업반장은 한 작업반만 맡을 수 있습니다. (작업자 삭제 시 NULL)
    leader_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("staffs.id", ondelete="SET NULL", use_alter=True), unique=True, nullable=True)
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


# =============================================================================
# 2. staffs 테이블 모델
# =============================================================================
class StaffBase(SQLModel):
    code: str = Field(max_length=50, unique=True, description="사번")
    name: str = Field(max_length=100, description="이름")
    major: Optional[int] = Field(default=None, description="직무 분야 코드")
    level: Optional[int] = Field(default=None, description="숙련 등급")
    status: int = Field(default=ResourceStatus.AVAILABLE.value, description="상태 (0: 가용, 1: 불가, 2: 점유)")
    # 바인딩: 작업반
    team_id: Optional[int] = Field(default=None, foreign_key="teams.id", index=True)


class Staff(StaffBase, table=True):
    __tablename__ = "staffs"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )
